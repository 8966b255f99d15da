import os
import re
import sys
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse
from PyQt6.QtCore import QUrl

_UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def get_resource_path(*parts: str) -> Path:
    """
    Get the absolute path to a resource file, handling PyInstaller bundles.

    In development: returns path relative to project root
    In PyInstaller bundle: returns path inside _MEIPASS

    Args:
        *parts: Path components relative to project/bundle root
                e.g. get_resource_path('resources', 'styles', 'viewer.qss')

    Returns:
        Absolute Path to the resource
    """
    if hasattr(sys, '_MEIPASS'):
        base = Path(sys._MEIPASS)
    else:
        # Development - use project root (parent of src/)
        base = Path(__file__).parent.parent.parent

    return base.joinpath(*parts)


def standardize_url_path(url_or_path: str):
    """
    Converts a URL (http/https/file://) or a local path string into a standardized
    format (str for network URLs, Path object for local files).
    """
    if not url_or_path:
        return ""

    # Handle standard HTTP/HTTPS URLs (return as a clean string)
    scheme = urlparse(url_or_path).scheme.lower()
    if scheme in {'http', 'https'}:
        return url_or_path.strip()

    # Handle file:// URLs using QUrl for robust conversion to a local path string
    if scheme == 'file':
        local_file_path_str = QUrl(url_or_path).toLocalFile()
        return Path(local_file_path_str).resolve()

    local_path = Path(url_or_path).expanduser()
    if local_path.is_absolute():
        return local_path.resolve()

    # Relative paths resolve against the current working directory
    return (Path(os.getcwd()) / local_path).resolve()


def sanitize_filename(name: str, fallback: str = "memory") -> str:
    """Strip characters that are not allowed in file names on common platforms."""
    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", name or "").strip().strip(".")
    return cleaned or fallback


def suggest_filename(display_name: Optional[str], index: int, suffix: str = "") -> str:
    """
    Suggested save-as name for a media item.

    Uses the display name when there is one, otherwise "memory-<n>" where n is
    the 1-based position of the item, plus the source suffix.
    """
    if display_name and display_name.strip():
        name = sanitize_filename(display_name)
        if suffix and not Path(name).suffix:
            name += suffix
        return name
    return f"memory-{index + 1}{suffix}"


def unique_destination(directory: Path, filename: str) -> Path:
    """Return directory/filename, adding " (n)" before the suffix if it already exists."""
    candidate = directory / filename
    if not candidate.exists():
        return candidate
    stem, suffix = Path(filename).stem, Path(filename).suffix
    n = 1
    while True:
        candidate = directory / f"{stem} ({n}){suffix}"
        if not candidate.exists():
            return candidate
        n += 1
