from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse


PHOTO_EXTS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".heic"}
VIDEO_EXTS = {".mp4", ".webm", ".mkv", ".mov", ".avi", ".m4v"}
AUDIO_EXTS = {".mp3", ".m4a", ".wav", ".ogg", ".aac", ".flac", ".opus"}


class MediaKind(Enum):
    PHOTO = "photo"
    VIDEO = "video"
    AUDIO = "audio"
    TEXT = "text"  # stored with memories, never rendered by the viewer


@dataclass(frozen=True)
class MediaItem:
    kind: MediaKind
    display_name: str
    source_locator: Optional[str] = None   # URL or local path
    byte_size: Optional[int] = None        # informational only

    @property
    def is_photo(self) -> bool:
        return self.kind is MediaKind.PHOTO

    @property
    def is_playable(self) -> bool:
        return self.kind in (MediaKind.VIDEO, MediaKind.AUDIO)

    @property
    def suffix(self) -> str:
        if not self.source_locator:
            return ""
        path = self.source_locator
        parsed = urlparse(path)
        if parsed.scheme in {"http", "https", "file"}:
            path = parsed.path
        return Path(path).suffix.lower()

    @classmethod
    def from_path(cls, locator: str, display_name: Optional[str] = None) -> "MediaItem":
        """Build an item from a file path or URL, inferring the kind from its suffix."""
        parsed = urlparse(locator)
        path = parsed.path if parsed.scheme in {"http", "https", "file"} else locator
        ext = Path(path).suffix.lower()
        if ext in VIDEO_EXTS:
            kind = MediaKind.VIDEO
        elif ext in AUDIO_EXTS:
            kind = MediaKind.AUDIO
        elif ext in PHOTO_EXTS:
            kind = MediaKind.PHOTO
        else:
            kind = MediaKind.TEXT

        byte_size = None
        if not parsed.scheme or len(parsed.scheme) == 1:  # plain path, maybe a drive letter
            local = Path(locator)
            if local.is_file():
                byte_size = local.stat().st_size

        return cls(
            kind=kind,
            display_name=display_name or Path(path).name,
            source_locator=locator,
            byte_size=byte_size,
        )
