"""
Resolution of media source locators.

A locator is a URL (http, https, file) or a local path. Resolution never
raises for a missing locator; callers decide whether absence is an error.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlparse

import requests

from src.core.errors import UnresolvableMediaError
from src.utils.file_utils import standardize_url_path

logger = logging.getLogger(__name__)

# Headers for media/file downloads
MEDIA_HEADERS = {
    "User-Agent": "MemoryBook/1.0 (+desktop viewer)",
    "Accept": "*/*",
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "identity;q=1, *;q=0",
}

FETCH_TIMEOUT = (10, 60)  # connect, read


def resolve_locator(locator: Optional[str]) -> Union[Path, str, None]:
    """Local Path for files, URL string for http(s), None when there is nothing to load."""
    if not locator or not locator.strip():
        return None
    resolved = standardize_url_path(locator.strip())
    return resolved or None


def is_remote(resolved: Union[Path, str, None]) -> bool:
    return isinstance(resolved, str) and urlparse(resolved).scheme in {"http", "https"}


def get_media_headers(url: str, access_token: Optional[str] = None) -> dict:
    """
    Media headers for a request to url.

    Hosted storage buckets that require a signed-in user get a bearer token.
    """
    headers = MEDIA_HEADERS.copy()
    try:
        parsed = urlparse(url)
        if parsed.scheme and parsed.hostname:
            headers["Referer"] = f"{parsed.scheme}://{parsed.hostname}/"
    except ValueError:
        pass
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    return headers


def fetch_bytes(
    locator: Optional[str],
    *,
    session: Optional[requests.Session] = None,
    access_token: Optional[str] = None,
) -> bytes:
    """
    Load the full content behind a locator (used for photos).

    Raises:
        UnresolvableMediaError: locator missing, file unreadable, or HTTP failure
    """
    resolved = resolve_locator(locator)
    if resolved is None:
        raise UnresolvableMediaError("Media item has no source")

    if is_remote(resolved):
        http = session or requests.Session()
        try:
            response = http.get(
                resolved,
                headers=get_media_headers(resolved, access_token),
                timeout=FETCH_TIMEOUT,
            )
            response.raise_for_status()
            return response.content
        except requests.RequestException as e:
            raise UnresolvableMediaError(f"Could not fetch {resolved}: {e}") from e
        finally:
            if session is None:
                http.close()

    path = Path(resolved)
    try:
        return path.read_bytes()
    except OSError as e:
        raise UnresolvableMediaError(f"Could not read {path}: {e}") from e
