"""
Background photo loading for the viewer.
"""
from __future__ import annotations

import logging
from typing import Optional

import requests
from PyQt6.QtCore import QThread, pyqtSignal

from src.core.errors import UnresolvableMediaError
from src.core.media_source import fetch_bytes

logger = logging.getLogger(__name__)


class PhotoLoadWorker(QThread):
    """
    Loads the bytes behind a photo locator off the UI thread.

    Signals:
        loaded(token, data): Emitted on success
        failed(token, error): Emitted on failure
    """
    loaded = pyqtSignal(int, bytes)
    failed = pyqtSignal(int, str)

    def __init__(
        self,
        *,
        token: int,
        locator: Optional[str],
        session: Optional[requests.Session] = None,
        access_token: Optional[str] = None,
    ):
        super().__init__()
        self._token = token
        self._locator = locator
        self._session = session
        self._access_token = access_token
        self._cancelled = False

    @property
    def token(self) -> int:
        """Get the worker's token for identifying responses."""
        return self._token

    def cancel(self) -> None:
        """Cancel the worker. Safe to call multiple times."""
        self._cancelled = True

    def run(self) -> None:
        try:
            data = fetch_bytes(self._locator, session=self._session, access_token=self._access_token)
        except UnresolvableMediaError as e:
            logger.warning(f"Photo load failed: {e}")
            if not self._cancelled:
                self.failed.emit(self._token, str(e))
            return
        if not self._cancelled:
            self.loaded.emit(self._token, data)
