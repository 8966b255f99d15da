from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import requests

from src.core.database import DatabaseManager, default_data_dir
from src.core.download_manager import DownloadManager
from src.core.media_source import MEDIA_HEADERS
from src.core.viewer.settings import ViewerSettings

logger = logging.getLogger(__name__)


class CoreContext:
    """
    Shared Core dependencies (DB + settings + services).

    Use a single instance for app lifetime for consistency.
    """

    def __init__(
        self,
        *,
        db: Optional[DatabaseManager] = None,
        session: Optional[requests.Session] = None,
        data_dir: Optional[Path] = None,
    ):
        self.data_dir = data_dir or default_data_dir()
        self.db = db or DatabaseManager(self.data_dir / "data.db")

        # Connect early so settings can be read
        if self.db.conn is None:
            self.db.connect()

        self.settings = ViewerSettings.from_db(self.db)
        logger.info(
            f"Viewer settings loaded - swipe threshold: {self.settings.swipe_threshold}, "
            f"max zoom: {self.settings.max_zoom}, download dir: {self.settings.download_dir}"
        )

        if session is not None:
            self.session = session
        else:
            self.session = requests.Session()
            self.session.headers.update(MEDIA_HEADERS)

    @property
    def storage_access_token(self) -> Optional[str]:
        try:
            return self.db.get_config('storage_access_token', None)
        except Exception as e:
            logger.warning(f"Could not read storage access token: {e}")
            return None

    def new_download_manager(self) -> DownloadManager:
        """A fresh manager; its aiohttp session binds to the loop that first uses it."""
        return DownloadManager(db_manager=self.db, download_dir=self.settings.download_dir)

    def close(self) -> None:
        self.db.close()
        self.session.close()
