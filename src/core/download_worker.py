from __future__ import annotations

import asyncio
import time
from pathlib import Path
from typing import Callable, Optional

from PyQt6.QtCore import QThread, pyqtSignal

from src.core.download_manager import DownloadManager


class DownloadWorker(QThread):
    """
    Saves one media source on a Qt thread with its own asyncio loop.

    The manager is built inside the thread so its aiohttp session belongs to
    the thread's loop.

    Signals:
        progress: (downloaded_bytes, total_bytes)
        completed: (saved_path)
        failed: (error_string)
    """

    progress = pyqtSignal(int, int)
    completed = pyqtSignal(str)
    failed = pyqtSignal(str)

    def __init__(
        self,
        manager_factory: Callable[[], DownloadManager],
        locator: Optional[str],
        filename: str,
    ):
        super().__init__()
        self._manager_factory = manager_factory
        self._locator = locator
        self._filename = filename
        self._cancelled = False
        self._last_emit = 0.0
        self.error: Optional[BaseException] = None

    def cancel(self) -> None:
        """Drop the outcome; the transfer itself runs to completion."""
        self._cancelled = True

    def _on_progress(self, downloaded: int, total: int) -> None:
        # Throttle updates to ~10 per second
        now = time.time()
        if now - self._last_emit < 0.1 and downloaded != total:
            return
        self._last_emit = now
        if not self._cancelled:
            self.progress.emit(downloaded, total)

    async def _save(self) -> Path:
        async with self._manager_factory() as manager:
            return await manager.save(self._locator, self._filename, progress_callback=self._on_progress)

    def run(self) -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            path = loop.run_until_complete(self._save())
            if not self._cancelled:
                self.completed.emit(str(path))
        except Exception as e:
            self.error = e
            if not self._cancelled:
                self.failed.emit(str(e))
        finally:
            loop.close()
