"""
Download manager: saves the media behind a locator to the local file system.
"""
import aiohttp
import asyncio
import logging
import shutil
from pathlib import Path
from typing import Optional, Callable

from src.core.errors import SideEffectError, UnresolvableMediaError
from src.core.media_source import MEDIA_HEADERS, get_media_headers, is_remote, resolve_locator
from src.utils.file_utils import unique_destination

logger = logging.getLogger(__name__)


class DownloadManager:
    """
    Saves media items to disk.

    Each call is an independent attempt: there is no queue and no
    de-duplication of concurrent requests for the same source.
    """

    def __init__(
        self,
        db_manager=None,
        download_dir: Optional[Path] = None,
        max_concurrent: int = 3,
    ):
        """
        Initialize download manager

        Args:
            db_manager: DatabaseManager instance (reads the storage access token)
            download_dir: Default destination directory.
                          Defaults to ~/Downloads if not specified.
            max_concurrent: Maximum concurrent downloads
        """
        self.db = db_manager
        self.download_dir = download_dir or (Path.home() / "Downloads")
        self.session: Optional[aiohttp.ClientSession] = None
        self._max_concurrent = max_concurrent
        self._semaphore: Optional[asyncio.Semaphore] = None
        self._chunk_size = 64 * 1024

    async def __aenter__(self):
        """Async context manager entry"""
        await self.create_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close_session()

    async def create_session(self):
        """Create aiohttp session with media headers"""
        if not self.session:
            timeout = aiohttp.ClientTimeout(total=None, sock_read=60)
            self.session = aiohttp.ClientSession(
                timeout=timeout,
                headers=MEDIA_HEADERS,
            )

    async def close_session(self):
        """Close aiohttp session"""
        if self.session:
            await self.session.close()
            self.session = None

    def _access_token(self) -> Optional[str]:
        if not self.db:
            return None
        try:
            return self.db.get_config('storage_access_token', None)
        except Exception as e:
            logger.warning(f"Could not read storage access token: {e}")
            return None

    async def save(self, locator: Optional[str], filename: str,
                   progress_callback: Optional[Callable] = None) -> Path:
        """
        Save a media source into the download directory under filename.

        An existing file is never overwritten; a " (n)" suffix is added instead.

        Returns:
            Path of the saved file
        """
        self.download_dir.mkdir(parents=True, exist_ok=True)
        destination = unique_destination(self.download_dir, filename)
        await self.download_file(locator, destination, progress_callback=progress_callback)
        return destination

    async def download_file(self, locator: Optional[str], destination: Path,
                            progress_callback: Optional[Callable] = None) -> Path:
        """
        Download single file

        Args:
            locator: URL or local path of the media
            destination: Destination file path
            progress_callback: Optional callback for progress updates (downloaded, total)

        Returns:
            destination, once the file is complete

        Raises:
            UnresolvableMediaError: the locator is missing
            SideEffectError: the transfer failed
        """
        resolved = resolve_locator(locator)
        if resolved is None:
            raise UnresolvableMediaError("Media item has no source to download")

        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self._max_concurrent)

        async with self._semaphore:
            destination.parent.mkdir(parents=True, exist_ok=True)
            if is_remote(resolved):
                await self._download_remote(resolved, destination, progress_callback)
            else:
                await self._copy_local(Path(resolved), destination, progress_callback)

        logger.info(f"Saved {locator} -> {destination}")
        return destination

    async def _copy_local(self, source: Path, destination: Path,
                          progress_callback: Optional[Callable]) -> None:
        if not source.is_file():
            raise SideEffectError(f"Source file not found: {source}")
        try:
            await asyncio.to_thread(shutil.copy2, source, destination)
        except OSError as e:
            raise SideEffectError(f"Failed to copy {source}: {e}") from e
        if progress_callback:
            size = destination.stat().st_size
            progress_callback(size, size)

    async def _download_remote(self, url: str, destination: Path,
                               progress_callback: Optional[Callable]) -> None:
        if not self.session:
            await self.create_session()

        part_path = destination.with_name(destination.name + ".part")
        headers = get_media_headers(url, self._access_token())

        logger.info(f"Downloading: {url} -> {destination}")
        try:
            async with self.session.get(url, headers=headers) as response:
                if response.status != 200:
                    raise SideEffectError(f"Download failed: HTTP {response.status}")

                try:
                    total_size = int(response.headers.get('content-length', '0'))
                except (ValueError, TypeError):
                    total_size = 0

                downloaded = 0
                with open(part_path, 'wb') as f:
                    async for chunk in response.content.iter_chunked(self._chunk_size):
                        f.write(chunk)
                        downloaded += len(chunk)
                        if progress_callback:
                            progress_callback(downloaded, total_size)

            part_path.replace(destination)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise SideEffectError(f"Download failed for {url}: {e}") from e
        finally:
            if part_path.exists():
                part_path.unlink()
