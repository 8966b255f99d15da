"""
Share side effect for the media viewer.

Uses a native share backend when the platform provides one and falls back to
copying the link into a clipboard sink otherwise.
"""
from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Union

from src.core.errors import SideEffectError, UnresolvableMediaError, UserCancelledError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShareRequest:
    title: str
    text: str
    url: Optional[str]

    @classmethod
    def for_item(cls, title: str, display_name: str, url: Optional[str]) -> "ShareRequest":
        return cls(title=title, text=f"Check out this memory: {display_name}", url=url)


class ShareOutcome(Enum):
    SHARED = "shared"
    COPIED = "copied"
    CANCELLED = "cancelled"


# A native backend may be sync or async; it raises UserCancelledError when dismissed.
ShareBackend = Callable[[ShareRequest], Union[None, Awaitable[None]]]
ClipboardSink = Callable[[str], None]


class ShareService:
    """Shares media links through a native backend or a clipboard sink."""

    def __init__(self, clipboard: ClipboardSink, native_backend: Optional[ShareBackend] = None):
        self._clipboard = clipboard
        self._native = native_backend

    @property
    def has_native_share(self) -> bool:
        return self._native is not None

    async def share(self, request: ShareRequest) -> ShareOutcome:
        """
        Share a link.

        Raises:
            UnresolvableMediaError: the request has no URL
            SideEffectError: the backend or clipboard failed
        """
        if not request.url:
            raise UnresolvableMediaError("Media item has no link to share")

        if self._native is not None:
            try:
                result = self._native(request)
                if inspect.isawaitable(result):
                    await result
            except UserCancelledError:
                logger.debug("Share sheet dismissed by user")
                return ShareOutcome.CANCELLED
            except Exception as e:
                raise SideEffectError(f"Share failed: {e}") from e
            logger.info(f"Shared {request.url}")
            return ShareOutcome.SHARED

        try:
            self._clipboard(request.url)
        except Exception as e:
            raise SideEffectError(f"Could not copy link: {e}") from e
        logger.info(f"Copied {request.url} to clipboard")
        return ShareOutcome.COPIED
