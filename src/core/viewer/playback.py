"""
Ownership of the single playable media element.

The viewer holds at most one handle at a time; binding a new one pauses and
releases the previous one first, so two elements never play together.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaybackState:
    is_playing: bool = False
    is_muted: bool = False


STOPPED = PlaybackState()


class PlaybackHandle(ABC):
    """A platform media element (video or audio) the viewer can drive."""

    @abstractmethod
    def play(self) -> None:
        ...

    @abstractmethod
    def pause(self) -> None:
        ...

    @abstractmethod
    def set_muted(self, muted: bool) -> None:
        ...

    def release(self) -> None:
        """Free platform resources. Called once, after pause()."""
        pass


class PlaybackSlot:
    """Holds the currently bound PlaybackHandle, if any."""

    def __init__(self):
        self._handle: Optional[PlaybackHandle] = None

    @property
    def handle(self) -> Optional[PlaybackHandle]:
        return self._handle

    @property
    def is_bound(self) -> bool:
        return self._handle is not None

    def bind(self, handle: Optional[PlaybackHandle]) -> None:
        if handle is self._handle:
            return
        self.release()
        self._handle = handle

    def release(self) -> None:
        handle, self._handle = self._handle, None
        if handle is None:
            return
        try:
            handle.pause()
        finally:
            handle.release()

    def play(self) -> bool:
        if self._handle is None:
            return False
        self._handle.play()
        return True

    def pause(self) -> bool:
        if self._handle is None:
            return False
        self._handle.pause()
        return True

    def set_muted(self, muted: bool) -> bool:
        if self._handle is None:
            return False
        self._handle.set_muted(muted)
        return True
