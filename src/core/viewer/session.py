"""
Viewer session: the navigation, zoom, playback and gesture state of one
opened media viewer.

The session holds no widget code. Every public operation is a synchronous
state transition; operations return True when observable state changed so
the owning widget knows to re-render.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional, Sequence

from src.core.dto.media import MediaItem, MediaKind
from src.core.errors import EmptyGalleryError
from src.core.viewer.gestures import GestureTracker, GestureUpdate, SwipeIntent, TouchPoint
from src.core.viewer.playback import STOPPED, PlaybackHandle, PlaybackSlot, PlaybackState
from src.core.viewer.settings import ViewerSettings

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Memory"


class ViewerKey(Enum):
    ESCAPE = "escape"
    ARROW_LEFT = "arrow_left"
    ARROW_RIGHT = "arrow_right"
    SPACE = "space"
    OTHER = "other"


class ViewerSession:
    """
    State owned by one mounted media viewer.

    Invariants after every public call:
        0 <= cursor < len(items)
        min_zoom <= zoom_factor <= max_zoom
        is_zoomed == (zoom_factor > min_zoom)
    """

    def __init__(
        self,
        items: Sequence[MediaItem],
        initial_index: int = 0,
        on_close: Optional[Callable[[], None]] = None,
        title: str = DEFAULT_TITLE,
        *,
        settings: Optional[ViewerSettings] = None,
        fullscreen_supported: bool = False,
    ):
        if not items:
            raise EmptyGalleryError("A media viewer needs at least one item")

        self.items = tuple(items)
        self.title = title or DEFAULT_TITLE
        self.settings = settings or ViewerSettings()
        self.fullscreen_supported = fullscreen_supported
        self._on_close = on_close

        self.cursor = max(0, min(int(initial_index), len(self.items) - 1))
        self.zoom_factor = self.settings.min_zoom
        self.is_zoomed = False
        self.playback: PlaybackState = STOPPED

        self.gestures = GestureTracker(self.settings.swipe_threshold)
        self._slot = PlaybackSlot()

        logger.debug(f"Viewer session opened on {len(self.items)} items at index {self.cursor}")

    # ---------------------------------------------------------
    # Derived state
    # ---------------------------------------------------------

    @property
    def current(self) -> MediaItem:
        return self.items[self.cursor]

    @property
    def has_previous(self) -> bool:
        return self.cursor > 0

    @property
    def has_next(self) -> bool:
        return self.cursor < len(self.items) - 1

    @property
    def can_zoom_in(self) -> bool:
        return self.current.is_photo and self.zoom_factor < self.settings.max_zoom

    @property
    def can_zoom_out(self) -> bool:
        return self.current.is_photo and self.zoom_factor > self.settings.min_zoom

    @property
    def position_label(self) -> str:
        return f"{self.cursor + 1} of {len(self.items)}"

    @property
    def playback_handle(self) -> Optional[PlaybackHandle]:
        return self._slot.handle

    # ---------------------------------------------------------
    # Navigation
    # ---------------------------------------------------------

    def go_next(self) -> bool:
        if not self.has_next:
            return False
        self._move_to(self.cursor + 1)
        return True

    def go_previous(self) -> bool:
        if not self.has_previous:
            return False
        self._move_to(self.cursor - 1)
        return True

    def jump_to(self, index: int) -> bool:
        """Thumbnail navigation. Resets zoom and playback even for the current index."""
        if not 0 <= index < len(self.items):
            raise IndexError(f"Media index {index} out of range (0..{len(self.items) - 1})")
        self._move_to(index)
        return True

    def _move_to(self, index: int) -> None:
        # Pause and drop the outgoing element in the same turn as the cursor change
        self._slot.release()
        self.cursor = index
        self._set_zoom(self.settings.min_zoom)
        self.playback = STOPPED
        self.gestures.reset()
        logger.debug(f"Viewer moved to {self.position_label}: {self.current.display_name}")

    # ---------------------------------------------------------
    # Zoom (photos only)
    # ---------------------------------------------------------

    def _set_zoom(self, value: float) -> None:
        s = self.settings
        self.zoom_factor = max(s.min_zoom, min(s.max_zoom, value))
        self.is_zoomed = self.zoom_factor > s.min_zoom

    def zoom_in(self) -> bool:
        if not self.current.is_photo:
            return False
        before = self.zoom_factor
        self._set_zoom(self.zoom_factor + self.settings.zoom_step)
        return self.zoom_factor != before

    def zoom_out(self) -> bool:
        if not self.current.is_photo:
            return False
        before = self.zoom_factor
        self._set_zoom(self.zoom_factor - self.settings.zoom_step)
        return self.zoom_factor != before

    def toggle_zoom_at_point(self) -> bool:
        """Tap zoom: jump straight to the tap level, or back to fit when zoomed."""
        if not self.current.is_photo:
            return False
        if self.is_zoomed:
            self._set_zoom(self.settings.min_zoom)
        else:
            self._set_zoom(self.settings.tap_zoom)
        return True

    # ---------------------------------------------------------
    # Playback (video/audio)
    # ---------------------------------------------------------

    def bind_handle(self, handle: Optional[PlaybackHandle]) -> None:
        """Attach the element rendering the current item; releases any previous one."""
        if handle is not None and not self.current.is_playable:
            logger.warning(f"Ignoring playback handle for non-playable item {self.current.display_name}")
            return
        self._slot.bind(handle)
        if handle is not None:
            handle.set_muted(self.playback.is_muted)

    def release_handle(self) -> None:
        self._slot.release()
        self.playback = STOPPED

    def toggle_play_pause(self) -> bool:
        if not self.current.is_playable or not self._slot.is_bound:
            return False
        if self.playback.is_playing:
            self._slot.pause()
        else:
            self._slot.play()
        self.playback = PlaybackState(not self.playback.is_playing, self.playback.is_muted)
        return True

    def toggle_mute(self) -> bool:
        if not self.current.is_playable:
            return False
        muted = not self.playback.is_muted
        self._slot.set_muted(muted)
        self.playback = PlaybackState(self.playback.is_playing, muted)
        return True

    def sync_playing(self, is_playing: bool) -> bool:
        """The element started or paused by itself (its own controls, end of stream)."""
        if not self.current.is_playable or self.playback.is_playing == is_playing:
            return False
        self.playback = PlaybackState(is_playing, self.playback.is_muted)
        return True

    # ---------------------------------------------------------
    # Keyboard
    # ---------------------------------------------------------

    def handle_key(self, key: ViewerKey) -> bool:
        """
        Apply a key press. Returns True when the key's default action
        (scrolling for Space) must be suppressed.
        """
        if key is ViewerKey.ESCAPE:
            self.request_close()
            return True
        if key is ViewerKey.ARROW_LEFT:
            self.go_previous()
            return True
        if key is ViewerKey.ARROW_RIGHT:
            self.go_next()
            return True
        if key is ViewerKey.SPACE:
            if self.current.kind is MediaKind.VIDEO:
                self.toggle_play_pause()
            return True
        return False

    # ---------------------------------------------------------
    # Touch
    # ---------------------------------------------------------

    def touch_start(self, points: Sequence[TouchPoint]) -> bool:
        self.gestures.touch_start(points)
        return False

    def touch_move(self, points: Sequence[TouchPoint]) -> bool:
        return self._apply_gesture(self.gestures.touch_move(points))

    def touch_end(self) -> bool:
        return self._apply_gesture(self.gestures.touch_end())

    def _apply_gesture(self, update: GestureUpdate) -> bool:
        if update.pinch_scale is not None:
            if not self.current.is_photo:
                return False
            self._set_zoom(self.zoom_factor * update.pinch_scale)
            return True

        if update.pinch_ended:
            if self.zoom_factor <= self.settings.pinch_snap:
                self._set_zoom(self.settings.min_zoom)
            return True

        if update.swipe is SwipeIntent.NEXT:
            return self.go_next()
        if update.swipe is SwipeIntent.PREVIOUS:
            return self.go_previous()
        if update.swipe is SwipeIntent.DISMISS:
            self.request_close()
            return True
        return False

    # ---------------------------------------------------------
    # Lifecycle
    # ---------------------------------------------------------

    def request_close(self) -> None:
        logger.debug("Viewer close requested")
        self.release_handle()
        self.gestures.reset()
        if self._on_close is not None:
            self._on_close()
