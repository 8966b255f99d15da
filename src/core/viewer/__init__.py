"""Media viewer state machine (no widget code)."""

from src.core.viewer.gestures import GestureTracker, SwipeIntent, TouchPoint, classify_swipe
from src.core.viewer.playback import PlaybackHandle, PlaybackSlot, PlaybackState
from src.core.viewer.session import ViewerKey, ViewerSession
from src.core.viewer.settings import ViewerSettings

__all__ = [
    "GestureTracker",
    "SwipeIntent",
    "TouchPoint",
    "classify_swipe",
    "PlaybackHandle",
    "PlaybackSlot",
    "PlaybackState",
    "ViewerKey",
    "ViewerSession",
    "ViewerSettings",
]
