"""Media viewer widgets."""

from .media_viewer import KeyboardSubscription, MemoryMediaViewer, default_player_factory
from .thumbnail_strip import ThumbnailStrip

__all__ = [
    'KeyboardSubscription',
    'MemoryMediaViewer',
    'ThumbnailStrip',
    'default_player_factory',
]
