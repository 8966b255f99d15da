from src.core.dto.media import MediaItem, MediaKind

__all__ = [
    "MediaItem",
    "MediaKind",
]
