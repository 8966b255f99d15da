"""Photo loading and display widgets."""

from .image_loader import PhotoLoadWorker
from .zoomable_image import ZoomableImageWidget

__all__ = [
    'PhotoLoadWorker',
    'ZoomableImageWidget'
]
