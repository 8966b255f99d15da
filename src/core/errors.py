"""
Error taxonomy for the media viewer.

None of these are fatal to a viewing session: they describe an action that
did not complete, never a corrupted navigation state.
"""


class ViewerError(Exception):
    """Base class for viewer errors."""
    pass


class EmptyGalleryError(ViewerError):
    """Raised when a viewer is opened without any media items."""
    pass


class UnresolvableMediaError(ViewerError):
    """Raised when a media item's source locator is missing or cannot be loaded."""
    pass


class CapabilityUnavailableError(ViewerError):
    """Raised when a platform capability (fullscreen, native share) is missing or denied."""
    pass


class UserCancelledError(ViewerError):
    """Raised by share backends when the user dismisses the share sheet."""
    pass


class SideEffectError(ViewerError):
    """Raised when a download or share attempt fails in transport."""
    pass
