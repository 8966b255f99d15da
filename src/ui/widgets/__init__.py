"""Reusable UI widgets."""

from .notification_widgets import ToastNotification
from .spinner_widget import SpinnerWidget

__all__ = [
    'ToastNotification',
    'SpinnerWidget',
]
