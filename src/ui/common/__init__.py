"""Shared theme for the viewer widgets."""

from .theme import Colors, Fonts, Spacing, Styles

__all__ = [
    'Colors',
    'Fonts',
    'Spacing',
    'Styles',
]
