"""
Centralized theme configuration for the viewer.

This module provides a single source of truth for the colors, fonts, spacing
and styling used by the viewer widgets.

Usage:
    from src.ui.common.theme import Colors, Fonts, Spacing, Styles

    label.setStyleSheet(f"color: {Colors.TEXT_PRIMARY};")
    icon = qta.icon('fa5s.search-plus', color=Colors.TEXT_WHITE)
"""


class Colors:
    """
    Color palette for the viewer.

      Backgrounds: #000000 (stage), #141414 (panels), #232323 (toasts)
      Text:        #ffffff (primary on stage), #e6e6e6, #9ca3af (secondary)
      Accent:      #f7673a
      Success:     #10b981
      Error:       #ef4444
    """

    ACCENT_PRIMARY = "#f7673a"
    ACCENT_SECONDARY = "#4a9eff"

    # Semantic accents
    ACCENT_SUCCESS = "#10b981"
    ACCENT_ERROR = "#ef4444"
    ACCENT_WARNING = "#f59e0b"

    # Media kind tiles (thumbnail strip)
    TILE_VIDEO = "#db2777"
    TILE_AUDIO = "#059669"
    TILE_TEXT = "#4b5563"

    TEXT_PRIMARY = "#e6e6e6"
    TEXT_SECONDARY = "#9ca3af"
    TEXT_MUTED = "#6b7280"
    TEXT_WHITE = "#ffffff"
    TEXT_ON_STAGE_DIM = "rgba(255, 255, 255, 0.7)"

    BG_STAGE = "#000000"
    BG_PRIMARY = "#141414"
    BG_SECONDARY = "#1b1b1b"
    BG_TERTIARY = "#232323"
    BG_OVERLAY = "rgba(0, 0, 0, 0.6)"
    BG_OVERLAY_HOVER = "rgba(0, 0, 0, 0.8)"
    BG_GHOST_HOVER = "rgba(255, 255, 255, 0.2)"

    BORDER_DEFAULT = "#2e2e2e"
    BORDER_SELECTED = "#ffffff"


class Fonts:
    """Font sizes and weights."""

    FAMILY = '"Fira Sans", "Segoe UI", sans-serif'

    SIZE_SM = 12
    SIZE_MD = 13
    SIZE_LG = 14
    SIZE_XL = 15
    SIZE_XXL = 18
    SIZE_TITLE = 20

    WEIGHT_NORMAL = 400
    WEIGHT_MEDIUM = 500
    WEIGHT_SEMIBOLD = 600

    @staticmethod
    def css(size: int, weight: int = 400, color: str = Colors.TEXT_PRIMARY) -> str:
        """Generate font CSS string with size validation."""
        # Qt warns on point sizes <= 0
        safe_size = max(1, size) if size else Fonts.SIZE_MD
        return f"font-size: {safe_size}px; font-weight: {weight}; color: {color};"


class Spacing:
    """Spacing and sizing constants."""

    XS = 4
    SM = 8
    MD = 12
    LG = 16
    XL = 20
    XXL = 24

    RADIUS_SM = 4
    RADIUS_LG = 8
    RADIUS_XL = 10
    RADIUS_ROUND = 9999

    ICON_SM = 16
    ICON_MD = 20
    ICON_LG = 24
    ICON_XL = 32
    ICON_HERO = 64

    # Viewer chrome
    ACTION_BUTTON = 40
    NAV_BUTTON = 56
    THUMBNAIL = 64
    THUMBNAIL_STRIP_HEIGHT = 88
    HEADER_HEIGHT = 72


class Styles:
    """Pre-built stylesheet snippets for the viewer chrome."""

    STAGE = f"background-color: {Colors.BG_STAGE};"

    HEADER = f"""
        QWidget#viewerHeader {{
            background: qlineargradient(x1:0, y1:0, x2:0, y2:1,
                stop:0 rgba(0, 0, 0, 0.8), stop:1 rgba(0, 0, 0, 0));
        }}
    """

    FOOTER = f"""
        QWidget#viewerFooter {{
            background: qlineargradient(x1:0, y1:1, x2:0, y2:0,
                stop:0 rgba(0, 0, 0, 0.8), stop:1 rgba(0, 0, 0, 0));
        }}
    """

    GHOST_BUTTON = f"""
        QPushButton {{
            border: none;
            background: transparent;
            border-radius: {Spacing.RADIUS_LG}px;
        }}
        QPushButton:hover {{ background-color: {Colors.BG_GHOST_HOVER}; }}
        QPushButton:disabled {{ background: transparent; }}
    """

    NAV_BUTTON = f"""
        QPushButton {{
            border: none;
            background-color: {Colors.BG_OVERLAY};
            border-radius: {Spacing.NAV_BUTTON // 2}px;
        }}
        QPushButton:hover {{ background-color: {Colors.BG_OVERLAY_HOVER}; }}
    """

    AUDIO_PANEL = f"""
        QFrame#audioPanel {{
            background: qlineargradient(x1:0, y1:0, x2:1, y2:1,
                stop:0 rgba(20, 83, 45, 0.5), stop:1 rgba(6, 78, 59, 0.5));
            border-radius: 16px;
        }}
    """

    @staticmethod
    def thumbnail(selected: bool, background: str = "transparent") -> str:
        border = Colors.BORDER_SELECTED if selected else "transparent"
        return f"""
            QPushButton {{
                border: 2px solid {border};
                border-radius: {Spacing.RADIUS_SM}px;
                background-color: {background};
            }}
        """
