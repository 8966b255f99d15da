"""
Viewer tunables backed by the config table.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


def _default_download_dir() -> Path:
    return Path.home() / "Downloads"


@dataclass(frozen=True)
class ViewerSettings:
    swipe_threshold: float = 50.0   # logical pixels
    zoom_step: float = 0.5
    min_zoom: float = 1.0
    max_zoom: float = 3.0
    tap_zoom: float = 2.0
    pinch_snap: float = 1.1         # pinch ending at or below this snaps back to min_zoom
    download_dir: Path = field(default_factory=_default_download_dir)

    CONFIG_DEFAULTS = {
        "viewer_swipe_threshold": "50",
        "viewer_zoom_step": "0.5",
        "viewer_max_zoom": "3.0",
        "viewer_tap_zoom": "2.0",
        "viewer_pinch_snap": "1.1",
    }

    @classmethod
    def from_db(cls, db) -> "ViewerSettings":
        """Read settings from a DatabaseManager, falling back to defaults on bad values."""
        defaults = cls()
        if db is None:
            return defaults

        def _float(key: str, fallback: float) -> float:
            raw = db.get_config(key, None)
            if raw is None:
                return fallback
            try:
                value = float(raw)
            except (TypeError, ValueError):
                logger.warning(f"Ignoring invalid value for {key}: {raw!r}")
                return fallback
            if value <= 0:
                logger.warning(f"Ignoring non-positive value for {key}: {raw!r}")
                return fallback
            return value

        max_zoom = _float("viewer_max_zoom", defaults.max_zoom)
        if max_zoom < defaults.min_zoom:
            max_zoom = defaults.max_zoom
        tap_zoom = _float("viewer_tap_zoom", defaults.tap_zoom)
        if tap_zoom <= defaults.min_zoom:
            logger.warning(f"Ignoring viewer_tap_zoom {tap_zoom}: must be above {defaults.min_zoom}")
            tap_zoom = defaults.tap_zoom
        tap_zoom = min(max_zoom, tap_zoom)

        pinch_snap = _float("viewer_pinch_snap", defaults.pinch_snap)
        if pinch_snap < defaults.min_zoom:
            logger.warning(f"Ignoring viewer_pinch_snap {pinch_snap}: must be at least {defaults.min_zoom}")
            pinch_snap = defaults.pinch_snap

        download_dir = db.get_config("download_dir", None)
        return cls(
            swipe_threshold=_float("viewer_swipe_threshold", defaults.swipe_threshold),
            zoom_step=_float("viewer_zoom_step", defaults.zoom_step),
            max_zoom=max_zoom,
            tap_zoom=tap_zoom,
            pinch_snap=pinch_snap,
            download_dir=Path(download_dir).expanduser() if download_dir else defaults.download_dir,
        )
