import os
import sys
import logging

from PyQt6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QLabel, QFrame
from PyQt6.QtCore import Qt, pyqtSignal
import qtawesome as qta

from src.core.dto.media import MediaItem, MediaKind
from src.core.media_source import is_remote, resolve_locator
from src.core.viewer.playback import PlaybackHandle
from src.ui.common.theme import Colors, Fonts, Spacing, Styles
from .player_controls import MPVSignals, SeekSlider

logger = logging.getLogger(__name__)

# --------------------------------------------------
# mpv bootstrap
# --------------------------------------------------

def bundled_mpv_dir():
    """Directory that may contain a bundled libmpv (PyInstaller builds and dev checkouts)."""
    if hasattr(sys, "_MEIPASS"):
        return os.path.join(sys._MEIPASS, "mpv")
    project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))
    return os.path.join(project_root, "mpv")


def _setup_mpv_path():
    """Put a bundled libmpv first on PATH so the mpv module can find it."""
    mpv_dir = bundled_mpv_dir()
    if not os.path.isdir(mpv_dir):
        return
    current_path = os.environ.get("PATH", "")
    if mpv_dir not in current_path:
        os.environ["PATH"] = mpv_dir + os.pathsep + current_path
        logger.info(f"[mpv] Added to PATH: {mpv_dir}")


_setup_mpv_path()

import mpv  # noqa: E402


def _fmt_time(seconds: float) -> str:
    seconds = max(0, int(seconds or 0))
    minutes, secs = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


# --------------------------------------------------
# Media Player
# --------------------------------------------------

class MediaPlayerWidget(QWidget):
    """
    mpv-backed player for one video or audio item.

    Starts paused. Reports pause state changes that did not come from the
    viewer (its own seek bar, end of stream) through playing_changed.
    """

    playing_changed = pyqtSignal(bool)

    def __init__(self, item: MediaItem, parent=None, *, access_token=None):
        super().__init__(parent)
        self.item = item
        self.duration = 0.0
        self._terminated = False
        self.signals = MPVSignals()

        self._setup_ui()

        resolved = resolve_locator(item.source_locator)
        url = str(resolved) if resolved is not None else ""

        options = dict(
            osc="no",
            input_default_bindings="no",
            keep_open="yes",
            msg_level="all=no",
        )
        if item.kind is MediaKind.VIDEO:
            options["wid"] = int(self.video_surface.winId())
            options["hwdec"] = "auto-safe"
        else:
            options["vid"] = "no"
        if access_token and is_remote(resolved):
            options["http_header_fields"] = f"Authorization: Bearer {access_token}"

        self.player = mpv.MPV(**options)
        self.player.observe_property("time-pos", self._mpv_time)
        self.player.observe_property("duration", self._mpv_duration)
        self.player.observe_property("pause", self._mpv_pause)

        self.signals.position.connect(self._on_position)
        self.signals.duration.connect(self._on_duration)
        self.signals.pause.connect(lambda paused: self.playing_changed.emit(not paused))

        if url:
            self.player.play(url)
        self.player.pause = True  # type: ignore[attr-defined]

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(Spacing.SM)

        if self.item.kind is MediaKind.VIDEO:
            self.video_surface = QWidget(self)
            self.video_surface.setAttribute(Qt.WidgetAttribute.WA_NativeWindow, True)
            self.video_surface.setStyleSheet(f"background-color: {Colors.BG_STAGE};")
            layout.addWidget(self.video_surface, 1)
        else:
            self.video_surface = None
            layout.addStretch(1)
            layout.addWidget(self._build_audio_panel(), 0, Qt.AlignmentFlag.AlignCenter)
            layout.addStretch(1)

        bar = QHBoxLayout()
        bar.setContentsMargins(Spacing.LG, 0, Spacing.LG, 0)
        self.seek = SeekSlider(self)
        self.seek.sliderMoved.connect(self._on_seek)
        self.time_label = QLabel("0:00 / 0:00")
        self.time_label.setStyleSheet(Fonts.css(Fonts.SIZE_SM, color=Colors.TEXT_SECONDARY))
        bar.addWidget(self.seek, 1)
        bar.addWidget(self.time_label)
        layout.addLayout(bar)

    def _build_audio_panel(self) -> QFrame:
        panel = QFrame(self)
        panel.setObjectName("audioPanel")
        panel.setStyleSheet(Styles.AUDIO_PANEL)
        col = QVBoxLayout(panel)
        col.setContentsMargins(Spacing.XXL * 2, Spacing.XXL, Spacing.XXL * 2, Spacing.XXL)
        col.setSpacing(Spacing.LG)

        icon = QLabel()
        icon.setPixmap(qta.icon('fa5s.volume-up', color=Colors.TEXT_WHITE).pixmap(Spacing.ICON_HERO, Spacing.ICON_HERO))
        icon.setAlignment(Qt.AlignmentFlag.AlignCenter)
        col.addWidget(icon)

        heading = QLabel("Audio File")
        heading.setAlignment(Qt.AlignmentFlag.AlignCenter)
        heading.setStyleSheet(Fonts.css(Fonts.SIZE_TITLE, Fonts.WEIGHT_MEDIUM, Colors.TEXT_WHITE))
        col.addWidget(heading)

        name = QLabel(self.item.display_name)
        name.setAlignment(Qt.AlignmentFlag.AlignCenter)
        name.setStyleSheet(f"color: {Colors.TEXT_ON_STAGE_DIM}; font-size: {Fonts.SIZE_LG}px;")
        col.addWidget(name)
        return panel

    # mpv observers (mpv event thread)

    def _mpv_time(self, _name, value):
        if value is not None:
            self.signals.position.emit(float(value))

    def _mpv_duration(self, _name, value):
        if value is not None:
            self.signals.duration.emit(float(value))

    def _mpv_pause(self, _name, value):
        if value is not None:
            self.signals.pause.emit(bool(value))

    # UI thread

    def _on_position(self, position: float):
        if self.duration > 0:
            self.seek.set_ratio(position / self.duration)
        self.time_label.setText(f"{_fmt_time(position)} / {_fmt_time(self.duration)}")

    def _on_duration(self, duration: float):
        self.duration = duration

    def _on_seek(self, value: int):
        if self._terminated or self.duration <= 0:
            return
        try:
            self.player.time_pos = self.duration * value / self.seek.RESOLUTION
        except Exception as e:
            logger.debug(f"Seek failed: {e}")

    # Control surface used by MpvPlaybackHandle

    def play(self):
        if not self._terminated:
            self.player.pause = False  # type: ignore[attr-defined]

    def pause(self):
        if not self._terminated:
            self.player.pause = True  # type: ignore[attr-defined]

    def set_muted(self, muted: bool):
        if not self._terminated:
            self.player.mute = bool(muted)  # type: ignore[attr-defined]

    def cleanup(self):
        if self._terminated:
            return
        self._terminated = True
        try:
            self.player.terminate()
        except Exception as e:
            logger.debug(f"mpv terminate failed: {e}")


class MpvPlaybackHandle(PlaybackHandle):
    """PlaybackHandle over a MediaPlayerWidget."""

    def __init__(self, widget: MediaPlayerWidget):
        self.widget = widget

    def play(self) -> None:
        self.widget.play()

    def pause(self) -> None:
        self.widget.pause()

    def set_muted(self, muted: bool) -> None:
        self.widget.set_muted(muted)

    def release(self) -> None:
        self.widget.cleanup()


def create_player(item: MediaItem, parent=None, *, access_token=None):
    """Default player factory for the viewer: returns (widget, handle)."""
    widget = MediaPlayerWidget(item, parent, access_token=access_token)
    return widget, MpvPlaybackHandle(widget)
