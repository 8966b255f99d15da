"""
Playback control widgets for the media player.

Contains the MPV signal bridge and a seek slider.
"""

from PyQt6.QtWidgets import QSlider
from PyQt6.QtCore import Qt, QObject, pyqtSignal
from PyQt6.QtGui import QPainter, QColor

from src.ui.common.theme import Colors


class MPVSignals(QObject):
    # mpv observers run on mpv's event thread; these are delivered queued to the UI thread
    position = pyqtSignal(float)
    duration = pyqtSignal(float)
    pause = pyqtSignal(bool)


class SeekSlider(QSlider):
    """Horizontal position slider that jumps to the clicked position."""

    RESOLUTION = 1000

    def __init__(self, parent=None):
        super().__init__(Qt.Orientation.Horizontal, parent)
        self.setMouseTracking(True)
        self.setRange(0, self.RESOLUTION)
        self.setFixedHeight(18)
        self.setFocusPolicy(Qt.FocusPolicy.NoFocus)

    def set_ratio(self, ratio: float):
        if self.isSliderDown():
            return
        self.setValue(int(max(0.0, min(1.0, ratio)) * self.RESOLUTION))

    def ratio(self) -> float:
        return self.value() / self.RESOLUTION

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            ratio = event.position().x() / max(1, self.width())
            self.setValue(int(ratio * self.maximum()))
            self.sliderMoved.emit(self.value())
            event.accept()
        super().mousePressEvent(event)

    def paintEvent(self, _):
        p = QPainter(self)
        p.setRenderHint(QPainter.RenderHint.Antialiasing)

        groove_h = 4
        r = self.rect().adjusted(
            8,
            (self.height() - groove_h) // 2,
            -8,
            -(self.height() - groove_h) // 2,
        )

        # base
        p.setPen(Qt.PenStyle.NoPen)
        p.setBrush(QColor(255, 255, 255, 40))
        p.drawRoundedRect(r, 2, 2)

        # played
        played = self.value() / self.maximum()
        pw = int(r.width() * played)
        p.setBrush(QColor(Colors.ACCENT_PRIMARY))
        p.drawRoundedRect(r.adjusted(0, 0, pw - r.width(), 0), 2, 2)

        # handle
        hx = r.left() + pw
        p.setBrush(QColor(255, 255, 255))
        p.drawEllipse(hx - 5, r.center().y() - 5, 10, 10)
