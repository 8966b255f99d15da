from PyQt6.QtCore import QSize, Qt
from PyQt6.QtWidgets import QGraphicsOpacityEffect, QWidget
import qtawesome as qta

from src.ui.common.theme import Colors, Spacing


class SpinnerWidget(qta.IconWidget):
    """Loading indicator shown over the stage while a photo is fetched."""

    def __init__(self, parent=None, *, size: int = Spacing.ICON_HERO, color: str = Colors.TEXT_WHITE, opacity: float = 0.7):
        super().__init__()
        if parent is not None:
            self.setParent(parent)
        self._spin = qta.Spin(self, autostart=False)
        self.setIcon(qta.icon("fa5s.spinner", color=color, animation=self._spin))
        self.setIconSize(QSize(size, size))
        self.setFixedSize(size, size)
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)

        opacity_effect = QGraphicsOpacityEffect(self)
        opacity_effect.setOpacity(opacity)
        self.setGraphicsEffect(opacity_effect)

        self.setVisible(False)

    def center_over(self, widget: QWidget):
        geo = widget.geometry()
        self.move(geo.x() + (geo.width() - self.width()) // 2, geo.y() + (geo.height() - self.height()) // 2)

    def start(self):
        self.setVisible(True)
        self.raise_()
        self._spin.start()

    def stop(self):
        self._spin.stop()
        self.setVisible(False)
