"""
Toast notifications for viewer feedback.

The toast is a child overlay of the viewer, painted above the stage at the
bottom center, and fades out after a few seconds.
"""
from PyQt6.QtCore import Qt, QTimer, QPropertyAnimation, QRectF
from PyQt6.QtGui import QPainter, QColor, QPainterPath, QPen
from PyQt6.QtWidgets import QWidget, QHBoxLayout, QLabel, QPushButton, QGraphicsOpacityEffect
import qtawesome as qta

from src.ui.common.theme import Colors, Fonts, Spacing

# Distance from the bottom edge, clears the thumbnail strip
BOTTOM_OFFSET = 120


class ToastNotification(QWidget):
    """
    Toast notification widget that appears and auto-dismisses.

    Only one message is visible at a time; a new message replaces the
    current one and restarts the timer.
    """

    DEFAULT_DURATION = 3000

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("toastNotification")
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, False)
        self.hide()

        self._radius = Spacing.RADIUS_XL
        self._bg_color = QColor(Colors.BG_TERTIARY)
        self._border_color = QColor(Colors.BORDER_DEFAULT)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(Spacing.LG, Spacing.MD, Spacing.LG, Spacing.MD)
        layout.setSpacing(Spacing.MD)

        self.icon_label = QLabel()
        self.icon_label.setFixedSize(Spacing.ICON_LG, Spacing.ICON_LG)
        layout.addWidget(self.icon_label)

        self.message_label = QLabel()
        self.message_label.setWordWrap(True)
        self.message_label.setStyleSheet(
            f"color: {Colors.TEXT_PRIMARY}; font-size: {Fonts.SIZE_LG}px; background: transparent;"
        )
        layout.addWidget(self.message_label, 1)

        close_btn = QPushButton()
        close_btn.setIcon(qta.icon('fa5s.times', color=Colors.TEXT_SECONDARY))
        close_btn.setFixedSize(Spacing.ICON_MD, Spacing.ICON_MD)
        close_btn.setFlat(True)
        close_btn.setStyleSheet(
            f"QPushButton {{ border: none; background: transparent; }} "
            f"QPushButton:hover {{ background-color: rgba(255,255,255,0.1); border-radius: {Spacing.RADIUS_LG}px; }}"
        )
        close_btn.clicked.connect(self.hide)
        close_btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        layout.addWidget(close_btn)

        self.hide_timer = QTimer(self)
        self.hide_timer.setSingleShot(True)
        self.hide_timer.timeout.connect(self._fade_out)

        # Child widgets ignore windowOpacity, fade through an effect instead
        self._effect = QGraphicsOpacityEffect(self)
        self._effect.setOpacity(1.0)
        self.setGraphicsEffect(self._effect)
        self.fade_animation = QPropertyAnimation(self._effect, b"opacity", self)
        self.fade_animation.setDuration(300)

    @property
    def message(self) -> str:
        return self.message_label.text()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        path = QPainterPath()
        rect = QRectF(0.5, 0.5, self.width() - 1, self.height() - 1)
        path.addRoundedRect(rect, self._radius, self._radius)
        painter.fillPath(path, self._bg_color)
        painter.setPen(QPen(self._border_color, 1))
        painter.drawPath(path)

    def show_message(
        self,
        message: str,
        icon_name: str = 'fa5s.info-circle',
        icon_color: str = Colors.ACCENT_SECONDARY,
        duration: int = DEFAULT_DURATION
    ):
        """
        Show toast notification.

        Args:
            message: Message to display
            icon_name: QtAwesome icon name
            icon_color: Icon color
            duration: Duration in milliseconds before auto-hide
        """
        self.message_label.setText(message)
        self.icon_label.setPixmap(
            qta.icon(icon_name, color=icon_color).pixmap(Spacing.ICON_LG, Spacing.ICON_LG)
        )
        self._reposition()

        try:
            self.fade_animation.finished.disconnect()
        except TypeError:
            pass
        self.fade_animation.stop()
        self.show()
        self.raise_()
        self.fade_animation.setStartValue(0.0)
        self.fade_animation.setEndValue(1.0)
        self.fade_animation.start()

        self.hide_timer.start(duration)

    def success(self, message: str):
        self.show_message(message, 'fa5s.check-circle', Colors.ACCENT_SUCCESS)

    def error(self, message: str):
        self.show_message(message, 'fa5s.exclamation-circle', Colors.ACCENT_ERROR, duration=4000)

    def info(self, message: str):
        self.show_message(message, 'fa5s.info-circle', Colors.ACCENT_SECONDARY)

    def _reposition(self):
        parent = self.parentWidget()
        if parent is None:
            return
        self.adjustSize()
        width = min(self.sizeHint().width(), max(200, parent.width() - 2 * Spacing.XL))
        self.resize(width, self.sizeHint().height())
        x = (parent.width() - self.width()) // 2
        y = max(Spacing.XL, parent.height() - self.height() - BOTTOM_OFFSET)
        self.move(x, y)

    def _fade_out(self):
        try:
            self.fade_animation.finished.disconnect()
        except TypeError:
            pass
        self.fade_animation.setStartValue(1.0)
        self.fade_animation.setEndValue(0.0)
        self.fade_animation.finished.connect(self.hide)
        self.fade_animation.start()
