"""
Zoomable image widget for the memory viewer
"""
from PyQt6.QtWidgets import QGraphicsView, QGraphicsScene, QGraphicsPixmapItem
from PyQt6.QtCore import Qt, QPointF, pyqtSignal
from PyQt6.QtGui import QPixmap, QWheelEvent, QMouseEvent, QPainter
import logging
from src.ui.common.theme import Colors

logger = logging.getLogger(__name__)

# A press that moves less than this (in pixels) before release counts as a tap
TAP_SLOP = 6


class ZoomableImageWidget(QGraphicsView):
    """
    Photo view rendered at a zoom factor relative to fit-in-view.

    The widget does not own the zoom level: it reports taps and wheel steps
    and displays whatever factor the viewer session sets.
    """

    tapped = pyqtSignal()
    zoom_in_requested = pyqtSignal()
    zoom_out_requested = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("zoomableImageView")

        self.scene = QGraphicsScene(self)
        self.setScene(self.scene)

        self.pixmap_item = None
        self.current_pixmap = None

        # Relative to the fit-in-view scale
        self.zoom_factor = 1.0
        self._fit_scale = 1.0

        self._press_pos = None
        self._last_drag_pos = None
        self._dragged = False

        self.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform, True)
        self.setDragMode(QGraphicsView.DragMode.NoDrag)
        self.setTransformationAnchor(QGraphicsView.ViewportAnchor.AnchorViewCenter)
        self.setResizeAnchor(QGraphicsView.ViewportAnchor.AnchorViewCenter)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setViewportUpdateMode(QGraphicsView.ViewportUpdateMode.FullViewportUpdate)

        self.setStyleSheet(f"background-color: {Colors.BG_STAGE}; border: none;")

    def set_pixmap(self, pixmap: QPixmap):
        """Set image to display"""
        if pixmap.isNull():
            return

        self.current_pixmap = pixmap
        self.scene.clear()

        self.pixmap_item = QGraphicsPixmapItem(pixmap)
        self.pixmap_item.setTransformationMode(Qt.TransformationMode.SmoothTransformation)
        self.pixmap_item.setPos(0, 0)
        self.scene.addItem(self.pixmap_item)
        self.scene.setSceneRect(self.pixmap_item.boundingRect())

        self._apply_transform()
        self.viewport().update()

    def clear_pixmap(self):
        self.scene.clear()
        self.pixmap_item = None
        self.current_pixmap = None
        self.zoom_factor = 1.0
        self.resetTransform()

    def set_zoom(self, factor: float):
        """Display the photo at factor times its fit-in-view scale."""
        if abs(factor - self.zoom_factor) < 1e-9:
            return
        self.zoom_factor = factor
        self._apply_transform()

    def _apply_transform(self):
        if not self.pixmap_item:
            return
        rect = self.pixmap_item.boundingRect()
        view = self.viewport().rect()
        if rect.width() <= 0 or rect.height() <= 0 or view.width() <= 0 or view.height() <= 0:
            return
        self._fit_scale = min(view.width() / rect.width(), view.height() / rect.height())
        scale = self._fit_scale * self.zoom_factor

        self.resetTransform()
        self.scale(scale, scale)
        if self.zoom_factor <= 1.0:
            self.pixmap_item.setPos(0, 0)
            self.centerOn(rect.center())

    def wheelEvent(self, event: QWheelEvent):
        """Mouse wheel asks the session to zoom"""
        if not self.pixmap_item:
            return
        if event.angleDelta().y() > 0:
            self.zoom_in_requested.emit()
        else:
            self.zoom_out_requested.emit()
        event.accept()

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() == Qt.MouseButton.LeftButton:
            self._press_pos = event.position()
            self._last_drag_pos = event.position()
            self._dragged = False
            event.accept()
        else:
            super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent):
        if self._press_pos is None:
            super().mouseMoveEvent(event)
            return
        pos = event.position()
        if (pos - self._press_pos).manhattanLength() > TAP_SLOP:
            self._dragged = True
        # Pan only while zoomed in
        if self._dragged and self.pixmap_item and self.zoom_factor > 1.0:
            delta = pos - self._last_drag_pos
            scale = max(1e-6, self._fit_scale * self.zoom_factor)
            self.pixmap_item.setPos(self.pixmap_item.pos() + QPointF(delta.x() / scale, delta.y() / scale))
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
        self._last_drag_pos = pos
        event.accept()

    def mouseReleaseEvent(self, event: QMouseEvent):
        if event.button() == Qt.MouseButton.LeftButton and self._press_pos is not None:
            was_tap = not self._dragged
            self._press_pos = None
            self._last_drag_pos = None
            self._dragged = False
            self.setCursor(Qt.CursorShape.ArrowCursor)
            if was_tap and self.pixmap_item:
                self.tapped.emit()
            event.accept()
        else:
            super().mouseReleaseEvent(event)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._apply_transform()
