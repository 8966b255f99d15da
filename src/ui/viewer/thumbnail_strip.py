"""
Thumbnail strip along the bottom of the viewer.
"""
import logging
from typing import Dict, List, Sequence

from PyQt6.QtCore import Qt, QSize, pyqtSignal
from PyQt6.QtGui import QIcon, QImageReader, QPixmap
from PyQt6.QtWidgets import QFrame, QHBoxLayout, QPushButton, QScrollArea, QWidget
import qtawesome as qta

from src.core.dto.media import MediaItem, MediaKind
from src.core.media_source import is_remote, resolve_locator
from src.ui.common.theme import Colors, Spacing, Styles
from src.ui.images.image_loader import PhotoLoadWorker

logger = logging.getLogger(__name__)

# Tile background and icon per non-photo kind
_KIND_TILES = {
    MediaKind.VIDEO: (Colors.TILE_VIDEO, 'fa5s.play'),
    MediaKind.AUDIO: (Colors.TILE_AUDIO, 'fa5s.volume-up'),
    MediaKind.TEXT: (Colors.TILE_TEXT, 'fa5s.file-alt'),
}


class ThumbnailStrip(QScrollArea):
    """
    Horizontal row of one tile per media item.

    Clicking a tile emits thumbnail_clicked(index); the viewer turns that into
    a jump. The strip never changes its own selection.
    """

    thumbnail_clicked = pyqtSignal(int)

    def __init__(self, items: Sequence[MediaItem], parent=None, *, session=None, access_token=None):
        super().__init__(parent)
        self.setObjectName("thumbnailStrip")
        self.items = list(items)
        self.selected_index = -1
        self.tiles: List[QPushButton] = []
        self._http = session
        self._access_token = access_token
        self._workers: Dict[int, PhotoLoadWorker] = {}

        self.setFixedHeight(Spacing.THUMBNAIL_STRIP_HEIGHT)
        self.setFrameShape(QFrame.Shape.NoFrame)
        self.setWidgetResizable(True)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAsNeeded)
        self.setStyleSheet(
            """
            QScrollArea#thumbnailStrip { background: transparent; border: none; }
            QScrollArea#thumbnailStrip > QWidget > QWidget { background: transparent; }
            """
        )

        container = QWidget()
        row = QHBoxLayout(container)
        row.setContentsMargins(Spacing.LG, Spacing.SM, Spacing.LG, Spacing.SM)
        row.setSpacing(Spacing.SM)
        row.setAlignment(Qt.AlignmentFlag.AlignCenter)

        for index, item in enumerate(self.items):
            tile = self._create_tile(index, item)
            row.addWidget(tile)
            self.tiles.append(tile)

        for index, item in enumerate(self.items):
            if item.is_photo:
                self._load_photo(index, item)

        self.setWidget(container)

    def _create_tile(self, index: int, item: MediaItem) -> QPushButton:
        tile = QPushButton()
        tile.setFixedSize(Spacing.THUMBNAIL, Spacing.THUMBNAIL)
        tile.setCursor(Qt.CursorShape.PointingHandCursor)
        tile.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        tile.setToolTip(item.display_name)
        tile.setProperty("background", "transparent")
        tile.clicked.connect(lambda _checked=False, i=index: self.thumbnail_clicked.emit(i))

        if item.is_photo:
            tile.setProperty("background", Colors.BG_SECONDARY)
            tile.setIcon(qta.icon('fa5s.image', color=Colors.TEXT_SECONDARY))
            tile.setIconSize(QSize(Spacing.ICON_LG, Spacing.ICON_LG))
        else:
            background, icon_name = _KIND_TILES[item.kind]
            tile.setProperty("background", background)
            tile.setIcon(qta.icon(icon_name, color=Colors.TEXT_WHITE))
            tile.setIconSize(QSize(Spacing.ICON_LG, Spacing.ICON_LG))

        tile.setStyleSheet(Styles.thumbnail(False, tile.property("background")))
        return tile

    # -----------------------------------------------------
    # Photo tiles
    # -----------------------------------------------------

    def _load_photo(self, index: int, item: MediaItem):
        resolved = resolve_locator(item.source_locator)
        if resolved is None:
            return
        if is_remote(resolved):
            worker = PhotoLoadWorker(
                token=index,
                locator=item.source_locator,
                session=self._http,
                access_token=self._access_token,
            )
            worker.loaded.connect(self._on_photo_loaded)
            worker.failed.connect(self._on_photo_failed)
            worker.finished.connect(lambda i=index: self._workers.pop(i, None))
            self._workers[index] = worker
            worker.start()
            return

        reader = QImageReader(str(resolved))
        reader.setAutoTransform(True)
        size = reader.size()
        if size.isValid() and size.width() > 0 and size.height() > 0:
            size.scale(Spacing.THUMBNAIL * 2, Spacing.THUMBNAIL * 2, Qt.AspectRatioMode.KeepAspectRatioByExpanding)
            reader.setScaledSize(size)
        image = reader.read()
        if image.isNull():
            logger.debug(f"No thumbnail for {item.display_name}: {reader.errorString()}")
            return
        self._set_tile_pixmap(index, QPixmap.fromImage(image))

    def _on_photo_loaded(self, index: int, data: bytes):
        pixmap = QPixmap()
        if pixmap.loadFromData(data):
            self._set_tile_pixmap(index, pixmap)

    def _on_photo_failed(self, index: int, error: str):
        logger.debug(f"Thumbnail {index} failed: {error}")

    def _set_tile_pixmap(self, index: int, pixmap: QPixmap):
        if not 0 <= index < len(self.tiles):
            return
        inner = Spacing.THUMBNAIL - 4
        scaled = pixmap.scaled(
            inner, inner,
            Qt.AspectRatioMode.KeepAspectRatioByExpanding,
            Qt.TransformationMode.SmoothTransformation,
        )
        x = max(0, (scaled.width() - inner) // 2)
        y = max(0, (scaled.height() - inner) // 2)
        tile = self.tiles[index]
        tile.setIcon(QIcon(scaled.copy(x, y, inner, inner)))
        tile.setIconSize(QSize(inner, inner))

    # -----------------------------------------------------
    # Selection
    # -----------------------------------------------------

    def set_current(self, index: int):
        """Highlight the tile at index and scroll it into view."""
        if index == self.selected_index:
            return
        for i, tile in enumerate(self.tiles):
            tile.setStyleSheet(Styles.thumbnail(i == index, tile.property("background")))
        self.selected_index = index
        if 0 <= index < len(self.tiles):
            self.ensureWidgetVisible(self.tiles[index], Spacing.LG, 0)

    def shutdown(self):
        """Stop pending thumbnail loads."""
        for worker in list(self._workers.values()):
            worker.cancel()
            try:
                worker.loaded.disconnect()
                worker.failed.disconnect()
            except TypeError:
                pass
            worker.wait(2000)
        self._workers.clear()
