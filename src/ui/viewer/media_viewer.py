"""
Full-window media viewer for the photos, videos and audio clips of one memory.

All viewer state lives in a ViewerSession; this widget translates Qt input
into session operations and re-renders from the session afterwards.
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional, Sequence, Set, Tuple

from PyQt6.QtCore import Qt, QEvent, QObject, QSize, pyqtSignal
from PyQt6.QtGui import QEventPoint, QGuiApplication, QPixmap
from PyQt6.QtWidgets import (
    QApplication, QHBoxLayout, QLabel, QPushButton, QStackedWidget, QVBoxLayout, QWidget
)
import qtawesome as qta

from src.core.download_manager import DownloadManager
from src.core.download_worker import DownloadWorker
from src.core.dto.media import MediaItem
from src.core.errors import CapabilityUnavailableError, SideEffectError, UnresolvableMediaError
from src.core.media_source import resolve_locator
from src.core.share_service import ShareOutcome, ShareRequest, ShareService
from src.core.viewer import PlaybackHandle, TouchPoint, ViewerKey, ViewerSession, ViewerSettings
from src.ui.common.theme import Colors, Fonts, Spacing, Styles
from src.ui.images.image_loader import PhotoLoadWorker
from src.ui.images.zoomable_image import ZoomableImageWidget
from src.ui.viewer.thumbnail_strip import ThumbnailStrip
from src.ui.widgets.notification_widgets import ToastNotification
from src.ui.widgets.spinner_widget import SpinnerWidget
from src.utils.file_utils import suggest_filename

logger = logging.getLogger(__name__)

SWIPE_HINT = "Swipe left/right to navigate · Swipe down to close"

# Platform plugins without real top-level windows
_NO_FULLSCREEN_PLATFORMS = {"offscreen", "minimal"}

_QT_KEYS = {
    Qt.Key.Key_Escape.value: ViewerKey.ESCAPE,
    Qt.Key.Key_Left.value: ViewerKey.ARROW_LEFT,
    Qt.Key.Key_Right.value: ViewerKey.ARROW_RIGHT,
    Qt.Key.Key_Space.value: ViewerKey.SPACE,
}

PlayerFactory = Callable[[MediaItem, QWidget], Tuple[QWidget, PlaybackHandle]]


def viewer_key(qt_key) -> ViewerKey:
    return _QT_KEYS.get(getattr(qt_key, "value", qt_key), ViewerKey.OTHER)


def fullscreen_supported() -> bool:
    """Whether the running platform plugin can put a top-level window in full screen."""
    return QGuiApplication.platformName() not in _NO_FULLSCREEN_PLATFORMS


class KeyboardSubscription(QObject):
    """
    Application-wide key listener that lives as long as the viewer is shown.

    Forwards Escape, arrows and Space to the handler and swallows the event
    when the handler reports it handled the key.
    """

    def __init__(self, handler: Callable[[ViewerKey], bool], parent=None):
        super().__init__(parent)
        self._handler = handler
        self._installed = False

    @property
    def installed(self) -> bool:
        return self._installed

    def install(self):
        app = QApplication.instance()
        if app is None or self._installed:
            return
        app.installEventFilter(self)
        self._installed = True

    def remove(self):
        app = QApplication.instance()
        if app is None or not self._installed:
            return
        app.removeEventFilter(self)
        self._installed = False

    def eventFilter(self, obj, event):
        # Key events reach the QWindow before the focus widget; handle them once
        if event.type() == QEvent.Type.KeyPress and isinstance(obj, QWidget):
            key = viewer_key(event.key())
            if key is not ViewerKey.OTHER:
                return bool(self._handler(key))
        return super().eventFilter(obj, event)


def default_player_factory(access_token: Optional[str] = None) -> PlayerFactory:
    """Factory for mpv-backed players; libmpv is only loaded on first use."""

    def factory(item: MediaItem, parent: QWidget):
        from src.ui.video.video_player import create_player
        return create_player(item, parent, access_token=access_token)

    return factory


class MemoryMediaViewer(QWidget):
    """
    Viewer over the media of one memory.

    Emits closed when the user dismisses it (close button, Escape, swipe down);
    the optional on_close callback is invoked at the same time.
    """

    closed = pyqtSignal()

    def __init__(
        self,
        items: Sequence[MediaItem],
        initial_index: int = 0,
        on_close: Optional[Callable[[], None]] = None,
        title: str = "Memory",
        *,
        context=None,
        settings: Optional[ViewerSettings] = None,
        player_factory: Optional[PlayerFactory] = None,
        share_service: Optional[ShareService] = None,
        parent=None,
    ):
        super().__init__(parent)
        self.setObjectName("memoryMediaViewer")
        self.context = context
        self._on_close = on_close

        if settings is None:
            settings = context.settings if context is not None else ViewerSettings()
        access_token = context.storage_access_token if context is not None else None
        self._http = context.session if context is not None else None
        self._access_token = access_token

        self.session = ViewerSession(
            items,
            initial_index,
            on_close=self._on_session_close,
            title=title,
            settings=settings,
            fullscreen_supported=fullscreen_supported(),
        )

        self.player_factory = player_factory or default_player_factory(access_token)
        self.share_service = share_service or ShareService(self._copy_to_clipboard)

        self._mounted_index: Optional[int] = None
        self._player_widget: Optional[QWidget] = None
        self._player_handle: Optional[PlaybackHandle] = None
        self._photo_token = 0
        self._photo_workers: Set[PhotoLoadWorker] = set()
        self._download_workers: Set[DownloadWorker] = set()
        self._tasks: Set[asyncio.Task] = set()
        self._torn_down = False
        self._closed = False

        self.keyboard = KeyboardSubscription(self._on_key, self)

        self.setAttribute(Qt.WidgetAttribute.WA_AcceptTouchEvents, True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setStyleSheet(Styles.STAGE)

        self._setup_ui()
        self._render()

    # ---------------------------------------------------------
    # Layout
    # ---------------------------------------------------------

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        layout.addWidget(self._build_header())

        self.stage_container = QWidget(self)
        stage_layout = QVBoxLayout(self.stage_container)
        stage_layout.setContentsMargins(0, 0, 0, 0)
        self.stage = QStackedWidget(self.stage_container)
        stage_layout.addWidget(self.stage)

        self.photo_view = ZoomableImageWidget()
        self.photo_view.tapped.connect(self._on_photo_tapped)
        self.photo_view.zoom_in_requested.connect(self._on_zoom_in)
        self.photo_view.zoom_out_requested.connect(self._on_zoom_out)
        self.stage.addWidget(self.photo_view)

        self.player_page = QWidget()
        self.player_layout = QVBoxLayout(self.player_page)
        self.player_layout.setContentsMargins(0, 0, 0, 0)
        self.stage.addWidget(self.player_page)

        self.placeholder_page = QWidget()
        placeholder_layout = QVBoxLayout(self.placeholder_page)
        placeholder_layout.addStretch(1)
        self.placeholder_icon = QLabel()
        self.placeholder_icon.setAlignment(Qt.AlignmentFlag.AlignCenter)
        placeholder_layout.addWidget(self.placeholder_icon)
        self.placeholder_label = QLabel()
        self.placeholder_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.placeholder_label.setWordWrap(True)
        self.placeholder_label.setStyleSheet(Fonts.css(Fonts.SIZE_XL, color=Colors.TEXT_ON_STAGE_DIM))
        placeholder_layout.addWidget(self.placeholder_label)
        placeholder_layout.addStretch(1)
        self.stage.addWidget(self.placeholder_page)

        # Overlays on the stage
        self.prev_button = self._nav_button('fa5s.chevron-left', "Previous")
        self.prev_button.clicked.connect(self._on_previous)
        self.next_button = self._nav_button('fa5s.chevron-right', "Next")
        self.next_button.clicked.connect(self._on_next)

        self.swipe_hint = QLabel(SWIPE_HINT, self.stage_container)
        self.swipe_hint.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.swipe_hint.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)
        self.swipe_hint.setStyleSheet(
            f"color: {Colors.TEXT_ON_STAGE_DIM}; font-size: {Fonts.SIZE_SM}px; background: transparent;"
        )

        self.spinner = SpinnerWidget(self.stage_container)

        layout.addWidget(self.stage_container, 1)
        layout.addWidget(self._build_footer())

        self.toast = ToastNotification(self)

    def _build_header(self) -> QWidget:
        header = QWidget(self)
        header.setObjectName("viewerHeader")
        header.setStyleSheet(Styles.HEADER)
        header.setFixedHeight(Spacing.HEADER_HEIGHT)
        row = QHBoxLayout(header)
        row.setContentsMargins(Spacing.XL, Spacing.MD, Spacing.XL, Spacing.MD)

        text_col = QVBoxLayout()
        text_col.setSpacing(2)
        self.title_label = QLabel(self.session.title)
        self.title_label.setStyleSheet(Fonts.css(Fonts.SIZE_SM, color=Colors.TEXT_ON_STAGE_DIM))
        self.name_label = QLabel()
        self.name_label.setStyleSheet(Fonts.css(Fonts.SIZE_XXL, Fonts.WEIGHT_MEDIUM, Colors.TEXT_WHITE))
        self.counter_label = QLabel()
        self.counter_label.setStyleSheet(Fonts.css(Fonts.SIZE_MD, color=Colors.TEXT_ON_STAGE_DIM))
        text_col.addWidget(self.title_label)
        text_col.addWidget(self.name_label)
        text_col.addWidget(self.counter_label)
        row.addLayout(text_col, 1)

        self.close_button = self._action_button('fa5s.times', "Close")
        self.close_button.clicked.connect(self._on_close_clicked)
        row.addWidget(self.close_button, 0, Qt.AlignmentFlag.AlignTop)
        return header

    def _build_footer(self) -> QWidget:
        footer = QWidget(self)
        footer.setObjectName("viewerFooter")
        footer.setStyleSheet(Styles.FOOTER)
        col = QVBoxLayout(footer)
        col.setContentsMargins(0, Spacing.SM, 0, Spacing.SM)
        col.setSpacing(Spacing.SM)

        bar = QHBoxLayout()
        bar.setContentsMargins(Spacing.XL, 0, Spacing.XL, 0)
        bar.setSpacing(Spacing.SM)
        bar.addStretch(1)

        self.zoom_out_button = self._action_button('fa5s.search-minus', "Zoom out")
        self.zoom_out_button.clicked.connect(self._on_zoom_out)
        self.zoom_in_button = self._action_button('fa5s.search-plus', "Zoom in")
        self.zoom_in_button.clicked.connect(self._on_zoom_in)
        self.play_button = self._action_button('fa5s.play', "Play")
        self.play_button.clicked.connect(self._on_play_pause)
        self.mute_button = self._action_button('fa5s.volume-up', "Mute")
        self.mute_button.clicked.connect(self._on_mute)
        self.fullscreen_button = self._action_button('fa5s.expand', "Fullscreen")
        self.fullscreen_button.clicked.connect(self._on_fullscreen)
        self.download_button = self._action_button('fa5s.download', "Download")
        self.download_button.clicked.connect(self._on_download)
        self.share_button = self._action_button('fa5s.share-alt', "Share")
        self.share_button.clicked.connect(self._on_share)

        for button in (
            self.zoom_out_button, self.zoom_in_button, self.play_button, self.mute_button,
            self.fullscreen_button, self.download_button, self.share_button,
        ):
            bar.addWidget(button)
        bar.addStretch(1)
        col.addLayout(bar)

        self.thumbnail_strip = ThumbnailStrip(
            self.session.items, footer, session=self._http, access_token=self._access_token
        )
        self.thumbnail_strip.thumbnail_clicked.connect(self._on_thumbnail_clicked)
        self.thumbnail_strip.setVisible(len(self.session.items) > 1)
        col.addWidget(self.thumbnail_strip)
        return footer

    def _action_button(self, icon_name: str, tooltip: str) -> QPushButton:
        button = QPushButton()
        button.setIcon(qta.icon(icon_name, color=Colors.TEXT_WHITE, color_disabled=Colors.TEXT_MUTED))
        button.setIconSize(QSize(Spacing.ICON_MD, Spacing.ICON_MD))
        button.setFixedSize(Spacing.ACTION_BUTTON, Spacing.ACTION_BUTTON)
        button.setToolTip(tooltip)
        button.setCursor(Qt.CursorShape.PointingHandCursor)
        button.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        button.setStyleSheet(Styles.GHOST_BUTTON)
        return button

    def _nav_button(self, icon_name: str, tooltip: str) -> QPushButton:
        button = QPushButton(self.stage_container)
        button.setIcon(qta.icon(icon_name, color=Colors.TEXT_WHITE))
        button.setIconSize(QSize(Spacing.ICON_LG, Spacing.ICON_LG))
        button.setFixedSize(Spacing.NAV_BUTTON, Spacing.NAV_BUTTON)
        button.setToolTip(tooltip)
        button.setCursor(Qt.CursorShape.PointingHandCursor)
        button.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        button.setStyleSheet(Styles.NAV_BUTTON)
        return button

    def _position_overlays(self):
        rect = self.stage_container.rect()
        y = (rect.height() - Spacing.NAV_BUTTON) // 2
        self.prev_button.move(Spacing.LG, y)
        self.next_button.move(rect.width() - Spacing.NAV_BUTTON - Spacing.LG, y)
        self.swipe_hint.adjustSize()
        self.swipe_hint.move(
            (rect.width() - self.swipe_hint.width()) // 2,
            rect.height() - self.swipe_hint.height() - Spacing.SM,
        )
        self.spinner.center_over(self.stage)
        self.prev_button.raise_()
        self.next_button.raise_()
        self.swipe_hint.raise_()

    # ---------------------------------------------------------
    # Rendering
    # ---------------------------------------------------------

    def _render(self):
        """Sync every widget from the session. A closed viewer is left as it is."""
        if self._closed or self._torn_down:
            return
        session = self.session
        item = session.current

        if self._needs_mount():
            self._mount_current()

        self.name_label.setText(item.display_name)
        self.counter_label.setText(session.position_label)

        self.prev_button.setVisible(session.has_previous)
        self.next_button.setVisible(session.has_next)
        self.swipe_hint.setVisible(len(session.items) > 1)

        self.zoom_in_button.setVisible(item.is_photo)
        self.zoom_out_button.setVisible(item.is_photo)
        self.zoom_in_button.setEnabled(session.can_zoom_in)
        self.zoom_out_button.setEnabled(session.can_zoom_out)
        if item.is_photo:
            self.photo_view.set_zoom(session.zoom_factor)

        playable = item.is_playable
        self.play_button.setVisible(playable)
        self.mute_button.setVisible(playable)
        if playable:
            playing = session.playback.is_playing
            self.play_button.setIcon(qta.icon('fa5s.pause' if playing else 'fa5s.play', color=Colors.TEXT_WHITE))
            self.play_button.setToolTip("Pause" if playing else "Play")
            muted = session.playback.is_muted
            self.mute_button.setIcon(qta.icon('fa5s.volume-mute' if muted else 'fa5s.volume-up', color=Colors.TEXT_WHITE))
            self.mute_button.setToolTip("Unmute" if muted else "Mute")
            self.play_button.setEnabled(session.playback_handle is not None)

        self.fullscreen_button.setVisible(session.fullscreen_supported)
        if session.fullscreen_supported:
            full = self.window().isFullScreen()
            self.fullscreen_button.setIcon(qta.icon('fa5s.compress' if full else 'fa5s.expand', color=Colors.TEXT_WHITE))

        self.thumbnail_strip.set_current(session.cursor)
        self._position_overlays()

    def _needs_mount(self) -> bool:
        if self._mounted_index != self.session.cursor:
            return True
        # A same-index jump released the player; build a fresh one
        return self._player_handle is not None and self.session.playback_handle is not self._player_handle

    def _mount_current(self):
        self._unmount_player()
        self._cancel_photo_load()
        item = self.session.current
        self._mounted_index = self.session.cursor

        if item.is_photo:
            self._show_photo(item)
        elif item.is_playable:
            self._show_player(item)
        else:
            self._show_placeholder('fa5s.file-alt', "Preview not available for this file")

    def _show_placeholder(self, icon_name: str, message: str):
        self.spinner.stop()
        self.placeholder_icon.setPixmap(
            qta.icon(icon_name, color=Colors.TEXT_MUTED).pixmap(Spacing.ICON_HERO, Spacing.ICON_HERO)
        )
        self.placeholder_label.setText(message)
        self.stage.setCurrentWidget(self.placeholder_page)

    def _show_broken(self):
        self._show_placeholder('fa5s.exclamation-triangle', "This media could not be loaded")

    # Photos

    def _show_photo(self, item: MediaItem):
        self.photo_view.clear_pixmap()
        if resolve_locator(item.source_locator) is None:
            logger.warning(f"Photo {item.display_name} has no source")
            self._show_broken()
            return

        self.stage.setCurrentWidget(self.photo_view)
        self._photo_token += 1
        worker = PhotoLoadWorker(
            token=self._photo_token,
            locator=item.source_locator,
            session=self._http,
            access_token=self._access_token,
        )
        worker.loaded.connect(self._on_photo_loaded)
        worker.failed.connect(self._on_photo_failed)
        worker.finished.connect(lambda w=worker: self._photo_workers.discard(w))
        self._photo_workers.add(worker)
        self.spinner.center_over(self.stage)
        self.spinner.start()
        worker.start()

    def _cancel_photo_load(self):
        # Bumping the token makes results of in-flight workers stale
        self._photo_token += 1
        for worker in self._photo_workers:
            worker.cancel()

    def _on_photo_loaded(self, token: int, data: bytes):
        if token != self._photo_token:
            return
        self.spinner.stop()
        pixmap = QPixmap()
        if not pixmap.loadFromData(data):
            logger.warning(f"Could not decode photo {self.session.current.display_name}")
            self._show_broken()
            return
        self.photo_view.set_pixmap(pixmap)
        self.photo_view.set_zoom(self.session.zoom_factor)
        self.stage.setCurrentWidget(self.photo_view)

    def _on_photo_failed(self, token: int, error: str):
        if token != self._photo_token:
            return
        logger.warning(f"Photo load failed: {error}")
        self._show_broken()

    # Video and audio

    def _show_player(self, item: MediaItem):
        self.spinner.stop()
        if resolve_locator(item.source_locator) is None:
            logger.warning(f"{item.kind.value.title()} {item.display_name} has no source")
            self._show_broken()
            return
        try:
            widget, handle = self.player_factory(item, self.player_page)
        except Exception as e:
            logger.error(f"Could not create player for {item.display_name}: {e}")
            self._show_broken()
            return

        self._player_widget = widget
        self._player_handle = handle
        self.player_layout.addWidget(widget)
        playing_changed = getattr(widget, "playing_changed", None)
        if playing_changed is not None:
            playing_changed.connect(self._on_player_playing_changed)
        self.session.bind_handle(handle)
        self.stage.setCurrentWidget(self.player_page)

    def _unmount_player(self):
        if self._player_widget is None:
            return
        widget = self._player_widget
        handle = self._player_handle
        self._player_widget = None
        self._player_handle = None
        if self.session.playback_handle is handle:
            self.session.release_handle()
        self.player_layout.removeWidget(widget)
        widget.hide()
        widget.deleteLater()

    # ---------------------------------------------------------
    # Session callbacks
    # ---------------------------------------------------------

    def _on_key(self, key: ViewerKey) -> bool:
        handled = self.session.handle_key(key)
        if handled:
            self._render()
        return handled

    def _on_session_close(self):
        logger.info("Media viewer closed")
        self._closed = True
        self._unmount_player()
        self._cancel_photo_load()
        self.keyboard.remove()
        self.closed.emit()
        if self._on_close is not None:
            self._on_close()

    def _on_close_clicked(self):
        self.session.request_close()

    def _on_previous(self):
        if self.session.go_previous():
            self._render()

    def _on_next(self):
        if self.session.go_next():
            self._render()

    def _on_thumbnail_clicked(self, index: int):
        self.session.jump_to(index)
        self._render()

    def _on_zoom_in(self):
        if self.session.zoom_in():
            self._render()

    def _on_zoom_out(self):
        if self.session.zoom_out():
            self._render()

    def _on_photo_tapped(self):
        if self.session.toggle_zoom_at_point():
            self._render()

    def _on_play_pause(self):
        if self.session.toggle_play_pause():
            self._render()

    def _on_mute(self):
        if self.session.toggle_mute():
            self._render()

    def _on_player_playing_changed(self, playing: bool):
        if self.sender() is not self._player_widget:
            return
        if self.session.sync_playing(playing):
            self._render()

    # ---------------------------------------------------------
    # Fullscreen
    # ---------------------------------------------------------

    def toggle_fullscreen(self):
        """Leave full screen when in it, otherwise enter it."""
        window = self.window()
        if window.isFullScreen():
            window.showNormal()
        else:
            if not self.session.fullscreen_supported:
                raise CapabilityUnavailableError(
                    f"Fullscreen is not available on the {QGuiApplication.platformName()} platform"
                )
            window.showFullScreen()

    def _on_fullscreen(self):
        try:
            self.toggle_fullscreen()
        except CapabilityUnavailableError as e:
            logger.warning(f"Fullscreen request failed: {e}")
            self.toast.error("Could not enter fullscreen mode")
            return
        self._render()

    # ---------------------------------------------------------
    # Download
    # ---------------------------------------------------------

    def _download_manager_factory(self) -> Callable[[], DownloadManager]:
        if self.context is not None:
            return self.context.new_download_manager
        download_dir = self.session.settings.download_dir
        return lambda: DownloadManager(download_dir=download_dir)

    def _on_download(self):
        item = self.session.current
        filename = suggest_filename(item.display_name, self.session.cursor, item.suffix)
        worker = DownloadWorker(self._download_manager_factory(), item.source_locator, filename)
        worker.completed.connect(self._on_download_completed)
        worker.failed.connect(self._on_download_failed)
        worker.finished.connect(lambda w=worker: self._download_workers.discard(w))
        self._download_workers.add(worker)
        logger.info(f"Download requested for {item.display_name} as {filename}")
        self.toast.info("Download started!")
        worker.start()

    def _on_download_completed(self, path: str):
        self.toast.success(f"Saved {Path(path).name}")

    def _on_download_failed(self, error: str):
        logger.error(f"Download failed: {error}")
        self.toast.error("Failed to download file")

    # ---------------------------------------------------------
    # Share
    # ---------------------------------------------------------

    @staticmethod
    def _copy_to_clipboard(text: str):
        QGuiApplication.clipboard().setText(text)

    def share_url(self, item: MediaItem) -> Optional[str]:
        resolved = resolve_locator(item.source_locator)
        if resolved is None:
            return None
        if isinstance(resolved, Path):
            return resolved.absolute().as_uri()
        return resolved

    def _on_share(self):
        item = self.session.current
        request = ShareRequest.for_item(self.session.title, item.display_name, self.share_url(item))
        self._run_coroutine(self._share(request))

    async def _share(self, request: ShareRequest):
        try:
            outcome = await self.share_service.share(request)
        except (UnresolvableMediaError, SideEffectError) as e:
            logger.error(f"Share failed: {e}")
            self.toast.error("Failed to share")
            return
        if outcome is ShareOutcome.SHARED:
            self.toast.success("Shared successfully!")
        elif outcome is ShareOutcome.COPIED:
            self.toast.success("Link copied to clipboard!")

    def _run_coroutine(self, coro):
        """Schedule on the running loop (qasync in the app); run inline when there is none."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(coro)
            return
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    # ---------------------------------------------------------
    # Qt events
    # ---------------------------------------------------------

    def event(self, event):
        etype = event.type()
        if etype in (QEvent.Type.TouchBegin, QEvent.Type.TouchUpdate, QEvent.Type.TouchEnd):
            self._handle_touch(event)
            event.accept()
            return True
        return super().event(event)

    def _handle_touch(self, event):
        # Gestures only use differences, so window coordinates serve as well as local ones
        points = [
            TouchPoint(p.scenePosition().x(), p.scenePosition().y())
            for p in event.points()
            if p.state() != QEventPoint.State.Released
        ]
        etype = event.type()
        if etype == QEvent.Type.TouchBegin:
            changed = self.session.touch_start(points)
        elif etype == QEvent.Type.TouchUpdate:
            # A finger joining mid-gesture arrives as a pressed point in an update
            if any(p.state() == QEventPoint.State.Pressed for p in event.points()):
                changed = self.session.touch_start(points)
            else:
                changed = self.session.touch_move(points)
        else:
            changed = self.session.touch_end()
        if changed:
            self._render()

    def showEvent(self, event):
        super().showEvent(event)
        self.keyboard.install()
        self._position_overlays()

    def hideEvent(self, event):
        self.keyboard.remove()
        super().hideEvent(event)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._position_overlays()

    def closeEvent(self, event):
        self.teardown()
        super().closeEvent(event)

    def teardown(self):
        """Release the player and stop background work."""
        if self._torn_down:
            return
        self._torn_down = True
        self.keyboard.remove()
        self._unmount_player()
        self.session.release_handle()
        self._cancel_photo_load()
        for worker in list(self._photo_workers):
            worker.wait(2000)
        for worker in list(self._download_workers):
            worker.cancel()
            worker.wait(5000)
        for task in list(self._tasks):
            task.cancel()
        self.thumbnail_strip.shutdown()
