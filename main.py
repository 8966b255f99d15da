"""
Main application entry point for Memory Book viewer

Usage:
    python main.py [--title TITLE] [--start N] PATH_OR_URL...
"""
import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from PyQt6.QtWidgets import QApplication
from PyQt6.QtCore import Qt, QtMsgType, qInstallMessageHandler
from PyQt6.QtGui import QColor, QPalette
import qasync

from src.utils.file_utils import get_resource_path


# Qt message handler to suppress specific warnings
def qt_message_handler(mode, context, message):
    """Custom Qt message handler to filter out known harmless warnings."""
    # Font inheritance during widget construction
    if "QFont::setPointSize: Point size <= 0" in message:
        return

    # Qt6 is stricter but the styles still apply
    if "Could not parse application stylesheet" in message:
        return

    if mode == QtMsgType.QtDebugMsg:
        logging.debug(f"Qt: {message}")
    elif mode == QtMsgType.QtInfoMsg:
        logging.info(f"Qt: {message}")
    elif mode == QtMsgType.QtWarningMsg:
        logging.warning(f"Qt: {message}")
    elif mode == QtMsgType.QtCriticalMsg:
        logging.error(f"Qt: {message}")
    elif mode == QtMsgType.QtFatalMsg:
        logging.critical(f"Qt: {message}")


def setup_logging(db_manager=None):
    """Configure application logging"""
    from src.utils.logging_config import setup_logging as setup_categorized_logging

    logging_manager = setup_categorized_logging(db_manager)
    qInstallMessageHandler(qt_message_handler)

    logger = logging.getLogger(__name__)
    logger.info("=" * 50)
    logger.info("Memory Book Viewer Starting")
    logger.info("=" * 50)

    return logging_manager


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="memory-book-viewer",
        description="Browse the photos, videos and audio clips of a memory.",
    )
    parser.add_argument("sources", nargs="+", metavar="PATH_OR_URL",
                        help="media files or http(s) URLs, in display order")
    parser.add_argument("--title", default="Memory", help="memory title shown in the header")
    parser.add_argument("--start", type=int, default=1,
                        help="1-based position of the item to open first")
    return parser.parse_args(argv)


def apply_dark_palette(app: QApplication):
    palette = QPalette()
    palette.setColor(QPalette.ColorRole.Window, QColor("#000000"))
    palette.setColor(QPalette.ColorRole.WindowText, QColor("#e6e6e6"))
    palette.setColor(QPalette.ColorRole.Base, QColor("#141414"))
    palette.setColor(QPalette.ColorRole.ToolTipBase, QColor("#232323"))
    palette.setColor(QPalette.ColorRole.ToolTipText, QColor("#e6e6e6"))
    palette.setColor(QPalette.ColorRole.Text, QColor("#e6e6e6"))
    palette.setColor(QPalette.ColorRole.Button, QColor("#232323"))
    palette.setColor(QPalette.ColorRole.ButtonText, QColor("#e6e6e6"))
    palette.setColor(QPalette.ColorRole.Highlight, QColor("#f7673a"))
    palette.setColor(QPalette.ColorRole.HighlightedText, QColor("#ffffff"))
    app.setPalette(palette)


async def async_main(args: argparse.Namespace, logging_manager=None):
    """Build the core context and open the viewer"""
    logger = logging.getLogger(__name__)

    try:
        from src.core import CoreContext
        from src.core.dto.media import MediaItem
        from src.ui.viewer.media_viewer import MemoryMediaViewer

        app = QApplication.instance()
        apply_dark_palette(app)

        icon_path = get_resource_path('resources', 'icon.ico')
        if icon_path.exists():
            from PyQt6.QtGui import QIcon
            app.setWindowIcon(QIcon(str(icon_path)))

        logger.info("Initializing core context...")
        core = CoreContext()
        if logging_manager is not None:
            logging_manager.attach_database(core.db)

        items = [MediaItem.from_path(source) for source in args.sources]
        logger.info(f"Opening viewer on {len(items)} item(s)")

        viewer = MemoryMediaViewer(
            items,
            initial_index=args.start - 1,
            title=args.title,
            context=core,
        )
        viewer.setWindowTitle(f"{args.title} - Memory Book")
        viewer.setWindowFlag(Qt.WindowType.FramelessWindowHint, True)
        viewer.closed.connect(app.quit)
        viewer.showMaximized()

        logger.info("Application started successfully - viewer")

        # Keep reference to prevent garbage collection
        app._viewer = viewer
        app._core_context = core

    except Exception as e:
        logger.exception(f"Fatal error during startup: {e}")
        sys.exit(1)


def main(argv: Optional[List[str]] = None):
    """Main application entry point"""
    args = parse_args(argv)
    logging_manager = setup_logging()
    logger = logging.getLogger(__name__)

    try:
        app = QApplication(sys.argv[:1])
        app.setApplicationName("Memory Book")
        app.setApplicationVersion("1.0.0")
        app.setOrganizationName("MemoryBook")

        loop = qasync.QEventLoop(app)
        asyncio.set_event_loop(loop)

        logger.info("Starting application with asyncio event loop integration")

        with loop:
            loop.run_until_complete(async_main(args, logging_manager))
            loop.run_forever()

    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)
    finally:
        logger.info("Shutting down...")
        if 'app' in locals():
            viewer = getattr(app, '_viewer', None)
            if viewer is not None:
                viewer.teardown()
            if hasattr(app, '_core_context'):
                app._core_context.close()
        logger.info("Application closed")


if __name__ == "__main__":
    main()
