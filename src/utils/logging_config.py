"""
Centralized logging configuration with categorized loggers.

Every module logs through ``logging.getLogger(__name__)``; this module groups
those loggers into named categories whose levels can be changed at runtime
and are remembered in the config table.
"""
import logging
from typing import Dict, Optional
from pathlib import Path
from logging.handlers import TimedRotatingFileHandler


class LoggerCategory:
    """Named categories for application loggers"""
    CORE = "core"                  # Context, errors, media source resolution
    VIEWER = "viewer"              # Viewer session, gestures, playback slot
    MEDIA = "media"                # Photo loading and mpv playback
    DOWNLOAD = "download"          # Download manager and worker
    SHARE = "share"                # Share service
    DATABASE = "database"          # Config store
    UI = "ui"                      # Widgets
    SETTINGS = "settings"          # Viewer settings parsing


DEFAULT_LOG_LEVELS = {
    LoggerCategory.CORE: logging.INFO,
    LoggerCategory.VIEWER: logging.INFO,
    LoggerCategory.MEDIA: logging.INFO,
    LoggerCategory.DOWNLOAD: logging.INFO,
    LoggerCategory.SHARE: logging.INFO,
    LoggerCategory.DATABASE: logging.WARNING,  # Reduce DB noise
    LoggerCategory.UI: logging.WARNING,        # Reduce UI noise
    LoggerCategory.SETTINGS: logging.INFO,
}


# Map module names to categories
MODULE_TO_CATEGORY = {
    # Core
    'src.core': LoggerCategory.CORE,
    'src.core.context': LoggerCategory.CORE,
    'src.core.media_source': LoggerCategory.CORE,

    # Viewer state machine
    'src.core.viewer': LoggerCategory.VIEWER,
    'src.core.viewer.session': LoggerCategory.VIEWER,
    'src.core.viewer.gestures': LoggerCategory.VIEWER,
    'src.core.viewer.playback': LoggerCategory.VIEWER,

    # Settings
    'src.core.viewer.settings': LoggerCategory.SETTINGS,

    # Database
    'src.core.database': LoggerCategory.DATABASE,

    # Download
    'src.core.download_manager': LoggerCategory.DOWNLOAD,
    'src.core.download_worker': LoggerCategory.DOWNLOAD,

    # Share
    'src.core.share_service': LoggerCategory.SHARE,

    # Media
    'src.ui.images': LoggerCategory.MEDIA,
    'src.ui.images.image_loader': LoggerCategory.MEDIA,
    'src.ui.images.zoomable_image': LoggerCategory.MEDIA,
    'src.ui.video': LoggerCategory.MEDIA,
    'src.ui.video.video_player': LoggerCategory.MEDIA,

    # UI
    'src.ui': LoggerCategory.UI,
    'src.ui.viewer': LoggerCategory.UI,
    'src.ui.viewer.media_viewer': LoggerCategory.UI,
    'src.ui.viewer.thumbnail_strip': LoggerCategory.UI,
    'src.ui.widgets': LoggerCategory.UI,
}


def category_for(module_name: str) -> Optional[str]:
    """Category of a module, taken from its closest mapped package."""
    name = module_name
    while name:
        if name in MODULE_TO_CATEGORY:
            return MODULE_TO_CATEGORY[name]
        name = name.rpartition('.')[0]
    return None


def default_log_dir() -> Path:
    return Path.home() / ".memory-book" / "logs"


class LoggingManager:
    """Manages application-wide logging configuration"""

    def __init__(self, log_dir: Optional[Path] = None, db_manager=None):
        """
        Initialize logging manager.

        Args:
            log_dir: Directory for log files
            db_manager: Database manager for persistent configuration
        """
        self.log_dir = log_dir or default_log_dir()
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.db_manager = db_manager
        self._category_levels: Dict[str, int] = {}
        self._load_levels_from_db()

    def _load_levels_from_db(self):
        """Load log levels from database configuration"""
        if not self.db_manager:
            self._category_levels = DEFAULT_LOG_LEVELS.copy()
            return

        for category, default_level in DEFAULT_LOG_LEVELS.items():
            config_key = f'log_level_{category}'
            level_name = self.db_manager.get_config(config_key, logging.getLevelName(default_level))
            level = logging.getLevelName(str(level_name).upper())
            self._category_levels[category] = level if isinstance(level, int) else default_level

    def attach_database(self, db_manager):
        """Switch to levels stored in the config table (logging starts before the DB exists)."""
        self.db_manager = db_manager
        self._load_levels_from_db()
        for category, level in self._category_levels.items():
            self._apply_category_level(category, level)

    def get_category_level(self, category: str) -> int:
        return self._category_levels.get(category, logging.INFO)

    def set_category_level(self, category: str, level: int):
        """Set log level for a category and remember it"""
        if category not in DEFAULT_LOG_LEVELS:
            raise ValueError(f"Unknown logging category: {category}")
        self._category_levels[category] = level
        if self.db_manager:
            self.db_manager.set_config(f'log_level_{category}', logging.getLevelName(level))
        self._apply_category_level(category, level)

    def _apply_category_level(self, category: str, level: int):
        for module_name, cat in MODULE_TO_CATEGORY.items():
            if cat == category:
                logging.getLogger(module_name).setLevel(level)

    def setup_logging(self, root_level: int = logging.INFO, console: bool = True):
        """
        Install file and console handlers on the root logger.

        Args:
            root_level: Root logger level
            console: Also log to stderr
        """
        log_file = self.log_dir / "memory_book.log"

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        file_handler = TimedRotatingFileHandler(
            log_file,
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)

        root_logger = logging.getLogger()
        root_logger.setLevel(root_level)

        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()

        root_logger.addHandler(file_handler)
        if console:
            stream_handler = logging.StreamHandler()
            stream_handler.setFormatter(formatter)
            root_logger.addHandler(stream_handler)

        for category, level in self._category_levels.items():
            self._apply_category_level(category, level)

        # Silence noisy third-party loggers
        logging.getLogger('urllib3').setLevel(logging.WARNING)
        logging.getLogger('requests').setLevel(logging.WARNING)
        logging.getLogger('aiohttp').setLevel(logging.WARNING)
        logging.getLogger('asyncio').setLevel(logging.WARNING)

    def get_all_levels(self) -> Dict[str, int]:
        return self._category_levels.copy()


# Global instance
_logging_manager: Optional[LoggingManager] = None


def get_logging_manager(db_manager=None, log_dir: Optional[Path] = None) -> LoggingManager:
    """Get or create the global logging manager"""
    global _logging_manager
    if _logging_manager is None:
        _logging_manager = LoggingManager(log_dir=log_dir, db_manager=db_manager)
    return _logging_manager


def setup_logging(db_manager=None, log_dir: Optional[Path] = None, root_level: int = logging.INFO):
    """Setup application logging (convenience function)"""
    manager = get_logging_manager(db_manager, log_dir)
    manager.setup_logging(root_level)
    return manager
