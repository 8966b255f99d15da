import logging

import pytest

from src.utils.logging_config import (
    DEFAULT_LOG_LEVELS, LoggerCategory, LoggingManager, category_for
)


class ConfigStore:
    def __init__(self, values=None):
        self.values = dict(values or {})

    def get_config(self, key, default=None):
        return self.values.get(key, default)

    def set_config(self, key, value, encrypt=False):
        self.values[key] = str(value)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


@pytest.mark.parametrize("module,category", [
    ("src.core.viewer.session", LoggerCategory.VIEWER),
    ("src.core.viewer.settings", LoggerCategory.SETTINGS),
    ("src.core.download_worker", LoggerCategory.DOWNLOAD),
    ("src.ui.video.video_player", LoggerCategory.MEDIA),
    ("src.ui.viewer.media_viewer", LoggerCategory.UI),
    ("src.ui.viewer.something_new", LoggerCategory.UI),
    ("src.core.errors", LoggerCategory.CORE),
    ("aiohttp.client", None),
])
def test_category_for(module, category):
    assert category_for(module) == category


def test_defaults_without_db(tmp_path):
    manager = LoggingManager(log_dir=tmp_path)
    assert manager.get_all_levels() == DEFAULT_LOG_LEVELS


def test_levels_loaded_from_config(tmp_path):
    store = ConfigStore({"log_level_viewer": "DEBUG", "log_level_share": "bogus"})
    manager = LoggingManager(log_dir=tmp_path, db_manager=store)
    assert manager.get_category_level(LoggerCategory.VIEWER) == logging.DEBUG
    assert manager.get_category_level(LoggerCategory.SHARE) == DEFAULT_LOG_LEVELS[LoggerCategory.SHARE]


def test_set_category_level_persists_and_applies(tmp_path):
    store = ConfigStore()
    manager = LoggingManager(log_dir=tmp_path, db_manager=store)
    manager.set_category_level(LoggerCategory.DOWNLOAD, logging.ERROR)
    assert store.values["log_level_download"] == "ERROR"
    assert logging.getLogger("src.core.download_manager").level == logging.ERROR


def test_unknown_category_rejected(tmp_path):
    with pytest.raises(ValueError):
        LoggingManager(log_dir=tmp_path).set_category_level("nope", logging.INFO)


def test_attach_database(tmp_path):
    manager = LoggingManager(log_dir=tmp_path)
    manager.attach_database(ConfigStore({"log_level_media": "WARNING"}))
    assert manager.get_category_level(LoggerCategory.MEDIA) == logging.WARNING
    assert logging.getLogger("src.ui.video.video_player").level == logging.WARNING


def test_setup_logging_writes_file(tmp_path, restore_root_logger):
    manager = LoggingManager(log_dir=tmp_path)
    manager.setup_logging(console=False)
    logging.getLogger("src.core.context").info("hello from the viewer")
    for handler in logging.getLogger().handlers:
        handler.flush()
    log_text = (tmp_path / "memory_book.log").read_text(encoding="utf-8")
    assert "hello from the viewer" in log_text
    assert logging.getLogger("aiohttp").level == logging.WARNING
