import logging
from pathlib import Path

import pytest

from src.core.database import DatabaseManager
from src.core.viewer.settings import ViewerSettings


@pytest.fixture
def fake_keyring(monkeypatch):
    store = {}
    monkeypatch.setattr("keyring.get_password", lambda service, name: store.get((service, name)))
    monkeypatch.setattr("keyring.set_password", lambda service, name, value: store.__setitem__((service, name), value))
    return store


@pytest.fixture
def db(tmp_path, fake_keyring):
    manager = DatabaseManager(tmp_path / "data.db")
    manager.connect()
    yield manager
    manager.close()


class TestDatabaseManager:
    def test_defaults_inserted(self, db):
        config = db.get_all_config()
        assert config["viewer_swipe_threshold"] == "50"
        assert config["viewer_max_zoom"] == "3.0"
        assert config["schema_version"] == DatabaseManager.VERSION

    def test_set_and_get(self, db):
        db.set_config("download_dir", "/tmp/memories")
        assert db.get_config("download_dir") == "/tmp/memories"
        assert db.get_config("missing", "fallback") == "fallback"

    def test_defaults_do_not_override_existing(self, tmp_path, fake_keyring):
        path = tmp_path / "data.db"
        first = DatabaseManager(path)
        first.connect()
        first.set_config("viewer_max_zoom", "4.0")
        first.close()

        second = DatabaseManager(path)
        second.connect()
        assert second.get_config("viewer_max_zoom") == "4.0"
        second.close()

    def test_encrypted_value_round_trip(self, db, fake_keyring):
        db.set_config("storage_access_token", "secret-token", encrypt=True)
        raw = db.conn.execute(
            "SELECT value FROM config WHERE key = 'storage_access_token'"
        ).fetchone()["value"]
        assert raw != "secret-token"
        assert db.get_config("storage_access_token") == "secret-token"
        assert "storage_access_token" not in db.get_all_config()
        assert len(fake_keyring) == 1

    def test_encrypted_value_with_new_key_falls_back(self, db, fake_keyring):
        db.set_config("storage_access_token", "secret-token", encrypt=True)
        fake_keyring.clear()
        db._encryption_key = None
        assert db.get_config("storage_access_token", "none") == "none"

    def test_delete(self, db):
        db.set_config("download_dir", "/tmp/x")
        db.delete_config("download_dir")
        assert db.get_config("download_dir") is None


class TestViewerSettings:
    def test_no_db_gives_defaults(self):
        settings = ViewerSettings.from_db(None)
        assert settings == ViewerSettings()
        assert settings.download_dir == Path.home() / "Downloads"

    def test_reads_stored_values(self, db):
        db.set_config("viewer_swipe_threshold", "80")
        db.set_config("viewer_zoom_step", "0.25")
        db.set_config("viewer_max_zoom", "5")
        db.set_config("viewer_tap_zoom", "2.5")
        db.set_config("viewer_pinch_snap", "1.2")
        db.set_config("download_dir", "~/Memories")
        settings = ViewerSettings.from_db(db)
        assert settings.swipe_threshold == 80
        assert settings.zoom_step == 0.25
        assert settings.max_zoom == 5
        assert settings.tap_zoom == 2.5
        assert settings.pinch_snap == 1.2
        assert settings.download_dir == Path.home() / "Memories"

    def test_invalid_values_fall_back(self, db, caplog):
        db.set_config("viewer_swipe_threshold", "wide")
        db.set_config("viewer_zoom_step", "-1")
        with caplog.at_level(logging.WARNING):
            settings = ViewerSettings.from_db(db)
        assert settings.swipe_threshold == 50
        assert settings.zoom_step == 0.5
        assert "viewer_swipe_threshold" in caplog.text

    def test_max_zoom_below_min_falls_back(self, db):
        db.set_config("viewer_max_zoom", "0.5")
        assert ViewerSettings.from_db(db).max_zoom == 3.0

    def test_tap_zoom_capped_at_max(self, db):
        db.set_config("viewer_max_zoom", "1.5")
        settings = ViewerSettings.from_db(db)
        assert settings.tap_zoom == 1.5

    @pytest.mark.parametrize("raw", ["0.5", "1.0"])
    def test_tap_zoom_not_above_min_falls_back(self, db, raw):
        db.set_config("viewer_tap_zoom", raw)
        assert ViewerSettings.from_db(db).tap_zoom == 2.0

    def test_pinch_snap_below_min_falls_back(self, db):
        db.set_config("viewer_pinch_snap", "0.8")
        assert ViewerSettings.from_db(db).pinch_snap == 1.1
