from pathlib import Path

import pytest

from src.core.dto.media import MediaItem, MediaKind
from src.core.media_source import get_media_headers, is_remote, resolve_locator
from src.utils.file_utils import sanitize_filename, suggest_filename, unique_destination


@pytest.mark.parametrize("name,expected", [
    ("beach.jpg", "beach.jpg"),
    ('a:b/c*?.png', "a_b_c__.png"),
    ("   ", "memory"),
    ("...", "memory"),
])
def test_sanitize_filename(name, expected):
    assert sanitize_filename(name) == expected


def test_suggest_filename_uses_display_name():
    assert suggest_filename("Beach day.jpg", 0, ".jpg") == "Beach day.jpg"
    assert suggest_filename("Beach day", 0, ".jpg") == "Beach day.jpg"


def test_suggest_filename_fallback():
    assert suggest_filename("", 2, ".mp4") == "memory-3.mp4"
    assert suggest_filename(None, 0) == "memory-1"


def test_unique_destination(tmp_path):
    assert unique_destination(tmp_path, "a.jpg") == tmp_path / "a.jpg"
    (tmp_path / "a.jpg").write_bytes(b"")
    (tmp_path / "a (1).jpg").write_bytes(b"")
    assert unique_destination(tmp_path, "a.jpg") == tmp_path / "a (2).jpg"


def test_resolve_locator(tmp_path):
    assert resolve_locator(None) is None
    assert resolve_locator("   ") is None
    assert resolve_locator("https://example.com/a.jpg") == "https://example.com/a.jpg"
    local = tmp_path / "a.jpg"
    assert resolve_locator(str(local)) == local.resolve()
    assert resolve_locator(local.as_uri()) == local.resolve()


def test_resolve_locator_local_name_starting_with_http(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert resolve_locator("http_photo.jpg") == (tmp_path / "http_photo.jpg").resolve()
    assert resolve_locator("https-clips/a.mp4") == (tmp_path / "https-clips" / "a.mp4").resolve()
    assert not is_remote(resolve_locator("http_photo.jpg"))


def test_is_remote(tmp_path):
    assert is_remote("https://example.com/a.jpg")
    assert not is_remote(tmp_path)
    assert not is_remote(None)


def test_media_headers():
    headers = get_media_headers("https://cdn.example.com/x/a.jpg", "tok")
    assert headers["Referer"] == "https://cdn.example.com/"
    assert headers["Authorization"] == "Bearer tok"
    assert "Authorization" not in get_media_headers("https://cdn.example.com/a.jpg")


class TestMediaItem:
    @pytest.mark.parametrize("locator,kind", [
        ("holiday.JPG", MediaKind.PHOTO),
        ("https://example.com/v/clip.mp4?sig=1", MediaKind.VIDEO),
        ("voice.m4a", MediaKind.AUDIO),
        ("notes.txt", MediaKind.TEXT),
    ])
    def test_from_path_infers_kind(self, locator, kind):
        item = MediaItem.from_path(locator)
        assert item.kind is kind

    def test_from_path_names_and_sizes(self, tmp_path):
        path = tmp_path / "beach.png"
        path.write_bytes(b"12345")
        item = MediaItem.from_path(str(path))
        assert item.display_name == "beach.png"
        assert item.byte_size == 5
        assert item.suffix == ".png"

    def test_remote_suffix_ignores_query(self):
        item = MediaItem.from_path("https://example.com/v/clip.MP4?sig=1")
        assert item.display_name == "clip.MP4"
        assert item.suffix == ".mp4"
        assert item.byte_size is None

    def test_flags(self):
        assert MediaItem(MediaKind.PHOTO, "a").is_photo
        assert MediaItem(MediaKind.AUDIO, "a").is_playable
        assert not MediaItem(MediaKind.TEXT, "a").is_playable
        assert MediaItem(MediaKind.TEXT, "a").suffix == ""
