import os

# Widget tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from src.core.dto.media import MediaItem, MediaKind
from src.core.viewer.playback import PlaybackHandle


class FakeHandle(PlaybackHandle):
    """Records every call the viewer makes on a media element."""

    def __init__(self):
        self.calls = []
        self.playing = False
        self.muted = False
        self.released = False

    def play(self):
        self.calls.append("play")
        self.playing = True

    def pause(self):
        self.calls.append("pause")
        self.playing = False

    def set_muted(self, muted):
        self.calls.append(("mute", muted))
        self.muted = muted

    def release(self):
        self.calls.append("release")
        self.released = True


def photo(name="photo.jpg", locator="https://example.com/photo.jpg"):
    return MediaItem(MediaKind.PHOTO, name, locator)


def video(name="clip.mp4", locator="https://example.com/clip.mp4"):
    return MediaItem(MediaKind.VIDEO, name, locator)


def audio(name="song.mp3", locator="https://example.com/song.mp3"):
    return MediaItem(MediaKind.AUDIO, name, locator)


def text(name="notes.txt", locator=None):
    return MediaItem(MediaKind.TEXT, name, locator)


@pytest.fixture
def photos():
    return [photo(f"photo-{i}.jpg", f"https://example.com/photo-{i}.jpg") for i in range(5)]


@pytest.fixture
def mixed_items():
    return [photo(), video(), audio(), text()]
