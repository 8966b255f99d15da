import pytest

from conftest import FakeHandle
from src.core.viewer.playback import PlaybackHandle, PlaybackSlot


class FailingPause(FakeHandle):
    def pause(self):
        super().pause()
        raise RuntimeError("element gone")


def test_handle_is_abstract():
    with pytest.raises(TypeError):
        PlaybackHandle()


def test_empty_slot_operations_are_noops():
    slot = PlaybackSlot()
    assert slot.play() is False
    assert slot.pause() is False
    assert slot.set_muted(True) is False
    slot.release()
    assert not slot.is_bound


def test_bind_and_drive():
    slot = PlaybackSlot()
    handle = FakeHandle()
    slot.bind(handle)
    assert slot.is_bound and slot.handle is handle
    slot.play()
    slot.set_muted(True)
    assert handle.calls == ["play", ("mute", True)]


def test_bind_releases_previous_handle():
    slot = PlaybackSlot()
    first, second = FakeHandle(), FakeHandle()
    slot.bind(first)
    slot.play()
    slot.bind(second)
    assert first.calls[-2:] == ["pause", "release"]
    assert slot.handle is second
    assert not second.released


def test_rebinding_same_handle_keeps_it():
    slot = PlaybackSlot()
    handle = FakeHandle()
    slot.bind(handle)
    slot.bind(handle)
    assert not handle.released


def test_release_runs_even_when_pause_fails():
    slot = PlaybackSlot()
    handle = FailingPause()
    slot.bind(handle)
    with pytest.raises(RuntimeError):
        slot.release()
    assert handle.released
    assert not slot.is_bound
