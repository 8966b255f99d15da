import asyncio

import pytest

from src.core.errors import SideEffectError, UnresolvableMediaError, UserCancelledError
from src.core.share_service import ShareOutcome, ShareRequest, ShareService

REQUEST = ShareRequest.for_item("Summer 2024", "beach.jpg", "https://example.com/beach.jpg")


def test_request_text():
    assert REQUEST.title == "Summer 2024"
    assert REQUEST.text == "Check out this memory: beach.jpg"
    assert REQUEST.url == "https://example.com/beach.jpg"


def test_clipboard_fallback():
    copied = []
    service = ShareService(copied.append)
    assert not service.has_native_share
    assert asyncio.run(service.share(REQUEST)) is ShareOutcome.COPIED
    assert copied == ["https://example.com/beach.jpg"]


def test_native_share_sync_backend():
    shared = []
    service = ShareService(lambda text: pytest.fail("clipboard used"), shared.append)
    assert service.has_native_share
    assert asyncio.run(service.share(REQUEST)) is ShareOutcome.SHARED
    assert shared == [REQUEST]


def test_native_share_async_backend():
    shared = []

    async def backend(request):
        await asyncio.sleep(0)
        shared.append(request)

    service = ShareService(lambda text: None, backend)
    assert asyncio.run(service.share(REQUEST)) is ShareOutcome.SHARED
    assert shared == [REQUEST]


def test_cancellation_is_silent():
    def backend(request):
        raise UserCancelledError("dismissed")

    service = ShareService(lambda text: None, backend)
    assert asyncio.run(service.share(REQUEST)) is ShareOutcome.CANCELLED


def test_backend_failure_is_wrapped():
    def backend(request):
        raise OSError("no share target")

    service = ShareService(lambda text: None, backend)
    with pytest.raises(SideEffectError) as excinfo:
        asyncio.run(service.share(REQUEST))
    assert isinstance(excinfo.value.__cause__, OSError)


def test_clipboard_failure_is_wrapped():
    def clipboard(text):
        raise RuntimeError("clipboard locked")

    with pytest.raises(SideEffectError):
        asyncio.run(ShareService(clipboard).share(REQUEST))


def test_missing_url():
    request = ShareRequest.for_item("Memory", "notes.txt", None)
    with pytest.raises(UnresolvableMediaError):
        asyncio.run(ShareService(lambda text: None).share(request))
