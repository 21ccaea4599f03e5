from __future__ import annotations

import asyncio

import httpx
import pytest

from droidypaste.application.uploads import UploadService
from droidypaste.domain.errors import MissingDeleteTokenError, ServerError
from droidypaste.domain.models import ClientConfig
from droidypaste.infrastructure.notifications import ClipboardNotificationSink, Notification

CONFIG = ClientConfig(
    server_url="paste.example",
    auth_token="auth",
    delete_token="del",
    default_expiry="1d",
)


def _service(make_client, handler, sink, clipboard) -> UploadService:
    return UploadService(make_client(handler), sink, clipboard)


def test_upload_text_is_sent_verbatim_with_defaults(make_client, sink, clipboard) -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text="https://paste.example/t.txt")

    service = _service(make_client, handler, sink, clipboard)

    url = asyncio.run(service.upload(CONFIG, "text", "  hello  "))

    assert url == "https://paste.example/t.txt"
    assert seen[0].headers["expire"] == "1d"
    assert seen[0].headers["authorization"] == "auth"
    assert b"\r\n\r\n  hello  \r\n" in seen[0].content
    assert sink.notifications == [
        Notification("text ok", "URL copied to clipboard", url="https://paste.example/t.txt"),
    ]


def test_cancelled_picker_is_not_an_error(make_client, sink, clipboard) -> None:
    seen = []
    service = _service(make_client, lambda request: seen.append(request), sink, clipboard)

    async def cancelled_picker():
        return None

    result = asyncio.run(service.pick_and_upload(CONFIG, cancelled_picker, "image"))

    assert result is None
    assert seen == []
    assert sink.notifications == []


def test_picker_result_is_uploaded(make_client, sink, clipboard, tmp_path) -> None:
    picked = tmp_path / "doc.pdf"
    picked.write_bytes(b"%PDF")
    service = _service(make_client, lambda request: httpx.Response(200, text="https://paste.example/doc.pdf"),
                       sink, clipboard)

    async def picker():
        return str(picked)

    assert asyncio.run(service.pick_and_upload(CONFIG, picker)) == "https://paste.example/doc.pdf"


@pytest.mark.parametrize("kind", ["text", "url", "remote"])
def test_blank_payload_is_rejected_before_network(make_client, sink, clipboard, kind) -> None:
    seen = []
    service = _service(make_client, lambda request: seen.append(request), sink, clipboard)

    with pytest.raises(ValueError):
        asyncio.run(service.upload(CONFIG, kind, "   "))

    assert seen == []
    assert sink.notifications == []


def test_client_error_is_notified_and_reraised(make_client, sink, clipboard) -> None:
    service = _service(make_client, lambda request: httpx.Response(413, text="file too large"), sink, clipboard)

    with pytest.raises(ServerError) as excinfo:
        asyncio.run(service.upload(CONFIG, "url", "https://example.com"))

    assert excinfo.value.status_code == 413
    assert sink.notifications == [Notification("url failed", "file too large", error=True)]


def test_list_uploads_is_sorted(make_client, sink, clipboard) -> None:
    body = '[{"file_name": "b", "file_size": 1}, {"file_name": "a", "file_size": 5}]'
    service = _service(make_client, lambda request: httpx.Response(200, text=body), sink, clipboard)

    records = asyncio.run(service.list_uploads(CONFIG, "size", "desc"))

    assert [r.file_name for r in records] == ["a", "b"]


def test_delete_uses_delete_token(make_client, sink, clipboard) -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(404)

    service = _service(make_client, handler, sink, clipboard)

    with pytest.raises(MissingDeleteTokenError):
        asyncio.run(service.delete(CONFIG, "a.txt"))

    assert seen[0].headers["authorization"] == "del"


def test_copy_url_writes_clipboard(make_client, sink, clipboard) -> None:
    service = _service(make_client, lambda request: httpx.Response(200), sink, clipboard)

    url = service.copy_url(CONFIG, "a.txt")

    assert url == "https://paste.example/a.txt"
    assert clipboard.copied == ["https://paste.example/a.txt"]


def test_clipboard_sink_copies_url_then_delivers(clipboard) -> None:
    delivered = []
    notifier = ClipboardNotificationSink(clipboard, deliver=delivered.append)

    asyncio.run(notifier.notify_success("URL", "https://paste.example/s"))
    asyncio.run(notifier.notify_error("text", "boom"))

    assert clipboard.copied == ["https://paste.example/s"]
    assert delivered == [
        Notification("URL uploaded successfully", "URL copied to clipboard", url="https://paste.example/s"),
        Notification("Text upload failed", "boom", error=True),
    ]


def test_clipboard_sink_never_raises(clipboard) -> None:
    def broken_delivery(notification):
        raise RuntimeError("notification service down")

    notifier = ClipboardNotificationSink(clipboard, deliver=broken_delivery)

    asyncio.run(notifier.notify_success("file", "https://paste.example/f"))
    asyncio.run(notifier.notify_error("file", "boom"))


def test_url_payloads_are_trimmed(make_client, sink, clipboard) -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text="https://paste.example/s")

    service = _service(make_client, handler, sink, clipboard)

    asyncio.run(service.upload(CONFIG, "url", "  https://example.com/long \n"))

    assert b"\r\n\r\nhttps://example.com/long\r\n" in seen[0].content
