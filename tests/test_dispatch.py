from __future__ import annotations

import asyncio

import httpx

from droidypaste.application.dispatch import ShareDispatcher, classify_item
from droidypaste.application.uploads import UploadService
from droidypaste.domain.errors import UnknownError
from droidypaste.domain.events import (
    EventChannel,
    NotificationOpened,
    ShareReceived,
    SharedFile,
    SharedText,
)
from droidypaste.domain.models import ClientConfig
from droidypaste.domain.result import Err, Ok, split_results

CONFIG = ClientConfig(server_url="paste.example", auth_token="auth")


async def _config() -> ClientConfig:
    return CONFIG


def test_classify_item() -> None:
    assert classify_item(SharedFile("/tmp/a.png", "image/png")) == ("image", "/tmp/a.png")
    assert classify_item(SharedFile("/tmp/a.bin")) == ("file", "/tmp/a.bin")
    assert classify_item(SharedText(" https://example.com/x ")) == ("url", "https://example.com/x")
    assert classify_item(SharedText("see https://example.com")) == ("text", "see https://example.com")


def test_dispatcher_uploads_items_in_order_and_survives_failures(make_client, sink, clipboard, tmp_path) -> None:
    shared = tmp_path / "shared.txt"
    shared.write_text("from another app", encoding="utf-8")
    order = []

    def handler(request: httpx.Request) -> httpx.Response:
        content = request.content
        if b'name="url"' in content:
            order.append("url")
            return httpx.Response(200, text="https://paste.example/short")
        if b'filename="shared.txt"' in content:
            order.append("file")
            return httpx.Response(200, text="https://paste.example/shared.txt")
        order.append("text")
        return httpx.Response(200, text="https://paste.example/text.txt")

    uploads = UploadService(make_client(handler), sink, clipboard)

    async def scenario():
        channel = EventChannel()
        dispatcher = ShareDispatcher(channel, uploads, _config)
        channel.publish(ShareReceived(items=(
            SharedFile(str(shared)),
            SharedFile(str(tmp_path / "gone.bin")),
            SharedText("https://example.com/long"),
            SharedText("plain note"),
        )))
        channel.close()
        return await dispatcher.run()

    results = asyncio.run(scenario())

    assert order == ["file", "url", "text"]
    assert isinstance(results[0], Ok) and results[0].value == "https://paste.example/shared.txt"
    assert isinstance(results[1], Err) and isinstance(results[1].error, UnknownError)
    assert [r.value for r in results[2:]] == ["https://paste.example/short", "https://paste.example/text.txt"]
    assert [n.error for n in sink.notifications] == [False, True, False, False]


def test_notification_opened_copies_url(make_client, sink, clipboard) -> None:
    uploads = UploadService(make_client(lambda request: httpx.Response(200)), sink, clipboard)

    async def scenario():
        channel = EventChannel()
        dispatcher = ShareDispatcher(channel, uploads, _config)
        channel.publish(NotificationOpened(url="https://paste.example/abc"))
        channel.publish(NotificationOpened(url=""))
        channel.close()
        channel.publish(NotificationOpened(url="https://paste.example/late"))
        return await dispatcher.run()

    results = asyncio.run(scenario())

    assert results == []
    assert clipboard.copied == ["https://paste.example/abc"]


def test_split_results_keeps_order() -> None:
    boom = ValueError("boom")

    urls, errors = split_results([Ok("a"), Err(boom), Ok("b")])

    assert urls == ["a", "b"]
    assert errors == [boom]


def test_shared_text_is_uploaded_verbatim(make_client, sink, clipboard) -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text="https://paste.example/text.txt")

    uploads = UploadService(make_client(handler), sink, clipboard)

    async def scenario():
        channel = EventChannel()
        dispatcher = ShareDispatcher(channel, uploads, _config)
        channel.publish(ShareReceived(items=(SharedText("    indented()\n"),)))
        channel.close()
        return await dispatcher.run()

    asyncio.run(scenario())

    assert b"\r\n\r\n    indented()\n\r\n" in seen[0].content


def test_settings_failure_marks_every_item_failed(make_client, sink, clipboard) -> None:
    uploads = UploadService(make_client(lambda request: httpx.Response(200)), sink, clipboard)
    keyring_down = RuntimeError("keyring locked")

    async def broken_config() -> ClientConfig:
        raise keyring_down

    async def scenario():
        channel = EventChannel()
        dispatcher = ShareDispatcher(channel, uploads, broken_config)
        channel.publish(ShareReceived(items=(SharedText("a"), SharedText("b"))))
        channel.publish(NotificationOpened(url="https://paste.example/abc"))
        channel.close()
        return await dispatcher.run()

    results = asyncio.run(scenario())

    assert results == [Err(keyring_down), Err(keyring_down)]
    assert clipboard.copied == ["https://paste.example/abc"]


def test_closed_channel_can_be_drained_again(make_client, sink, clipboard) -> None:
    uploads = UploadService(make_client(lambda request: httpx.Response(200)), sink, clipboard)

    async def scenario():
        channel = EventChannel()
        dispatcher = ShareDispatcher(channel, uploads, _config)
        channel.close()
        first = await dispatcher.run()
        second = await asyncio.wait_for(dispatcher.run(), timeout=1)
        return first, second, await asyncio.wait_for(channel.next(), timeout=1)

    assert asyncio.run(scenario()) == ([], [], None)
