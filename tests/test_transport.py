from __future__ import annotations

import base64
import types

import pytest
from telegram.error import BadRequest, NetworkError

from src.bot.transport import MessageContent, TelegramTransport, TransportError, decode_audio_url


class _StubBot:
    def __init__(self) -> None:
        self.calls: list[tuple[str, dict]] = []
        self.errors: dict[str, Exception] = {}

    async def _record(self, name: str, **kwargs):
        self.calls.append((name, kwargs))
        if name in self.errors:
            raise self.errors[name]
        return types.SimpleNamespace(message_id=321)

    async def send_message(self, **kwargs):
        return await self._record("send_message", **kwargs)

    async def send_audio(self, **kwargs):
        return await self._record("send_audio", **kwargs)

    async def edit_message_text(self, **kwargs):
        return await self._record("edit_message_text", **kwargs)

    async def edit_message_caption(self, **kwargs):
        return await self._record("edit_message_caption", **kwargs)

    async def delete_message(self, **kwargs):
        await self._record("delete_message", **kwargs)
        return True

    async def answer_callback_query(self, query_id, **kwargs):
        return await self._record("answer_callback_query", query_id=query_id, **kwargs)


@pytest.mark.asyncio
async def test_send_uses_audio_endpoint_for_audio_content() -> None:
    bot = _StubBot()
    transport = TelegramTransport(bot)

    assert await transport.send(1, MessageContent(text="plain")) == 321
    assert await transport.send(1, MessageContent(text="voiced", audio=b"mp3", audio_title="Greetings - 1")) == 321

    assert [name for name, _ in bot.calls] == ["send_message", "send_audio"]
    assert bot.calls[1][1]["caption"] == "voiced"
    assert bot.calls[1][1]["title"] == "Greetings - 1"


@pytest.mark.asyncio
async def test_send_errors_become_transport_errors() -> None:
    bot = _StubBot()
    bot.errors["send_message"] = NetworkError("connection reset")
    transport = TelegramTransport(bot)

    with pytest.raises(TransportError):
        await transport.send(1, MessageContent(text="plain"))


@pytest.mark.asyncio
async def test_edit_treats_not_modified_as_success() -> None:
    bot = _StubBot()
    transport = TelegramTransport(bot)

    bot.errors["edit_message_text"] = BadRequest("Message is not modified: specified new message content is the same")
    assert await transport.edit(1, 2, MessageContent(text="same")) is True

    bot.errors["edit_message_text"] = BadRequest("Message to edit not found")
    assert await transport.edit(1, 2, MessageContent(text="gone")) is False

    assert await transport.edit(1, 2, MessageContent(text="caption"), has_attachment=True) is True
    assert bot.calls[-1][0] == "edit_message_caption"


@pytest.mark.asyncio
async def test_delete_and_acknowledge_never_raise() -> None:
    bot = _StubBot()
    transport = TelegramTransport(bot)

    assert await transport.delete(1, 2) is True
    bot.errors["delete_message"] = BadRequest("Message can't be deleted")
    assert await transport.delete(1, 2) is False

    bot.errors["answer_callback_query"] = BadRequest("Query is too old and response timeout expired")
    await transport.acknowledge("q1", "hi")
    bot.errors["answer_callback_query"] = NetworkError("timeout")
    await transport.acknowledge("q2")


def test_decode_audio_url_accepts_data_urls_and_bare_base64() -> None:
    payload = base64.b64encode(b"mp3-bytes").decode("ascii")

    assert decode_audio_url(f"data:audio/mpeg;base64,{payload}") == b"mp3-bytes"
    assert decode_audio_url(payload) == b"mp3-bytes"
    assert decode_audio_url(None) is None
    assert decode_audio_url("data:audio/mpeg;base64,###") is None
