"""Message transport used by the lesson engine, backed by the Telegram Bot API."""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Optional, Protocol

from telegram import Bot, InlineKeyboardMarkup, InputFile
from telegram.constants import ParseMode
from telegram.error import BadRequest, TelegramError


LOGGER = logging.getLogger(__name__)

_NOT_MODIFIED = "message is not modified"
_STALE_QUERY_MARKERS = ("query is too old", "query id is invalid")


class TransportError(RuntimeError):
    """Raised when the messaging service rejects a send."""


@dataclass(slots=True)
class MessageContent:
    """Everything needed to render one bot message."""

    text: str
    keyboard: Optional[InlineKeyboardMarkup] = None
    audio: Optional[bytes] = None
    audio_title: Optional[str] = None

    @property
    def has_audio(self) -> bool:
        return self.audio is not None


def decode_audio_url(audio_url: Optional[str]) -> Optional[bytes]:
    """Decode an inline ``data:`` URL (or bare base64 payload) into bytes."""
    if not audio_url:
        return None
    payload = audio_url.split(",", 1)[1] if "," in audio_url else audio_url
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        LOGGER.warning("Ignoring malformed inline audio payload.")
        return None
    return data or None


class MessageTransport(Protocol):
    async def send(self, chat_id: int, content: MessageContent) -> int:
        ...

    async def edit(
        self,
        chat_id: int,
        message_id: int,
        content: MessageContent,
        has_attachment: bool = False,
    ) -> bool:
        ...

    async def delete(self, chat_id: int, message_id: int) -> bool:
        ...

    async def acknowledge(self, event_id: str, text: Optional[str] = None, show_alert: bool = False) -> None:
        ...


class TelegramTransport:
    """Adapter translating transport calls into Bot API requests."""

    def __init__(self, bot: Bot) -> None:
        self._bot = bot

    async def send(self, chat_id: int, content: MessageContent) -> int:
        try:
            if content.audio is not None:
                message = await self._bot.send_audio(
                    chat_id=chat_id,
                    audio=InputFile(BytesIO(content.audio), filename="sentence.mp3"),
                    caption=content.text,
                    parse_mode=ParseMode.HTML,
                    reply_markup=content.keyboard,
                    title=content.audio_title,
                )
            else:
                message = await self._bot.send_message(
                    chat_id=chat_id,
                    text=content.text,
                    parse_mode=ParseMode.HTML,
                    reply_markup=content.keyboard,
                )
        except TelegramError as exc:
            raise TransportError(f"Failed to send message to chat {chat_id}: {exc}") from exc
        return message.message_id

    async def edit(
        self,
        chat_id: int,
        message_id: int,
        content: MessageContent,
        has_attachment: bool = False,
    ) -> bool:
        try:
            if has_attachment:
                await self._bot.edit_message_caption(
                    chat_id=chat_id,
                    message_id=message_id,
                    caption=content.text,
                    parse_mode=ParseMode.HTML,
                    reply_markup=content.keyboard,
                )
            else:
                await self._bot.edit_message_text(
                    chat_id=chat_id,
                    message_id=message_id,
                    text=content.text,
                    parse_mode=ParseMode.HTML,
                    reply_markup=content.keyboard,
                )
        except BadRequest as exc:
            if _NOT_MODIFIED in str(exc).lower():
                return True
            LOGGER.debug("Edit of message %s in chat %s rejected: %s", message_id, chat_id, exc)
            return False
        except TelegramError:
            LOGGER.debug("Edit of message %s in chat %s failed.", message_id, chat_id, exc_info=True)
            return False
        return True

    async def delete(self, chat_id: int, message_id: int) -> bool:
        try:
            return bool(await self._bot.delete_message(chat_id=chat_id, message_id=message_id))
        except TelegramError:
            LOGGER.debug("Could not delete message %s in chat %s.", message_id, chat_id, exc_info=True)
            return False

    async def acknowledge(self, event_id: str, text: Optional[str] = None, show_alert: bool = False) -> None:
        try:
            await self._bot.answer_callback_query(event_id, text=text, show_alert=show_alert)
        except BadRequest as exc:
            if any(marker in str(exc).lower() for marker in _STALE_QUERY_MARKERS):
                LOGGER.debug("Ignoring stale callback acknowledgment %s.", event_id)
                return
            LOGGER.warning("Callback acknowledgment %s rejected: %s", event_id, exc)
        except TelegramError:
            LOGGER.warning("Callback acknowledgment %s failed.", event_id, exc_info=True)
