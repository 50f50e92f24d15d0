"""Edit-or-replace transitions between lesson messages."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Set

from src.bot.transport import MessageContent, MessageTransport


LOGGER = logging.getLogger(__name__)


class TransitionState(str, Enum):
    COMPOSING = "composing"
    ATTEMPT_INPLACE_EDIT = "attempt_inplace_edit"
    EDITED = "edited"
    ATTEMPT_REPLACE = "attempt_replace"
    REPLACED = "replaced"
    FAILED = "failed"


@dataclass(slots=True)
class RenderedMessage:
    """The live lesson message currently shown in a chat."""

    message_id: int
    has_audio: bool = False


@dataclass(slots=True)
class TransitionOutcome:
    state: TransitionState
    message: Optional[RenderedMessage] = None
    trail: List[TransitionState] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.state in (TransitionState.EDITED, TransitionState.REPLACED)


class TransitionEngine:
    """Moves a chat from one rendered lesson message to the next.

    Text-only messages are edited in place. When either side carries audio, or
    the edit is rejected, a new message is sent first and the superseded one is
    deleted in the background, so the chat always shows a live lesson card.
    """

    def __init__(self, transport: MessageTransport, skeleton_enabled: bool = True) -> None:
        self._transport = transport
        self._skeleton_enabled = skeleton_enabled
        self._pending_deletes: Set[asyncio.Task] = set()

    async def render_fresh(self, chat_id: int, content: MessageContent) -> TransitionOutcome:
        """Send a brand new lesson message without touching older ones."""
        return await self._replace(chat_id, None, content, [TransitionState.COMPOSING])

    async def transition(
        self,
        chat_id: int,
        previous: Optional[RenderedMessage],
        content: MessageContent,
        skeleton: Optional[MessageContent] = None,
    ) -> TransitionOutcome:
        trail = [TransitionState.COMPOSING]
        skeleton_shown = False

        if previous is not None and not previous.has_audio and not content.has_audio:
            trail.append(TransitionState.ATTEMPT_INPLACE_EDIT)
            if skeleton is not None and self._skeleton_enabled:
                skeleton_shown = await self._show_skeleton(chat_id, previous.message_id, skeleton)
            if await self._safe_edit(chat_id, previous.message_id, content, has_attachment=False):
                trail.append(TransitionState.EDITED)
                return TransitionOutcome(
                    TransitionState.EDITED,
                    RenderedMessage(previous.message_id, has_audio=False),
                    trail,
                )
            LOGGER.info(
                "In-place edit of message %s in chat %s failed; replacing it.",
                previous.message_id,
                chat_id,
            )

        outcome = await self._replace(chat_id, previous, content, trail)
        if skeleton_shown and not outcome.succeeded:
            # The placeholder must not remain as the last thing the old message shows.
            if not await self._safe_edit(chat_id, previous.message_id, content, has_attachment=False):
                LOGGER.warning("Skeleton left on message %s in chat %s.", previous.message_id, chat_id)
        return outcome

    async def update_in_place(self, chat_id: int, message: RenderedMessage, content: MessageContent) -> bool:
        """Edit text and keyboard of the live message, keeping its attachment."""
        return await self._safe_edit(chat_id, message.message_id, content, has_attachment=message.has_audio)

    async def drain(self) -> None:
        """Wait for background deletions scheduled so far."""
        while self._pending_deletes:
            await asyncio.gather(*list(self._pending_deletes), return_exceptions=True)

    def schedule_delete(self, chat_id: int, message_id: int) -> None:
        task = asyncio.create_task(self._delete_quietly(chat_id, message_id))
        self._pending_deletes.add(task)
        task.add_done_callback(self._pending_deletes.discard)

    async def _replace(
        self,
        chat_id: int,
        previous: Optional[RenderedMessage],
        content: MessageContent,
        trail: List[TransitionState],
    ) -> TransitionOutcome:
        trail.append(TransitionState.ATTEMPT_REPLACE)
        try:
            message_id = await self._transport.send(chat_id, content)
        except Exception:
            if not content.has_audio:
                LOGGER.warning("Failed to send lesson message to chat %s.", chat_id, exc_info=True)
                trail.append(TransitionState.FAILED)
                return TransitionOutcome(TransitionState.FAILED, None, trail)
            LOGGER.warning("Failed to send audio to chat %s, sending text only.", chat_id, exc_info=True)
            content = replace(content, audio=None, audio_title=None)
            try:
                message_id = await self._transport.send(chat_id, content)
            except Exception:
                LOGGER.warning("Failed to send lesson message to chat %s.", chat_id, exc_info=True)
                trail.append(TransitionState.FAILED)
                return TransitionOutcome(TransitionState.FAILED, None, trail)

        if previous is not None and previous.message_id != message_id:
            self.schedule_delete(chat_id, previous.message_id)

        trail.append(TransitionState.REPLACED)
        return TransitionOutcome(
            TransitionState.REPLACED,
            RenderedMessage(message_id, has_audio=content.has_audio),
            trail,
        )

    async def _show_skeleton(self, chat_id: int, message_id: int, skeleton: MessageContent) -> bool:
        if await self._safe_edit(chat_id, message_id, skeleton, has_attachment=False):
            return True
        LOGGER.debug("Skeleton placeholder for message %s was not shown.", message_id)
        return False

    async def _safe_edit(
        self,
        chat_id: int,
        message_id: int,
        content: MessageContent,
        has_attachment: bool,
    ) -> bool:
        try:
            return await self._transport.edit(chat_id, message_id, content, has_attachment=has_attachment)
        except Exception:
            LOGGER.debug("Edit of message %s raised.", message_id, exc_info=True)
            return False

    async def _delete_quietly(self, chat_id: int, message_id: int) -> None:
        try:
            deleted = await self._transport.delete(chat_id, message_id)
        except Exception:
            LOGGER.warning("Background delete of message %s failed.", message_id, exc_info=True)
            return
        if not deleted:
            LOGGER.debug("Message %s in chat %s was not deleted.", message_id, chat_id)
