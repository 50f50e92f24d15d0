"""Saving sentences during lessons and browsing them later."""

from __future__ import annotations

import logging
from html import escape
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.bot.composer import compose_favourite_text
from src.bot.keyboards import build_favourite_keyboard
from src.bot.padding import DEFAULT_LINE_WIDTH
from src.bot.session_controller import Acknowledgement, LessonController, LessonEvent
from src.bot.transport import MessageContent, MessageTransport, decode_audio_url
from src.bot.ui_text import get_ui_text
from src.db import Favourite
from src.db.content import get_sentence_by_index
from src.db.favourites import add_favourite, count_favourites, get_favourite_at, remove_favourite
from src.db.sessions import (
    SessionState,
    get_session_state,
    load_or_create_session_state,
    upsert_session_state,
)


LOGGER = logging.getLogger(__name__)


class FavouritesFlow:
    """Favourite bookmarks; the browsing position lives in the user's session."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        transport: MessageTransport,
        controller: LessonController,
        *,
        default_language: str = "eng",
        line_width: int = DEFAULT_LINE_WIDTH,
    ) -> None:
        self._session_factory = session_factory
        self._transport = transport
        self._controller = controller
        self._default_language = default_language
        self._line_width = line_width

    async def add_current(self, event: LessonEvent) -> Optional[bool]:
        """Bookmark the sentence currently shown in the lesson."""

        async def body(ack: Acknowledgement) -> Optional[bool]:
            async with self._session_factory() as session:
                async with session.begin():
                    state = await get_session_state(session, event.user_id)
                    if state is None or not state.category:
                        ack.send(get_ui_text("no_active_lesson", self._default_language))
                        return None
                    sentence = await get_sentence_by_index(
                        session, state.folder, state.category, state.current_index
                    )
                    if sentence is None:
                        ack.send(get_ui_text("no_sentences", state.language_to))
                        return None
                    created = await add_favourite(session, event.user_id, sentence)

            ack.send(get_ui_text("favourite_added" if created else "favourite_exists", state.language_to))
            return created

        return await self._controller.guarded(event, "add_favourite", body)

    async def open(self, event: LessonEvent) -> Optional[int]:
        """Send the favourite at the stored browsing position as a new message."""

        async def body(ack: Acknowledgement) -> Optional[int]:
            state, favourite, total = await self._current(event.user_id)
            ack.send()
            content = self._card(state, favourite, total, revealed=False)
            try:
                return await self._transport.send(event.chat_id, content)
            except Exception:
                LOGGER.warning("Could not send favourites card to chat %s.", event.chat_id, exc_info=True)
                return None

        return await self._controller.guarded(event, "open_favourites", body)

    async def reveal(self, event: LessonEvent) -> Optional[bool]:
        async def body(ack: Acknowledgement) -> bool:
            state, favourite, total = await self._current(event.user_id)
            ack.send(get_ui_text("translation_revealed", state.language_to) if favourite else None)
            return await self._edit_card(event, self._card(state, favourite, total, revealed=True))

        return await self._controller.guarded(event, "reveal_favourite", body)

    async def next(self, event: LessonEvent) -> Optional[bool]:
        """Advance to the following favourite, wrapping around at the end."""

        async def body(ack: Acknowledgement) -> bool:
            state, _, total = await self._current(event.user_id)
            if total:
                state.favourite_index = (state.favourite_index + 1) % total
                await self._persist(state)
            state, favourite, total = await self._current(event.user_id)
            ack.send()
            return await self._edit_card(event, self._card(state, favourite, total, revealed=False))

        return await self._controller.guarded(event, "next_favourite", body)

    async def remove(self, event: LessonEvent) -> Optional[bool]:
        """Delete the shown favourite and display the one now at that position."""

        async def body(ack: Acknowledgement) -> bool:
            state, favourite, _ = await self._current(event.user_id)
            if favourite is not None:
                async with self._session_factory() as session:
                    async with session.begin():
                        await remove_favourite(session, event.user_id, favourite.sentence_id)
                ack.send(get_ui_text("favourite_removed", state.language_to))
            else:
                ack.send()

            state, favourite, total = await self._current(event.user_id)
            return await self._edit_card(event, self._card(state, favourite, total, revealed=False))

        return await self._controller.guarded(event, "remove_favourite", body)

    async def listen(self, event: LessonEvent) -> Optional[bool]:
        """Send the audio of the shown favourite, when it has one."""

        async def body(ack: Acknowledgement) -> bool:
            state, favourite, _ = await self._current(event.user_id)
            audio = decode_audio_url(favourite.sentence.audio_url) if favourite else None
            if audio is None:
                ack.send(get_ui_text("no_audio", state.language_to))
                return False
            ack.send()
            await self._transport.send(
                event.chat_id,
                MessageContent(text=f"🎙️ {escape(favourite.sentence.bg)}", audio=audio, audio_title=favourite.sentence.bg),
            )
            return True

        return await self._controller.guarded(event, "listen_favourite", body)

    async def _current(self, user_id: int) -> tuple[SessionState, Optional[Favourite], int]:
        """Load the session and the favourite at its clamped browsing position."""
        async with self._session_factory() as session:
            async with session.begin():
                state = await load_or_create_session_state(session, user_id, self._default_language)
                total = await count_favourites(session, user_id)
                index = min(max(state.favourite_index, 0), max(total - 1, 0))
                changed = index != state.favourite_index
                state.favourite_index = index
                favourite = await get_favourite_at(session, user_id, index) if total else None
                if changed:
                    await upsert_session_state(session, state)
        return state, favourite, total

    async def _persist(self, state: SessionState) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                await upsert_session_state(session, state)

    def _card(
        self,
        state: SessionState,
        favourite: Optional[Favourite],
        total: int,
        revealed: bool,
    ) -> MessageContent:
        if favourite is None or favourite.sentence is None:
            return MessageContent(text=get_ui_text("favourites_empty", state.language_to))
        text = compose_favourite_text(
            favourite.sentence,
            favourite.category,
            state.favourite_index,
            total,
            state.language_to,
            revealed=revealed,
            width=self._line_width,
        )
        return MessageContent(text=text, keyboard=build_favourite_keyboard(state.language_to))

    async def _edit_card(self, event: LessonEvent, content: MessageContent) -> bool:
        if event.message_id is None:
            await self._transport.send(event.chat_id, content)
            return True
        if await self._transport.edit(event.chat_id, event.message_id, content):
            return True
        LOGGER.debug("Favourites card %s not editable; sending a new one.", event.message_id)
        await self._transport.send(event.chat_id, content)
        return True
