"""Lesson entry points: start, reveal, next and previous."""

from __future__ import annotations

import asyncio
import logging
import weakref
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Set, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.bot.catalog import category_name
from src.bot.composer import compose_completion_text, compose_lesson_text, compose_skeleton_text
from src.bot.keyboards import build_completion_keyboard, build_lesson_keyboard
from src.bot.padding import DEFAULT_LINE_WIDTH
from src.bot.transitions import RenderedMessage, TransitionEngine, TransitionOutcome
from src.bot.transport import MessageContent, MessageTransport, decode_audio_url
from src.bot.ui_text import get_ui_text
from src.db import Sentence
from src.db.content import count_sentences, get_sentence_by_index
from src.db.mastery import count_mastery, upsert_mastery
from src.db.sessions import SessionState, get_session_state, upsert_session_state


LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(slots=True)
class LessonEvent:
    """An incoming user interaction routed to the controller."""

    user_id: int
    chat_id: int
    event_id: Optional[str] = None
    message_id: Optional[int] = None


class UserLocks:
    """One asyncio lock per user; unused locks are garbage collected."""

    def __init__(self) -> None:
        self._locks: "weakref.WeakValueDictionary[int, asyncio.Lock]" = weakref.WeakValueDictionary()

    def get(self, user_id: int) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock

    def is_locked(self, user_id: int) -> bool:
        lock = self._locks.get(user_id)
        return lock is not None and lock.locked()


class BackgroundTasks:
    """Keeps references to fire-and-forget tasks until they finish."""

    def __init__(self) -> None:
        self._tasks: Set[asyncio.Task] = set()

    def spawn(self, coro: Awaitable[None], description: str) -> None:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(lambda done: self._finish(done, description))

    def _finish(self, task: asyncio.Task, description: str) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            LOGGER.warning("Background task '%s' failed: %s", description, exc)

    async def drain(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


class Acknowledgement:
    """Answers the originating interaction at most once, without waiting."""

    def __init__(self, transport: MessageTransport, tasks: BackgroundTasks, event_id: Optional[str]) -> None:
        self._transport = transport
        self._tasks = tasks
        self._event_id = event_id
        self.sent = False

    def send(self, text: Optional[str] = None, show_alert: bool = False) -> None:
        if self.sent:
            return
        self.sent = True
        if self._event_id is None:
            return
        self._tasks.spawn(
            self._transport.acknowledge(self._event_id, text, show_alert),
            f"acknowledge {self._event_id}",
        )


@dataclass(slots=True)
class _Snapshot:
    state: Optional[SessionState]
    total: int = 0
    sentence: Optional[Sentence] = None


class LessonController:
    """Serializes lesson operations per user and drives the transition engine."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        transport: MessageTransport,
        engine: Optional[TransitionEngine] = None,
        *,
        default_language: str = "eng",
        line_width: int = DEFAULT_LINE_WIDTH,
        skeleton_enabled: bool = True,
        locks: Optional[UserLocks] = None,
        tasks: Optional[BackgroundTasks] = None,
    ) -> None:
        self._session_factory = session_factory
        self._transport = transport
        self._engine = engine or TransitionEngine(transport, skeleton_enabled=skeleton_enabled)
        self._default_language = default_language
        self._line_width = line_width
        self._skeleton_enabled = skeleton_enabled
        self._locks = locks or UserLocks()
        self._tasks = tasks or BackgroundTasks()

    @property
    def engine(self) -> TransitionEngine:
        return self._engine

    @property
    def locks(self) -> UserLocks:
        return self._locks

    @property
    def tasks(self) -> BackgroundTasks:
        return self._tasks

    async def drain(self) -> None:
        """Wait for pending acknowledgments and background deletions."""
        await self._tasks.drain()
        await self._engine.drain()

    async def guarded(
        self,
        event: LessonEvent,
        name: str,
        body: Callable[[Acknowledgement], Awaitable[T]],
    ) -> Optional[T]:
        ack = Acknowledgement(self._transport, self._tasks, event.event_id)
        lock = self._locks.get(event.user_id)
        if lock.locked():
            ack.send()

        async with lock:
            try:
                return await body(ack)
            except Exception:
                LOGGER.exception("Lesson operation %s failed for user %s.", name, event.user_id)
                if not ack.sent:
                    ack.send(get_ui_text("error_occurred", self._default_language))
                return None

    async def _load(self, user_id: int) -> _Snapshot:
        async with self._session_factory() as session:
            async with session.begin():
                state = await get_session_state(session, user_id)
                if state is None or not state.category:
                    return _Snapshot(state)
                total = await count_sentences(session, state.folder, state.category)
                sentence = await get_sentence_by_index(session, state.folder, state.category, state.current_index)
                return _Snapshot(state, total, sentence)

    async def _fetch_sentence(self, folder: str, category: str, index: int) -> Optional[Sentence]:
        async with self._session_factory() as session:
            return await get_sentence_by_index(session, folder, category, index)

    async def _persist(self, state: SessionState) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                await upsert_session_state(session, state)

    async def _mark_learned(self, state: SessionState, sentence: Sentence) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                await upsert_mastery(
                    session,
                    state.user_id,
                    sentence.id,
                    state.folder,
                    state.category,
                    status="learned",
                )

    def _lesson_content(self, state: SessionState, sentence: Sentence, total: int, revealed: bool) -> MessageContent:
        text = compose_lesson_text(
            sentence,
            state.folder,
            state.category,
            state.current_index,
            total,
            state.language_to,
            revealed=revealed,
            width=self._line_width,
        )
        audio = decode_audio_url(sentence.audio_url)
        return MessageContent(
            text=text,
            keyboard=build_lesson_keyboard(state.language_to, revealed),
            audio=audio,
            audio_title=f"{category_name(state.category)} - {state.current_index + 1}" if audio else None,
        )

    def _skeleton(self, state: SessionState, total: int) -> Optional[MessageContent]:
        if not self._skeleton_enabled:
            return None
        return MessageContent(
            text=compose_skeleton_text(state.category, state.current_index, total, width=self._line_width),
            keyboard=build_lesson_keyboard(state.language_to, revealed=False),
        )

    @staticmethod
    def _previous_message(state: SessionState) -> Optional[RenderedMessage]:
        if state.last_message_id is None:
            return None
        return RenderedMessage(state.last_message_id, state.last_message_has_audio)

    @staticmethod
    def _track(state: SessionState, outcome: TransitionOutcome) -> None:
        if outcome.succeeded and outcome.message is not None:
            state.last_message_id = outcome.message.message_id
            state.last_message_has_audio = outcome.message.has_audio

    async def _notify_missing_content(self, event: LessonEvent, ack: Acknowledgement, language: str) -> None:
        notice = get_ui_text("no_sentences", language)
        ack.send(notice)
        try:
            await self._transport.send(event.chat_id, MessageContent(text=notice))
        except Exception:
            LOGGER.warning("Could not send missing content notice to chat %s.", event.chat_id, exc_info=True)

    async def start_lesson(
        self,
        event: LessonEvent,
        folder: Optional[str] = None,
        category: Optional[str] = None,
    ) -> Optional[SessionState]:
        """Show the current (or a newly selected) category from a fresh message."""

        async def body(ack: Acknowledgement) -> Optional[SessionState]:
            snapshot = await self._load(event.user_id)
            state = snapshot.state or SessionState.fresh(event.user_id, self._default_language)

            target_folder = folder or state.folder
            target_category = category or state.category
            switching = target_folder != state.folder or target_category != state.category
            index = 0 if switching else state.current_index

            async with self._session_factory() as session:
                total = await count_sentences(session, target_folder, target_category) if target_category else 0
                if total and index >= total:
                    index = 0
                sentence = await get_sentence_by_index(session, target_folder, target_category, index)

            if sentence is None:
                LOGGER.info(
                    "No content for %s/%s at %s requested by user %s.",
                    target_folder,
                    target_category,
                    index,
                    event.user_id,
                )
                await self._notify_missing_content(event, ack, state.language_to)
                return None

            state.folder = target_folder
            state.category = target_category
            state.current_index = index
            state.translation_revealed = False
            ack.send(get_ui_text("lesson_started", state.language_to))

            previous = self._previous_message(state)
            outcome = await self._engine.render_fresh(event.chat_id, self._lesson_content(state, sentence, total, False))
            if outcome.succeeded:
                if previous is not None:
                    self._engine.schedule_delete(event.chat_id, previous.message_id)
                self._track(state, outcome)
            else:
                LOGGER.error("Lesson message for user %s could not be rendered.", event.user_id)

            state.lesson_active = True
            state.last_folder = state.folder
            state.last_category = state.category
            await self._persist(state)
            return state

        return await self.guarded(event, "start_lesson", body)

    async def reveal_translation(self, event: LessonEvent) -> Optional[SessionState]:
        """Re-render the current card with the translation shown."""

        async def body(ack: Acknowledgement) -> Optional[SessionState]:
            snapshot = await self._load(event.user_id)
            state = snapshot.state
            if state is None or not state.lesson_active or state.last_message_id is None:
                language = state.language_to if state else self._default_language
                ack.send(get_ui_text("no_active_lesson", language))
                return None
            if snapshot.sentence is None:
                await self._notify_missing_content(event, ack, state.language_to)
                return None

            ack.send(get_ui_text("translation_revealed", state.language_to))
            content = self._lesson_content(state, snapshot.sentence, snapshot.total, revealed=True)
            content.audio = None
            message = RenderedMessage(state.last_message_id, state.last_message_has_audio)
            if not await self._engine.update_in_place(event.chat_id, message, content):
                LOGGER.warning("Could not reveal translation on message %s.", state.last_message_id)

            state.translation_revealed = True
            await self._persist(state)
            return state

        return await self.guarded(event, "reveal_translation", body)

    async def next(self, event: LessonEvent) -> Optional[SessionState]:
        return await self.guarded(event, "next", lambda ack: self._navigate(event, ack, 1))

    async def previous(self, event: LessonEvent) -> Optional[SessionState]:
        return await self.guarded(event, "previous", lambda ack: self._navigate(event, ack, -1))

    async def _navigate(self, event: LessonEvent, ack: Acknowledgement, step: int) -> Optional[SessionState]:
        snapshot = await self._load(event.user_id)
        state = snapshot.state
        if state is None or not state.lesson_active:
            language = state.language_to if state else self._default_language
            ack.send(get_ui_text("no_active_lesson", language))
            return None
        if snapshot.total == 0 or snapshot.sentence is None:
            await self._notify_missing_content(event, ack, state.language_to)
            return None

        departed = snapshot.sentence
        previous = self._previous_message(state)

        if step > 0 and state.current_index >= snapshot.total - 1:
            await self._mark_learned(state, departed)
            await self._complete(event, ack, state, snapshot.total, previous)
            return state

        if step < 0 and state.current_index <= 0:
            ack.send(get_ui_text("at_beginning", state.language_to))
            state.current_index = 0
            state.translation_revealed = False
            content = self._lesson_content(state, departed, snapshot.total, revealed=False)
            outcome = await self._engine.transition(event.chat_id, previous, content)
            self._track(state, outcome)
            await self._persist(state)
            return state

        target = await self._fetch_sentence(state.folder, state.category, state.current_index + step)
        if target is None:
            await self._notify_missing_content(event, ack, state.language_to)
            return None

        await self._mark_learned(state, departed)
        state.current_index += step
        state.translation_revealed = False
        ack.send(get_ui_text("next_clicked" if step > 0 else "previous_clicked", state.language_to))

        content = self._lesson_content(state, target, snapshot.total, revealed=False)
        outcome = await self._engine.transition(
            event.chat_id,
            previous,
            content,
            skeleton=self._skeleton(state, snapshot.total),
        )
        if outcome.succeeded:
            self._track(state, outcome)
        else:
            LOGGER.error(
                "Lesson message for user %s not rendered; index already moved to %s.",
                event.user_id,
                state.current_index,
            )

        await self._persist(state)
        return state

    async def _complete(
        self,
        event: LessonEvent,
        ack: Acknowledgement,
        state: SessionState,
        total: int,
        previous: Optional[RenderedMessage],
    ) -> None:
        ack.send(get_ui_text("next_clicked", state.language_to))
        async with self._session_factory() as session:
            mastered = await count_mastery(session, state.user_id, state.folder, state.category)

        content = MessageContent(
            text=compose_completion_text(state.category, mastered, total, state.language_to),
            keyboard=build_completion_keyboard(state.folder, state.language_to),
        )
        outcome = await self._engine.transition(event.chat_id, previous, content)
        self._track(state, outcome)

        state.lesson_active = False
        state.translation_revealed = False
        await self._persist(state)
        LOGGER.info("User %s completed %s/%s.", state.user_id, state.folder, state.category)

    async def exit_lesson(self, event: LessonEvent) -> Optional[SessionState]:
        """End the active lesson and remove its message."""

        async def body(ack: Acknowledgement) -> Optional[SessionState]:
            snapshot = await self._load(event.user_id)
            state = snapshot.state
            if state is None:
                ack.send()
                return None

            ack.send(get_ui_text("lesson_exited", state.language_to))
            if state.last_message_id is not None:
                self._engine.schedule_delete(event.chat_id, state.last_message_id)
            state.lesson_active = False
            state.translation_revealed = False
            state.last_message_id = None
            state.last_message_has_audio = False
            await self._persist(state)
            return state

        return await self.guarded(event, "exit_lesson", body)

    async def update_preferences(
        self,
        event: LessonEvent,
        *,
        language_to: Optional[str] = None,
        folder: Optional[str] = None,
    ) -> Optional[SessionState]:
        """Store the chosen language or folder, creating the session if needed."""

        async def body(ack: Acknowledgement) -> SessionState:
            snapshot = await self._load(event.user_id)
            state = snapshot.state or SessionState.fresh(event.user_id, self._default_language)
            if language_to is not None:
                state.language_to = language_to
            if folder is not None and folder != state.folder:
                state.folder = folder
                state.category = ""
                state.current_index = 0
                state.translation_revealed = False
                state.lesson_active = False
            ack.send(get_ui_text("language_set", state.language_to) if language_to else None)
            await self._persist(state)
            return state

        return await self.guarded(event, "update_preferences", body)
