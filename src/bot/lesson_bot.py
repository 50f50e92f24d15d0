"""Telegram handlers for the Bulgarian lessons bot."""

from __future__ import annotations

import logging
from html import escape
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from telegram import InlineKeyboardMarkup, Update
from telegram.constants import ParseMode
from telegram.ext import ContextTypes

from src.bot.catalog import FOLDERS, category_label, folder_label, get_language, is_known_language
from src.bot.composer import progress_bar
from src.bot.favourites_flow import FavouritesFlow
from src.bot.keyboards import (
    build_category_keyboard,
    build_folder_keyboard,
    build_language_keyboard,
    build_resume_keyboard,
    parse_callback,
)
from src.bot.session_controller import LessonController, LessonEvent
from src.bot.transport import MessageContent, MessageTransport, TransportError
from src.bot.ui_text import HELP_TEXT, get_ui_text
from src.db.content import category_totals, count_sentences, list_categories, list_folders
from src.db.mastery import clear_mastery, mastery_by_category
from src.db.sessions import SessionState, get_session_state


LOGGER = logging.getLogger(__name__)


def order_folders(folders: List[str]) -> List[str]:
    """Known folders in catalog order, then any others alphabetically."""
    known = [folder for folder in FOLDERS if folder in folders]
    return known + sorted(folder for folder in folders if folder not in FOLDERS)


class LessonBot:
    """Routes Telegram updates to the lesson controller and renders menus."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        transport: MessageTransport,
        controller: LessonController,
        favourites: FavouritesFlow,
        default_language: str = "eng",
    ) -> None:
        self._session_factory = session_factory
        self._transport = transport
        self._controller = controller
        self._favourites = favourites
        self._default_language = default_language

    @staticmethod
    def _event_from_query(update: Update) -> Optional[LessonEvent]:
        query = update.callback_query
        if query is None or query.message is None or query.from_user is None:
            return None
        return LessonEvent(
            user_id=query.from_user.id,
            chat_id=query.message.chat.id,
            event_id=query.id,
            message_id=query.message.message_id,
        )

    @staticmethod
    def _event_from_message(update: Update) -> Optional[LessonEvent]:
        chat = update.effective_chat
        user = update.effective_user
        if update.message is None or chat is None or user is None:
            return None
        return LessonEvent(user_id=user.id, chat_id=chat.id)

    async def _load_state(self, user_id: int) -> Optional[SessionState]:
        async with self._session_factory() as session:
            return await get_session_state(session, user_id)

    async def _show(self, event: LessonEvent, text: str, keyboard: Optional[InlineKeyboardMarkup] = None) -> None:
        """Replace the menu the user tapped, or send a new message for commands."""
        content = MessageContent(text=text, keyboard=keyboard)
        if event.message_id is not None and await self._transport.edit(event.chat_id, event.message_id, content):
            return
        await self._transport.send(event.chat_id, content)

    async def _folder_menu(self, language: str) -> Tuple[str, InlineKeyboardMarkup]:
        async with self._session_factory() as session:
            folders = order_folders(await list_folders(session))
        return get_ui_text("select_level", language), build_folder_keyboard(folders)

    async def _category_menu(self, user_id: int, folder: str, language: str) -> Tuple[str, InlineKeyboardMarkup]:
        async with self._session_factory() as session:
            categories = await list_categories(session, folder)
            mastered = await mastery_by_category(session, user_id)
            entries = []
            for category in categories:
                total = await count_sentences(session, folder, category)
                done = mastered.get((folder, category), 0)
                entries.append((category, int(100 * done / total) if total else 0))

        if not entries:
            text = f"{folder_label(folder)}\n\n{get_ui_text('no_categories', language)}"
        else:
            text = f"{folder_label(folder)}\n\n{get_ui_text('select_category', language)}"
        return text, build_category_keyboard(entries, language)

    async def handle_start(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Offer to resume an active lesson or choose a target language."""
        event = self._event_from_message(update)
        if event is None:
            return

        state = await self._load_state(event.user_id)
        if state is not None and state.lesson_active and state.category:
            language = state.language_to
            text = (
                f"{get_ui_text('welcome_back', language)}\n\n"
                f"{get_ui_text('active_lesson', language)} <b>{escape(category_label(state.category))}</b> "
                f"({escape(folder_label(state.folder))}).\n\n"
                f"{get_ui_text('what_to_do', language)}"
            )
            await update.message.reply_text(
                text,
                parse_mode=ParseMode.HTML,
                reply_markup=build_resume_keyboard(language),
            )
            return

        language = state.language_to if state else self._default_language
        await update.message.reply_text(
            get_ui_text("select_language", language),
            reply_markup=build_language_keyboard(language),
        )

    async def handle_language(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        event = self._event_from_query(update)
        token = parse_callback(update.callback_query.data if update.callback_query else None)
        if event is None or token is None:
            return
        if not is_known_language(token.value):
            await self._transport.acknowledge(event.event_id)
            return

        state = await self._controller.update_preferences(event, language_to=token.value)
        if state is None:
            return
        text, keyboard = await self._folder_menu(state.language_to)
        await self._show(event, text, keyboard)

    async def handle_folder(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        event = self._event_from_query(update)
        token = parse_callback(update.callback_query.data if update.callback_query else None)
        if event is None or token is None:
            return

        state = await self._controller.update_preferences(event, folder=token.value)
        if state is None:
            return
        text, keyboard = await self._category_menu(event.user_id, state.folder, state.language_to)
        await self._show(event, text, keyboard)

    async def handle_category(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        event = self._event_from_query(update)
        token = parse_callback(update.callback_query.data if update.callback_query else None)
        if event is None or token is None:
            return
        await self._controller.start_lesson(event, category=token.value)

    async def handle_lesson_action(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        event = self._event_from_query(update)
        token = parse_callback(update.callback_query.data if update.callback_query else None)
        if event is None or token is None:
            return

        action = token.value
        if action == "show":
            await self._controller.reveal_translation(event)
        elif action in {"next", "skip"}:
            await self._controller.next(event)
        elif action == "prev":
            await self._controller.previous(event)
        elif action == "resume":
            await self._controller.start_lesson(event)
        elif action == "new":
            state = await self._load_state(event.user_id)
            await self._transport.acknowledge(event.event_id)
            text, keyboard = await self._folder_menu(state.language_to if state else self._default_language)
            await self._show(event, text, keyboard)
        elif action == "exit":
            state = await self._controller.exit_lesson(event)
            if state is None:
                return
            text, keyboard = await self._category_menu(event.user_id, state.folder, state.language_to)
            try:
                await self._transport.send(event.chat_id, MessageContent(text=text, keyboard=keyboard))
            except TransportError:
                LOGGER.warning("Could not send category menu to chat %s.", event.chat_id, exc_info=True)

    async def handle_favourite_action(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        event = self._event_from_query(update)
        token = parse_callback(update.callback_query.data if update.callback_query else None)
        if event is None or token is None:
            return

        handlers = {
            "add": self._favourites.add_current,
            "show": self._favourites.reveal,
            "listen": self._favourites.listen,
            "remove": self._favourites.remove,
            "next": self._favourites.next,
        }
        await handlers[token.value](event)

    async def handle_menu(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        event = self._event_from_query(update)
        if event is None:
            return
        await self._transport.acknowledge(event.event_id)
        state = await self._load_state(event.user_id)
        text, keyboard = await self._folder_menu(state.language_to if state else self._default_language)
        await self._show(event, text, keyboard)

    async def handle_favourites(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        event = self._event_from_message(update)
        if event is None:
            return
        await self._favourites.open(event)

    async def handle_progress(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Report mastered sentences per category with progress bars."""
        event = self._event_from_message(update)
        if event is None:
            return

        state = await self._load_state(event.user_id)
        language = state.language_to if state else self._default_language
        try:
            report = await self._build_progress_report(event.user_id, language)
        except Exception:
            LOGGER.exception("Failed to build progress report for user %s.", event.user_id)
            await update.message.reply_text(get_ui_text("error_occurred", language))
            return

        await update.message.reply_text(report, parse_mode=ParseMode.HTML)

    async def _build_progress_report(self, user_id: int, language: str) -> str:
        async with self._session_factory() as session:
            totals = await category_totals(session)
            mastered = await mastery_by_category(session, user_id)

        if not mastered:
            return get_ui_text("progress_no_lessons", language)

        lines = [get_ui_text("progress_title", language)]
        folders = order_folders(sorted({folder for folder, _ in mastered}))
        for folder in folders:
            lines.append("")
            lines.append(f"<b>{escape(folder_label(folder))}</b>")
            for (total_folder, category), total in sorted(totals.items()):
                if total_folder != folder:
                    continue
                done = min(mastered.get((folder, category), 0), total)
                percent = int(100 * done / total) if total else 0
                marker = "✅" if total and done >= total else "📖"
                lines.append(
                    f"{marker} {escape(category_label(category))} {progress_bar(done, total)} "
                    f"{percent}% ({done}/{total})"
                )
        return "\n".join(lines)

    async def handle_profile(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        event = self._event_from_message(update)
        if event is None:
            return

        state = await self._load_state(event.user_id)
        language_code = state.language_to if state else self._default_language
        language = get_language(language_code)

        lesson = get_ui_text("profile_none", language_code)
        if state is not None and state.category:
            async with self._session_factory() as session:
                total = await count_sentences(session, state.folder, state.category)
            lesson = (
                f"{escape(folder_label(state.folder))} / {escape(category_label(state.category))}"
                f" · {min(state.current_index + 1, total)}/{total}"
            )

        text = (
            f"{get_ui_text('profile_title', language_code)}\n\n"
            f"{get_ui_text('profile_language', language_code)}: {language.emoji} {escape(language.name)}\n"
            f"{get_ui_text('profile_lesson', language_code)}: {lesson}\n\n"
            f"{get_ui_text('change_language', language_code)}:"
        )
        await update.message.reply_text(
            text,
            parse_mode=ParseMode.HTML,
            reply_markup=build_language_keyboard(language_code),
        )

    async def handle_refresh(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Delete every mastery record of the user."""
        event = self._event_from_message(update)
        if event is None:
            return

        state = await self._load_state(event.user_id)
        language = state.language_to if state else self._default_language
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    removed = await clear_mastery(session, event.user_id)
        except Exception:
            LOGGER.exception("Failed to clear mastery records for user %s.", event.user_id)
            await update.message.reply_text(get_ui_text("error_occurred", language))
            return

        LOGGER.info("Cleared %s mastery records for user %s.", removed, event.user_id)
        await update.message.reply_text(f"🧹 {get_ui_text('results_cleared', language)} ({removed})")

    async def handle_help(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        if not update.message:
            return
        await update.message.reply_text(HELP_TEXT, parse_mode=ParseMode.HTML)

    async def handle_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        LOGGER.error("Unhandled error while processing update %s.", update, exc_info=context.error)
