"""Localized interface strings."""

from __future__ import annotations

from typing import Dict, Optional


UI_TEXT: Dict[str, Dict[str, str]] = {
    "eng": {
        "welcome_back": "Welcome back! 👋",
        "active_lesson": "You have an active lesson in",
        "what_to_do": "What would you like to do?",
        "resume_lesson": "✅ Resume lesson",
        "start_new": "❌ Start new lesson",
        "select_language": "Select your learning language:",
        "language_eng": "🇬🇧 English",
        "language_ua": "🇺🇦 Ukrainian",
        "language_kharkiv": "🎭 Kharkiv (Ukrainian Dialect)",
        "language_set": "Language saved",
        "select_level": "Select your learning level:",
        "select_category": "Select a lesson category:",
        "no_categories": "No categories available",
        "show_translation": "📖 Show translation",
        "add_favourite": "⭐",
        "skip_next": "⏭️ Skip to next",
        "change_folder": "📚 Change folder",
        "main_menu": "🏠 Main menu",
        "previous": "⬅️ Previous",
        "next": "Next ➡️",
        "exit_lesson": "❌ Exit",
        "choose_another": "📚 Choose another category",
        "lesson_started": "🎓 Lesson started! Good luck!",
        "lesson_resumed": "✅ Lesson resumed",
        "lesson_exited": "👋 Lesson closed",
        "translation_revealed": "🎯 Translation revealed! 👀",
        "next_clicked": "➡️ Next!",
        "previous_clicked": "⬅️ Previous!",
        "congratulations": "🎉 CONGRATULATIONS! 🎉",
        "lesson_completed": "You completed the",
        "sentences_mastered": "sentences mastered",
        "great_job": "💪 Great job! Ready for the next category?",
        "at_beginning": "✨ You're at the beginning!",
        "no_sentences": "❌ No sentences available.",
        "no_active_lesson": "No active lesson. Use /start to begin.",
        "error_occurred": "Error occurred",
        "progress_title": "📊 <b>Your Learning Progress</b>",
        "progress_no_lessons": "📚 No lessons started yet. Use /start to begin!",
        "profile_title": "👤 <b>Your profile</b>",
        "profile_language": "Language",
        "profile_lesson": "Current lesson",
        "profile_none": "none",
        "change_language": "Change language",
        "results_cleared": "All mastery results cleared!",
        "favourite_added": "⭐ Added to favourites",
        "favourite_exists": "⭐ Already in favourites",
        "favourites_empty": "⭐ You have no favourites yet. Tap ⭐ during a lesson to save a sentence.",
        "favourites_title": "⭐ Favourite",
        "favourite_removed": "🗑 Removed from favourites",
        "listen": "🎙️ Listen",
        "remove": "🗑 Remove",
        "fav_next": "⏭ Next",
        "no_audio": "🔇 No audio for this sentence yet",
    },
    "kharkiv": {
        "welcome_back": "Добро пожаловать назад! 👋",
        "active_lesson": "У вас есть активный урок в",
        "what_to_do": "Шо вы хотели бы делать?",
        "resume_lesson": "✅ Продолжить урок",
        "start_new": "❌ Начать новый урок",
        "select_language": "Выберите язык обучения:",
        "language_eng": "🇬🇧 Английский",
        "language_ua": "🇺🇦 Украинский",
        "language_kharkiv": "🎭 Харьков (слобожанский говор)",
        "language_set": "Язык сохранён",
        "select_level": "Выберите уровень обучения:",
        "select_category": "Выберите категорию урока:",
        "no_categories": "Категории недоступны",
        "show_translation": "📖 Показать перевод",
        "skip_next": "⏭️ Перейти к следующему",
        "change_folder": "📚 Сменить уровень",
        "main_menu": "🏠 Главное меню",
        "previous": "⬅️ Предыдущий",
        "next": "Следующий ➡️",
        "exit_lesson": "❌ Выйти",
        "choose_another": "📚 Выбрать другую категорию",
        "lesson_started": "🎓 Урок начался! Удачи!",
        "lesson_resumed": "✅ Урок продолжен",
        "lesson_exited": "👋 Урок закрыт",
        "translation_revealed": "🎯 Перевод раскрыт! 👀",
        "next_clicked": "➡️ Дальше!",
        "previous_clicked": "⬅️ Назад!",
        "congratulations": "🎉 ПОЗДРАВЛЯЕМ! 🎉",
        "lesson_completed": "Вы завершили",
        "sentences_mastered": "предложений освоено",
        "great_job": "💪 Отличная работа! Готовы к следующей категории?",
        "at_beginning": "✨ Вы в начале!",
        "no_sentences": "❌ Нет доступных предложений.",
        "no_active_lesson": "Нет активного урока. Используйте /start.",
        "error_occurred": "Произошла ошибка",
        "progress_title": "📊 <b>Ваш прогресс обучения</b>",
        "progress_no_lessons": "📚 Уроки еще не начаты. Используйте /start для начала!",
        "profile_title": "👤 <b>Ваш профиль</b>",
        "profile_language": "Язык",
        "profile_lesson": "Текущий урок",
        "profile_none": "нет",
        "change_language": "Измените язык",
        "results_cleared": "Все результаты мастерства очищены!",
        "favourite_added": "⭐ Добавлено в избранное",
        "favourite_exists": "⭐ Уже в избранном",
        "favourites_empty": "⭐ В избранном пока пусто. Нажмите ⭐ во время урока.",
        "favourites_title": "⭐ Избранное",
        "favourite_removed": "🗑 Удалено из избранного",
        "listen": "🎙️ Слушать",
        "remove": "🗑 Удалить",
        "fav_next": "⏭ Дальше",
        "no_audio": "🔇 Для этого предложения пока нет аудио",
    },
    "ua": {
        "welcome_back": "Ласкаво просимо назад! 👋",
        "active_lesson": "У вас є активний урок у",
        "what_to_do": "Що б ви хотіли робити?",
        "resume_lesson": "✅ Продовжити урок",
        "start_new": "❌ Почати новий урок",
        "select_language": "Виберіть мову навчання:",
        "language_eng": "🇬🇧 Англійська",
        "language_ua": "🇺🇦 Українська",
        "language_kharkiv": "🎭 Харків (український діалект)",
        "language_set": "Мову збережено",
        "select_level": "Виберіть рівень навчання:",
        "select_category": "Виберіть категорію уроку:",
        "no_categories": "Категорії недоступні",
        "show_translation": "📖 Показати переклад",
        "skip_next": "⏭️ Перейти до наступного",
        "change_folder": "📚 Змінити рівень",
        "main_menu": "🏠 Головне меню",
        "previous": "⬅️ Попередній",
        "next": "Наступний ➡️",
        "exit_lesson": "❌ Вийти",
        "choose_another": "📚 Вибрати іншу категорію",
        "lesson_started": "🎓 Урок розпочався! Удачі!",
        "lesson_resumed": "✅ Урок продовжено",
        "lesson_exited": "👋 Урок закрито",
        "translation_revealed": "🎯 Переклад розкрито! 👀",
        "next_clicked": "➡️ Далі!",
        "previous_clicked": "⬅️ Назад!",
        "congratulations": "🎉 ВІТАЄМО! 🎉",
        "lesson_completed": "Ви завершили",
        "sentences_mastered": "речення засвоєно",
        "great_job": "💪 Чудова робота! Готові до наступної категорії?",
        "at_beginning": "✨ Ви на початку!",
        "no_sentences": "❌ Немає доступних речень.",
        "no_active_lesson": "Немає активного уроку. Використайте /start.",
        "error_occurred": "Сталася помилка",
        "progress_title": "📊 <b>Ваш прогрес навчання</b>",
        "progress_no_lessons": "📚 Уроки ще не розпочаті. Використайте /start для початку!",
        "profile_title": "👤 <b>Ваш профіль</b>",
        "profile_language": "Мова",
        "profile_lesson": "Поточний урок",
        "profile_none": "немає",
        "change_language": "Змініть мову",
        "results_cleared": "Всі результати мастерства очищено!",
        "favourite_added": "⭐ Додано до улюблених",
        "favourite_exists": "⭐ Вже в улюблених",
        "favourites_empty": "⭐ Улюблених поки немає. Натисніть ⭐ під час уроку.",
        "favourites_title": "⭐ Улюблене",
        "favourite_removed": "🗑 Видалено з улюблених",
        "listen": "🎙️ Слухати",
        "remove": "🗑 Видалити",
        "fav_next": "⏭ Далі",
        "no_audio": "🔇 Для цього речення ще немає аудіо",
    },
}

HELP_TEXT = (
    "<b>📚 Bulgarian Learning Bot - Quick Guide</b>\n\n"
    "<b>🚀 Getting Started</b>\n"
    "<code>/start</code> - Continue where you left off or pick a new lesson. "
    "Sets your target language on first run.\n"
    "<code>/profile</code> - View or change your target language.\n\n"
    "<b>📖 Learning</b>\n"
    "<code>/favourites</code> - Practice the sentences you saved with ⭐.\n\n"
    "<b>📊 Progress &amp; Settings</b>\n"
    "<code>/progress</code> - Completion per category.\n"
    "<code>/refresh</code> - Clear all learning results.\n\n"
    "<b>❓ Help</b>\n"
    "<code>/help</code> - Show this message.\n\n"
    "<b>How to Use:</b>\n"
    "1️⃣ Send <code>/start</code> and choose English, Ukrainian or the Kharkiv dialect\n"
    "2️⃣ Select a learning level and a category\n"
    "3️⃣ Tap the spoiler or <b>Show translation</b> to reveal the answer\n"
    "4️⃣ Move on with Previous/Next, every sentence you pass is marked as learned\n"
    "5️⃣ Save sentences with ⭐ for later review\n\n"
    "Enjoy learning Bulgarian! 🇧🇬"
)


def get_ui_text(key: str, language: Optional[str] = "eng") -> str:
    """Return the localized string, falling back to English and then to the key."""
    translations = UI_TEXT.get(language or "eng", UI_TEXT["eng"])
    if key in translations:
        return translations[key]
    return UI_TEXT["eng"].get(key, key)
