from __future__ import annotations

import pytest

from src.db.sessions import (
    DEFAULT_FOLDER,
    SessionState,
    get_session_state,
    load_or_create_session_state,
    upsert_session_state,
)


@pytest.mark.asyncio
async def test_load_or_create_returns_unsaved_defaults(session_factory) -> None:
    async with session_factory() as session:
        state = await load_or_create_session_state(session, 42, "ua")
        assert await get_session_state(session, 42) is None

    assert state == SessionState(user_id=42, folder=DEFAULT_FOLDER, category="", language_to="ua")
    assert state.lesson_active is False
    assert state.last_message_id is None


@pytest.mark.asyncio
async def test_upsert_session_state_round_trips_every_field(session_factory) -> None:
    state = SessionState.fresh(42, "eng")
    state.category = "greetings"
    state.current_index = 2
    state.lesson_active = True
    state.translation_revealed = True
    state.last_message_id = 900
    state.last_message_has_audio = True
    state.last_folder = "basic"
    state.last_category = "greetings"
    state.favourite_index = 3

    async with session_factory() as session:
        async with session.begin():
            await upsert_session_state(session, state)

    async with session_factory() as session:
        stored = await get_session_state(session, 42)

    assert stored == state


@pytest.mark.asyncio
async def test_upsert_session_state_updates_existing_row(session_factory) -> None:
    state = SessionState.fresh(42, "eng")
    async with session_factory() as session:
        async with session.begin():
            await upsert_session_state(session, state)

    state.language_to = "kharkiv"
    state.current_index = 1
    state.last_message_id = None
    async with session_factory() as session:
        async with session.begin():
            await upsert_session_state(session, state)

    async with session_factory() as session:
        stored = await get_session_state(session, 42)

    assert stored.language_to == "kharkiv"
    assert stored.current_index == 1
    assert stored.last_message_id is None
