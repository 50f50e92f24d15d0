"""Persistence helpers for per-user lesson sessions."""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from . import LessonSession


DEFAULT_FOLDER = "basic"


@dataclass(slots=True)
class SessionState:
    """Detached snapshot of a user's lesson session."""

    user_id: int
    folder: str
    category: str
    language_to: str
    current_index: int = 0
    lesson_active: bool = False
    translation_revealed: bool = False
    last_message_id: Optional[int] = None
    last_message_has_audio: bool = False
    last_folder: Optional[str] = None
    last_category: Optional[str] = None
    favourite_index: int = 0

    @classmethod
    def fresh(cls, user_id: int, language_to: str) -> "SessionState":
        """Return the defaults used for a user seen for the first time."""
        return cls(user_id=user_id, folder=DEFAULT_FOLDER, category="", language_to=language_to)

    @classmethod
    def from_model(cls, record: LessonSession) -> "SessionState":
        return cls(**{field.name: getattr(record, field.name) for field in fields(cls)})


async def get_session_state(session: AsyncSession, user_id: int) -> Optional[SessionState]:
    """Return the stored session for a user, if any."""
    record = await session.get(LessonSession, user_id)
    if record is None:
        return None
    return SessionState.from_model(record)


async def upsert_session_state(session: AsyncSession, state: SessionState) -> None:
    """Write the whole session snapshot, creating the row when missing."""
    values = {field.name: getattr(state, field.name) for field in fields(state)}
    record = await session.get(LessonSession, state.user_id)

    if record is None:
        now = datetime.now(timezone.utc)
        session.add(LessonSession(**values, created_at=now, updated_at=now))
        await session.flush()
        return

    for name, value in values.items():
        setattr(record, name, value)
    record.updated_at = datetime.now(timezone.utc)
    await session.flush()


async def load_or_create_session_state(
    session: AsyncSession,
    user_id: int,
    language_to: str,
) -> SessionState:
    """Return the stored session or a fresh, unsaved one."""
    state = await get_session_state(session, user_id)
    if state is None:
        return SessionState.fresh(user_id, language_to)
    return state
