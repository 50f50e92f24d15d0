from __future__ import annotations

from collections import deque
from typing import Any, Deque, Dict, List, Optional, Sequence, Tuple

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from src.db import Base
from src.db.content import replace_category
from src.bot.transport import MessageContent, TransportError


GREETINGS = [
    {"bg": "Здравей!", "eng": "Hello!", "ru": "Привет!", "ua": "Привіт!"},
    {"bg": "Добро утро.", "eng": "Good morning.", "ru": "Доброе утро.", "ua": "Доброго ранку."},
    {"bg": "Довиждане.", "eng": "Goodbye.", "ru": "До свидания.", "ua": "До побачення."},
]


@pytest_asyncio.fixture
async def session_factory() -> async_sessionmaker:
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", future=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False)
    try:
        yield factory
    finally:
        await engine.dispose()


@pytest.fixture
def seed_category(session_factory):
    async def _seed(
        folder: str = "basic",
        category: str = "greetings",
        items: Optional[Sequence[Dict[str, Any]]] = None,
    ) -> int:
        async with session_factory() as session:
            async with session.begin():
                return await replace_category(session, folder, category, list(items or GREETINGS))

    return _seed


class RecordingTransport:
    """In-memory transport that records every call made by the lesson engine."""

    def __init__(self) -> None:
        self.sent: List[Tuple[int, int, MessageContent]] = []
        self.edits: List[Tuple[int, int, MessageContent, bool]] = []
        self.deleted: List[Tuple[int, int]] = []
        self.acks: List[Tuple[str, Optional[str], bool]] = []
        self.calls: List[str] = []
        self.edit_results: Deque[bool] = deque()
        self.fail_edits = False
        self.fail_sends = False
        self.fail_audio_sends = False
        self.fail_deletes = False
        self._next_id = 100

    async def send(self, chat_id: int, content: MessageContent) -> int:
        self.calls.append("send")
        if self.fail_sends or (self.fail_audio_sends and content.audio is not None):
            raise TransportError("send rejected")
        self._next_id += 1
        self.sent.append((chat_id, self._next_id, content))
        return self._next_id

    async def edit(
        self,
        chat_id: int,
        message_id: int,
        content: MessageContent,
        has_attachment: bool = False,
    ) -> bool:
        self.calls.append("edit")
        self.edits.append((chat_id, message_id, content, has_attachment))
        if self.edit_results:
            return self.edit_results.popleft()
        return not self.fail_edits

    async def delete(self, chat_id: int, message_id: int) -> bool:
        self.calls.append("delete")
        if self.fail_deletes:
            return False
        self.deleted.append((chat_id, message_id))
        return True

    async def acknowledge(self, event_id: str, text: Optional[str] = None, show_alert: bool = False) -> None:
        self.calls.append("ack")
        self.acks.append((event_id, text, show_alert))

    @property
    def ack_texts(self) -> List[Optional[str]]:
        return [text for _, text, _ in self.acks]


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()
