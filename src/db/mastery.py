"""Helpers for recording per-sentence review status."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Iterable, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from . import SentenceMastery


MASTERY_STATUSES = ("new", "learning", "learned", "known")
MASTERED_STATUSES = ("learned", "known")


def _apply_review(record: SentenceMastery, status: str, now: datetime) -> None:
    record.status = status
    record.review_count = (record.review_count or 0) + 1
    record.last_reviewed_at = now
    record.updated_at = now
    if status in MASTERED_STATUSES and record.mastered_at is None:
        record.mastered_at = now


async def _find_record(session: AsyncSession, user_id: int, sentence_id: int) -> Optional[SentenceMastery]:
    stmt = select(SentenceMastery).where(
        SentenceMastery.user_id == user_id,
        SentenceMastery.sentence_id == sentence_id,
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def upsert_mastery(
    session: AsyncSession,
    user_id: int,
    sentence_id: int,
    folder: str,
    category: str,
    status: str = "learned",
    now: Optional[datetime] = None,
) -> SentenceMastery:
    """Record one review of a sentence, keeping a single row per user and sentence."""
    if status not in MASTERY_STATUSES:
        raise ValueError(f"Unknown mastery status: {status}")
    if now is None:
        now = datetime.now(timezone.utc)

    record = await _find_record(session, user_id, sentence_id)
    if record is None:
        record = SentenceMastery(
            user_id=user_id,
            sentence_id=sentence_id,
            folder=folder,
            category=category,
            review_count=0,
            created_at=now,
        )
        session.add(record)

    _apply_review(record, status, now)
    await session.flush()
    return record


async def count_mastery(
    session: AsyncSession,
    user_id: int,
    folder: str,
    category: str,
    statuses: Iterable[str] = MASTERED_STATUSES,
) -> int:
    """Count the user's records in a category that have one of the statuses."""
    stmt = select(func.count(SentenceMastery.id)).where(
        SentenceMastery.user_id == user_id,
        SentenceMastery.folder == folder,
        SentenceMastery.category == category,
        SentenceMastery.status.in_(list(statuses)),
    )
    result = await session.execute(stmt)
    return int(result.scalar_one())


async def mastery_by_category(
    session: AsyncSession,
    user_id: int,
    statuses: Iterable[str] = MASTERED_STATUSES,
) -> Dict[Tuple[str, str], int]:
    """Return mastered counts keyed by ``(folder, category)``."""
    stmt = (
        select(SentenceMastery.folder, SentenceMastery.category, func.count(SentenceMastery.id))
        .where(
            SentenceMastery.user_id == user_id,
            SentenceMastery.status.in_(list(statuses)),
        )
        .group_by(SentenceMastery.folder, SentenceMastery.category)
    )
    result = await session.execute(stmt)
    return {(folder, category): int(total) for folder, category, total in result}


async def clear_mastery(session: AsyncSession, user_id: int) -> int:
    """Delete every mastery record of a user and return how many were removed."""
    result = await session.execute(delete(SentenceMastery).where(SentenceMastery.user_id == user_id))
    return int(result.rowcount or 0)
