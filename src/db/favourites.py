"""Helpers for bookmarking sentences."""

from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from . import Favourite, Sentence


async def add_favourite(session: AsyncSession, user_id: int, sentence: Sentence) -> bool:
    """Bookmark a sentence. Returns ``False`` when it was already saved."""
    stmt = select(Favourite.id).where(
        Favourite.user_id == user_id,
        Favourite.sentence_id == sentence.id,
    )
    result = await session.execute(stmt)
    if result.scalar_one_or_none() is not None:
        return False

    session.add(
        Favourite(
            user_id=user_id,
            sentence_id=sentence.id,
            folder=sentence.folder,
            category=sentence.category,
        )
    )
    await session.flush()
    return True


async def list_favourites(session: AsyncSession, user_id: int) -> Sequence[Favourite]:
    """Return the user's favourites, oldest first, with sentences loaded."""
    stmt = (
        select(Favourite)
        .options(selectinload(Favourite.sentence))
        .where(Favourite.user_id == user_id)
        .order_by(Favourite.added_at, Favourite.id)
    )
    result = await session.execute(stmt)
    return result.scalars().all()


async def count_favourites(session: AsyncSession, user_id: int) -> int:
    result = await session.execute(select(func.count(Favourite.id)).where(Favourite.user_id == user_id))
    return int(result.scalar_one())


async def get_favourite_at(session: AsyncSession, user_id: int, index: int) -> Optional[Favourite]:
    """Return the favourite at a zero-based position in browsing order."""
    if index < 0:
        return None
    stmt = (
        select(Favourite)
        .options(selectinload(Favourite.sentence))
        .where(Favourite.user_id == user_id)
        .order_by(Favourite.added_at, Favourite.id)
        .offset(index)
        .limit(1)
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def remove_favourite(session: AsyncSession, user_id: int, sentence_id: int) -> bool:
    """Delete a bookmark. Returns whether a row was removed."""
    result = await session.execute(
        delete(Favourite).where(
            Favourite.user_id == user_id,
            Favourite.sentence_id == sentence_id,
        )
    )
    return bool(result.rowcount)
