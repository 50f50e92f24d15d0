"""Read access to lesson content and import of lesson JSON files."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from . import Sentence


LOGGER = logging.getLogger(__name__)

# Keys used by lesson JSON files mapped to model attributes.
_FIELD_ALIASES = {
    "bg": "bg",
    "eng": "eng",
    "ru": "ru",
    "ua": "ua",
    "source": "source",
    "grammar": "grammar",
    "explanation": "explanation",
    "tag": "tag",
    "ruleEng": "rule_eng",
    "ruleRu": "rule_ru",
    "ruleUA": "rule_ua",
    "comparison": "comparison",
    "falseFriend": "false_friend",
    "audioUrl": "audio_url",
}


@dataclass(slots=True)
class ImportSummary:
    """Counts collected while importing a content directory."""

    categories: int = 0
    sentences: int = 0
    skipped_files: int = 0


async def get_sentence_by_index(
    session: AsyncSession,
    folder: str,
    category: str,
    index: int,
) -> Optional[Sentence]:
    """Return the sentence at the zero-based position within a category."""
    if index < 0:
        return None

    stmt = (
        select(Sentence)
        .where(Sentence.folder == folder, Sentence.category == category)
        .order_by(Sentence.position, Sentence.id)
        .offset(index)
        .limit(1)
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def count_sentences(session: AsyncSession, folder: str, category: str) -> int:
    """Return how many sentences a category holds."""
    stmt = select(func.count(Sentence.id)).where(
        Sentence.folder == folder,
        Sentence.category == category,
    )
    result = await session.execute(stmt)
    return int(result.scalar_one())


async def list_categories(session: AsyncSession, folder: str) -> List[str]:
    """Return the categories of a folder in import order."""
    stmt = (
        select(Sentence.category, func.min(Sentence.id).label("first_id"))
        .where(Sentence.folder == folder)
        .group_by(Sentence.category)
        .order_by("first_id")
    )
    result = await session.execute(stmt)
    return [row.category for row in result]


async def list_folders(session: AsyncSession) -> List[str]:
    """Return folders that currently have content."""
    stmt = select(Sentence.folder).distinct()
    result = await session.execute(stmt)
    return sorted(result.scalars().all())


async def category_totals(session: AsyncSession) -> Dict[Tuple[str, str], int]:
    """Return sentence counts keyed by ``(folder, category)``."""
    stmt = select(Sentence.folder, Sentence.category, func.count(Sentence.id)).group_by(
        Sentence.folder, Sentence.category
    )
    result = await session.execute(stmt)
    return {(folder, category): int(total) for folder, category, total in result}


async def list_sentences_without_audio(
    session: AsyncSession,
    folder: Optional[str] = None,
    limit: Optional[int] = None,
) -> Sequence[Sentence]:
    """Return sentences whose audio has not been generated yet."""
    stmt = select(Sentence).where(Sentence.audio_generated.is_(False)).order_by(Sentence.id)
    if folder:
        stmt = stmt.where(Sentence.folder == folder)
    if limit:
        stmt = stmt.limit(limit)
    result = await session.execute(stmt)
    return result.scalars().all()


def _extract_items(payload: Any) -> Optional[List[Dict[str, Any]]]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("items"), list):
        return payload["items"]
    return None


def _sentence_values(raw: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Map a raw JSON item to column values, or ``None`` when it has no Bulgarian text."""
    bg = raw.get("bg")
    if not isinstance(bg, str) or not bg.strip():
        return None

    values: Dict[str, Any] = {attribute: None for attribute in _FIELD_ALIASES.values()}
    values.update(eng="", ru="", ua="")
    for key, attribute in _FIELD_ALIASES.items():
        value = raw.get(key)
        if value is None:
            continue
        if attribute == "grammar":
            values[attribute] = [str(item) for item in value] if isinstance(value, list) else None
            continue
        values[attribute] = value.strip() if isinstance(value, str) else value
    return values


def _apply_values(record: Sentence, values: Dict[str, Any]) -> None:
    audio_url = values.pop("audio_url")
    text_changed = record.bg != values["bg"]
    for attribute, value in values.items():
        setattr(record, attribute, value)
    if audio_url:
        record.audio_url = audio_url
        record.audio_generated = True
    elif text_changed:
        # Generated audio no longer matches the sentence.
        record.audio_url = None
        record.audio_generated = False


async def replace_category(
    session: AsyncSession,
    folder: str,
    category: str,
    items: Iterable[Dict[str, Any]],
) -> int:
    """Make the category hold exactly the provided raw items, in order.

    Rows are matched by position and updated in place so sentence ids (and the
    mastery and favourite rows pointing at them) survive a re-import.
    """
    result = await session.execute(
        select(Sentence).where(Sentence.folder == folder, Sentence.category == category)
    )
    existing = {sentence.position: sentence for sentence in result.scalars()}

    position = 0
    for item_number, raw in enumerate(items):
        values = _sentence_values(raw) if isinstance(raw, dict) else None
        if values is None:
            LOGGER.debug("Skipping item %s in %s/%s without Bulgarian text.", item_number, folder, category)
            continue

        record = existing.pop(position, None)
        if record is None:
            record = Sentence(folder=folder, category=category, position=position)
            session.add(record)
        _apply_values(record, values)
        position += 1

    for stale in existing.values():
        await session.delete(stale)

    await session.flush()
    return position


async def import_content(session: AsyncSession, root: Path) -> ImportSummary:
    """Load ``<root>/<folder>/<category>.json`` files into the sentences table."""
    summary = ImportSummary()
    if not root.is_dir():
        raise RuntimeError(f"Content directory {root} does not exist.")

    for folder_path in sorted(path for path in root.iterdir() if path.is_dir()):
        folder = folder_path.name
        for file_path in sorted(folder_path.glob("*.json")):
            category = file_path.stem
            try:
                payload = json.loads(file_path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError):
                LOGGER.warning("Failed to read lesson file %s.", file_path, exc_info=True)
                summary.skipped_files += 1
                continue

            items = _extract_items(payload)
            if items is None:
                LOGGER.warning("Unexpected JSON structure in %s.", file_path)
                summary.skipped_files += 1
                continue

            inserted = await replace_category(session, folder, category, items)
            summary.categories += 1
            summary.sentences += inserted
            LOGGER.info("Imported %s sentences for %s/%s.", inserted, folder, category)

    return summary
