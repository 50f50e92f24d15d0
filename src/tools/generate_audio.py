"""Generate inline audio for sentences that have none yet.

Usage::

    python -m src.tools.generate_audio [FOLDER] [--limit N]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Optional, Sequence

from openai import AsyncOpenAI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.app.settings import SpeechSettings
from src.db import Sentence, get_engine, get_session_factory
from src.db.content import list_sentences_without_audio
from src.services import build_openai_client, synthesize_speech, to_data_url


LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class AudioGenerationSummary:
    generated: int = 0
    failed: int = 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Synthesize audio for sentences without it.")
    parser.add_argument("folder", nargs="?", help="Only process sentences of this folder.")
    parser.add_argument("--limit", type=int, default=None, help="Maximum number of sentences to process.")
    return parser


async def generate_missing_audio(
    session_factory: async_sessionmaker[AsyncSession],
    client: AsyncOpenAI,
    settings: SpeechSettings,
    folder: Optional[str] = None,
    limit: Optional[int] = None,
) -> AudioGenerationSummary:
    """Fill ``audio_url`` for pending sentences, one commit per sentence."""
    summary = AudioGenerationSummary()
    async with session_factory() as session:
        pending = list(await list_sentences_without_audio(session, folder=folder, limit=limit))

    LOGGER.info("Generating audio for %s sentences.", len(pending))
    for sentence in pending:
        try:
            audio = await synthesize_speech(client, sentence.bg, settings.model, settings.voice)
        except Exception:
            LOGGER.exception("Speech synthesis failed for sentence %s.", sentence.id)
            summary.failed += 1
            continue

        async with session_factory() as session:
            async with session.begin():
                record = await session.get(Sentence, sentence.id)
                if record is None:
                    LOGGER.warning("Sentence %s disappeared before audio was stored.", sentence.id)
                    summary.failed += 1
                    continue
                record.audio_url = to_data_url(audio)
                record.audio_generated = True
        summary.generated += 1
        LOGGER.info("Stored audio for sentence %s (%s/%s).", sentence.id, sentence.folder, sentence.category)

    return summary


async def _run(folder: Optional[str], limit: Optional[int]) -> AudioGenerationSummary:
    settings = SpeechSettings.from_env()
    client = build_openai_client(settings.openai_api_key)
    try:
        return await generate_missing_audio(get_session_factory(), client, settings, folder, limit)
    finally:
        await client.close()
        await get_engine().dispose()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.limit is not None and args.limit < 1:
        raise SystemExit("--limit must be a positive integer.")
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )

    summary = asyncio.run(_run(args.folder, args.limit))
    print(f"Generated audio for {summary.generated} sentences ({summary.failed} failed).")
    return 0 if summary.failed == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
