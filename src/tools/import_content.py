"""Import lesson JSON files into the database.

Usage::

    python -m src.tools.import_content [CONTENT_DIR]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from pathlib import Path
from typing import Optional, Sequence

from src.app.settings import DEFAULT_CONTENT_DIR
from src.db import get_engine, get_session_factory, run_migrations_if_needed
from src.db.content import ImportSummary, import_content


LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Import <folder>/<category>.json lesson files.")
    parser.add_argument(
        "content_dir",
        nargs="?",
        type=Path,
        default=Path(os.getenv("CONTENT_DIR") or DEFAULT_CONTENT_DIR),
        help="Directory holding one sub-directory per folder (default: CONTENT_DIR or ./data).",
    )
    return parser


async def run_import(content_dir: Path) -> ImportSummary:
    try:
        async with get_session_factory()() as session:
            async with session.begin():
                return await import_content(session, content_dir)
    finally:
        await get_engine().dispose()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )

    run_migrations_if_needed()
    summary = asyncio.run(run_import(args.content_dir))
    print(
        f"Imported {summary.sentences} sentences in {summary.categories} categories "
        f"({summary.skipped_files} files skipped)."
    )
    return 0 if summary.skipped_files == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
