"""
Ingestion CLI.

Usage:
    python -m portfolio_chat.scripts.ingest [--dry-run] [--show-index]

Extracts the portfolio facts, chunks and embeds them, and replaces every
stored record. With --dry-run nothing is written.

Dependencies: argparse, portfolio_chat.application
System role: Offline ingestion entry point
"""

import argparse
import asyncio
import json
import logging
import sys

from portfolio_chat.application.context import AppContext
from portfolio_chat.configs import get_settings
from portfolio_chat.core.exceptions import PortfolioChatException
from portfolio_chat.models.ingestion import IngestionReport
from portfolio_chat.observability.logger import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Ingest portfolio content into the vector store")
    parser.add_argument("--dry-run", action="store_true", help="Extract, chunk and embed without writing")
    parser.add_argument("--show-index", action="store_true", help="Print the vector index definition")
    return parser


async def run_ingestion(context: AppContext, dry_run: bool = False) -> IngestionReport:
    """Connect, ingest and always release the store."""
    await context.startup()
    try:
        return await context.pipeline.run(dry_run=dry_run)
    finally:
        await context.close()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)

    context = AppContext(settings)
    if args.show_index:
        print(json.dumps(context.vector_store.index_definition(), indent=2))

    try:
        report = asyncio.run(run_ingestion(context, dry_run=args.dry_run))
    except PortfolioChatException as e:
        logger.error(f"{__name__}:main - Ingestion failed: {e}")
        return 1

    print(report.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
