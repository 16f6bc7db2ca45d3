"""Command line entry point: ``python -m bookstore_queries``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from pymongo.errors import PyMongoError

from .client import BookstoreClient
from .config import BookstoreConfig, get_config
from .demo import run_demo
from .facade import BookQueryFacade
from .report import Printer

logger = logging.getLogger("bookstore_queries")


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger once; repeated calls keep existing handlers."""
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=getattr(logging, level.upper(), logging.INFO),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            stream=sys.stderr,
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bookstore-queries",
        description="Run the bookstore query demonstration against MongoDB.",
    )
    parser.add_argument("--uri", help="MongoDB connection URI (env MONGO_URI)")
    parser.add_argument("--db", help="database name (env MONGO_DB)")
    parser.add_argument("--collection", help="books collection (env BOOKS_COLLECTION)")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    return parser


async def run(config: BookstoreConfig, printer: Optional[Printer] = None) -> None:
    async with BookstoreClient(config) as client:
        await run_demo(BookQueryFacade(client.books), printer or Printer())


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = get_config().override(
        mongo_uri=args.uri,
        database=args.db,
        collection=args.collection,
        log_level="DEBUG" if args.debug else None,
    )
    setup_logging(config.log_level)
    try:
        asyncio.run(run(config))
    except PyMongoError as exc:
        logger.error("Query run aborted: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
