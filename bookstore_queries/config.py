"""
bookstore_queries.config
========================

Centralized configuration. This is the only module that reads environment
variables; everything else receives a :class:`BookstoreConfig`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class BookstoreConfig:
    mongo_uri: str = "mongodb://localhost:27017"
    database: str = "plp_bookstore"
    collection: str = "books"
    log_level: str = "INFO"
    # Server selection timeout handed to the driver
    timeout_ms: int = 5000

    def override(self, **changes: Optional[str]) -> "BookstoreConfig":
        """Return a copy with every non-``None`` value in ``changes`` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def _getenv(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name, default)
    if v is None:
        return None
    v = v.strip()
    return v if v else None


def get_config() -> BookstoreConfig:
    """
    Build the configuration from the environment.
    - Loads `.env` if present, without overriding variables already set
    - Falls back to the defaults on :class:`BookstoreConfig`
    """
    load_dotenv(override=False)
    defaults = BookstoreConfig()

    timeout = _getenv("MONGO_TIMEOUT_MS")
    try:
        timeout_ms = int(timeout) if timeout else defaults.timeout_ms
    except ValueError as exc:
        raise ValueError(f"MONGO_TIMEOUT_MS must be an integer, got {timeout!r}") from exc

    return BookstoreConfig(
        mongo_uri=_getenv("MONGO_URI") or defaults.mongo_uri,
        database=_getenv("MONGO_DB") or defaults.database,
        collection=_getenv("BOOKS_COLLECTION") or defaults.collection,
        log_level=(_getenv("LOG_LEVEL") or defaults.log_level).upper(),
        timeout_ms=timeout_ms,
    )
