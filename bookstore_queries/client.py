"""
bookstore_queries.client
========================

A single explicitly owned connection to the document store. The driver
client is created when the context is entered and closed when it exits, so
every query in a run shares one connection with a guaranteed release::

    async with BookstoreClient(config) as client:
        facade = BookQueryFacade(client.books)
        ...
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from motor.motor_asyncio import AsyncIOMotorClient

from .config import BookstoreConfig

logger = logging.getLogger(__name__)


class BookstoreClient:
    """Async context manager around the Motor client.

    :param config: Connection settings.
    :param client_factory: Callable building the driver client from a URI;
        defaults to :class:`~motor.motor_asyncio.AsyncIOMotorClient`.
    """

    def __init__(
        self,
        config: BookstoreConfig,
        client_factory: Callable[..., Any] = AsyncIOMotorClient,
    ) -> None:
        self.config = config
        self._client_factory = client_factory
        self._client: Optional[Any] = None

    @property
    def is_open(self) -> bool:
        return self._client is not None

    def open(self) -> None:
        if self._client is not None:
            return
        # Motor connects lazily; no round trip happens here.
        self._client = self._client_factory(
            self.config.mongo_uri,
            serverSelectionTimeoutMS=self.config.timeout_ms,
        )
        logger.info(
            "Opened client for database '%s' (collection '%s')",
            self.config.database,
            self.config.collection,
        )

    def close(self) -> None:
        if self._client is None:
            return
        try:
            self._client.close()
        finally:
            self._client = None
            logger.info("Closed client for database '%s'", self.config.database)

    @property
    def database(self) -> Any:
        if self._client is None:
            raise RuntimeError("BookstoreClient is not open")
        return self._client[self.config.database]

    @property
    def books(self) -> Any:
        """The configured books collection."""
        return self.database[self.config.collection]

    async def __aenter__(self) -> "BookstoreClient":
        self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()
