"""
bookstore_queries.facade
========================

:class:`BookQueryFacade` names one operation per demonstrated capability of
the books collection: filtered finds, a price update, a delete, projection,
sorting, pagination, grouped aggregations, index management and query
explanation.

Every operation is a thin pass-through to the driver. Read operations that
return several books are async generators, so results stream from the
store's cursor and a second call simply re-issues the query. Store errors
propagate unchanged, with a single exception: an index whose definition
conflicts with an existing one is logged as a warning in
:meth:`BookQueryFacade.ensure_index` instead of aborting the caller.
"""

from __future__ import annotations

import logging
from typing import (
    Any,
    AsyncIterator,
    Dict,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Type,
    TypeVar,
    Union,
)

from pymongo import ASCENDING, DESCENDING
from pymongo.errors import OperationFailure

from . import pipelines
from .models import (
    AuthorRanking,
    Book,
    CollectionSummary,
    DecadeGroup,
    ExplainSummary,
    Extremes,
    GenrePriceStats,
    GenreProfile,
    IndexInfo,
    PartialBook,
    StockStatus,
)

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")
Direction = Union[int, str]
KeySpec = Union[Mapping[str, Direction], Sequence[Tuple[str, Direction]]]

# Server error codes raised when an index definition clashes with an existing one
INDEX_CONFLICT_CODES = frozenset({68, 85, 86})


def normalize_keys(keys: KeySpec) -> List[Tuple[str, Direction]]:
    """Turn ``{"title": 1}`` or ``[("title", 1)]`` into a list of pairs.

    String directions (``"text"``, ``"2dsphere"``, ...) are passed through.
    """
    pairs = list(keys.items()) if isinstance(keys, Mapping) else [tuple(k) for k in keys]
    if not pairs:
        raise ValueError("index key specification must not be empty")
    return [
        (str(field), direction if isinstance(direction, str) else int(direction))
        for field, direction in pairs
    ]


def _check_direction(direction: int) -> int:
    if direction not in (ASCENDING, DESCENDING):
        raise ValueError(f"sort direction must be 1 or -1, got {direction!r}")
    return direction


def _find_index_name(stage: Optional[Dict[str, Any]]) -> Optional[str]:
    # IXSCAN usually sits below FETCH/SORT/LIMIT, so walk the input stages
    while stage:
        if stage.get("indexName"):
            return stage["indexName"]
        children = stage.get("inputStages")
        if children:
            for child in children:
                name = _find_index_name(child)
                if name:
                    return name
            return None
        stage = stage.get("inputStage")
    return None


class BookQueryFacade:
    """Named queries over one books collection.

    :param collection: A Motor collection (or anything exposing the same
        async API).
    """

    def __init__(self, collection: Any) -> None:
        self.collection = collection

    # -- internal helpers -------------------------------------------------

    async def _stream(
        self,
        model: Type[RecordT],
        query_filter: Dict[str, Any],
        projection: Optional[Dict[str, Any]] = None,
        **options: Any,
    ) -> AsyncIterator[RecordT]:
        logger.debug("find %s projection=%s options=%s", query_filter, projection, options)
        cursor = self.collection.find(query_filter, projection, **options)
        async for doc in cursor:
            yield model.model_validate(doc)

    async def _aggregate(
        self, model: Type[RecordT], pipeline: pipelines.Pipeline
    ) -> AsyncIterator[RecordT]:
        logger.debug("aggregate %s", pipeline)
        async for doc in self.collection.aggregate(pipeline):
            yield model.model_validate(doc)

    async def _find_one_sorted(self, key: str, direction: int) -> Optional[Book]:
        doc = await self.collection.find_one({}, sort=[(key, direction)])
        return Book.model_validate(doc) if doc is not None else None

    # -- basic CRUD -------------------------------------------------------

    def find_by_genre(self, genre: str) -> AsyncIterator[Book]:
        return self._stream(Book, {"genre": genre})

    def find_published_after(self, year: int) -> AsyncIterator[Book]:
        return self._stream(Book, {"published_year": {"$gt": year}})

    def find_by_author(self, author: str) -> AsyncIterator[Book]:
        return self._stream(Book, {"author": author})

    async def find_by_title(self, title: str) -> Optional[Book]:
        doc = await self.collection.find_one({"title": title})
        return Book.model_validate(doc) if doc is not None else None

    async def insert_book(self, book: Book) -> str:
        result = await self.collection.insert_one(book.model_dump(exclude_none=True))
        logger.debug("inserted '%s' as %s", book.title, result.inserted_id)
        return str(result.inserted_id)

    async def update_price(self, title: str, price: float) -> int:
        """Set the price of the book titled ``title``.

        Returns the modified count: 0 when no book matches (or the price is
        already ``price``), 1 otherwise.
        """
        result = await self.collection.update_one(
            {"title": title}, {"$set": {"price": price}}
        )
        return result.modified_count

    async def delete_by_title(self, title: str) -> int:
        result = await self.collection.delete_one({"title": title})
        return result.deleted_count

    async def count_books(self, query_filter: Optional[Dict[str, Any]] = None) -> int:
        return await self.collection.count_documents(query_filter or {})

    # -- advanced queries -------------------------------------------------

    def find_in_stock_after(self, year: int) -> AsyncIterator[Book]:
        return self._stream(Book, {"in_stock": True, "published_year": {"$gt": year}})

    def find_with_projection(
        self, fields: Sequence[str], limit: int = 0
    ) -> AsyncIterator[PartialBook]:
        """Return only ``fields`` of each book; ``_id`` is dropped unless listed."""
        projection: Dict[str, Any] = {field: 1 for field in fields}
        if "_id" not in projection:
            projection["_id"] = 0
        return self._stream(PartialBook, {}, projection, limit=limit)

    def find_sorted(
        self, sort_key: str, direction: int = ASCENDING, limit: int = 0
    ) -> AsyncIterator[Book]:
        sort = [(sort_key, _check_direction(direction))]
        return self._stream(Book, {}, sort=sort, limit=limit)

    def find_page(
        self, page_size: int, page_number: int, sort_key: Optional[str] = None
    ) -> AsyncIterator[Book]:
        """Return page ``page_number`` (1-based) of ``page_size`` books."""
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        if page_number < 1:
            raise ValueError("page_number must be >= 1")
        return self._stream(
            Book,
            {},
            sort=self._page_order(sort_key),
            skip=page_size * (page_number - 1),
            limit=page_size,
        )

    def find_all(self, sort_key: Optional[str] = None) -> AsyncIterator[Book]:
        """Every book, in the same order :meth:`find_page` uses."""
        return self._stream(Book, {}, sort=self._page_order(sort_key))

    @staticmethod
    def _page_order(sort_key: Optional[str]) -> List[Tuple[str, int]]:
        order = [(sort_key, ASCENDING)] if sort_key and sort_key != "_id" else []
        order.append(("_id", ASCENDING))
        return order

    # -- aggregations -----------------------------------------------------

    def average_price_by_genre(self) -> AsyncIterator[GenrePriceStats]:
        return self._aggregate(GenrePriceStats, pipelines.average_price_by_genre())

    def books_by_author_ranked(self) -> AsyncIterator[AuthorRanking]:
        return self._aggregate(AuthorRanking, pipelines.books_by_author_ranked())

    def books_by_decade(self) -> AsyncIterator[DecadeGroup]:
        return self._aggregate(DecadeGroup, pipelines.books_by_decade())

    def stock_breakdown(self) -> AsyncIterator[StockStatus]:
        return self._aggregate(StockStatus, pipelines.stock_breakdown())

    def genre_analysis(self) -> AsyncIterator[GenreProfile]:
        return self._aggregate(GenreProfile, pipelines.genre_analysis())

    async def collection_summary(self) -> Optional[CollectionSummary]:
        """Whole-collection statistics, or ``None`` for an empty collection."""
        pipeline = pipelines.collection_summary()
        logger.debug("aggregate %s", pipeline)
        docs = await self.collection.aggregate(pipeline).to_list(length=1)
        if not docs:
            return None
        summary = CollectionSummary.model_validate(docs[0])
        # some engines emit a null-filled group for an empty input
        return summary if summary.total_books else None

    async def price_extremes(self) -> Optional[Extremes]:
        highest = await self._find_one_sorted("price", DESCENDING)
        lowest = await self._find_one_sorted("price", ASCENDING)
        if highest is None or lowest is None:
            return None
        return Extremes(highest=highest, lowest=lowest)

    async def length_extremes(self) -> Optional[Extremes]:
        highest = await self._find_one_sorted("pages", DESCENDING)
        lowest = await self._find_one_sorted("pages", ASCENDING)
        if highest is None or lowest is None:
            return None
        return Extremes(highest=highest, lowest=lowest)

    # -- indexes ----------------------------------------------------------

    async def ensure_index(self, keys: KeySpec, name: Optional[str] = None) -> Optional[str]:
        """Create an index on ``keys`` and return its name.

        Re-creating an identical index is a no-op on the server. A definition
        that conflicts with an existing index is logged as a warning and
        ``None`` is returned; any other failure propagates.
        """
        key_list = normalize_keys(keys)
        options: Dict[str, Any] = {"name": name} if name else {}
        try:
            index_name = await self.collection.create_index(key_list, **options)
        except OperationFailure as exc:
            if exc.code not in INDEX_CONFLICT_CODES:
                raise
            logger.warning("Index on %s may already exist: %s", key_list, exc)
            return None
        logger.info("Index ready: %s", index_name)
        return index_name

    async def list_indexes(self) -> List[IndexInfo]:
        info = await self.collection.index_information()
        return [
            IndexInfo(
                name=index_name,
                key=[(f, d if isinstance(d, str) else int(d)) for f, d in spec["key"]],
            )
            for index_name, spec in info.items()
        ]

    async def explain(self, query_filter: Dict[str, Any]) -> ExplainSummary:
        """Execution statistics for ``find(query_filter)``; nothing is modified."""
        plan = await self.collection.find(query_filter).explain()
        stats = plan.get("executionStats", {})
        stages = stats.get("executionStages", {})
        return ExplainSummary(
            execution_time_ms=stats.get("executionTimeMillis", 0),
            docs_examined=stats.get("totalDocsExamined", 0),
            docs_returned=stats.get("nReturned", 0),
            stage=stages.get("stage", "UNKNOWN"),
            index_name=_find_index_name(stages),
        )
