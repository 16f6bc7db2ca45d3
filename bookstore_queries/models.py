"""
bookstore_queries.models
========================

Typed records for everything the façade returns. Documents read from the
store carry extra keys (``_id`` and whatever a seeding script added); those
are ignored. Aggregation outputs use the store-side key names as aliases, so
``Model.model_validate(doc)`` works directly on a pipeline result while the
Python attributes stay snake_case.
"""

from __future__ import annotations

from typing import Annotated, Any, List, Optional, Tuple, Union

from bson.decimal128 import Decimal128
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


def _from_decimal128(value: Any) -> Any:
    if isinstance(value, Decimal128):
        return float(value.to_decimal())
    return value


# Prices may be stored as BSON doubles or decimals; $avg over no values is null
Price = Annotated[Optional[float], BeforeValidator(_from_decimal128)]


class Book(_Record):
    """A stored book. Only the title is expected; other attributes may be missing."""

    title: str
    author: Optional[str] = None
    genre: Optional[str] = None
    published_year: Optional[int] = None
    price: Price = None
    in_stock: Optional[bool] = None
    pages: Optional[int] = None
    publisher: Optional[str] = None


class PartialBook(_Record):
    """A projected book; only the requested attributes are set."""

    title: Optional[str] = None
    author: Optional[str] = None
    genre: Optional[str] = None
    published_year: Optional[int] = None
    price: Price = None
    in_stock: Optional[bool] = None
    pages: Optional[int] = None
    publisher: Optional[str] = None


class GenrePriceStats(_Record):
    genre: Optional[str] = Field(alias="_id")
    avg_price: Price = Field(alias="avgPrice")
    count: int = Field(alias="bookCount")
    min_price: Price = Field(alias="minPrice")
    max_price: Price = Field(alias="maxPrice")


class AuthorRanking(_Record):
    author: Optional[str] = Field(alias="_id")
    count: int = Field(alias="bookCount")
    titles: List[str] = Field(alias="books")
    total_pages: int = Field(alias="totalPages")
    avg_price: Price = Field(alias="avgPrice")


class DecadeBook(_Record):
    title: Optional[str] = None
    year: Optional[int] = None
    author: Optional[str] = None


class DecadeGroup(_Record):
    decade: Optional[int] = Field(alias="_id")
    count: int
    books: List[DecadeBook]
    avg_price: Price = Field(alias="avgPrice")

    @property
    def label(self) -> str:
        return f"{self.decade}s" if self.decade is not None else "unknown"


class IndexInfo(_Record):
    name: str
    # direction is 1/-1, or a string for special indexes ("text", "2dsphere")
    key: List[Tuple[str, Union[int, str]]]


class ExplainSummary(_Record):
    execution_time_ms: int
    docs_examined: int
    docs_returned: int
    stage: str
    index_name: Optional[str] = None

    @property
    def used_index(self) -> bool:
        return self.index_name is not None

    @property
    def stage_or_index(self) -> str:
        return self.index_name or self.stage


class CollectionSummary(_Record):
    total_books: int = Field(alias="totalBooks")
    avg_price: Price = Field(alias="avgPrice")
    avg_pages: Optional[float] = Field(alias="avgPages")
    in_stock_count: int = Field(alias="inStockCount")
    out_of_stock_count: int = Field(alias="outOfStockCount")
    oldest_year: Optional[int] = Field(alias="oldestBook")
    newest_year: Optional[int] = Field(alias="newestBook")
    total_pages: int = Field(alias="totalPages")
    total_value: Price = Field(alias="totalValue")


class Extremes(_Record):
    """The books at both ends of one ordering (price or length)."""

    highest: Book
    lowest: Book


class StockStatus(_Record):
    in_stock: Optional[bool] = Field(alias="_id")
    count: int
    titles: List[str] = Field(alias="books")


class GenreProfile(_Record):
    genre: Optional[str] = Field(alias="_id")
    count: int
    avg_price: Price = Field(alias="avgPrice")
    avg_pages: Optional[float] = Field(alias="avgPages")
