import uuid
from collections import defaultdict
from statistics import mean

import pytest
from bson.decimal128 import Decimal128

from bookstore_queries import (
    AuthorRanking,
    BookQueryFacade,
    DecadeGroup,
    GenrePriceStats,
    GenreProfile,
)

from conftest import BOOKS, collect


@pytest.mark.asyncio
async def test_average_price_by_genre(facade):
    stats = await collect(facade.average_price_by_genre())

    prices = defaultdict(list)
    for book in BOOKS:
        prices[book["genre"]].append(book["price"])

    assert {s.genre for s in stats} == set(prices)
    assert sum(s.count for s in stats) == len(BOOKS)
    for s in stats:
        assert s.avg_price == pytest.approx(mean(prices[s.genre]))
        assert s.min_price == min(prices[s.genre])
        assert s.max_price == max(prices[s.genre])
    averages = [s.avg_price for s in stats]
    assert averages == sorted(averages, reverse=True)


@pytest.mark.asyncio
async def test_authors_ranked_by_count_then_pages(facade):
    rankings = await collect(facade.books_by_author_ranked())
    assert rankings[0].author == "J.R.R. Tolkien"
    assert rankings[0].count == 2
    assert rankings[0].total_pages == 310 + 1178
    assert set(rankings[0].titles) == {"The Hobbit", "The Lord of the Rings"}
    assert rankings[1].author == "George Orwell"
    assert all(r.count == 1 for r in rankings[2:])


@pytest.mark.asyncio
async def test_books_by_decade(facade):
    groups = await collect(facade.books_by_decade())
    labels = [g.label for g in groups]
    assert labels == [
        "1810s", "1840s", "1850s", "1920s", "1930s",
        "1940s", "1950s", "1960s", "1980s",
    ]
    fifties = groups[labels.index("1950s")]
    assert fifties.count == 2
    assert {b.title for b in fifties.books} == {
        "The Catcher in the Rye",
        "The Lord of the Rings",
    }
    assert fifties.avg_price == pytest.approx((8.99 + 19.99) / 2)
    assert sum(g.count for g in groups) == len(BOOKS)


@pytest.mark.asyncio
async def test_collection_summary(facade):
    summary = await facade.collection_summary()
    assert summary.total_books == len(BOOKS)
    assert summary.in_stock_count == 9
    assert summary.out_of_stock_count == 3
    assert summary.oldest_year == 1813
    assert summary.newest_year == 1988
    assert summary.total_pages == sum(b["pages"] for b in BOOKS)
    assert summary.total_value == pytest.approx(sum(b["price"] for b in BOOKS))
    assert summary.avg_pages == pytest.approx(mean(b["pages"] for b in BOOKS))


@pytest.mark.asyncio
async def test_collection_summary_known_prices(mongo_client, books):
    coll = mongo_client[f"prices_{uuid.uuid4().hex}"]["books"]
    for i, book in enumerate(books):
        book["price"] = 5.0 * (i + 1)
    await coll.insert_many(books)

    summary = await BookQueryFacade(coll).collection_summary()
    assert summary.total_books == 12
    assert summary.avg_price == pytest.approx(32.5)


@pytest.mark.asyncio
async def test_collection_summary_empty(mongo_client):
    coll = mongo_client[f"empty_{uuid.uuid4().hex}"]["books"]
    assert await BookQueryFacade(coll).collection_summary() is None


@pytest.mark.asyncio
async def test_price_and_length_extremes(facade):
    prices = await facade.price_extremes()
    assert prices.highest.title == "The Lord of the Rings"
    assert prices.lowest.title == "Pride and Prejudice"

    lengths = await facade.length_extremes()
    assert lengths.highest.pages == 1178
    assert lengths.lowest.title == "Animal Farm"


@pytest.mark.asyncio
async def test_stock_breakdown(facade):
    statuses = await collect(facade.stock_breakdown())
    assert [s.in_stock for s in statuses] == [True, False]
    assert statuses[0].count == 9
    assert set(statuses[1].titles) == {"Brave New World", "Animal Farm", "Moby Dick"}


@pytest.mark.asyncio
async def test_genre_analysis(facade):
    profiles = await collect(facade.genre_analysis())
    assert profiles[0].genre == "Fiction"
    assert profiles[0].count == 4
    counts = [p.count for p in profiles]
    assert counts == sorted(counts, reverse=True)
    fiction_pages = [b["pages"] for b in BOOKS if b["genre"] == "Fiction"]
    assert profiles[0].avg_pages == pytest.approx(mean(fiction_pages))


class NullGroupCursor:
    def __init__(self, docs):
        self.docs = docs
        self.lengths = []

    async def to_list(self, length=None):
        self.lengths.append(length)
        return list(self.docs)


class NullGroupCollection:
    """Answers every pipeline with the given documents."""

    def __init__(self, docs):
        self.cursor = NullGroupCursor(docs)

    def aggregate(self, pipeline):
        return self.cursor


@pytest.mark.asyncio
async def test_collection_summary_null_group_is_empty():
    coll = NullGroupCollection([{
        "_id": None, "totalBooks": 0, "avgPrice": None, "avgPages": None,
        "inStockCount": 0, "outOfStockCount": 0, "oldestBook": None,
        "newestBook": None, "totalPages": 0, "totalValue": 0,
    }])
    assert await BookQueryFacade(coll).collection_summary() is None
    assert coll.cursor.lengths == [1]


@pytest.mark.asyncio
async def test_collection_summary_without_prices_or_years():
    coll = NullGroupCollection([{
        "_id": None, "totalBooks": 2, "avgPrice": None, "avgPages": None,
        "inStockCount": 1, "outOfStockCount": 1, "oldestBook": None,
        "newestBook": None, "totalPages": 0, "totalValue": 0,
    }])
    summary = await BookQueryFacade(coll).collection_summary()
    assert summary.total_books == 2
    assert summary.avg_price is None
    assert summary.oldest_year is None


def test_group_records_accept_null_averages():
    assert GenrePriceStats.model_validate(
        {"_id": "Poetry", "avgPrice": None, "bookCount": 1, "minPrice": None, "maxPrice": None}
    ).avg_price is None
    assert AuthorRanking.model_validate(
        {"_id": None, "bookCount": 1, "books": ["Untitled"], "totalPages": 0, "avgPrice": None}
    ).author is None
    group = DecadeGroup.model_validate(
        {"_id": None, "count": 1, "books": [{"title": "Undated"}], "avgPrice": None}
    )
    assert group.label == "unknown"
    profile = GenreProfile.model_validate(
        {"_id": "Poetry", "count": 1, "avgPrice": Decimal128("3.50"), "avgPages": None}
    )
    assert profile.avg_price == pytest.approx(3.5)
    assert profile.avg_pages is None
