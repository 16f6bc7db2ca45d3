"""
bookstore_queries.demo
======================

The fixed demonstration run: basic CRUD, advanced queries, aggregation
pipelines, indexing and collection statistics, printed in that order. The
collection is expected to be seeded beforehand.
"""

from __future__ import annotations

import logging
from typing import AsyncIterable, List, TypeVar

from pymongo import ASCENDING, DESCENDING

from . import report
from .facade import BookQueryFacade
from .models import Book

logger = logging.getLogger(__name__)

T = TypeVar("T")

SENTINEL_BOOK = Book(
    title="Temporary Test Book",
    author="Test Author",
    genre="Test Genre",
    published_year=2023,
    price=9.99,
    in_stock=True,
    pages=100,
    publisher="Test Publisher",
)


async def collect(items: AsyncIterable[T]) -> List[T]:
    return [item async for item in items]


async def basic_crud(facade: BookQueryFacade, printer: report.Printer) -> None:
    with printer.section("🔍 TASK 2: BASIC CRUD OPERATIONS"):
        printer.line("\n1. Find all Fiction books:")
        report.books(printer, await collect(facade.find_by_genre("Fiction")))

        printer.line("\n2. Books published after 1950:")
        report.books(printer, await collect(facade.find_published_after(1950)), style="year")

        printer.line("\n3. Books by George Orwell:")
        report.books(printer, await collect(facade.find_by_author("George Orwell")), style="pages")

        printer.line("\n4. Updating price of 'The Great Gatsby' to $12.99:")
        modified = await facade.update_price("The Great Gatsby", 12.99)
        printer.line(f"   Modified {modified} document(s)")
        updated = await facade.find_by_title("The Great Gatsby")
        if updated is not None:
            printer.line(f"   New price: {report.money(updated.price)}")
        else:
            printer.line("   'The Great Gatsby' is not in the collection")

        printer.line("\n5. Deleting a book by title:")
        await facade.insert_book(SENTINEL_BOOK)
        printer.line("   Added temporary book for deletion test")
        deleted = await facade.delete_by_title(SENTINEL_BOOK.title)
        printer.line(f"   Deleted {deleted} document(s)")


async def advanced_queries(facade: BookQueryFacade, printer: report.Printer) -> None:
    with printer.section("🔍 TASK 3: ADVANCED QUERIES"):
        printer.line("\n1. Books in stock AND published after 2010:")
        report.books(printer, await collect(facade.find_in_stock_after(2010)), style="short")

        printer.line("\n2. Books with projection (title, author, price only):")
        report.partial_books(
            printer,
            await collect(facade.find_with_projection(["title", "author", "price"], limit=7)),
        )
        printer.line("\n   ... (showing first 7 books with projection)")

        printer.line("\n3. Books sorted by price (ascending - cheapest first):")
        report.books(printer, await collect(facade.find_sorted("price", ASCENDING, 6)), style="price")

        printer.line("\n4. Books sorted by price (descending - most expensive first):")
        report.books(printer, await collect(facade.find_sorted("price", DESCENDING, 6)), style="price")

        printer.line("\n5. Pagination Example - 5 books per page:")
        notes = ("first 5 books", "next 5 books", "remaining books")
        for page_number, note in enumerate(notes, start=1):
            if page_number > 1:
                printer.line()
            items = await collect(facade.find_page(5, page_number))
            report.page(printer, items, 5, page_number, note)


async def aggregations(facade: BookQueryFacade, printer: report.Printer) -> None:
    with printer.section("🔍 TASK 4: AGGREGATION PIPELINES"):
        printer.line("\n1. Average price by genre:")
        report.genre_prices(printer, await collect(facade.average_price_by_genre()))

        printer.line("\n2. Authors ranked by number of books:")
        report.author_rankings(printer, await collect(facade.books_by_author_ranked()))

        printer.line("\n3. Books grouped by publication decade:")
        report.decades(printer, await collect(facade.books_by_decade()))


async def indexing(facade: BookQueryFacade, printer: report.Printer) -> None:
    with printer.section("🔍 TASK 5: INDEXING"):
        printer.line("\n1. Creating index on 'title' field:")
        report.index_created(printer, await facade.ensure_index([("title", ASCENDING)]))

        printer.line("\n2. Creating compound index on 'author' and 'published_year':")
        report.index_created(
            printer,
            await facade.ensure_index([("author", ASCENDING), ("published_year", DESCENDING)]),
        )

        printer.line("\n3. Current indexes on books collection:")
        report.indexes(printer, await facade.list_indexes())

        printer.line("\n4. Performance analysis with explain():")
        printer.line("\n   🔍 Title search performance:")
        report.explain(printer, await facade.explain({"title": "The Great Gatsby"}))

        printer.line("\n   🔍 Compound index performance test:")
        report.explain(
            printer,
            await facade.explain(
                {"author": "J.R.R. Tolkien", "published_year": {"$gte": 1950}}
            ),
        )

        printer.line("\n   🔍 Query without index (genre field):")
        report.explain(printer, await facade.explain({"genre": "Fiction"}))


async def statistics(facade: BookQueryFacade, printer: report.Printer) -> None:
    with printer.section("🔍 ADDITIONAL USEFUL QUERIES & STATISTICS"):
        printer.line("\n1. Collection overview:")
        report.collection_summary(printer, await facade.collection_summary())

        printer.line("\n2. Price extremes:")
        report.price_extremes(printer, await facade.price_extremes())

        printer.line("\n3. Book length extremes:")
        report.length_extremes(printer, await facade.length_extremes())

        printer.line("\n4. Stock status breakdown:")
        report.stock(printer, await collect(facade.stock_breakdown()))

        printer.line("\n5. Genre analysis:")
        report.genre_profiles(printer, await collect(facade.genre_analysis()))


async def run_demo(facade: BookQueryFacade, printer: report.Printer) -> None:
    printer.banner("📚 PLP BOOKSTORE - MONGODB QUERIES")
    await basic_crud(facade, printer)
    await advanced_queries(facade, printer)
    await aggregations(facade, printer)
    await indexing(facade, printer)
    await statistics(facade, printer)

    total = await facade.count_books()
    printer.line("\n" + "=" * report.RULE_WIDTH)
    printer.line("✅ All MongoDB queries completed successfully!")
    printer.line(f"📝 Total documents in collection: {total}")
    printer.line("=" * report.RULE_WIDTH)
    logger.info("Demo finished with %d documents in the collection", total)
