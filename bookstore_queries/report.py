"""Console rendering of façade results."""

from __future__ import annotations

import json
import sys
from typing import Iterable, Optional, TextIO

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

RULE_WIDTH = 60


def money(value: Optional[float]) -> str:
    return "n/a" if value is None else f"${value:.2f}"


def whole(value: Optional[float]) -> str:
    return "n/a" if value is None else f"{round(value)}"


class Printer:
    """Writes report lines to a stream (stdout by default)."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream or sys.stdout

    def line(self, text: str = "") -> None:
        print(text, file=self.stream)

    def banner(self, title: str) -> None:
        self.line("=" * RULE_WIDTH)
        self.line(title)
        self.line("=" * RULE_WIDTH)

    def section(self, title: str) -> "Section":
        return Section(self, title)


class Section:
    """Print a task header on entry; report an error raised inside it."""

    def __init__(self, printer: Printer, title: str) -> None:
        self.printer = printer
        self.title = title

    def __enter__(self) -> Printer:
        self.printer.line(f"\n{self.title}")
        self.printer.line("-" * 40)
        return self.printer

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc:
            self.printer.line(f">>> Section '{self.title}' raised: {exc}")


def books(printer: Printer, items: Iterable[Book], style: str = "full") -> int:
    """Print one bullet per book and return how many were printed."""
    count = 0
    for book in items:
        count += 1
        if style == "year":
            printer.line(f"   • {book.title} ({book.published_year}) by {book.author}")
        elif style == "pages":
            printer.line(f"   • {book.title} ({book.published_year}) - {book.pages} pages")
        elif style == "price":
            printer.line(f"   • {book.title} - {money(book.price)}")
        elif style == "short":
            printer.line(f"   • {book.title} by {book.author} ({book.published_year})")
        else:
            printer.line(
                f"   • {book.title} by {book.author} ({book.published_year}) - {money(book.price)}"
            )
    if not count:
        printer.line("   (no books)")
    return count


def partial_books(printer: Printer, items: Iterable[PartialBook]) -> None:
    for book in items:
        fields = book.model_dump(exclude_none=True)
        title = fields.pop("title", "?")
        rest = ", ".join(
            money(v) if k == "price" else f"{v}" for k, v in fields.items()
        )
        printer.line(f'   • "{title}"' + (f" - {rest}" if rest else ""))


def page(
    printer: Printer,
    items: Iterable[Book],
    page_size: int,
    page_number: int,
    note: Optional[str] = None,
) -> None:
    start = page_size * (page_number - 1) + 1
    suffix = f" ({note})" if note else ""
    printer.line(f"   Page {page_number}{suffix}:")
    for offset, book in enumerate(items):
        printer.line(f"   {start + offset}. {book.title} by {book.author}")


def genre_prices(printer: Printer, items: Iterable[GenrePriceStats]) -> None:
    for stats in items:
        printer.line(f"   • {stats.genre}:")
        printer.line(f"     - Average: {money(stats.avg_price)}")
        printer.line(f"     - Books: {stats.count}")
        printer.line(f"     - Range: {money(stats.min_price)} - {money(stats.max_price)}")


def author_rankings(printer: Printer, items: Iterable[AuthorRanking]) -> None:
    for ranking in items:
        printer.line(f"   • {ranking.author}: {ranking.count} book(s)")
        printer.line(f"     - Total pages: {ranking.total_pages}")
        printer.line(f"     - Avg price: {money(ranking.avg_price)}")
        for title in ranking.titles:
            printer.line(f'     - "{title}"')


def decades(printer: Printer, items: Iterable[DecadeGroup]) -> None:
    for group in items:
        printer.line(
            f"   • {group.label}: {group.count} book(s) - Avg price: {money(group.avg_price)}"
        )
        for book in group.books:
            printer.line(f"     - {book.title} ({book.year}) by {book.author}")


def index_created(printer: Printer, name: Optional[str]) -> None:
    if name is None:
        printer.line("   ⚠️  Index may already exist (see warning log)")
    else:
        printer.line(f"   ✅ Index created: {name}")


def indexes(printer: Printer, items: Iterable[IndexInfo]) -> None:
    for info in items:
        printer.line(f"   • {info.name}: {json.dumps(dict(info.key))}")


def explain(printer: Printer, summary: ExplainSummary) -> None:
    printer.line(f"   • Execution time: {summary.execution_time_ms}ms")
    printer.line(f"   • Documents examined: {summary.docs_examined}")
    printer.line(f"   • Documents returned: {summary.docs_returned}")
    if summary.used_index:
        printer.line(f"   • Index used: {summary.index_name}")
    else:
        printer.line(f"   • Scan type: {summary.stage} (no index)")


def collection_summary(printer: Printer, summary: Optional[CollectionSummary]) -> None:
    if summary is None:
        printer.line("   The collection is empty.")
        return
    printer.line("   📊 Database Statistics:")
    printer.line(f"   • Total books: {summary.total_books}")
    printer.line(f"   • Average price: {money(summary.avg_price)}")
    printer.line(f"   • Average pages: {whole(summary.avg_pages)} pages")
    printer.line(f"   • Total pages: {summary.total_pages:,} pages")
    printer.line(f"   • Total collection value: {money(summary.total_value)}")
    printer.line(f"   • Books in stock: {summary.in_stock_count}")
    printer.line(f"   • Books out of stock: {summary.out_of_stock_count}")
    printer.line(f"   • Publication range: {summary.oldest_year} - {summary.newest_year}")


def price_extremes(printer: Printer, extremes: Optional[Extremes]) -> None:
    if extremes is None:
        return
    top, bottom = extremes.highest, extremes.lowest
    printer.line(f'   💰 Most expensive: "{top.title}" by {top.author} - {money(top.price)}')
    printer.line(f'   💵 Cheapest: "{bottom.title}" by {bottom.author} - {money(bottom.price)}')


def length_extremes(printer: Printer, extremes: Optional[Extremes]) -> None:
    if extremes is None:
        return
    printer.line(f'   📖 Longest: "{extremes.highest.title}" - {extremes.highest.pages} pages')
    printer.line(f'   📄 Shortest: "{extremes.lowest.title}" - {extremes.lowest.pages} pages')


def stock(printer: Printer, items: Iterable[StockStatus]) -> None:
    for status in items:
        label = "📗 In Stock" if status.in_stock else "📕 Out of Stock"
        printer.line(f"   {label}: {status.count} books")


def genre_profiles(printer: Printer, items: Iterable[GenreProfile]) -> None:
    for profile in items:
        printer.line(f"   📚 {profile.genre}: {profile.count} book(s)")
        printer.line(
            f"       Avg price: {money(profile.avg_price)}, Avg pages: {whole(profile.avg_pages)}"
        )
