"""A handful of façade queries against a local, already seeded MongoDB."""

import asyncio

from pymongo import DESCENDING

from bookstore_queries import BookQueryFacade, BookstoreClient, get_config


async def main() -> None:
    async with BookstoreClient(get_config()) as client:
        facade = BookQueryFacade(client.books)

        print("Fiction:")
        async for book in facade.find_by_genre("Fiction"):
            print(" ", book.title, book.price)

        print("Most expensive three:")
        async for book in facade.find_sorted("price", DESCENDING, limit=3):
            print(" ", book.title, book.price)

        print("Average price by genre:")
        async for stats in facade.average_price_by_genre():
            print(f"  {stats.genre}: {stats.avg_price:.2f} ({stats.count} books)")

        summary = await facade.collection_summary()
        print("Summary:", summary)


if __name__ == "__main__":
    asyncio.run(main())
