"""Aggregation pipelines, one builder per report.

Builders only return the stage lists; the store executes them.
"""

from __future__ import annotations

from typing import Any, Dict, List

Pipeline = List[Dict[str, Any]]


def average_price_by_genre() -> Pipeline:
    return [
        {
            "$group": {
                "_id": "$genre",
                "avgPrice": {"$avg": "$price"},
                "bookCount": {"$sum": 1},
                "minPrice": {"$min": "$price"},
                "maxPrice": {"$max": "$price"},
            }
        },
        {"$sort": {"avgPrice": -1}},
    ]


def books_by_author_ranked() -> Pipeline:
    return [
        {
            "$group": {
                "_id": "$author",
                "bookCount": {"$sum": 1},
                "books": {"$push": "$title"},
                "totalPages": {"$sum": "$pages"},
                "avgPrice": {"$avg": "$price"},
            }
        },
        {"$sort": {"bookCount": -1, "totalPages": -1}},
    ]


def books_by_decade() -> Pipeline:
    # decade = floor(published_year / 10) * 10; the "1950s" label is built client side
    return [
        {
            "$addFields": {
                "decade": {
                    "$multiply": [
                        {"$floor": {"$divide": ["$published_year", 10]}},
                        10,
                    ]
                }
            }
        },
        {
            "$group": {
                "_id": "$decade",
                "count": {"$sum": 1},
                "books": {
                    "$push": {
                        "title": "$title",
                        "year": "$published_year",
                        "author": "$author",
                    }
                },
                "avgPrice": {"$avg": "$price"},
            }
        },
        {"$sort": {"_id": 1}},
    ]


def collection_summary() -> Pipeline:
    return [
        {
            "$group": {
                "_id": None,
                "totalBooks": {"$sum": 1},
                "avgPrice": {"$avg": "$price"},
                "avgPages": {"$avg": "$pages"},
                "inStockCount": {"$sum": {"$cond": ["$in_stock", 1, 0]}},
                "outOfStockCount": {"$sum": {"$cond": ["$in_stock", 0, 1]}},
                "oldestBook": {"$min": "$published_year"},
                "newestBook": {"$max": "$published_year"},
                "totalPages": {"$sum": "$pages"},
                "totalValue": {"$sum": "$price"},
            }
        }
    ]


def stock_breakdown() -> Pipeline:
    return [
        {
            "$group": {
                "_id": "$in_stock",
                "count": {"$sum": 1},
                "books": {"$push": "$title"},
            }
        },
        # true sorts after false; in-stock first
        {"$sort": {"_id": -1}},
    ]


def genre_analysis() -> Pipeline:
    return [
        {
            "$group": {
                "_id": "$genre",
                "count": {"$sum": 1},
                "avgPrice": {"$avg": "$price"},
                "avgPages": {"$avg": "$pages"},
            }
        },
        {"$sort": {"count": -1}},
    ]
