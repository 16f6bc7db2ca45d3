from .client import BookstoreClient
from .config import BookstoreConfig, get_config
from .facade import BookQueryFacade
from .models import (
    AuthorRanking,
    Book,
    CollectionSummary,
    DecadeBook,
    DecadeGroup,
    ExplainSummary,
    Extremes,
    GenrePriceStats,
    GenreProfile,
    IndexInfo,
    PartialBook,
    StockStatus,
)

__version__ = "0.1.0"
__all__ = [
    "BookQueryFacade",
    "BookstoreClient",
    "BookstoreConfig",
    "get_config",
    "AuthorRanking",
    "Book",
    "CollectionSummary",
    "DecadeBook",
    "DecadeGroup",
    "ExplainSummary",
    "Extremes",
    "GenrePriceStats",
    "GenreProfile",
    "IndexInfo",
    "PartialBook",
    "StockStatus",
]
