"""Search module for the DevNote blog.

Main components:
- RelevanceSearchIndex: in-memory map of posts with ranked, highlighted search
- RelevanceRanker: fixed-weight substring scoring
- SearchEngine: async facade with caching, timeouts and store rebuilds
"""

from .exceptions import (
    BackingStoreError,
    EmptyQueryError,
    InvalidDocumentError,
    InvalidPaginationError,
    SearchError,
    SearchTimeoutError,
)
from .index import RelevanceSearchIndex
from .models import IndexedDocument, RelevanceScore, ScoredDocument, SearchPage
from .relevance import RelevanceRanker
from .result_processor import PaginationInfo, ResultCache
from .search_engine import SearchEngine

__all__ = [
    "RelevanceSearchIndex",
    "RelevanceRanker",
    "SearchEngine",
    "IndexedDocument",
    "RelevanceScore",
    "ScoredDocument",
    "SearchPage",
    "PaginationInfo",
    "ResultCache",
    "SearchError",
    "InvalidDocumentError",
    "EmptyQueryError",
    "InvalidPaginationError",
    "BackingStoreError",
    "SearchTimeoutError",
]
