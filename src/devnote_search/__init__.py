"""DevNote blog search.

In-memory relevance search over blog posts: substring scoring with fixed
per-field weights, highlighted and paginated results, and an async engine
that rebuilds the index from the blog's post store.
"""

from .__version__ import __version__
from .search import (
    BackingStoreError,
    EmptyQueryError,
    IndexedDocument,
    InvalidDocumentError,
    InvalidPaginationError,
    RelevanceSearchIndex,
    ScoredDocument,
    SearchEngine,
    SearchError,
    SearchPage,
    SearchTimeoutError,
)

__all__ = [
    "__version__",
    "RelevanceSearchIndex",
    "SearchEngine",
    "IndexedDocument",
    "ScoredDocument",
    "SearchPage",
    "SearchError",
    "InvalidDocumentError",
    "EmptyQueryError",
    "InvalidPaginationError",
    "BackingStoreError",
    "SearchTimeoutError",
]
