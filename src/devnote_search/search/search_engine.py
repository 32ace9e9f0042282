"""High-level async search interface.

``SearchEngine`` is what the request-handling layer talks to. It owns a
``RelevanceSearchIndex``, serves repeated queries from a result cache,
bounds every query by the configured timeout, and keeps the index in step
with the post store.
"""

import asyncio
import time
from typing import TYPE_CHECKING, Any, Dict, Hashable, Optional

from ..config.logging import get_logger, log_performance
from ..config.settings import SearchConfig
from .exceptions import BackingStoreError, SearchTimeoutError
from .index import RelevanceSearchIndex
from .models import IndexedDocument, SearchPage
from .result_processor import ResultCache, validate_pagination

if TYPE_CHECKING:
    from ..storage.repositories import PostRepository

logger = get_logger(__name__)


class SearchEngine:
    """Async facade over the relevance index."""

    def __init__(
        self,
        config: Optional[SearchConfig] = None,
        index: Optional[RelevanceSearchIndex] = None,
    ):
        """Initialize the search engine.

        Args:
            config: Search configuration settings
            index: Index to serve from; a new empty one is created if omitted
        """
        self.config = config or SearchConfig()
        self.index = index or RelevanceSearchIndex(
            pre_tag=self.config.highlight_pre_tag,
            post_tag=self.config.highlight_post_tag,
        )
        self.cache = ResultCache(
            max_cache_size=self.config.cache_size,
            ttl_seconds=self.config.cache_ttl,
        )

    async def search(
        self,
        query: str,
        page: int = 0,
        page_size: Optional[int] = None,
    ) -> SearchPage:
        """Search indexed posts.

        Args:
            query: Search query string
            page: Page number (0-based)
            page_size: Results per page; defaults to the configured size

        Returns:
            SearchPage: Ranked, highlighted page with pagination metadata

        Raises:
            EmptyQueryError: If query is blank
            InvalidPaginationError: If page or page_size is out of range
            SearchTimeoutError: If the query exceeds the configured timeout
        """
        if page_size is None:
            page_size = self.config.default_page_size

        normalized_query = self.index.query_processor.normalize(query)
        validate_pagination(page, page_size, self.config.max_page_size)

        generation = self.index.generation
        cache_key = self.cache.get_cache_key(normalized_query, page, page_size)
        if self.config.cache_enabled:
            cached = self.cache.get(cache_key, generation)
            if cached is not None:
                logger.debug("Search cache hit", query=normalized_query, page=page)
                return cached.copy()

        start_time = time.perf_counter()
        deadline = time.monotonic() + self.config.query_timeout

        try:
            result = await asyncio.to_thread(
                self.index.search, normalized_query, page, page_size, deadline
            )
        except SearchTimeoutError as e:
            logger.warning(
                "Search timed out",
                query=normalized_query,
                timeout_seconds=self.config.query_timeout,
            )
            raise SearchTimeoutError(normalized_query, self.config.query_timeout) from e

        duration_ms = (time.perf_counter() - start_time) * 1000
        result.metadata["query_time_ms"] = duration_ms
        log_performance(
            logger,
            "search",
            duration_ms,
            query=normalized_query,
            total_matches=result.total_matches,
        )

        if self.config.cache_enabled:
            self.cache.put(cache_key, generation, result.copy())

        return result

    async def index_document(self, document: IndexedDocument) -> None:
        """Index or re-index a single document."""
        self.index.index(document)

    async def remove_document(self, document_id: Hashable) -> bool:
        """Remove a document from the index; absent ids are a no-op."""
        return self.index.remove(document_id)

    async def rebuild_from_store(self, repository: "PostRepository") -> int:
        """Rebuild the index from every published post in the store.

        The index is swapped only after every post has been loaded and
        validated, so a failure leaves the previous contents in place.

        Returns:
            int: Number of documents indexed

        Raises:
            BackingStoreError: If the store read fails
        """
        start_time = time.perf_counter()

        try:
            documents = await repository.list_published_posts()
        except BackingStoreError:
            logger.error("Index rebuild aborted, post store read failed")
            raise

        count = self.index.rebuild(documents)

        log_performance(
            logger,
            "rebuild_index",
            (time.perf_counter() - start_time) * 1000,
            document_count=count,
        )
        return count

    async def sync_post(self, repository: "PostRepository", post_id: int) -> bool:
        """Bring one post's index entry in line with the store.

        Published posts are (re)indexed; missing or unpublished posts are
        removed.

        Returns:
            bool: True if the post is indexed after the sync

        Raises:
            BackingStoreError: If the store read fails
        """
        post = await repository.get_post(post_id)

        if post is None or not post.is_published:
            self.index.remove(post_id)
            return False

        self.index.index(repository.to_indexed_document(post))
        return True

    def get_statistics(self) -> Dict[str, Any]:
        """Get index and cache statistics."""
        return {
            "document_count": len(self.index),
            "generation": self.index.generation,
            "cache": self.cache.get_cache_stats(),
        }
