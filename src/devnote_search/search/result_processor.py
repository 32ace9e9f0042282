"""Result pagination and caching for search pages."""

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Dict, Hashable, List, Optional, Sequence, Tuple, TypeVar

from ..config.logging import get_logger
from .exceptions import InvalidPaginationError

T = TypeVar("T")

logger = get_logger(__name__)


@dataclass
class PaginationInfo:
    """Pagination metadata for results. Pages are 0-based."""

    page: int
    page_size: int
    total_pages: int
    total_matches: int
    has_previous: bool
    has_next: bool
    previous_page: Optional[int]
    next_page: Optional[int]


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_pagination(
    page: Any, page_size: Any, max_page_size: Optional[int] = None
) -> None:
    """Check that page and page size are usable.

    Raises:
        InvalidPaginationError: If page is negative, page_size is below 1 or
            above ``max_page_size``, or either is not an integer
    """
    if not _is_int(page):
        raise InvalidPaginationError("page", "must be an integer", page)
    if page < 0:
        raise InvalidPaginationError("page", "must be >= 0", page)
    if not _is_int(page_size):
        raise InvalidPaginationError("page_size", "must be an integer", page_size)
    if page_size < 1:
        raise InvalidPaginationError("page_size", "must be >= 1", page_size)
    if max_page_size is not None and page_size > max_page_size:
        raise InvalidPaginationError(
            "page_size", f"must be <= {max_page_size}", page_size
        )


def paginate(
    items: Sequence[T], page: int, page_size: int
) -> Tuple[List[T], PaginationInfo]:
    """Slice ``items`` to one page and describe where it sits.

    The slice is ``[page * page_size, page * page_size + page_size)``
    clamped to the available items; a page past the end is empty.
    """
    validate_pagination(page, page_size)

    total_matches = len(items)
    total_pages = (total_matches + page_size - 1) // page_size

    start_index = page * page_size
    end_index = min(start_index + page_size, total_matches)
    page_items = list(items[start_index:end_index])

    has_next = page + 1 < total_pages
    pagination_info = PaginationInfo(
        page=page,
        page_size=page_size,
        total_pages=total_pages,
        total_matches=total_matches,
        has_previous=page > 0,
        has_next=has_next,
        previous_page=page - 1 if page > 0 else None,
        next_page=page + 1 if has_next else None,
    )

    return page_items, pagination_info


class ResultCache:
    """LRU cache of search pages with TTL and generation tagging.

    Each entry remembers the index generation it was computed at. A lookup
    with a newer generation is a miss and drops the entry, so pages never
    outlive an index mutation. Entries are kept in recency order, oldest
    first.
    """

    def __init__(self, max_cache_size: int = 1000, ttl_seconds: int = 300):
        """Initialize result cache.

        Args:
            max_cache_size: Maximum number of cached entries
            ttl_seconds: Time to live for cached entries
        """
        self.max_size = max_cache_size
        self.ttl = ttl_seconds
        self._entries: "OrderedDict[Hashable, Tuple[int, float, Any]]" = OrderedDict()
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._lock = threading.Lock()

    @staticmethod
    def get_cache_key(normalized_query: str, page: int, page_size: int) -> Tuple:
        return (normalized_query, page, page_size)

    def get(self, cache_key: Hashable, generation: int) -> Optional[Any]:
        """Return the cached value if it is fresh and from ``generation``."""
        current_time = time.monotonic()

        with self._lock:
            entry = self._entries.get(cache_key)
            if entry is None:
                self._misses += 1
                return None

            entry_generation, created_at, value = entry
            if current_time - created_at > self.ttl or entry_generation != generation:
                del self._entries[cache_key]
                self._misses += 1
                return None

            self._entries.move_to_end(cache_key)
            self._hits += 1
            return value

    def put(self, cache_key: Hashable, generation: int, value: Any) -> None:
        """Store a value computed at ``generation``, evicting the LRU entry."""
        current_time = time.monotonic()

        with self._lock:
            if cache_key in self._entries:
                self._entries.move_to_end(cache_key)
            elif len(self._entries) >= self.max_size:
                evicted_key, _ = self._entries.popitem(last=False)
                self._evictions += 1
                logger.debug("Evicted search cache entry", cache_key=evicted_key)

            self._entries[cache_key] = (generation, current_time, value)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, cache_key: Hashable) -> bool:
        return cache_key in self._entries

    def get_cache_stats(self) -> Dict[str, Any]:
        """Get cache performance statistics."""
        with self._lock:
            lookups = self._hits + self._misses
            return {
                "entries": len(self._entries),
                "max_size": self.max_size,
                "ttl_seconds": self.ttl,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "hit_rate": self._hits / lookups if lookups else 0.0,
            }
