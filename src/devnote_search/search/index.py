"""In-memory relevance search index.

The index maps a post id to its ``IndexedDocument`` and answers ranked,
paginated, highlighted queries by scanning a snapshot of that map. It is
a cache derived from the post store and can be rebuilt at any time.

Writers take a lock per mutation. Readers take the same lock only long
enough to copy the current documents, then scan without it, so a long
scan never blocks ``index`` or ``remove``. A scan sees the map as it was
when the scan started.
"""

import threading
import time
from typing import Dict, Hashable, Iterable, List, Optional

from ..config.logging import get_logger
from .exceptions import InvalidDocumentError, SearchTimeoutError
from .models import IndexedDocument, ScoredDocument, SearchPage
from .query_processor import DEFAULT_POST_TAG, DEFAULT_PRE_TAG, QueryProcessor
from .relevance import RelevanceRanker
from .result_processor import paginate, validate_pagination

logger = get_logger(__name__)


def validate_document(document: IndexedDocument) -> None:
    """Check the fields the index relies on.

    Raises:
        InvalidDocumentError: If the document has no id or a blank title or
            content
    """
    if not isinstance(document, IndexedDocument):
        raise InvalidDocumentError(
            "document", f"expected IndexedDocument, got {type(document).__name__}"
        )

    if document.id is None:
        raise InvalidDocumentError("id", "is required")

    for field_name in ("title", "content"):
        value = getattr(document, field_name)
        if not isinstance(value, str) or not value.strip():
            raise InvalidDocumentError(
                field_name, "is required and must be non-empty", document.id
            )


class RelevanceSearchIndex:
    """Thread-safe in-memory search index over blog posts."""

    def __init__(
        self,
        pre_tag: str = DEFAULT_PRE_TAG,
        post_tag: str = DEFAULT_POST_TAG,
    ):
        """Initialize an empty index.

        Args:
            pre_tag: Marker inserted before each highlighted match
            post_tag: Marker inserted after each highlighted match
        """
        self._documents: Dict[Hashable, IndexedDocument] = {}
        self._lock = threading.Lock()
        self._generation = 0
        self.ranker = RelevanceRanker()
        self.query_processor = QueryProcessor(pre_tag, post_tag)

    @property
    def generation(self) -> int:
        """Counter bumped on every mutation."""
        return self._generation

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, document_id: Hashable) -> bool:
        return document_id in self._documents

    def get(self, document_id: Hashable) -> Optional[IndexedDocument]:
        return self._documents.get(document_id)

    def index(self, document: IndexedDocument) -> None:
        """Insert or wholesale replace the entry for ``document.id``.

        Raises:
            InvalidDocumentError: If the document fails validation; the index
                is left unchanged
        """
        try:
            validate_document(document)
        except InvalidDocumentError as e:
            logger.warning("Rejected document", error=e.message, **e.data)
            raise

        with self._lock:
            replaced = document.id in self._documents
            self._documents[document.id] = document
            self._generation += 1

        logger.info(
            "Document indexed",
            document_id=document.id,
            replaced=replaced,
            tag_count=len(document.tags),
        )

    def remove(self, document_id: Hashable) -> bool:
        """Remove the entry for ``document_id`` if present.

        Returns:
            bool: Whether an entry was removed
        """
        with self._lock:
            removed = self._documents.pop(document_id, None) is not None
            if removed:
                self._generation += 1

        if removed:
            logger.info("Document removed from index", document_id=document_id)
        else:
            logger.debug("Document not indexed, nothing to remove", document_id=document_id)
        return removed

    def rebuild(self, documents: Iterable[IndexedDocument]) -> int:
        """Replace the whole index with ``documents``.

        Every document is validated before the swap; on any failure the
        current contents are kept.

        Returns:
            int: Number of documents in the rebuilt index
        """
        fresh: Dict[Hashable, IndexedDocument] = {}
        for document in documents:
            validate_document(document)
            fresh[document.id] = document

        with self._lock:
            self._documents = fresh
            self._generation += 1

        logger.info("Search index rebuilt", document_count=len(fresh))
        return len(fresh)

    def clear(self) -> None:
        with self._lock:
            self._documents = {}
            self._generation += 1

    def snapshot(self) -> List[IndexedDocument]:
        """Copy of the currently indexed documents."""
        with self._lock:
            return list(self._documents.values())

    def search(
        self,
        query: str,
        page: int = 0,
        page_size: int = 10,
        deadline: Optional[float] = None,
    ) -> SearchPage:
        """Run a ranked, paginated, highlighted search.

        Args:
            query: Raw search query
            page: 0-based page number
            page_size: Results per page, at least 1
            deadline: Optional ``time.monotonic()`` value after which the
                search aborts

        Returns:
            SearchPage: The requested page and total match count

        Raises:
            EmptyQueryError: If the query is blank
            InvalidPaginationError: If page or page_size is out of range
            SearchTimeoutError: If the deadline passes before the page is built
        """
        normalized_query = self.query_processor.normalize(query)
        validate_pagination(page, page_size)

        ranked = self.ranker.rank_results(
            normalized_query, self.snapshot(), deadline=deadline
        )
        page_items, pagination_info = paginate(ranked, page, page_size)

        if deadline is not None and time.monotonic() >= deadline:
            raise SearchTimeoutError(normalized_query)

        results = [
            self._to_scored_document(document, relevance_score.total_score, normalized_query)
            for document, relevance_score in page_items
        ]

        logger.info(
            "Search completed",
            query=normalized_query,
            page=page,
            page_size=page_size,
            total_matches=pagination_info.total_matches,
            returned=len(results),
        )

        return SearchPage(
            results=results,
            total_matches=pagination_info.total_matches,
            query=normalized_query,
            page=page,
            page_size=page_size,
            pagination=pagination_info,
        )

    def _to_scored_document(
        self, document: IndexedDocument, score: float, normalized_query: str
    ) -> ScoredDocument:
        return ScoredDocument(
            id=document.id,
            title=document.title,
            content=document.content,
            excerpt=document.excerpt,
            tags=document.tags,
            highlighted_title=self.query_processor.highlight(
                document.title, normalized_query
            ),
            highlighted_content=self.query_processor.highlight(
                document.content, normalized_query
            ),
            score=score,
        )
