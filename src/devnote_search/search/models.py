"""Data models for indexed posts and search results."""

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, Hashable, Iterable, List, Mapping, Optional, Tuple

from .result_processor import PaginationInfo


def normalize_tags(tags: Optional[Iterable[Any]]) -> Tuple[str, ...]:
    """Strip and lowercase tag names, dropping blanks and keeping order."""
    if tags is None:
        return ()
    if isinstance(tags, str):
        tags = [tags]

    normalized = []
    for tag in tags:
        if tag is None:
            continue
        name = str(tag).strip().lower()
        if name:
            normalized.append(name)
    return tuple(normalized)


@dataclass(frozen=True)
class IndexedDocument:
    """In-memory projection of a post used for search.

    Instances are immutable, so a reader holding one never sees it change
    while the index replaces the entry for its id.
    """

    id: Hashable
    title: str
    content: str
    excerpt: Optional[str] = None
    tags: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "tags", normalize_tags(self.tags))

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "IndexedDocument":
        """Build a document from a post payload as the domain layer sends it."""
        return cls(
            id=payload.get("id"),
            title=payload.get("title"),
            content=payload.get("content"),
            excerpt=payload.get("excerpt"),
            tags=payload.get("tags") or (),
        )


@dataclass(frozen=True)
class RelevanceScore:
    """Represents a relevance score with its per-field breakdown."""

    total_score: float
    field_scores: Dict[str, float]
    matched_fields: List[str]

    @property
    def matched(self) -> bool:
        return self.total_score > 0


@dataclass(frozen=True)
class ScoredDocument:
    """A single search hit with highlighted title and content.

    Frozen so cached pages can share hits between callers.
    """

    id: Hashable
    title: str
    content: str
    excerpt: Optional[str]
    tags: Tuple[str, ...]
    highlighted_title: str
    highlighted_content: str
    score: float

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["tags"] = list(self.tags)
        return data


@dataclass
class SearchPage:
    """One page of ranked search results plus pagination metadata."""

    results: List[ScoredDocument]
    total_matches: int
    query: str
    page: int
    page_size: int
    pagination: PaginationInfo
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_pages(self) -> int:
        return self.pagination.total_pages

    def copy(self) -> "SearchPage":
        """Copy whose results, pagination and metadata can be changed freely."""
        return replace(
            self,
            results=list(self.results),
            pagination=replace(self.pagination),
            metadata=dict(self.metadata),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the page into a response envelope."""
        return {
            "results": [result.to_dict() for result in self.results],
            "total_matches": self.total_matches,
            "query": self.query,
            "pagination": asdict(self.pagination),
            "metadata": dict(self.metadata),
        }
