"""Relevance ranking for indexed posts.

A document scores by substring containment of the normalized query with
fixed per-field weights. The weights are constants and are not exposed
through configuration.
"""

import time
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .exceptions import SearchTimeoutError
from .models import IndexedDocument, RelevanceScore
from .query_processor import contains

TITLE_WEIGHT = 3.0
CONTENT_WEIGHT = 1.0
TAG_WEIGHT = 2.0

DEADLINE_CHECK_INTERVAL = 256

FIELD_WEIGHTS = {
    "title": TITLE_WEIGHT,
    "content": CONTENT_WEIGHT,
    "tags": TAG_WEIGHT,
}


class RelevanceRanker:
    """Scores and orders documents against a normalized query."""

    def calculate_relevance_score(
        self, normalized_query: str, document: IndexedDocument
    ) -> RelevanceScore:
        """Calculate the relevance score for a single document.

        Args:
            normalized_query: Query as produced by ``normalize_query``
            document: Document to score

        Returns:
            RelevanceScore: Total score with per-field breakdown
        """
        field_scores = {"title": 0.0, "content": 0.0, "tags": 0.0}

        if contains(document.title, normalized_query):
            field_scores["title"] = TITLE_WEIGHT

        if contains(document.content, normalized_query):
            field_scores["content"] = CONTENT_WEIGHT

        # One bonus no matter how many tags match
        if any(contains(tag, normalized_query) for tag in document.tags):
            field_scores["tags"] = TAG_WEIGHT

        return RelevanceScore(
            total_score=sum(field_scores.values()),
            field_scores=field_scores,
            matched_fields=[name for name, score in field_scores.items() if score > 0],
        )

    def rank_results(
        self,
        normalized_query: str,
        documents: Iterable[IndexedDocument],
        deadline: Optional[float] = None,
    ) -> List[Tuple[IndexedDocument, RelevanceScore]]:
        """Score documents, drop non-matches and order by relevance.

        Ties are broken by document id ascending.

        Args:
            normalized_query: Query as produced by ``normalize_query``
            documents: Documents to rank
            deadline: Optional ``time.monotonic()`` value to abort at

        Returns:
            List of (document, relevance_score) tuples, best first

        Raises:
            SearchTimeoutError: If the deadline passes during the scan
        """
        scored_documents = []
        for position, document in enumerate(documents):
            if (
                deadline is not None
                and position % DEADLINE_CHECK_INTERVAL == 0
                and time.monotonic() >= deadline
            ):
                raise SearchTimeoutError(normalized_query)

            relevance_score = self.calculate_relevance_score(normalized_query, document)
            if relevance_score.matched:
                scored_documents.append((document, relevance_score))

        sort_ranked(scored_documents)
        return scored_documents

    def explain_score(
        self, normalized_query: str, document: IndexedDocument
    ) -> Dict[str, Any]:
        """Explain how a document's relevance score was calculated."""
        relevance_score = self.calculate_relevance_score(normalized_query, document)

        steps = []
        for field_name, weight in FIELD_WEIGHTS.items():
            matched = field_name in relevance_score.matched_fields
            steps.append(
                f"{field_name}: {'match' if matched else 'no match'}"
                f" -> +{relevance_score.field_scores[field_name]:.1f}"
                f" (weight {weight:.1f})"
            )

        return {
            "document_id": document.id,
            "query": normalized_query,
            "final_score": relevance_score.total_score,
            "field_scores": dict(relevance_score.field_scores),
            "matched_fields": list(relevance_score.matched_fields),
            "calculation_steps": steps,
        }


def sort_ranked(scored_documents: List[Tuple[IndexedDocument, RelevanceScore]]) -> None:
    """Sort in place by score descending, then id ascending."""
    try:
        scored_documents.sort(key=lambda item: (-item[1].total_score, item[0].id))
    except TypeError:
        # Ids of mixed types have no natural order
        scored_documents.sort(
            key=lambda item: (-item[1].total_score, str(item[0].id))
        )
