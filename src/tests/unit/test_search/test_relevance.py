"""Tests for relevance ranking functionality."""

import time

import pytest

from devnote_search.search.exceptions import SearchTimeoutError
from devnote_search.search.models import IndexedDocument, RelevanceScore
from devnote_search.search.relevance import (
    CONTENT_WEIGHT,
    TAG_WEIGHT,
    TITLE_WEIGHT,
    RelevanceRanker,
)


@pytest.fixture
def relevance_ranker():
    """Create RelevanceRanker instance for testing."""
    return RelevanceRanker()


class TestRelevanceRanker:
    """Test cases for RelevanceRanker class."""

    def test_weights_are_fixed(self):
        assert (TITLE_WEIGHT, CONTENT_WEIGHT, TAG_WEIGHT) == (3.0, 1.0, 2.0)

    def test_full_match_scores_six(self, relevance_ranker, spring_documents):
        score = relevance_ranker.calculate_relevance_score("spring", spring_documents[0])

        assert isinstance(score, RelevanceScore)
        assert score.total_score == 6.0
        assert score.field_scores == {"title": 3.0, "content": 1.0, "tags": 2.0}
        assert score.matched_fields == ["title", "content", "tags"]

    def test_content_only_match(self, relevance_ranker, spring_documents):
        score = relevance_ranker.calculate_relevance_score("spring", spring_documents[1])

        assert score.total_score == 1.0
        assert score.matched_fields == ["content"]

    def test_no_match_scores_zero(self, relevance_ranker, spring_documents):
        score = relevance_ranker.calculate_relevance_score("golang", spring_documents[0])

        assert score.total_score == 0.0
        assert not score.matched

    def test_match_is_case_insensitive(self, relevance_ranker):
        document = IndexedDocument(id=1, title="TYPESCRIPT Handbook", content="x")

        score = relevance_ranker.calculate_relevance_score("typescript", document)

        assert score.field_scores["title"] == TITLE_WEIGHT

    def test_rank_results_orders_and_filters(self, relevance_ranker, spring_documents):
        extra = IndexedDocument(id=3, title="Nothing here", content="at all")

        ranked = relevance_ranker.rank_results("spring", spring_documents + [extra])

        assert [document.id for document, _ in ranked] == [1, 2]
        assert [score.total_score for _, score in ranked] == [6.0, 1.0]

    def test_rank_results_honours_deadline(self, relevance_ranker, spring_documents):
        with pytest.raises(SearchTimeoutError):
            relevance_ranker.rank_results(
                "spring", spring_documents, deadline=time.monotonic() - 0.1
            )

    def test_explain_score(self, relevance_ranker, spring_documents):
        explanation = relevance_ranker.explain_score("spring", spring_documents[1])

        assert explanation["final_score"] == 1.0
        assert explanation["matched_fields"] == ["content"]
        assert len(explanation["calculation_steps"]) == 3
        assert explanation["calculation_steps"][1].startswith("content: match")
