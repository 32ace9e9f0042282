"""Tests for the async search engine facade."""

import dataclasses
from unittest.mock import AsyncMock, Mock, patch

import pytest

from devnote_search.config.settings import SearchConfig
from devnote_search.search.exceptions import (
    BackingStoreError,
    EmptyQueryError,
    InvalidDocumentError,
    InvalidPaginationError,
    SearchTimeoutError,
)
from devnote_search.search.index import RelevanceSearchIndex
from devnote_search.search.models import IndexedDocument, SearchPage
from devnote_search.search.search_engine import SearchEngine


@pytest.fixture
def search_engine(search_config, populated_index):
    """Create SearchEngine over the two-post index."""
    return SearchEngine(search_config, index=populated_index)


@pytest.fixture
def mock_repository(spring_documents):
    repository = Mock()
    repository.list_published_posts = AsyncMock(return_value=spring_documents)
    repository.get_post = AsyncMock(return_value=None)
    return repository


class TestSearchEngine:
    """Test cases for SearchEngine class."""

    def test_initialization_builds_index_from_config(self):
        engine = SearchEngine(SearchConfig(highlight_pre_tag="<b>", highlight_post_tag="</b>"))

        assert isinstance(engine.index, RelevanceSearchIndex)
        assert engine.index.query_processor.pre_tag == "<b>"
        assert engine.cache.max_size == 1000

    @pytest.mark.asyncio
    async def test_search_returns_ranked_page(self, search_engine):
        page = await search_engine.search("Spring")

        assert isinstance(page, SearchPage)
        assert [result.id for result in page.results] == [1, 2]
        assert page.page_size == 10
        assert "query_time_ms" in page.metadata

    @pytest.mark.asyncio
    async def test_search_with_empty_query_raises_error(self, search_engine):
        with pytest.raises(EmptyQueryError, match="Search query cannot be empty"):
            await search_engine.search("")

        with pytest.raises(EmptyQueryError):
            await search_engine.search("   ")

    @pytest.mark.asyncio
    async def test_search_rejects_page_size_over_max(self, search_engine):
        with pytest.raises(InvalidPaginationError):
            await search_engine.search("spring", page_size=51)

    @pytest.mark.asyncio
    async def test_search_rejects_negative_page(self, search_engine):
        with pytest.raises(InvalidPaginationError):
            await search_engine.search("spring", page=-1)

    @pytest.mark.asyncio
    async def test_repeated_search_is_served_from_cache(self, search_engine):
        first = await search_engine.search("spring")
        second = await search_engine.search("  SPRING ")

        assert second is not first
        assert second.to_dict()["results"] == first.to_dict()["results"]
        assert search_engine.get_statistics()["cache"]["hits"] == 1

    @pytest.mark.asyncio
    async def test_mutating_returned_page_does_not_corrupt_cache(self, search_engine):
        first = await search_engine.search("spring")
        first.results.clear()
        first.metadata["filtered"] = True
        first.pagination.total_matches = 0

        second = await search_engine.search("spring")
        third = await search_engine.search("spring")

        assert search_engine.get_statistics()["cache"]["hits"] == 2
        for page in (second, third):
            assert [result.id for result in page.results] == [1, 2]
            assert page.total_matches == 2
            assert page.pagination.total_matches == 2
            assert "filtered" not in page.metadata

    @pytest.mark.asyncio
    async def test_hits_are_immutable(self, search_engine):
        page = await search_engine.search("spring")

        with pytest.raises(dataclasses.FrozenInstanceError):
            page.results[0].score = 100.0

    @pytest.mark.asyncio
    async def test_index_mutation_invalidates_cache(self, search_engine):
        first = await search_engine.search("spring")

        await search_engine.index_document(
            IndexedDocument(id=3, title="Spring Security", content="auth")
        )
        second = await search_engine.search("spring")

        assert second is not first
        assert [result.id for result in second.results] == [1, 3, 2]

        await search_engine.remove_document(1)
        third = await search_engine.search("spring")

        assert [result.id for result in third.results] == [3, 2]

    @pytest.mark.asyncio
    async def test_cache_disabled(self, populated_index):
        engine = SearchEngine(SearchConfig(cache_enabled=False), index=populated_index)

        first = await engine.search("spring")
        second = await engine.search("spring")

        assert second is not first
        assert len(engine.cache) == 0

    @pytest.mark.asyncio
    async def test_timeout_is_reported_with_configured_limit(self, search_engine):
        with patch.object(
            search_engine.index, "search", side_effect=SearchTimeoutError("spring")
        ):
            with pytest.raises(SearchTimeoutError) as exc_info:
                await search_engine.search("spring")

        assert exc_info.value.data["timeout_seconds"] == 5.0
        assert exc_info.value.to_dict()["code"] == "SEARCH_TIMEOUT"

    @pytest.mark.asyncio
    async def test_index_document_validates(self, search_engine):
        with pytest.raises(InvalidDocumentError):
            await search_engine.index_document(IndexedDocument(id=9, title="", content="x"))

    @pytest.mark.asyncio
    async def test_remove_missing_document_is_noop(self, search_engine):
        assert await search_engine.remove_document(99) is False
        assert search_engine.get_statistics()["document_count"] == 2


class TestStoreSync:
    @pytest.mark.asyncio
    async def test_rebuild_from_store(self, search_config, mock_repository):
        engine = SearchEngine(search_config)

        count = await engine.rebuild_from_store(mock_repository)

        assert count == 2
        page = await engine.search("spring")
        assert page.total_matches == 2

    @pytest.mark.asyncio
    async def test_rebuild_failure_keeps_previous_index(self, search_engine, mock_repository):
        mock_repository.list_published_posts.side_effect = BackingStoreError(
            "list_published_posts", "disk I/O error"
        )

        with pytest.raises(BackingStoreError):
            await search_engine.rebuild_from_store(mock_repository)

        assert len(search_engine.index) == 2
        assert search_engine.index.get(1).title == "Spring Boot Guide"

    @pytest.mark.asyncio
    async def test_sync_post_indexes_published_post(self, search_engine, mock_repository):
        post = Mock(is_published=True)
        mock_repository.get_post.return_value = post
        mock_repository.to_indexed_document = Mock(
            return_value=IndexedDocument(id=1, title="Spring Boot Guide v2", content="updated")
        )

        assert await search_engine.sync_post(mock_repository, 1) is True
        assert search_engine.index.get(1).title == "Spring Boot Guide v2"

    @pytest.mark.asyncio
    async def test_sync_post_removes_unpublished_post(self, search_engine, mock_repository):
        mock_repository.get_post.return_value = Mock(is_published=False)

        assert await search_engine.sync_post(mock_repository, 1) is False
        assert 1 not in search_engine.index

    @pytest.mark.asyncio
    async def test_sync_post_removes_deleted_post(self, search_engine, mock_repository):
        assert await search_engine.sync_post(mock_repository, 2) is False
        assert 2 not in search_engine.index

    @pytest.mark.asyncio
    async def test_sync_post_store_failure_leaves_index(self, search_engine, mock_repository):
        mock_repository.get_post.side_effect = BackingStoreError("get_post", "locked")
        generation = search_engine.index.generation

        with pytest.raises(BackingStoreError):
            await search_engine.sync_post(mock_repository, 1)

        assert 1 in search_engine.index
        assert search_engine.index.generation == generation
