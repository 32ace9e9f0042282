"""Pytest configuration and shared fixtures."""

import tempfile
from pathlib import Path
from typing import AsyncGenerator, List

import pytest
import pytest_asyncio
from faker import Faker

from devnote_search.config.settings import SearchConfig
from devnote_search.search.index import RelevanceSearchIndex
from devnote_search.search.models import IndexedDocument
from devnote_search.storage.database import DatabaseConfig, DatabaseManager
from devnote_search.storage.models import Post, Tag

fake = Faker()
Faker.seed(1234)

FILLER_WORDS = ["alpha", "beta", "gamma", "delta", "omega", "lorem", "ipsum"]


@pytest.fixture
def spring_documents() -> List[IndexedDocument]:
    """The two posts from the 'spring' ranking scenario."""
    return [
        IndexedDocument(
            id=1,
            title="Spring Boot Guide",
            content="Learn Spring Boot basics",
            tags=["java", "spring-boot"],
        ),
        IndexedDocument(
            id=2,
            title="Docker Tips",
            content="Spring apps in containers",
            tags=["docker"],
        ),
    ]


@pytest.fixture
def search_index() -> RelevanceSearchIndex:
    """Empty index with default highlight markers."""
    return RelevanceSearchIndex()


@pytest.fixture
def populated_index(search_index, spring_documents) -> RelevanceSearchIndex:
    for document in spring_documents:
        search_index.index(document)
    return search_index


@pytest.fixture
def search_config() -> SearchConfig:
    return SearchConfig(
        default_page_size=10,
        max_page_size=50,
        query_timeout=5.0,
        cache_size=10,
        cache_ttl=60,
    )


@pytest.fixture
def filler_documents() -> List[IndexedDocument]:
    """Posts built from a vocabulary no test query matches."""
    return [
        IndexedDocument(
            id=100 + i,
            title=fake.sentence(nb_words=4, ext_word_list=FILLER_WORDS),
            content=fake.paragraph(ext_word_list=FILLER_WORDS),
            tags=["misc"],
        )
        for i in range(20)
    ]


@pytest_asyncio.fixture
async def temp_db() -> AsyncGenerator[DatabaseManager, None]:
    """Temporary SQLite post store with the read-model tables created."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        temp_path = f.name

    db_manager = DatabaseManager(DatabaseConfig(database_path=temp_path, enable_wal=False))
    await db_manager.initialize()

    try:
        yield db_manager
    finally:
        await db_manager.close()
        Path(temp_path).unlink(missing_ok=True)


@pytest_asyncio.fixture
async def seeded_db(temp_db) -> DatabaseManager:
    """Post store holding two published posts, one draft and one archived."""
    async with temp_db.get_session() as session:
        java = Tag(name="Java", slug="java")
        spring = Tag(name="Spring-Boot", slug="spring-boot")
        docker = Tag(name="docker", slug="docker")
        session.add_all([java, spring, docker])

        session.add_all([
            Post(
                id=1,
                title="Spring Boot Guide",
                slug="spring-boot-guide",
                excerpt="Getting started",
                content="Learn Spring Boot basics",
                status="PUBLISHED",
                tags=[java, spring],
            ),
            Post(
                id=2,
                title="Docker Tips",
                slug="docker-tips",
                content="Spring apps in containers",
                status="PUBLISHED",
                tags=[docker],
            ),
            Post(
                id=3,
                title="Spring Draft",
                slug="spring-draft",
                content="Unfinished spring notes",
                status="DRAFT",
            ),
            Post(
                id=4,
                title="Old Spring Post",
                slug="old-spring-post",
                content="Archived spring content",
                status="ARCHIVED",
            ),
        ])

    return temp_db
