"""Read-only repository over published posts."""

import time
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from devnote_search.config.logging import get_logger, log_database_query
from devnote_search.search.exceptions import BackingStoreError
from devnote_search.search.models import IndexedDocument
from devnote_search.storage.models import POST_STATUS_PUBLISHED, Post

logger = get_logger(__name__)


class PostRepository:
    """Loads posts from the store and projects them into indexed documents.

    Every driver or SQLAlchemy failure surfaces as ``BackingStoreError``.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.logger = get_logger(f"{__name__}.Post")

    async def get_post(self, post_id: int) -> Optional[Post]:
        """Get a post with its tags by id."""
        start_time = time.perf_counter()
        try:
            stmt = (
                select(Post)
                .options(selectinload(Post.tags))
                .where(Post.id == post_id)
            )
            result = await self.session.execute(stmt)
            post = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            self.logger.error("Failed to get post", post_id=post_id, error=str(e))
            raise BackingStoreError("get_post", str(e)) from e

        log_database_query(
            self.logger,
            "SELECT",
            (time.perf_counter() - start_time) * 1000,
            rows_affected=1 if post else 0,
            post_id=post_id,
        )
        return post

    async def list_published_posts(self) -> List[IndexedDocument]:
        """Load every published post as an indexed document, ordered by id."""
        start_time = time.perf_counter()
        try:
            stmt = (
                select(Post)
                .options(selectinload(Post.tags))
                .where(Post.status == POST_STATUS_PUBLISHED)
                .order_by(Post.id)
            )
            result = await self.session.execute(stmt)
            posts = list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error("Failed to list published posts", error=str(e))
            raise BackingStoreError("list_published_posts", str(e)) from e

        log_database_query(
            self.logger,
            "SELECT",
            (time.perf_counter() - start_time) * 1000,
            rows_affected=len(posts),
        )
        return [self.to_indexed_document(post) for post in posts]

    @staticmethod
    def to_indexed_document(post: Post) -> IndexedDocument:
        return IndexedDocument(
            id=post.id,
            title=post.title,
            content=post.content,
            excerpt=post.excerpt,
            tags=[tag.name for tag in post.tags],
        )
