"""SQLAlchemy models for the blog's post store.

Only the tables search reads from are mapped: ``posts``, ``tags`` and the
``post_tags`` join table.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

POST_STATUS_DRAFT = "DRAFT"
POST_STATUS_PUBLISHED = "PUBLISHED"
POST_STATUS_ARCHIVED = "ARCHIVED"
POST_STATUSES = (POST_STATUS_DRAFT, POST_STATUS_PUBLISHED, POST_STATUS_ARCHIVED)

# SQLite only autoincrements INTEGER primary keys
IdType = BigInteger().with_variant(Integer(), "sqlite")


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps."""

    created_at = Column(
        DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )


post_tags = Table(
    "post_tags",
    Base.metadata,
    Column("id", IdType, primary_key=True, autoincrement=True),
    Column("post_id", IdType, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
    Column("tag_id", IdType, ForeignKey("tags.id", ondelete="CASCADE"), nullable=False),
    UniqueConstraint("post_id", "tag_id", name="unique_post_tag"),
    Index("idx_post_tags_post_id", "post_id"),
    Index("idx_post_tags_tag_id", "tag_id"),
)


class Tag(Base, TimestampMixin):
    """A tag attached to posts."""

    __tablename__ = "tags"

    id = Column(IdType, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False, unique=True)
    slug = Column(String(50), nullable=False, unique=True)

    posts = relationship("Post", secondary=post_tags, back_populates="tags")

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name='{self.name}')>"


class Post(Base, TimestampMixin):
    """A blog post; the authoritative source of indexed documents."""

    __tablename__ = "posts"

    id = Column(IdType, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True)
    excerpt = Column(Text)
    content = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default=POST_STATUS_DRAFT)
    published_at = Column(DateTime)

    tags = relationship(
        "Tag",
        secondary=post_tags,
        back_populates="posts",
        order_by="Tag.id",
    )

    __table_args__ = (
        Index("idx_posts_status", "status"),
        Index("idx_posts_published_at", "published_at"),
    )

    @property
    def is_published(self) -> bool:
        return self.status == POST_STATUS_PUBLISHED

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title='{self.title}', status='{self.status}')>"
