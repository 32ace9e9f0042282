"""Read-only access to the blog post store."""

from devnote_search.storage.database import DatabaseConfig, DatabaseManager
from devnote_search.storage.models import Base, Post, Tag, post_tags
from devnote_search.storage.repositories import PostRepository

__all__ = [
    # Database management
    "DatabaseManager",
    "DatabaseConfig",
    # Models
    "Base",
    "Post",
    "Tag",
    "post_tags",
    # Repositories
    "PostRepository",
]
