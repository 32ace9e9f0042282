"""Repository layer for reading the post store."""

from .post_repository import PostRepository

__all__ = ["PostRepository"]
