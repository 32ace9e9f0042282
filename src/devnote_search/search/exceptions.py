"""Search error hierarchy.

Every error carries a stable ``code`` and a ``data`` dict so the request
layer can turn it into a response body with ``to_dict()``.
"""

import time
from typing import Any, Dict, Optional


class SearchError(Exception):
    """Base exception for search index and engine errors."""

    code = "SEARCH_ERROR"

    def __init__(self, message: str, data: Optional[Dict[str, Any]] = None):
        """Initialize search error.

        Args:
            message: Human-readable error message
            data: Additional error context
        """
        super().__init__(message)
        self.message = message
        self.data = data or {}
        self.timestamp = time.time()

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to a serializable error body."""
        error_dict = {"code": self.code, "message": self.message}
        if self.data:
            error_dict["data"] = self.data
        return error_dict


class InvalidDocumentError(SearchError, ValueError):
    """A document passed for indexing is missing a required field."""

    code = "INVALID_DOCUMENT"

    def __init__(self, field: str, message: str, document_id: Any = None):
        data = {"field": field, "error_type": "validation_error"}
        if document_id is not None:
            data["document_id"] = str(document_id)
        super().__init__(f"Invalid document field '{field}': {message}", data)
        self.field = field
        self.document_id = document_id


class EmptyQueryError(SearchError, ValueError):
    """The search query is empty or whitespace only."""

    code = "EMPTY_QUERY"

    def __init__(self, message: str = "Search query cannot be empty"):
        super().__init__(
            message, {"parameter": "query", "error_type": "validation_error"}
        )


class InvalidPaginationError(SearchError, ValueError):
    """Page number or page size is out of range."""

    code = "INVALID_PAGINATION"

    def __init__(self, parameter: str, message: str, value: Any = None):
        data = {"parameter": parameter, "error_type": "validation_error"}
        if value is not None:
            data["value"] = str(value)
        super().__init__(f"Invalid parameter '{parameter}': {message}", data)
        self.parameter = parameter


class BackingStoreError(SearchError):
    """Reading from the post store failed; the index was left unchanged."""

    code = "BACKING_STORE_ERROR"

    def __init__(self, operation: str, message: str):
        super().__init__(
            f"Post store operation '{operation}' failed: {message}",
            {"operation": operation, "error_type": "database_error"},
        )
        self.operation = operation


class SearchTimeoutError(SearchError):
    """The search deadline passed before a response was produced."""

    code = "SEARCH_TIMEOUT"

    def __init__(self, query: str, timeout_seconds: Optional[float] = None):
        data: Dict[str, Any] = {"query": query, "error_type": "timeout_error"}
        message = f"Search for '{query}' exceeded its deadline"
        if timeout_seconds is not None:
            data["timeout_seconds"] = timeout_seconds
            message = f"Search for '{query}' timed out after {timeout_seconds}s"
        super().__init__(message, data)
