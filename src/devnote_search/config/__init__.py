"""Configuration and logging for devnote-search."""

from .logging import configure_logging, configure_logging_from_settings, get_logger
from .settings import DatabaseConfig, LoggingConfig, SearchConfig, Settings

__all__ = [
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "DatabaseConfig",
    "LoggingConfig",
    "SearchConfig",
    "Settings",
]
