"""Application configuration settings."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class LoggingConfig(BaseSettings):
    """Logging configuration settings."""

    level: str = Field(default="INFO", description="Log level")
    file_path: Optional[str] = Field(default=None, description="Log file path")
    json_format: bool = Field(default=True, description="Use JSON log format")
    enable_performance: bool = Field(
        default=True, description="Enable performance logging"
    )

    class Config:
        env_prefix = "LOG_"


class DatabaseConfig(BaseSettings):
    """Post store configuration settings."""

    path: str = Field(default="devnote.db", description="Database file path")
    timeout: int = Field(default=30, description="Query timeout in seconds")

    class Config:
        env_prefix = "DB_"


class SearchConfig(BaseSettings):
    """Search configuration settings.

    Scoring weights are fixed in ``search.relevance`` and deliberately have
    no setting here.
    """

    default_page_size: int = Field(
        default=10, ge=1, description="Page size used when none is given"
    )
    max_page_size: int = Field(
        default=100, ge=1, description="Largest page size a caller may request"
    )
    query_timeout: float = Field(
        default=5.0, gt=0, description="Query timeout in seconds"
    )
    cache_enabled: bool = Field(default=True, description="Cache search pages")
    cache_size: int = Field(
        default=1000, ge=1, description="Maximum cached search pages"
    )
    cache_ttl: int = Field(
        default=300, ge=1, description="Search cache TTL in seconds"
    )
    highlight_pre_tag: str = Field(
        default="<mark>", description="Marker inserted before a matched span"
    )
    highlight_post_tag: str = Field(
        default="</mark>", description="Marker inserted after a matched span"
    )

    class Config:
        env_prefix = "SEARCH_"


class Settings(BaseSettings):
    """Main application settings."""

    # Sub-configurations
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)

    # Global settings
    data_dir: str = Field(default="data", description="Data directory path")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    def get_database_path(self) -> Path:
        """Get the database file path."""
        if Path(self.database.path).is_absolute():
            return Path(self.database.path)
        return Path(self.data_dir) / self.database.path
