"""Database connection management for the post store."""

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator, Dict, Optional

import aiosqlite
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from devnote_search.config.logging import get_logger
from devnote_search.config.settings import Settings
from devnote_search.storage.models import Base

logger = get_logger(__name__)


class DatabaseConfig:
    """Database configuration settings."""

    def __init__(
        self,
        database_path: str = "devnote.db",
        enable_wal: bool = True,
        connection_timeout: float = 30.0,
        busy_timeout: float = 30.0,
        enable_foreign_keys: bool = True,
        create_tables: bool = True,
    ):
        self.database_path = database_path
        self.enable_wal = enable_wal
        self.connection_timeout = connection_timeout
        self.busy_timeout = busy_timeout
        self.enable_foreign_keys = enable_foreign_keys
        self.create_tables = create_tables

    @classmethod
    def from_settings(
        cls, settings: Settings, database_path: Optional[str] = None
    ) -> "DatabaseConfig":
        """Build a config from application settings.

        The file lives under ``data_dir`` unless ``DB_PATH`` is absolute.
        """
        return cls(
            database_path=database_path or str(settings.get_database_path()),
            connection_timeout=float(settings.database.timeout),
            busy_timeout=float(settings.database.timeout),
        )

    @property
    def database_url(self) -> str:
        """Get the database URL for SQLAlchemy."""
        return f"sqlite+aiosqlite:///{self.database_path}"


class DatabaseManager:
    """Manages post store connections and sessions."""

    def __init__(self, config: Optional[DatabaseConfig] = None):
        self.config = config or DatabaseConfig()
        self.logger = get_logger(__name__)
        self._engine = None
        self._session_factory = None
        self._initialized = False
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Open the engine and create the mapped tables if missing."""
        async with self._lock:
            if self._initialized:
                return

            try:
                self.logger.info(
                    "Initializing database",
                    database_path=self.config.database_path,
                )

                db_path = Path(self.config.database_path)
                db_path.parent.mkdir(parents=True, exist_ok=True)

                self._engine = create_async_engine(
                    self.config.database_url,
                    poolclass=StaticPool,
                    connect_args={
                        "check_same_thread": False,
                        "timeout": self.config.connection_timeout,
                    },
                    echo=False,
                )

                await self._configure_sqlite()

                self._session_factory = async_sessionmaker(
                    self._engine, class_=AsyncSession, expire_on_commit=False
                )

                if self.config.create_tables:
                    async with self._engine.begin() as conn:
                        await conn.run_sync(Base.metadata.create_all)

                self._initialized = True

                self.logger.info("Database initialization completed successfully")

            except Exception as e:
                self.logger.error("Database initialization failed", error=str(e))
                raise

    async def _configure_sqlite(self) -> None:
        """Configure SQLite-specific settings."""
        async with aiosqlite.connect(self.config.database_path) as conn:
            if self.config.enable_wal:
                await conn.execute("PRAGMA journal_mode=WAL")

            if self.config.enable_foreign_keys:
                await conn.execute("PRAGMA foreign_keys=ON")

            await conn.execute(
                f"PRAGMA busy_timeout={int(self.config.busy_timeout * 1000)}"
            )
            await conn.commit()

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get an async database session; commits on success."""
        if not self._initialized:
            await self.initialize()

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception as e:
                await session.rollback()
                self.logger.error("Database session error, rolling back", error=str(e))
                raise

    async def health_check(self) -> Dict[str, Any]:
        """Perform database health check."""
        try:
            async with self.get_session() as session:
                result = await session.execute(text("SELECT 1"))
                result.scalar()

                table_counts = {}
                for table in ("posts", "tags", "post_tags"):
                    count = await session.execute(text(f"SELECT COUNT(*) FROM {table}"))
                    table_counts[table] = count.scalar() or 0

            db_path = Path(self.config.database_path)
            file_size = db_path.stat().st_size if db_path.exists() else 0

            return {
                "status": "healthy",
                "database_path": self.config.database_path,
                "file_size_bytes": file_size,
                "wal_enabled": self.config.enable_wal,
                "table_counts": table_counts,
            }

        except Exception as e:
            return {
                "status": "unhealthy",
                "error": str(e),
                "database_path": self.config.database_path,
            }

    async def close(self) -> None:
        """Close database connections and cleanup."""
        if self._engine:
            await self._engine.dispose()
            self._engine = None

        self._session_factory = None
        self._initialized = False

        self.logger.info("Database connections closed")
