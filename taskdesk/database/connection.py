"""
Database connection and session management with connection pooling.

Provides async SQLAlchemy engine and session factory for the task store.
"""

import logging
from typing import AsyncGenerator, Optional, Dict, Any
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncSession,
    async_sessionmaker,
    AsyncEngine,
)
from sqlalchemy.pool import NullPool, AsyncAdaptedQueuePool

from config import settings
from .models import Base

logger = logging.getLogger(__name__)


class Database:
    """Database connection manager."""

    def __init__(self):
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._initialized = False

    async def initialize(self) -> bool:
        """Initialize database connection and create tables."""
        if self._initialized:
            return True

        database_url = settings.database_url
        if not database_url:
            logger.warning("DATABASE_URL not configured")
            return False

        try:
            # Convert postgres:// to postgresql+asyncpg://
            if database_url.startswith("postgres://"):
                database_url = database_url.replace("postgres://", "postgresql+asyncpg://", 1)
            elif database_url.startswith("postgresql://"):
                database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)

            if settings.environment == "test":
                pool_config = {
                    "poolclass": NullPool,
                }
                logger.info("Using NullPool for test environment")
            else:
                pool_config = {
                    "poolclass": AsyncAdaptedQueuePool,
                    "pool_size": settings.db_pool_size,
                    "max_overflow": settings.db_max_overflow,
                    "pool_timeout": settings.db_pool_timeout,
                    "pool_recycle": settings.db_pool_recycle,
                    "pool_pre_ping": True,
                }
                logger.info(
                    f"Database pool config: size={settings.db_pool_size}, "
                    f"max_overflow={settings.db_max_overflow}, "
                    f"timeout={settings.db_pool_timeout}s"
                )

            self.engine = create_async_engine(
                database_url,
                echo=settings.database_echo,
                **pool_config
            )

            self.session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )

            # Create all tables
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

            # Dashboards created before recurrence support lack the scheduling columns
            await self._run_migrations()

            self._initialized = True
            logger.info("Database initialized successfully")
            return True

        except Exception as e:
            logger.error(f"Database initialization failed: {e}")
            return False

    async def _run_migrations(self):
        """Add recurrence columns to a pre-existing tasks table."""
        from sqlalchemy import text

        # Format: (table_name, column_name, column_definition)
        migrations = [
            ("tasks", "scheduled_day", "INTEGER"),
            ("tasks", "is_template", "BOOLEAN DEFAULT FALSE"),
            ("tasks", "next_scheduled_at", "TIMESTAMP"),
            ("tasks", "last_created_at", "TIMESTAMP"),
            ("tasks", "parent_task_id", "INTEGER REFERENCES tasks(id)"),
        ]

        async with self.engine.begin() as conn:
            for table_name, column_name, column_def in migrations:
                try:
                    result = await conn.execute(text("""
                        SELECT column_name
                        FROM information_schema.columns
                        WHERE table_name = :table
                        AND column_name = :column
                    """), {"table": table_name, "column": column_name})
                    exists = result.fetchone()

                    if not exists:
                        logger.info(f"Migration: Adding column {table_name}.{column_name}")

                        # Identifiers are only allowed to be alphanumeric and underscores
                        if not table_name.replace('_', '').isalnum():
                            raise ValueError(f"Invalid table name: {table_name}")
                        if not column_name.replace('_', '').isalnum():
                            raise ValueError(f"Invalid column name: {column_name}")

                        await conn.execute(text(f"""
                            ALTER TABLE {table_name}
                            ADD COLUMN {column_name} {column_def}
                        """))
                        logger.info(f"  Added {column_name}")
                except Exception as e:
                    logger.warning(f"Migration error for {table_name}.{column_name}: {e}")

    async def close(self):
        """Close database connection."""
        if self.engine:
            await self.engine.dispose()
            self._initialized = False
            logger.info("Database connection closed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get a database session."""
        if not self._initialized:
            await self.initialize()

        if not self.session_factory:
            raise RuntimeError("Database not initialized")

        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception as e:
                await session.rollback()
                logger.error(f"Database session error: {e}")
                raise

    async def health_check(self) -> Dict[str, Any]:
        """Perform health check on database."""
        from sqlalchemy import text

        try:
            if not self._initialized:
                await self.initialize()

            async with self.session() as session:
                result = await session.execute(text("SELECT 1"))
                result.scalar()

            return {
                "status": "healthy",
                "initialized": self._initialized,
            }
        except Exception as e:
            return {
                "status": "unhealthy",
                "error": str(e),
            }


# Singleton instance
_database: Optional[Database] = None


def get_database() -> Database:
    """Get the database singleton."""
    global _database
    if _database is None:
        _database = Database()
    return _database


async def init_database() -> bool:
    """Initialize the database."""
    db = get_database()
    return await db.initialize()


async def close_database():
    """Close the database connection."""
    global _database
    if _database:
        await _database.close()
        _database = None
