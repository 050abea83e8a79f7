"""
Pytest configuration and shared fixtures.
"""

import os

# Settings are read at import time
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("ENABLE_SCHEDULER", "false")
os.environ.setdefault("NOTIFICATION_WEBHOOK_URL", "")

import pytest
import pytest_asyncio
from datetime import datetime
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from taskdesk.database.connection import Database
from taskdesk.database.models import Base, TaskDB, UserDB


@pytest.fixture
def run_time():
    """Reference time used by scheduler runs under test."""
    return datetime(2024, 1, 15, 9, 30, 0)


@pytest.fixture
def make_template():
    """Factory for due template rows (not persisted)."""
    def _make(task_id=1, **overrides):
        values = {
            "id": task_id,
            "user_id": 7,
            "title": f"Monthly inspection {task_id}",
            "description": "Check the fire extinguishers",
            "frequency": "monthly",
            "scheduled_day": 5,
            "status": "pending",
            "chat_status": "open",
            "is_template": True,
            "next_scheduled_at": datetime(2024, 1, 15, 8, 0, 0),
            "last_created_at": None,
            "created_at": datetime(2023, 12, 1, 12, 0, 0),
            "parent_task_id": None,
        }
        values.update(overrides)
        return TaskDB(**values)
    return _make


@pytest.fixture
def sample_users():
    """Assignee directory entries."""
    return [
        {"id": 7, "name": "Dana Whitfield"},
        {"id": 8, "name": "Ravi Patel"},
    ]


@pytest_asyncio.fixture
async def sqlite_database():
    """Database wired to an in-memory SQLite engine with the full schema."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    db = Database()
    db.engine = engine
    db.session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    db._initialized = True

    async with db.session() as session:
        session.add_all([
            UserDB(id=7, name="Dana Whitfield", role="technician"),
            UserDB(id=8, name="Ravi Patel", role="employee"),
        ])

    yield db

    await engine.dispose()
