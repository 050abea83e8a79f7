"""
User repository.

The scheduler only needs the id -> name directory to label
notifications; the dashboard lists users when assigning templates.
"""

import logging
from typing import Optional, List, Dict, Any

from sqlalchemy import select

from ..connection import get_database
from ..models import UserDB

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user lookups."""

    def __init__(self):
        self.db = get_database()

    async def get_directory(self) -> List[Dict[str, Any]]:
        """Get every user as an {id, name} pair."""
        async with self.db.session() as session:
            result = await session.execute(
                select(UserDB.id, UserDB.name)
            )
            return [{"id": row.id, "name": row.name} for row in result.all()]

    async def get_all(self) -> List[UserDB]:
        """Get all users ordered by name."""
        async with self.db.session() as session:
            result = await session.execute(
                select(UserDB).order_by(UserDB.name)
            )
            return list(result.scalars().all())

    async def get_by_id(self, user_id: int) -> Optional[UserDB]:
        """Get user by database ID."""
        async with self.db.session() as session:
            result = await session.execute(
                select(UserDB).where(UserDB.id == user_id)
            )
            return result.scalar_one_or_none()


# Singleton
_user_repo: Optional[UserRepository] = None


def get_user_repository() -> UserRepository:
    """Get the user repository singleton."""
    global _user_repo
    if _user_repo is None:
        _user_repo = UserRepository()
    return _user_repo
