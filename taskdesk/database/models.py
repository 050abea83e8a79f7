"""
SQLAlchemy models for PostgreSQL database.

Schema includes:
- Users (employees, technicians and managers tasks are assigned to)
- Tasks, both recurring templates and the instances created from them
"""

from datetime import datetime
from typing import Optional, List
from sqlalchemy import (
    String,
    Text,
    Integer,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
)
from sqlalchemy.orm import DeclarativeBase, relationship, Mapped, mapped_column
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


# ==================== USERS ====================

class UserDB(Base):
    """People tasks are assigned to."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    role: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)  # employee, technician, manager
    chat_history: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    tasks: Mapped[List["TaskDB"]] = relationship("TaskDB", back_populates="user")

    __table_args__ = (
        Index("idx_users_name", "name"),
    )


# ==================== TASKS ====================

class TaskDB(Base):
    """Tasks, including recurring templates and their generated instances."""
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Core fields
    title: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[Optional[str]] = mapped_column(String(30), default="pending")

    # Chatbot integration
    chat_status: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)  # open, closed
    chat_history: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Assignment
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    user: Mapped[Optional["UserDB"]] = relationship("UserDB", back_populates="tasks")

    # Recurrence
    frequency: Mapped[Optional[str]] = mapped_column(String(20), default="one_time")
    scheduled_day: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # day of month
    is_template: Mapped[bool] = mapped_column(Boolean, default=False)
    next_scheduled_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    last_created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    # Instances point back at the template that created them
    parent_task_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("tasks.id"), nullable=True)
    parent_task: Mapped[Optional["TaskDB"]] = relationship("TaskDB", remote_side=[id], backref="instances")

    __table_args__ = (
        Index("idx_tasks_user", "user_id"),
        Index("idx_tasks_template_next", "is_template", "next_scheduled_at"),
        Index("idx_tasks_parent", "parent_task_id"),
        Index("idx_tasks_created", "created_at"),
    )

    def to_dict(self) -> dict:
        """Plain column values, used for API responses and notifications."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "description": self.description,
            "frequency": self.frequency,
            "scheduled_day": self.scheduled_day,
            "status": self.status,
            "chat_status": self.chat_status,
            "is_template": self.is_template,
            "next_scheduled_at": self.next_scheduled_at,
            "last_created_at": self.last_created_at,
            "created_at": self.created_at,
            "parent_task_id": self.parent_task_id,
        }
