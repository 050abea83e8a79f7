"""
Pydantic models for API endpoint input validation.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from .scheduling import TaskFrequency


class TemplateCreate(BaseModel):
    """Input validation for creating a recurring template."""
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = Field(None, max_length=5000)
    user_id: int = Field(..., gt=0)
    frequency: TaskFrequency = Field(default=TaskFrequency.ONE_TIME)
    scheduled_day: Optional[int] = Field(None, ge=1, le=31)
    status: str = Field(default="pending", max_length=30)
    chat_status: Optional[str] = Field(None, pattern=r"^(open|closed)$")
    next_scheduled_at: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        stripped = v.strip()
        if not stripped:
            raise ValueError("title cannot be empty after stripping whitespace")
        return stripped

