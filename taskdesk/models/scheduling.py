"""Data models produced by a scheduled-task run."""

from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field

from ..utils.datetime_utils import to_iso_utc


class TaskFrequency(str, Enum):
    """How often a template materializes a new task."""
    ONE_TIME = "one_time"
    DAILY = "daily"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUALLY = "semi_annually"
    ANNUALLY = "annually"


FREQUENCY_LABELS = {
    "one_time": "One Time",
    "daily": "Daily",
    "monthly": "Monthly",
    "quarterly": "Quarterly",
    "semi_annually": "Semi-Annually",
    "annually": "Annually",
}

UNKNOWN_USER_NAME = "Unknown User"


def frequency_label(frequency: Optional[str]) -> str:
    """Display label for a stored frequency value; unknown values pass through."""
    if not frequency:
        return "N/A"
    return FREQUENCY_LABELS.get(frequency, frequency)


class ErrorDetail(BaseModel):
    """A template that could not be fully processed."""
    template_id: int = Field(alias="templateId")
    error: str

    model_config = {"populate_by_name": True}


class RunSummary(BaseModel):
    """Outcome of one scheduled-task run."""
    timestamp: datetime
    templates_processed: int = Field(0, alias="templatesProcessed")
    tasks_created: int = Field(0, alias="tasksCreated")
    error_details: List[ErrorDetail] = Field(default_factory=list, alias="errorDetails")

    model_config = {"populate_by_name": True}

    @property
    def errors(self) -> int:
        return len(self.error_details)

    def add_error(self, template_id: int, error: str) -> None:
        self.error_details.append(ErrorDetail(template_id=template_id, error=error))

    def to_response(self) -> Dict[str, Any]:
        """JSON document returned to whoever triggered the run."""
        return {
            "timestamp": to_iso_utc(self.timestamp),
            "templatesProcessed": self.templates_processed,
            "tasksCreated": self.tasks_created,
            "errors": self.errors,
            "errorDetails": [d.model_dump(by_alias=True) for d in self.error_details],
        }


class TaskNotification(BaseModel):
    """Payload posted to the notification webhook for a created task."""
    id: int
    title: Optional[str] = None
    description: Optional[str] = None
    user_id: int
    user_name: str = UNKNOWN_USER_NAME
    frequency: Optional[str] = None
    scheduled_day: Optional[int] = None
    status: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_payload(self) -> Dict[str, Any]:
        payload = self.model_dump()
        payload["created_at"] = to_iso_utc(self.created_at)
        return payload
