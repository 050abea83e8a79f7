from .scheduling import (
    TaskFrequency,
    FREQUENCY_LABELS,
    UNKNOWN_USER_NAME,
    frequency_label,
    ErrorDetail,
    RunSummary,
    TaskNotification,
)
from .api_validation import TemplateCreate

__all__ = [
    "TaskFrequency",
    "FREQUENCY_LABELS",
    "UNKNOWN_USER_NAME",
    "frequency_label",
    "ErrorDetail",
    "RunSummary",
    "TaskNotification",
    "TemplateCreate",
]
