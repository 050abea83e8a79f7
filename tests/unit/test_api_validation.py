"""
Tests for API input validation and display helpers.
"""

import pytest
from datetime import datetime, timezone
from pydantic import ValidationError

from taskdesk.models.api_validation import TemplateCreate
from taskdesk.models.scheduling import TaskFrequency, frequency_label


class TestTemplateCreate:
    """Tests for TemplateCreate model."""

    def test_defaults(self):
        """Test a minimal template is a pending one-time task."""
        data = TemplateCreate(title="Replace lobby bulbs", user_id=7)

        assert data.frequency == TaskFrequency.ONE_TIME
        assert data.status == "pending"
        assert data.scheduled_day is None
        assert data.next_scheduled_at is None

    def test_title_is_stripped(self):
        data = TemplateCreate(title="  Replace lobby bulbs ", user_id=7)
        assert data.title == "Replace lobby bulbs"

    def test_blank_title_rejected(self):
        with pytest.raises(ValidationError, match="title cannot be empty"):
            TemplateCreate(title="   ", user_id=7)

    @pytest.mark.parametrize("frequency", ["weekly", "Monthly", "yearly"])
    def test_unknown_frequency_rejected(self, frequency):
        with pytest.raises(ValidationError):
            TemplateCreate(title="Inspection", user_id=7, frequency=frequency)

    @pytest.mark.parametrize("scheduled_day", [0, 32, -1])
    def test_scheduled_day_range(self, scheduled_day):
        with pytest.raises(ValidationError):
            TemplateCreate(title="Inspection", user_id=7, scheduled_day=scheduled_day)

    def test_scheduled_day_above_28_accepted(self):
        """Test days 29-31 are accepted and capped only when scheduling."""
        data = TemplateCreate(title="Inspection", user_id=7, frequency="monthly", scheduled_day=31)
        assert data.scheduled_day == 31

    def test_chat_status_values(self):
        assert TemplateCreate(title="Inspection", user_id=7, chat_status="closed").chat_status == "closed"
        with pytest.raises(ValidationError):
            TemplateCreate(title="Inspection", user_id=7, chat_status="archived")

    def test_aware_next_scheduled_at_kept(self):
        dt = datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)
        assert TemplateCreate(title="Inspection", user_id=7, next_scheduled_at=dt).next_scheduled_at == dt


class TestFrequencyLabel:
    """Tests for frequency_label function."""

    @pytest.mark.parametrize("frequency,label", [
        ("one_time", "One Time"),
        ("daily", "Daily"),
        ("monthly", "Monthly"),
        ("quarterly", "Quarterly"),
        ("semi_annually", "Semi-Annually"),
        ("annually", "Annually"),
    ])
    def test_known_frequencies(self, frequency, label):
        assert frequency_label(frequency) == label

    def test_unknown_frequency_passes_through(self):
        assert frequency_label("fortnightly") == "fortnightly"

    @pytest.mark.parametrize("frequency", [None, ""])
    def test_missing_frequency(self, frequency):
        assert frequency_label(frequency) == "N/A"
