"""
Unit tests for gestational age and the milestone table.
"""

from datetime import UTC, date, datetime, timedelta

import pytest

from mamacare.domains.reminders.domain.services.gestational_age import compute_current_week, parse_due_date
from mamacare.domains.reminders.domain.services.milestones import get_milestone

TODAY = date(2025, 3, 10)


@pytest.mark.unit
class TestComputeCurrentWeek:
    def test_due_today_is_week_40(self):
        assert compute_current_week(TODAY, TODAY) == 40

    def test_ten_days_left_is_week_39(self):
        assert compute_current_week(TODAY + timedelta(days=10), TODAY) == 39

    def test_twenty_weeks_left(self):
        assert compute_current_week(TODAY + timedelta(weeks=20), TODAY) == 20

    def test_clamped_to_range(self):
        assert compute_current_week(TODAY + timedelta(weeks=60), TODAY) == 1
        assert compute_current_week(TODAY - timedelta(weeks=5), TODAY) == 42

    def test_overdue_by_a_few_days(self):
        # floor(-3 / 7) == -1
        assert compute_current_week(TODAY - timedelta(days=3), TODAY) == 41


@pytest.mark.unit
class TestParseDueDate:
    def test_accepts_date_datetime_and_iso_strings(self):
        assert parse_due_date(date(2025, 8, 1)) == date(2025, 8, 1)
        assert parse_due_date(datetime(2025, 8, 1, 23, 30, tzinfo=UTC)) == date(2025, 8, 1)
        assert parse_due_date("2025-08-01") == date(2025, 8, 1)
        assert parse_due_date("2025-08-01T00:00:00Z") == date(2025, 8, 1)

    @pytest.mark.parametrize("value", [None, "", "not a date", "2025-13-45"])
    def test_rejects_missing_or_malformed(self, value):
        with pytest.raises(ValueError):
            parse_due_date(value)


@pytest.mark.unit
class TestMilestones:
    def test_week_20_is_halfway_point(self):
        milestone = get_milestone(20)

        assert milestone is not None
        assert milestone.category == "milestone"
        assert "Halfway point" in milestone.message
        assert "anatomy scan" in milestone.message
        assert milestone.title == "Week 20 Milestone"

    def test_week_without_entry(self):
        assert get_milestone(21) is None
        assert get_milestone(None) is None

    def test_table_weeks(self):
        weeks = [week for week in range(1, 43) if get_milestone(week) is not None]

        assert weeks == [4, 8, 12, 16, 20, 24, 28, 32, 36, 40]
