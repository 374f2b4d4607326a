"""
Tests for due-date aging labels.
"""

from datetime import date

import pytest

from invoice_engines.aging import (
    AgingTone,
    DueDateAging,
    calendar_days_until,
    describe_due_date_aging,
)
from tests.factories import dt, make_invoice


class TestCalendarDays:

    def test_counts_whole_calendar_days(self):
        assert calendar_days_until(dt(2024, 2, 10), dt(2024, 2, 1)) == 9

    def test_time_of_day_ignored(self):
        assert calendar_days_until(dt(2024, 2, 2, 1), dt(2024, 2, 1, 23)) == 1

    def test_negative_after_due(self):
        assert calendar_days_until(dt(2024, 1, 30), dt(2024, 2, 1)) == -2

    def test_accepts_dates(self):
        assert calendar_days_until(date(2024, 3, 1), date(2024, 2, 28)) == 2  # leap year


class TestDescribeDueDateAging:

    def test_no_due_date(self):
        aging = describe_due_date_aging(make_invoice(due_at=None), dt(2024, 2, 1))

        assert aging == DueDateAging(None, AgingTone.NO_DUE_DATE, "No due date")
        assert aging.days_overdue == 0

    def test_unparseable_due_date_treated_as_missing(self):
        aging = describe_due_date_aging(make_invoice(due_at="soon"), dt(2024, 2, 1))

        assert aging.tone is AgingTone.NO_DUE_DATE

    def test_due_today(self):
        aging = describe_due_date_aging(make_invoice(due_at=dt(2024, 2, 1, 17)), dt(2024, 2, 1, 9))

        assert aging.days_until_due == 0
        assert aging.tone is AgingTone.DUE_SOON
        assert aging.label == "Due today"

    @pytest.mark.parametrize(
        "due_day,tone,label",
        [
            (2, AgingTone.DUE_SOON, "1 day remaining"),
            (4, AgingTone.DUE_SOON, "3 days remaining"),
            (5, AgingTone.ON_TRACK, "4 days remaining"),
        ],
    )
    def test_days_remaining(self, due_day, tone, label):
        aging = describe_due_date_aging(make_invoice(due_at=dt(2024, 2, due_day)), dt(2024, 2, 1))

        assert aging.tone is tone
        assert aging.label == label

    def test_overdue(self):
        aging = describe_due_date_aging(make_invoice(due_at=dt(2024, 1, 20)), dt(2024, 2, 1))

        assert aging.days_until_due == -12
        assert aging.days_overdue == 12
        assert aging.tone is AgingTone.OVERDUE
        assert aging.label == "12 days overdue"

    def test_one_day_overdue_singular(self):
        aging = describe_due_date_aging(make_invoice(due_at=dt(2024, 1, 31)), dt(2024, 2, 1))

        assert aging.label == "1 day overdue"

    def test_due_soon_threshold_configurable(self):
        invoice = make_invoice(due_at=dt(2024, 2, 8))

        assert describe_due_date_aging(invoice, dt(2024, 2, 1)).tone is AgingTone.ON_TRACK
        assert (
            describe_due_date_aging(invoice, dt(2024, 2, 1), due_soon_days=7).tone
            is AgingTone.DUE_SOON
        )
