from datetime import date

import pytest

from booking.services_calendar import BookingCalendarService
from core.api.exceptions import DomainValidationError


def test_grid_starts_on_sunday_before_first_of_month():
    days = BookingCalendarService.grid_days(date(2025, 11, 1))

    assert len(days) == 42
    assert days[0] == date(2025, 10, 26)
    assert days[0].weekday() == 6
    assert days[-1] == date(2025, 12, 6)


def test_grid_starts_on_first_when_month_begins_on_sunday():
    days = BookingCalendarService.grid_days(date(2026, 2, 1))

    assert days[0] == date(2026, 2, 1)
    assert days[-1] == date(2026, 3, 14)


def test_parse_month_returns_first_day():
    assert BookingCalendarService.parse_month("2025-11") == date(2025, 11, 1)


def test_parse_month_defaults_to_current_month():
    assert BookingCalendarService.parse_month("", today=date(2025, 11, 18)) == date(
        2025, 11, 1
    )


@pytest.mark.parametrize("raw_month", ["2025-13", "2025/11", "Nov 2025", "2025-1"])
def test_parse_month_rejects_malformed_values(raw_month):
    with pytest.raises(DomainValidationError):
        BookingCalendarService.parse_month(raw_month)
