from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, timedelta

from django.utils import timezone

from booking.models import Booking
from core.api.exceptions import DomainValidationError

MONTH_PATTERN = re.compile(r"^(?P<year>\d{4})-(?P<month>\d{2})$")
GRID_DAYS = 42


@dataclass(frozen=True)
class CalendarCell:
    date: date
    in_current_month: bool
    is_today: bool
    booking_count: int
    summary: str

    def as_dict(self) -> dict[str, object]:
        return {
            "date": self.date.isoformat(),
            "in_current_month": self.in_current_month,
            "is_today": self.is_today,
            "booking_count": self.booking_count,
            "summary": self.summary,
        }


class BookingCalendarService:
    @staticmethod
    def parse_month(raw_month: str | None, *, today: date | None = None) -> date:
        """Return the first day of a `YYYY-MM` month; blank means the current month."""
        if not raw_month:
            return (today or timezone.localdate()).replace(day=1)

        match = MONTH_PATTERN.fullmatch(str(raw_month).strip())
        if match is None:
            raise DomainValidationError("month must use the YYYY-MM format.")
        try:
            return date(int(match["year"]), int(match["month"]), 1)
        except ValueError as exc:
            raise DomainValidationError("month must use the YYYY-MM format.") from exc

    @staticmethod
    def grid_days(month_start: date) -> list[date]:
        # Weeks start on Sunday.
        first = month_start.replace(day=1)
        grid_start = first - timedelta(days=(first.weekday() + 1) % 7)
        return [grid_start + timedelta(days=offset) for offset in range(GRID_DAYS)]

    @staticmethod
    def summarize(bookings: list[Booking]) -> str:
        counts: dict[str, int] = {}
        for booking in bookings:
            counts[booking.bike.model] = counts.get(booking.bike.model, 0) + 1
        return "; ".join(f"{model} ({count})" for model, count in counts.items())

    @classmethod
    def month_grid(
        cls,
        *,
        month_start: date,
        queryset=None,
        today: date | None = None,
    ) -> list[CalendarCell]:
        today = today or timezone.localdate()
        days = cls.grid_days(month_start)
        queryset = queryset if queryset is not None else Booking.domain.get_queryset()
        bookings = list(
            queryset.overlapping(days[0], days[-1]).select_related("bike").earliest_first()
        )

        cells = []
        for day in days:
            covering = [booking for booking in bookings if booking.covers(day)]
            cells.append(
                CalendarCell(
                    date=day,
                    in_current_month=day.month == month_start.month
                    and day.year == month_start.year,
                    is_today=day == today,
                    booking_count=len(covering),
                    summary=cls.summarize(covering),
                )
            )
        return cells
