from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from django.db import transaction

from bike.models import Bike
from booking.models import Booking
from core.api.exceptions import DomainValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DateRangeSelection:
    """
    Two-click range picker state.

    The first click opens a range and the second one closes it, swapping the
    bounds when the second day is earlier. A click on a closed range starts over.
    """

    start: date | None = None
    end: date | None = None

    @property
    def is_complete(self) -> bool:
        return self.start is not None and self.end is not None

    def select(self, day: date) -> DateRangeSelection:
        if self.start is None or self.end is not None:
            return DateRangeSelection(start=day, end=None)
        if day < self.start:
            return DateRangeSelection(start=day, end=self.start)
        return DateRangeSelection(start=self.start, end=day)


class BookingService:
    @staticmethod
    def validate_range(start_date: date | None, end_date: date | None) -> None:
        if start_date is None or end_date is None:
            raise DomainValidationError("Both start_date and end_date are required.")
        if start_date > end_date:
            raise DomainValidationError(
                "end_date must be greater than or equal to start_date."
            )

    @staticmethod
    def ensure_bike_is_free(
        *,
        bike_id: int,
        start_date: date,
        end_date: date,
        exclude_booking_id: int | None = None,
    ) -> None:
        if Booking.domain.has_conflict(
            bike_id=bike_id,
            start=start_date,
            end=end_date,
            exclude_id=exclude_booking_id,
        ):
            raise DomainValidationError(
                f"Bike is already booked between {start_date.isoformat()} "
                f"and {end_date.isoformat()}."
            )

    @classmethod
    @transaction.atomic
    def create_booking(
        cls,
        *,
        bike: Bike,
        booking_number: str,
        start_date: date,
        end_date: date,
        notes: str = "",
    ) -> Booking:
        cls.validate_range(start_date, end_date)
        cls.ensure_bike_is_free(bike_id=bike.id, start_date=start_date, end_date=end_date)

        booking = Booking.objects.create(
            bike=bike,
            booking_number=str(booking_number).strip(),
            start_date=start_date,
            end_date=end_date,
            notes=str(notes or "").strip(),
        )
        logger.info(
            "Booking %s created for bike %s (%s..%s).",
            booking.booking_number,
            bike.ref_no,
            start_date,
            end_date,
        )
        return booking

    @classmethod
    @transaction.atomic
    def update_booking(cls, booking: Booking, **changes) -> Booking:
        changes.pop("bike", None)
        start_date = changes.get("start_date", booking.start_date)
        end_date = changes.get("end_date", booking.end_date)
        cls.validate_range(start_date, end_date)
        cls.ensure_bike_is_free(
            bike_id=booking.bike_id,
            start_date=start_date,
            end_date=end_date,
            exclude_booking_id=booking.id,
        )

        if "booking_number" in changes:
            changes["booking_number"] = str(changes["booking_number"]).strip()
        if "notes" in changes:
            changes["notes"] = str(changes["notes"] or "").strip()

        for field, value in changes.items():
            setattr(booking, field, value)
        booking.save()
        return booking

    @staticmethod
    def delete_booking(booking: Booking) -> None:
        logger.info("Booking %s (id=%s) removed.", booking.booking_number, booking.id)
        booking.delete()

    @staticmethod
    def filter_bookings(
        *,
        queryset=None,
        booking_number: str | None = None,
        brand: str | None = None,
        model: str | None = None,
        size: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ):
        queryset = queryset if queryset is not None else Booking.domain.get_queryset()
        if booking_number and booking_number.strip():
            queryset = queryset.number_contains(booking_number.strip())
        if brand:
            queryset = queryset.with_bike_brand(brand)
        if model:
            queryset = queryset.with_bike_model(model)
        if size:
            queryset = queryset.with_bike_size(size)
        if date_from:
            queryset = queryset.ending_on_or_after(date_from)
        if date_to:
            queryset = queryset.starting_on_or_before(date_to)
        return queryset.earliest_first()

    @staticmethod
    def bookings_on(day: date, *, queryset=None):
        queryset = queryset if queryset is not None else Booking.domain.get_queryset()
        return queryset.covering(day).earliest_first()

    @staticmethod
    def booked_dates(
        *,
        bike: Bike,
        days: Iterable[date],
        exclude_booking_id: int | None = None,
    ) -> list[date]:
        days = list(days)
        if not days:
            return []

        bookings = list(
            Booking.domain.for_bike(bike.id)
            .excluding(exclude_booking_id)
            .overlapping(min(days), max(days))
        )
        return [day for day in days if any(b.covers(day) for b in bookings)]

    @classmethod
    def select_range(
        cls,
        *,
        selection: DateRangeSelection,
        day: date,
        bike: Bike | None = None,
        exclude_booking_id: int | None = None,
    ) -> tuple[DateRangeSelection, bool]:
        """Apply a picker click; booked days of `bike` are not selectable."""
        if bike is not None and cls.booked_dates(
            bike=bike, days=[day], exclude_booking_id=exclude_booking_id
        ):
            return selection, True
        return selection.select(day), False
