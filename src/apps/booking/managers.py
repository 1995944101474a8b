from __future__ import annotations

from datetime import date

from django.db import models


class BookingQuerySet(models.QuerySet):
    def for_bike(self, bike_id: int):
        return self.filter(bike_id=bike_id)

    def excluding(self, booking_id: int | None):
        if booking_id is None:
            return self
        return self.exclude(pk=booking_id)

    def overlapping(self, start: date, end: date):
        return self.filter(start_date__lte=end, end_date__gte=start)

    def covering(self, day: date):
        return self.filter(start_date__lte=day, end_date__gte=day)

    def ending_on_or_after(self, day: date):
        return self.filter(end_date__gte=day)

    def starting_on_or_before(self, day: date):
        return self.filter(start_date__lte=day)

    def number_contains(self, query: str):
        return self.filter(booking_number__icontains=query)

    def with_bike_brand(self, brand: str):
        return self.filter(bike__brand=brand)

    def with_bike_model(self, model: str):
        return self.filter(bike__model=model)

    def with_bike_size(self, size: str):
        return self.filter(bike__size=size)

    def earliest_first(self):
        return self.order_by("start_date", "id")


class BookingDomainManager(models.Manager.from_queryset(BookingQuerySet)):
    def get_queryset(self):
        return super().get_queryset().select_related("bike")

    def schedule_for_bike(self, bike_id: int):
        return self.get_queryset().for_bike(bike_id).earliest_first()

    def has_conflict(
        self,
        *,
        bike_id: int,
        start: date,
        end: date,
        exclude_id: int | None = None,
    ) -> bool:
        return (
            self.get_queryset()
            .for_bike(bike_id)
            .excluding(exclude_id)
            .overlapping(start, end)
            .exists()
        )
