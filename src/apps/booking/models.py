from datetime import date

from django.db import models
from django.db.models import F, Q

from booking.managers import BookingDomainManager
from core.models import TimestampedModel


class Booking(TimestampedModel):
    objects = models.Manager()
    domain = BookingDomainManager()

    bike = models.ForeignKey(
        "bike.Bike",
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    booking_number = models.CharField(max_length=32, db_index=True)
    start_date = models.DateField()
    end_date = models.DateField()
    notes = models.TextField(blank=True, default="")

    class Meta:
        indexes = [
            models.Index(
                fields=["bike", "start_date", "end_date"],
                name="booking_bike_range_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(start_date__lte=F("end_date")),
                name="booking_start_not_after_end",
            ),
        ]

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def overlaps(self, start: date, end: date) -> bool:
        return self.start_date <= end and self.end_date >= start

    def __str__(self) -> str:
        return f"{self.booking_number} bike={self.bike_id} {self.start_date}..{self.end_date}"
