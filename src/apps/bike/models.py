from django.db import models
from django.db.models.functions import Upper

from bike.managers import BikeDomainManager
from core.models import TimestampedModel
from core.utils.constants import BikeSize, BikeStatus


class Bike(TimestampedModel):
    objects = models.Manager()
    domain = BikeDomainManager()

    ref_no = models.CharField(max_length=32, db_index=True)
    brand = models.CharField(max_length=64, db_index=True)
    model = models.CharField(max_length=64, db_index=True)
    size = models.CharField(max_length=2, choices=BikeSize, db_index=True)
    status = models.CharField(
        max_length=20,
        choices=BikeStatus,
        default=BikeStatus.AVAILABLE,
        db_index=True,
    )
    entry_date = models.DateField()
    image_url = models.TextField(blank=True, default="")

    class Meta:
        indexes = [
            models.Index(fields=["brand", "model"], name="bike_brand_model_idx"),
        ]
        constraints = [
            models.UniqueConstraint(Upper("ref_no"), name="unique_bike_ref_no_ci"),
        ]

    def mark_in_maintenance(self) -> None:
        if self.status == BikeStatus.IN_MAINTENANCE:
            return
        self.status = BikeStatus.IN_MAINTENANCE
        self.save(update_fields=["status", "updated_at"])

    def mark_available(self) -> None:
        if self.status == BikeStatus.AVAILABLE:
            return
        self.status = BikeStatus.AVAILABLE
        self.save(update_fields=["status", "updated_at"])

    def __str__(self) -> str:
        return f"{self.ref_no} {self.brand} {self.model} ({self.status})"
