from datetime import date

from django.db import models

from core.models import TimestampedModel
from core.utils.constants import MaintenanceStatus
from maintenance.managers import (
    MaintenanceRecordDomainManager,
    MaintenanceTaskTypeDomainManager,
)


class MaintenanceTaskType(TimestampedModel):
    objects = models.Manager()
    domain = MaintenanceTaskTypeDomainManager()

    name = models.CharField(max_length=64, unique=True)

    class Meta:
        ordering = ("name",)

    def __str__(self) -> str:
        return self.name


class MaintenanceRecord(TimestampedModel):
    objects = models.Manager()
    domain = MaintenanceRecordDomainManager()

    bike = models.ForeignKey(
        "bike.Bike",
        on_delete=models.CASCADE,
        related_name="maintenance_records",
    )
    description = models.TextField()
    tasks = models.JSONField(default=list, blank=True)
    workshop_notes = models.TextField(blank=True, default="")
    reported_date = models.DateField(db_index=True)
    resolved_date = models.DateField(null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=MaintenanceStatus,
        default=MaintenanceStatus.PENDING,
        db_index=True,
    )

    class Meta:
        indexes = [
            models.Index(
                fields=["status", "reported_date"],
                name="maint_status_reported_idx",
            ),
        ]

    @property
    def is_pending(self) -> bool:
        return self.status == MaintenanceStatus.PENDING

    def days_since_reported(self, today: date) -> int:
        return (today - self.reported_date).days

    def resolve(self, *, resolved_on: date) -> None:
        if not self.is_pending:
            raise ValueError("Maintenance record is already resolved.")
        self.status = MaintenanceStatus.RESOLVED
        self.resolved_date = resolved_on

    def __str__(self) -> str:
        return f"#{self.pk} bike={self.bike_id} {self.status} ({self.reported_date})"
