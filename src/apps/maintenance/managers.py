from __future__ import annotations

from datetime import date, timedelta

from django.db import models

from core.utils.constants import MaintenanceStatus


class MaintenanceTaskTypeQuerySet(models.QuerySet):
    def by_name(self, name: str):
        return self.filter(name__iexact=name)


class MaintenanceTaskTypeDomainManager(
    models.Manager.from_queryset(MaintenanceTaskTypeQuerySet)
):
    def names(self) -> list[str]:
        return list(self.get_queryset().order_by("name").values_list("name", flat=True))

    def unknown_names(self, names) -> list[str]:
        known = set(self.names())
        return [name for name in names if name not in known]


class MaintenanceRecordQuerySet(models.QuerySet):
    def pending(self):
        return self.filter(status=MaintenanceStatus.PENDING)

    def resolved(self):
        return self.filter(status=MaintenanceStatus.RESOLVED)

    def for_bike(self, bike_id: int):
        return self.filter(bike_id=bike_id)

    def newest_first(self):
        return self.order_by("-reported_date", "-id")

    def reported_before(self, value: date):
        return self.filter(reported_date__lt=value)


class MaintenanceRecordDomainManager(
    models.Manager.from_queryset(MaintenanceRecordQuerySet)
):
    def history_for_bike(self, bike_id: int):
        return self.get_queryset().for_bike(bike_id).newest_first()

    def has_other_pending(self, *, bike_id: int, exclude_id: int | None = None) -> bool:
        queryset = self.get_queryset().for_bike(bike_id).pending()
        if exclude_id is not None:
            queryset = queryset.exclude(pk=exclude_id)
        return queryset.exists()

    def overdue(self, *, today: date, threshold_days: int):
        """Pending records reported strictly more than `threshold_days` days before `today`."""
        cutoff = today - timedelta(days=threshold_days)
        return (
            self.get_queryset()
            .pending()
            .reported_before(cutoff)
            .select_related("bike")
            .order_by("reported_date", "id")
        )
