from __future__ import annotations

from datetime import date

from django.db import models
from django.db.models import Q

from core.utils.constants import BikeStatus


class BikeQuerySet(models.QuerySet):
    def by_ref_no(self, ref_no: str):
        return self.filter(ref_no__iexact=ref_no)

    def with_status(self, status: str):
        return self.filter(status=status)

    def with_size(self, size: str):
        return self.filter(size=size)

    def with_brand(self, brand: str):
        return self.filter(brand=brand)

    def with_model(self, model: str):
        return self.filter(model=model)

    def search(self, query: str):
        return self.filter(
            Q(ref_no__icontains=query)
            | Q(brand__icontains=query)
            | Q(model__icontains=query)
        )

    def newest_first(self):
        return self.order_by("-created_at", "-id")

    def booked_between(self, start: date, end: date):
        return self.filter(
            bookings__start_date__lte=end,
            bookings__end_date__gte=start,
        ).distinct()

    def available_between(self, start: date, end: date):
        """Bikes that are not in the workshop and have no booking touching [start, end]."""
        booked_ids = self.model.domain.booked_between(start, end).values("pk")
        return self.exclude(status=BikeStatus.IN_MAINTENANCE).exclude(
            pk__in=booked_ids
        )


class BikeDomainManager(models.Manager.from_queryset(BikeQuerySet)):
    def find_by_ref_no(self, ref_no: str):
        return self.get_queryset().by_ref_no(ref_no).order_by("id").first()

    def brands(self) -> list[str]:
        return list(
            self.get_queryset()
            .order_by("brand")
            .values_list("brand", flat=True)
            .distinct()
        )

    def models_for(self, *, brand: str | None = None) -> list[str]:
        queryset = self.get_queryset()
        if brand:
            queryset = queryset.with_brand(brand)
        return list(
            queryset.order_by("model").values_list("model", flat=True).distinct()
        )
