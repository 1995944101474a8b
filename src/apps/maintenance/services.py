from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from bike.models import Bike
from core.api.exceptions import DomainValidationError
from core.utils.constants import MaintenanceStatus
from maintenance.models import MaintenanceRecord, MaintenanceTaskType

logger = logging.getLogger(__name__)


def _resolve_today(today: date | None) -> date:
    return today or timezone.localdate()


class MaintenanceTaskTypeService:
    @staticmethod
    def normalize_name(raw_name: str) -> str:
        return " ".join(str(raw_name or "").split())

    @classmethod
    def add_task_type(cls, name: str) -> MaintenanceTaskType:
        normalized = cls.normalize_name(name)
        if not normalized:
            raise DomainValidationError("Task type name must not be blank.")
        if MaintenanceTaskType.domain.by_name(normalized).exists():
            raise DomainValidationError(f"Task type '{normalized}' already exists.")
        return MaintenanceTaskType.objects.create(name=normalized)

    @staticmethod
    def remove_task_type(task_type: MaintenanceTaskType) -> None:
        # Records keep the label; only the catalogue entry goes away.
        task_type.delete()

    @classmethod
    def ensure_task_types(cls, names: Iterable[str]) -> int:
        created = 0
        for name in names:
            normalized = cls.normalize_name(name)
            if not normalized:
                continue
            if MaintenanceTaskType.domain.by_name(normalized).exists():
                continue
            MaintenanceTaskType.objects.create(name=normalized)
            created += 1
        return created


class MaintenanceService:
    """Fault reports, workshop sessions and their effect on bike status."""

    ROUTINE_DESCRIPTION = "Routine maintenance started by the workshop."

    @classmethod
    def report_fault(
        cls, *, bike: Bike, description: str, today: date | None = None
    ) -> MaintenanceRecord:
        description = str(description or "").strip()
        if not description:
            raise DomainValidationError("Fault description must not be blank.")

        record = MaintenanceRecord.objects.create(
            bike=bike,
            description=description,
            tasks=[],
            workshop_notes="",
            reported_date=_resolve_today(today),
            status=MaintenanceStatus.PENDING,
        )
        logger.info("Fault reported for bike %s (record=%s).", bike.ref_no, record.id)
        return record

    @classmethod
    @transaction.atomic
    def start_maintenance(
        cls, *, bike: Bike, today: date | None = None
    ) -> MaintenanceRecord:
        record = MaintenanceRecord.objects.create(
            bike=bike,
            description=cls.ROUTINE_DESCRIPTION,
            tasks=[],
            workshop_notes="",
            reported_date=_resolve_today(today),
            status=MaintenanceStatus.PENDING,
        )
        bike.mark_in_maintenance()
        logger.info("Bike %s moved into the workshop (record=%s).", bike.ref_no, record.id)
        return record

    @staticmethod
    def normalize_tasks(tasks: Iterable[str]) -> list[str]:
        normalized: list[str] = []
        for task in tasks:
            label = MaintenanceTaskTypeService.normalize_name(task)
            if label and label not in normalized:
                normalized.append(label)
        return normalized

    @classmethod
    @transaction.atomic
    def process_record(
        cls,
        *,
        record: MaintenanceRecord,
        tasks: Iterable[str] | None = None,
        workshop_notes: str | None = None,
        conclude: bool = False,
        today: date | None = None,
    ) -> MaintenanceRecord:
        if tasks is not None:
            normalized_tasks = cls.normalize_tasks(tasks)
            unknown = MaintenanceTaskType.domain.unknown_names(normalized_tasks)
            if unknown:
                raise DomainValidationError(
                    f"Unknown maintenance task types: {', '.join(unknown)}."
                )
            record.tasks = normalized_tasks

        if workshop_notes is not None:
            record.workshop_notes = str(workshop_notes).strip()

        if conclude:
            try:
                record.resolve(resolved_on=_resolve_today(today))
            except ValueError as exc:
                raise DomainValidationError(str(exc)) from exc

        record.save()

        if conclude and not MaintenanceRecord.domain.has_other_pending(
            bike_id=record.bike_id, exclude_id=record.id
        ):
            record.bike.mark_available()
            logger.info(
                "Bike %s is back in the fleet after record %s.",
                record.bike.ref_no,
                record.id,
            )
        return record

    @staticmethod
    def history_for_bike(bike: Bike):
        return MaintenanceRecord.domain.history_for_bike(bike.id)


@dataclass(frozen=True)
class OverdueMaintenance:
    record: MaintenanceRecord
    days_overdue: int

    @property
    def bike(self) -> Bike:
        return self.record.bike


class OverdueMaintenanceService:
    @staticmethod
    def threshold_days() -> int:
        return int(getattr(settings, "MAINTENANCE_OVERDUE_DAYS", 7))

    @classmethod
    def list_overdue(
        cls, *, today: date | None = None, threshold_days: int | None = None
    ) -> list[OverdueMaintenance]:
        today = _resolve_today(today)
        threshold = cls.threshold_days() if threshold_days is None else threshold_days

        overdue = [
            OverdueMaintenance(
                record=record, days_overdue=record.days_since_reported(today)
            )
            for record in MaintenanceRecord.domain.overdue(
                today=today, threshold_days=threshold
            )
        ]
        overdue.sort(key=lambda item: (-item.days_overdue, item.record.id))
        return overdue

    @classmethod
    def report_overdue(cls, *, today: date | None = None) -> dict[str, object]:
        threshold = cls.threshold_days()
        overdue = cls.list_overdue(today=today, threshold_days=threshold)
        for item in overdue:
            logger.warning(
                "Maintenance record %s for bike %s is overdue by %s days.",
                item.record.id,
                item.bike.ref_no,
                item.days_overdue,
            )
        return {
            "count": len(overdue),
            "record_ids": [item.record.id for item in overdue],
            "threshold_days": threshold,
        }
