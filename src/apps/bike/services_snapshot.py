from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any

from django.db import transaction
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from bike.models import Bike
from bike.services import BikeService
from booking.models import Booking
from core.utils.constants import BikeSize, BikeStatus, MaintenanceStatus
from maintenance.models import MaintenanceRecord, MaintenanceTaskType
from maintenance.services import MaintenanceService, MaintenanceTaskTypeService

logger = logging.getLogger(__name__)

DEMO_FLEET_PATH = Path(__file__).resolve().parent / "fixtures" / "demo_fleet.json"


@dataclass
class FleetImportSummary:
    bikes_created: int = 0
    maintenance_records_created: int = 0
    bookings_created: int = 0
    task_types_created: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "bikes_created": self.bikes_created,
            "maintenance_records_created": self.maintenance_records_created,
            "bookings_created": self.bookings_created,
            "task_types_created": self.task_types_created,
        }


def _status_aliases(choices, extra: dict[str, str]) -> dict[str, str]:
    aliases = {}
    for value, label in choices.choices:
        aliases[value.casefold()] = value
        aliases[str(label).casefold()] = value
    aliases.update({key.casefold(): value for key, value in extra.items()})
    return aliases


class FleetSnapshotService:
    """
    Whole-fleet JSON document: the same layout the fleet used to keep in
    browser storage (`bikes`, `maintenanceRecords`, `bookings`).
    """

    BIKE_STATUS_ALIASES = _status_aliases(
        BikeStatus,
        {
            "Disponível": BikeStatus.AVAILABLE,
            "Alugada": BikeStatus.RENTED,
            "Em Manutenção": BikeStatus.IN_MAINTENANCE,
        },
    )
    MAINTENANCE_STATUS_ALIASES = _status_aliases(
        MaintenanceStatus,
        {
            "Pendente": MaintenanceStatus.PENDING,
            "Resolvido": MaintenanceStatus.RESOLVED,
        },
    )
    VALID_SIZES = {choice for choice, _ in BikeSize.choices}

    @classmethod
    def export_snapshot(cls) -> dict[str, list]:
        bikes = Bike.domain.get_queryset().newest_first()
        records = MaintenanceRecord.objects.order_by("-reported_date", "-id")
        bookings = Booking.objects.order_by("start_date", "id")

        return {
            "bikes": [
                {
                    "id": str(bike.id),
                    "ref_no": bike.ref_no,
                    "brand": bike.brand,
                    "model": bike.model,
                    "size": bike.size,
                    "status": bike.status,
                    "entry_date": bike.entry_date.isoformat(),
                    "image_url": bike.image_url,
                    "created_at": bike.created_at.isoformat(),
                }
                for bike in bikes
            ],
            "maintenanceRecords": [
                {
                    "id": str(record.id),
                    "bike_id": str(record.bike_id),
                    "description": record.description,
                    "tasks": list(record.tasks or []),
                    "reported_date": record.reported_date.isoformat(),
                    "resolved_date": (
                        record.resolved_date.isoformat()
                        if record.resolved_date
                        else None
                    ),
                    "status": record.status,
                    "workshop_notes": record.workshop_notes,
                    "created_at": record.created_at.isoformat(),
                }
                for record in records
            ],
            "bookings": [
                {
                    "id": str(booking.id),
                    "bike_id": str(booking.bike_id),
                    "booking_number": booking.booking_number,
                    "start_date": booking.start_date.isoformat(),
                    "end_date": booking.end_date.isoformat(),
                    "notes": booking.notes,
                    "created_at": booking.created_at.isoformat(),
                }
                for booking in bookings
            ],
            "maintenanceTaskTypes": MaintenanceTaskType.domain.names(),
        }

    @classmethod
    def import_snapshot(cls, document: Any) -> dict[str, int]:
        if not isinstance(document, dict):
            raise ValueError("Fleet snapshot must be a JSON object.")

        raw_bikes = cls._list_section(document, "bikes", required=True)
        raw_records = cls._list_section(document, "maintenanceRecords")
        raw_bookings = cls._list_section(document, "bookings")
        raw_task_types = document.get("maintenanceTaskTypes")
        if raw_task_types is not None and not isinstance(raw_task_types, list):
            raise ValueError("'maintenanceTaskTypes' must be a list of names.")

        summary = FleetImportSummary()

        with transaction.atomic():
            Bike.objects.all().delete()

            bikes_by_key: dict[str, Bike] = {}
            seen_ref_nos: set[str] = set()
            for index, row in enumerate(raw_bikes):
                label = f"bikes[{index}]"
                key = cls._required_string(row, "id", label)
                if key in bikes_by_key:
                    raise ValueError(f"{label}: duplicate id '{key}'.")

                ref_no = BikeService.normalize_ref_no(
                    cls._required_string(row, "ref_no", label)
                )
                if not BikeService.is_valid_ref_no(ref_no):
                    raise ValueError(f"{label}: invalid ref_no '{ref_no}'.")
                if ref_no in seen_ref_nos:
                    raise ValueError(f"{label}: duplicate ref_no '{ref_no}'.")
                seen_ref_nos.add(ref_no)

                size = cls._required_string(row, "size", label).upper()
                if size not in cls.VALID_SIZES:
                    raise ValueError(f"{label}: unsupported size '{size}'.")

                image_url = cls._optional_string(row.get("image_url"))
                if image_url and not BikeService.is_valid_image_url(image_url):
                    raise ValueError(f"{label}: unsupported image_url.")

                bike = Bike.objects.create(
                    ref_no=ref_no,
                    brand=cls._bounded_string(row, "brand", label, Bike),
                    model=cls._bounded_string(row, "model", label, Bike),
                    size=size,
                    status=cls._parse_status(
                        row.get("status"),
                        aliases=cls.BIKE_STATUS_ALIASES,
                        default=BikeStatus.AVAILABLE,
                        label=label,
                    ),
                    entry_date=cls._parse_date(row.get("entry_date"), "entry_date", label),
                    image_url=image_url or BikeService.placeholder_image_url(),
                )
                cls._restore_created_at(Bike, bike.pk, row.get("created_at"), label)
                bikes_by_key[key] = bike
                summary.bikes_created += 1

            used_labels: list[str] = []
            for index, row in enumerate(raw_records):
                label = f"maintenanceRecords[{index}]"
                bike = cls._linked_bike(row, bikes_by_key, label)
                tasks = row.get("tasks") or []
                if not isinstance(tasks, list):
                    raise ValueError(f"{label}: 'tasks' must be a list.")
                tasks = MaintenanceService.normalize_tasks(tasks)
                used_labels.extend(tasks)

                status = cls._parse_status(
                    row.get("status"),
                    aliases=cls.MAINTENANCE_STATUS_ALIASES,
                    default=MaintenanceStatus.PENDING,
                    label=label,
                )
                resolved_raw = row.get("resolved_date")
                record = MaintenanceRecord.objects.create(
                    bike=bike,
                    description=cls._required_string(row, "description", label),
                    tasks=tasks,
                    workshop_notes=cls._optional_string(row.get("workshop_notes")),
                    reported_date=cls._parse_date(
                        row.get("reported_date"), "reported_date", label
                    ),
                    resolved_date=(
                        cls._parse_date(resolved_raw, "resolved_date", label)
                        if resolved_raw
                        else None
                    ),
                    status=status,
                )
                cls._restore_created_at(
                    MaintenanceRecord, record.pk, row.get("created_at"), label
                )
                summary.maintenance_records_created += 1

            for index, row in enumerate(raw_bookings):
                label = f"bookings[{index}]"
                bike = cls._linked_bike(row, bikes_by_key, label)
                start_date = cls._parse_date(row.get("start_date"), "start_date", label)
                end_date = cls._parse_date(row.get("end_date"), "end_date", label)
                if start_date > end_date:
                    raise ValueError(f"{label}: end_date is before start_date.")
                if Booking.domain.has_conflict(
                    bike_id=bike.id, start=start_date, end=end_date
                ):
                    raise ValueError(
                        f"{label}: overlaps another booking of bike {bike.ref_no}."
                    )

                booking = Booking.objects.create(
                    bike=bike,
                    booking_number=cls._bounded_string(
                        row, "booking_number", label, Booking
                    ),
                    start_date=start_date,
                    end_date=end_date,
                    notes=cls._optional_string(row.get("notes")),
                )
                cls._restore_created_at(Booking, booking.pk, row.get("created_at"), label)
                summary.bookings_created += 1

            if raw_task_types is not None:
                MaintenanceTaskType.objects.all().delete()
                summary.task_types_created = MaintenanceTaskTypeService.ensure_task_types(
                    [*raw_task_types, *used_labels]
                )
            else:
                summary.task_types_created = MaintenanceTaskTypeService.ensure_task_types(
                    used_labels
                )

        logger.info("Fleet snapshot imported: %s", summary.as_dict())
        return summary.as_dict()

    @classmethod
    def load_demo_document(cls) -> dict[str, Any]:
        with DEMO_FLEET_PATH.open(encoding="utf-8") as fp:
            return json.load(fp)

    @classmethod
    def seed_demo_fleet(cls, *, force: bool = False) -> dict[str, int] | None:
        """Load the bundled demo fleet; an existing fleet is left alone unless forced."""
        if not force and Bike.objects.exists():
            return None
        return cls.import_snapshot(cls.load_demo_document())

    @staticmethod
    def _list_section(document: dict, key: str, *, required: bool = False) -> list:
        if key not in document:
            if required:
                raise ValueError(f"Fleet snapshot is missing '{key}'.")
            return []
        value = document[key]
        if not isinstance(value, list) or not all(isinstance(row, dict) for row in value):
            raise ValueError(f"'{key}' must be a list of objects.")
        return value

    @staticmethod
    def _optional_string(value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @classmethod
    def _required_string(cls, row: dict, field_name: str, label: str) -> str:
        value = cls._optional_string(row.get(field_name))
        if not value:
            raise ValueError(f"{label}: '{field_name}' is required.")
        return value

    @classmethod
    def _bounded_string(cls, row: dict, field_name: str, label: str, model) -> str:
        value = cls._required_string(row, field_name, label)
        max_length = model._meta.get_field(field_name).max_length
        if len(value) > max_length:
            raise ValueError(
                f"{label}: '{field_name}' must be at most {max_length} characters."
            )
        return value

    @staticmethod
    def _parse_date(value: Any, field_name: str, label: str) -> date:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        text = str(value or "").strip()
        parsed = None
        try:
            parsed = parse_date(text)
            if parsed is None:
                moment = parse_datetime(text)
                parsed = moment.date() if moment else None
        except ValueError:
            parsed = None
        if parsed is None:
            raise ValueError(f"{label}: '{field_name}' is not a valid date.")
        return parsed

    @staticmethod
    def _parse_status(value: Any, *, aliases: dict[str, str], default: str, label: str) -> str:
        text = str(value or "").strip()
        if not text:
            return default
        status = aliases.get(text.casefold())
        if status is None:
            raise ValueError(f"{label}: unsupported status '{text}'.")
        return status

    @classmethod
    def _linked_bike(cls, row: dict, bikes_by_key: dict[str, Bike], label: str) -> Bike:
        key = cls._required_string(row, "bike_id", label)
        bike = bikes_by_key.get(key)
        if bike is None:
            raise ValueError(f"{label}: unknown bike_id '{key}'.")
        return bike

    @staticmethod
    def _restore_created_at(model, pk: int, value: Any, label: str) -> None:
        if not value:
            return
        try:
            moment = parse_datetime(str(value))
        except ValueError:
            moment = None
        if moment is None:
            raise ValueError(f"{label}: 'created_at' is not a valid datetime.")
        if timezone.is_naive(moment):
            moment = timezone.make_aware(moment)
        model.objects.filter(pk=pk).update(created_at=moment)
