import json
from datetime import date
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from bike.models import Bike
from bike.services_snapshot import FleetSnapshotService
from booking.models import Booking
from core.utils.constants import BikeStatus, MaintenanceStatus
from maintenance.models import MaintenanceRecord, MaintenanceTaskType

pytestmark = pytest.mark.django_db


EXPORT_URL = "/api/v1/fleet/export/"
IMPORT_URL = "/api/v1/fleet/import/"


def _legacy_document() -> dict:
    return {
        "bikes": [
            {
                "id": "bike-1",
                "ref_no": "m42",
                "brand": "Caloi",
                "model": "Explorer",
                "size": "M",
                "status": "Disponível",
                "entry_date": "2023-01-15T00:00:00.000Z",
                "image_url": "https://example.com/m42.jpg",
            },
            {
                "id": "bike-3",
                "ref_no": "M88",
                "brand": "Trek",
                "model": "Marlin 5",
                "size": "M",
                "status": "Em Manutenção",
                "entry_date": "2023-03-10",
            },
        ],
        "maintenanceRecords": [
            {
                "id": "maint-1",
                "bike_id": "bike-3",
                "description": "Rear brake problem.",
                "tasks": ["Brake adjustment", "Saddle swap"],
                "reported_date": "2023-10-20",
                "status": "Pendente",
                "workshop_notes": "",
            }
        ],
        "bookings": [
            {
                "id": "book-2",
                "bike_id": "bike-1",
                "booking_number": "R-002",
                "start_date": "2025-11-22",
                "end_date": "2025-11-24",
                "notes": "",
            }
        ],
    }


def test_export_requires_auth(api_client):
    resp = api_client.get(EXPORT_URL)
    assert resp.status_code == 401


def test_export_returns_whole_fleet(
    authed_client, bike_factory, maintenance_record_factory, booking_factory
):
    bike = bike_factory(ref_no="L16", status=BikeStatus.RENTED)
    maintenance_record_factory(bike=bike, tasks=["Front tyre replacement"])
    booking_factory(bike=bike, booking_number="R-001")

    resp = authed_client.get(EXPORT_URL)

    assert resp.status_code == 200
    data = resp.data["data"]
    assert [row["ref_no"] for row in data["bikes"]] == ["L16"]
    assert data["bikes"][0]["id"] == str(bike.id)
    assert data["maintenanceRecords"][0]["bike_id"] == str(bike.id)
    assert data["maintenanceRecords"][0]["tasks"] == ["Front tyre replacement"]
    assert data["bookings"][0]["booking_number"] == "R-001"
    assert "Brake adjustment" in data["maintenanceTaskTypes"]


def test_import_replaces_fleet_and_accepts_legacy_labels(authed_client, bike_factory):
    bike_factory(ref_no="OLD1")

    resp = authed_client.post(IMPORT_URL, _legacy_document(), format="json")

    assert resp.status_code == 200
    assert resp.data["data"] == {
        "bikes_created": 2,
        "maintenance_records_created": 1,
        "bookings_created": 1,
        "task_types_created": 1,
    }
    assert not Bike.objects.filter(ref_no="OLD1").exists()

    explorer = Bike.objects.get(ref_no="M42")
    marlin = Bike.objects.get(ref_no="M88")
    assert explorer.status == BikeStatus.AVAILABLE
    assert explorer.entry_date == date(2023, 1, 15)
    assert marlin.status == BikeStatus.IN_MAINTENANCE
    assert marlin.image_url.startswith("https://picsum.photos/seed/bike")

    record = MaintenanceRecord.objects.get()
    assert record.bike == marlin
    assert record.status == MaintenanceStatus.PENDING
    assert MaintenanceTaskType.objects.filter(name="Saddle swap").exists()
    assert Booking.objects.get().bike == explorer


def test_import_with_task_type_list_replaces_catalogue():
    document = _legacy_document()
    document["maintenanceTaskTypes"] = ["Brake adjustment", "Wheel truing"]

    FleetSnapshotService.import_snapshot(document)

    assert MaintenanceTaskType.domain.names() == [
        "Brake adjustment",
        "Saddle swap",
        "Wheel truing",
    ]


def test_import_merges_task_labels_that_differ_only_by_case():
    document = _legacy_document()
    document["maintenanceRecords"][0]["tasks"] = ["brake adjustment", "Saddle swap"]
    document["maintenanceTaskTypes"] = ["Brake adjustment", "BRAKE ADJUSTMENT"]

    FleetSnapshotService.import_snapshot(document)

    assert MaintenanceTaskType.domain.names() == ["Brake adjustment", "Saddle swap"]


def test_import_accepts_booking_number_at_length_limit():
    document = _legacy_document()
    document["bookings"][0]["booking_number"] = "R" * 32

    FleetSnapshotService.import_snapshot(document)

    assert Booking.objects.get().booking_number == "R" * 32


@pytest.mark.parametrize(
    "mutate",
    [
        lambda doc: doc.pop("bikes"),
        lambda doc: doc["bikes"][0].update(size="XXL"),
        lambda doc: doc["bikes"][1].update(ref_no="M42"),
        lambda doc: doc["bikes"][0].update(status="Lost"),
        lambda doc: doc["maintenanceRecords"][0].update(bike_id="bike-9"),
        lambda doc: doc["bookings"][0].update(start_date="2025-11-30"),
        lambda doc: doc["bookings"][0].update(end_date="not a date"),
        lambda doc: doc["bookings"][0].update(booking_number="X" * 33),
        lambda doc: doc["bikes"][0].update(brand="B" * 65),
        lambda doc: doc["bikes"][1].update(model="M" * 65),
        lambda doc: doc["bikes"][0].update(image_url="javascript:alert(1)"),
    ],
)
def test_import_rejects_malformed_document_and_keeps_fleet(
    authed_client, bike_factory, mutate
):
    bike_factory(ref_no="KEEP")
    document = _legacy_document()
    mutate(document)

    resp = authed_client.post(IMPORT_URL, document, format="json")

    assert resp.status_code == 400
    assert resp.data["success"] is False
    assert list(Bike.objects.values_list("ref_no", flat=True)) == ["KEEP"]


def test_import_rejects_overlapping_bookings_of_same_bike():
    document = _legacy_document()
    document["bookings"].append(
        {
            "id": "book-9",
            "bike_id": "bike-1",
            "booking_number": "R-009",
            "start_date": "2025-11-24",
            "end_date": "2025-11-25",
        }
    )

    with pytest.raises(ValueError, match="overlaps"):
        FleetSnapshotService.import_snapshot(document)


def test_export_then_import_keeps_bike_creation_order(bike_factory):
    bike_factory(ref_no="A1")
    bike_factory(ref_no="A2")
    snapshot = FleetSnapshotService.export_snapshot()

    FleetSnapshotService.import_snapshot(snapshot)

    assert list(
        Bike.domain.get_queryset().newest_first().values_list("ref_no", flat=True)
    ) == ["A2", "A1"]


def test_seed_fleet_loads_demo_data_only_into_empty_fleet():
    out = StringIO()
    call_command("seed_fleet", stdout=out)

    assert "bikes=4" in out.getvalue()
    assert Bike.objects.count() == 4
    assert MaintenanceRecord.objects.count() == 2
    assert Booking.objects.count() == 4
    assert Bike.objects.get(ref_no="M88").status == BikeStatus.IN_MAINTENANCE

    Bike.objects.filter(ref_no="S05").delete()
    out = StringIO()
    call_command("seed_fleet", stdout=out)
    assert "nothing seeded" in out.getvalue()
    assert Bike.objects.count() == 3

    call_command("seed_fleet", "--force", stdout=StringIO())
    assert Bike.objects.count() == 4


def test_export_and_import_commands_use_files(tmp_path, bike_factory):
    bike_factory(ref_no="M42")
    target = tmp_path / "fleet.json"

    call_command("export_fleet", "--output", str(target), stdout=StringIO())
    assert json.loads(target.read_text(encoding="utf-8"))["bikes"][0]["ref_no"] == "M42"

    Bike.objects.all().delete()
    call_command("import_fleet", str(target), stdout=StringIO())
    assert Bike.objects.filter(ref_no="M42").exists()


def test_import_command_reports_bad_document(tmp_path):
    target = tmp_path / "fleet.json"
    target.write_text(json.dumps({"bikes": "nope"}), encoding="utf-8")

    with pytest.raises(CommandError):
        call_command("import_fleet", str(target), stdout=StringIO())
