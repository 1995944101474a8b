from datetime import date, timedelta

import pytest
from django.utils import timezone

from core.utils.constants import BikeStatus, MaintenanceStatus
from maintenance.models import MaintenanceRecord, MaintenanceTaskType
from maintenance.services import MaintenanceTaskTypeService

pytestmark = pytest.mark.django_db


OVERDUE_URL = "/api/v1/maintenance/overdue/"
TASK_TYPES_URL = "/api/v1/maintenance/task-types/"


def history_url(bike_id: int) -> str:
    return f"/api/v1/bikes/{bike_id}/maintenance/"


def report_fault_url(bike_id: int) -> str:
    return f"/api/v1/bikes/{bike_id}/maintenance/report-fault/"


def start_url(bike_id: int) -> str:
    return f"/api/v1/bikes/{bike_id}/maintenance/start/"


def record_url(record_id: int) -> str:
    return f"/api/v1/maintenance/records/{record_id}/"


def process_url(record_id: int) -> str:
    return f"/api/v1/maintenance/records/{record_id}/process/"


def task_type_url(task_type_id: int) -> str:
    return f"/api/v1/maintenance/task-types/{task_type_id}/"


def test_report_fault_opens_pending_record_without_touching_status(
    authed_client, bike_factory
):
    bike = bike_factory(status=BikeStatus.RENTED)

    resp = authed_client.post(
        report_fault_url(bike.id),
        {"description": "  Flat tyre. "},
        format="json",
    )

    assert resp.status_code == 201
    data = resp.data["data"]
    assert data["description"] == "Flat tyre."
    assert data["status"] == MaintenanceStatus.PENDING
    assert data["tasks"] == []
    assert data["reported_date"] == timezone.localdate().isoformat()
    bike.refresh_from_db()
    assert bike.status == BikeStatus.RENTED


def test_report_fault_rejects_blank_description(authed_client, bike_factory):
    bike = bike_factory()

    resp = authed_client.post(
        report_fault_url(bike.id), {"description": "   "}, format="json"
    )

    assert resp.status_code == 400
    assert not MaintenanceRecord.objects.exists()


def test_start_maintenance_moves_bike_into_workshop(authed_client, bike_factory):
    bike = bike_factory()

    resp = authed_client.post(start_url(bike.id), format="json")

    assert resp.status_code == 201
    data = resp.data["data"]
    assert data["status"] == MaintenanceStatus.PENDING
    assert data["description"] == "Routine maintenance started by the workshop."
    assert data["bike"]["status"] == BikeStatus.IN_MAINTENANCE
    bike.refresh_from_db()
    assert bike.status == BikeStatus.IN_MAINTENANCE


def test_start_maintenance_returns_404_for_unknown_bike(authed_client):
    resp = authed_client.post(start_url(404), format="json")
    assert resp.status_code == 404


def test_process_record_saves_tasks_and_notes_without_concluding(
    authed_client, maintenance_record_factory
):
    record = maintenance_record_factory()

    resp = authed_client.post(
        process_url(record.id),
        {
            "tasks": ["Brake adjustment", "Chain replacement", "Brake adjustment"],
            "workshop_notes": "Worn pads.",
        },
        format="json",
    )

    assert resp.status_code == 200
    record.refresh_from_db()
    assert record.tasks == ["Brake adjustment", "Chain replacement"]
    assert record.workshop_notes == "Worn pads."
    assert record.status == MaintenanceStatus.PENDING
    assert record.resolved_date is None


def test_process_record_rejects_unknown_task_labels(
    authed_client, maintenance_record_factory
):
    record = maintenance_record_factory()

    resp = authed_client.post(
        process_url(record.id),
        {"tasks": ["Paint job"]},
        format="json",
    )

    assert resp.status_code == 400
    assert resp.data["error"] == "validation_error"
    assert "Paint job" in resp.data["message"]
    record.refresh_from_db()
    assert record.tasks == []


def test_concluding_last_pending_record_returns_bike_to_fleet(
    authed_client, bike_factory, maintenance_record_factory
):
    bike = bike_factory(status=BikeStatus.IN_MAINTENANCE)
    record = maintenance_record_factory(bike=bike)

    resp = authed_client.post(
        process_url(record.id),
        {"tasks": ["Brake adjustment"], "conclude": True},
        format="json",
    )

    assert resp.status_code == 200
    record.refresh_from_db()
    bike.refresh_from_db()
    assert record.status == MaintenanceStatus.RESOLVED
    assert record.resolved_date == timezone.localdate()
    assert bike.status == BikeStatus.AVAILABLE


def test_concluding_record_keeps_status_while_other_records_pending(
    authed_client, bike_factory, maintenance_record_factory
):
    bike = bike_factory(status=BikeStatus.IN_MAINTENANCE)
    record = maintenance_record_factory(bike=bike)
    maintenance_record_factory(bike=bike, description="Gears skipping.")

    resp = authed_client.post(process_url(record.id), {"conclude": True}, format="json")

    assert resp.status_code == 200
    bike.refresh_from_db()
    assert bike.status == BikeStatus.IN_MAINTENANCE


def test_concluding_resolved_record_is_rejected_but_notes_stay_editable(
    authed_client, maintenance_record_factory
):
    record = maintenance_record_factory(
        status=MaintenanceStatus.RESOLVED,
        resolved_date=date(2023, 10, 16),
    )

    resp = authed_client.post(process_url(record.id), {"conclude": True}, format="json")
    assert resp.status_code == 400
    assert resp.data["error"] == "validation_error"

    resp = authed_client.post(
        process_url(record.id),
        {"workshop_notes": "Inner tube swapped as well."},
        format="json",
    )
    assert resp.status_code == 200
    record.refresh_from_db()
    assert record.workshop_notes == "Inner tube swapped as well."
    assert record.resolved_date == date(2023, 10, 16)


def test_bike_history_is_newest_first(
    authed_client, bike_factory, maintenance_record_factory
):
    bike = bike_factory()
    first = maintenance_record_factory(bike=bike, reported_date=date(2023, 10, 15))
    second = maintenance_record_factory(bike=bike, reported_date=date(2023, 10, 20))
    maintenance_record_factory(reported_date=date(2023, 10, 25))

    resp = authed_client.get(history_url(bike.id))

    assert resp.status_code == 200
    assert [row["id"] for row in resp.data["results"]] == [second.id, first.id]


def test_record_detail_includes_bike(authed_client, maintenance_record_factory):
    record = maintenance_record_factory()

    resp = authed_client.get(record_url(record.id))

    assert resp.status_code == 200
    assert resp.data["data"]["bike"]["ref_no"] == record.bike.ref_no


def test_overdue_lists_pending_records_older_than_threshold(
    authed_client, maintenance_record_factory
):
    today = timezone.localdate()
    oldest = maintenance_record_factory(reported_date=today - timedelta(days=30))
    overdue = maintenance_record_factory(reported_date=today - timedelta(days=8))
    maintenance_record_factory(reported_date=today - timedelta(days=7))
    maintenance_record_factory(
        reported_date=today - timedelta(days=40),
        status=MaintenanceStatus.RESOLVED,
        resolved_date=today - timedelta(days=39),
    )

    resp = authed_client.get(OVERDUE_URL)

    assert resp.status_code == 200
    rows = resp.data["data"]
    assert [row["record"]["id"] for row in rows] == [oldest.id, overdue.id]
    assert [row["days_overdue"] for row in rows] == [30, 8]
    assert rows[0]["bike"]["ref_no"] == oldest.bike.ref_no


def test_task_type_catalogue_lists_adds_and_removes(authed_client):
    resp = authed_client.get(TASK_TYPES_URL)
    assert resp.status_code == 200
    names = [row["name"] for row in resp.data["data"]]
    assert names == sorted(names)
    assert "Brake adjustment" in names

    resp = authed_client.post(TASK_TYPES_URL, {"name": "  Wheel   truing "}, format="json")
    assert resp.status_code == 201
    assert resp.data["data"]["name"] == "Wheel truing"

    resp = authed_client.post(TASK_TYPES_URL, {"name": "wheel truing"}, format="json")
    assert resp.status_code == 400

    task_type = MaintenanceTaskType.objects.get(name="Wheel truing")
    resp = authed_client.delete(task_type_url(task_type.id))
    assert resp.status_code == 204
    assert not MaintenanceTaskType.objects.filter(pk=task_type.id).exists()


def test_removing_task_type_keeps_labels_on_existing_records(
    authed_client, maintenance_record_factory
):
    record = maintenance_record_factory(tasks=["Gear adjustment"])
    task_type = MaintenanceTaskType.objects.get(name="Gear adjustment")

    resp = authed_client.delete(task_type_url(task_type.id))

    assert resp.status_code == 204
    record.refresh_from_db()
    assert record.tasks == ["Gear adjustment"]


@pytest.mark.parametrize("name", ["", "   "])
def test_task_type_catalogue_rejects_blank_names(authed_client, name):
    count_before = MaintenanceTaskType.objects.count()

    resp = authed_client.post(TASK_TYPES_URL, {"name": name}, format="json")

    assert resp.status_code == 400
    assert resp.data["success"] is False
    assert MaintenanceTaskType.objects.count() == count_before


def test_ensure_task_types_skips_case_variants_of_known_names():
    created = MaintenanceTaskTypeService.ensure_task_types(
        ["brake adjustment", "Wheel truing", "WHEEL TRUING", "  wheel   truing "]
    )

    assert created == 1
    names = MaintenanceTaskType.domain.names()
    assert names.count("Wheel truing") == 1
    assert "brake adjustment" not in names
    assert "WHEEL TRUING" not in names
