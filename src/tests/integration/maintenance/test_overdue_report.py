import logging
from datetime import date
from io import StringIO

import pytest
from django.core.management import call_command

from maintenance.services import OverdueMaintenanceService
from maintenance.tasks import report_overdue_maintenance

pytestmark = pytest.mark.django_db


def test_list_overdue_sorts_by_days_overdue_descending(maintenance_record_factory):
    today = date(2025, 11, 20)
    recent = maintenance_record_factory(reported_date=date(2025, 11, 10))
    oldest = maintenance_record_factory(reported_date=date(2025, 10, 1))
    maintenance_record_factory(reported_date=date(2025, 11, 15))

    overdue = OverdueMaintenanceService.list_overdue(today=today)

    assert [item.record.id for item in overdue] == [oldest.id, recent.id]
    assert [item.days_overdue for item in overdue] == [50, 10]
    assert overdue[0].bike == oldest.bike


def test_threshold_follows_settings(settings, maintenance_record_factory):
    settings.MAINTENANCE_OVERDUE_DAYS = 2
    record = maintenance_record_factory(reported_date=date(2025, 11, 17))

    overdue = OverdueMaintenanceService.list_overdue(today=date(2025, 11, 20))

    assert [item.record.id for item in overdue] == [record.id]


def test_report_overdue_logs_each_record(caplog, maintenance_record_factory):
    record = maintenance_record_factory(reported_date=date(2025, 10, 1))

    with caplog.at_level(logging.WARNING, logger="maintenance.services"):
        summary = OverdueMaintenanceService.report_overdue(today=date(2025, 11, 20))

    assert summary == {"count": 1, "record_ids": [record.id], "threshold_days": 7}
    assert f"Maintenance record {record.id}" in caplog.text


def test_overdue_task_returns_summary(maintenance_record_factory):
    record = maintenance_record_factory(reported_date=date(2020, 1, 1))

    summary = report_overdue_maintenance()

    assert summary["count"] == 1
    assert summary["record_ids"] == [record.id]


def test_overdue_command_prints_summary(maintenance_record_factory):
    record = maintenance_record_factory(reported_date=date(2020, 1, 1))
    out = StringIO()

    call_command("report_overdue_maintenance", stdout=out)

    assert "count=1" in out.getvalue()
    assert str(record.id) in out.getvalue()
