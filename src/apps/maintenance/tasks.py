from __future__ import annotations

from celery import shared_task

from maintenance.services import OverdueMaintenanceService


@shared_task(name="maintenance.tasks.report_overdue_maintenance")
def report_overdue_maintenance() -> dict[str, object]:
    return OverdueMaintenanceService.report_overdue()
