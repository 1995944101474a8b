from django.core.management.base import BaseCommand

from maintenance.services import OverdueMaintenanceService


class Command(BaseCommand):
    help = "Log every pending maintenance record that is past the overdue threshold."

    def handle(self, *args, **options):
        summary = OverdueMaintenanceService.report_overdue()
        style = self.style.WARNING if summary["count"] else self.style.SUCCESS
        self.stdout.write(
            style(
                "Overdue maintenance check completed: "
                f"count={summary['count']} "
                f"threshold_days={summary['threshold_days']} "
                f"record_ids={summary['record_ids']}"
            )
        )
