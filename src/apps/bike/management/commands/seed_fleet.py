from django.core.management.base import BaseCommand

from bike.services_snapshot import FleetSnapshotService


class Command(BaseCommand):
    help = "Load the bundled demo fleet when the database holds no bikes."

    def add_arguments(self, parser):
        parser.add_argument(
            "--force",
            action="store_true",
            help="Replace the current fleet with the demo fleet.",
        )

    def handle(self, *args, **options):
        summary = FleetSnapshotService.seed_demo_fleet(force=options["force"])
        if summary is None:
            self.stdout.write(
                self.style.WARNING(
                    "Fleet already has bikes; nothing seeded. Use --force to replace it."
                )
            )
            return

        self.stdout.write(
            self.style.SUCCESS(
                "Demo fleet seeded: "
                f"bikes={summary['bikes_created']} "
                f"maintenance_records={summary['maintenance_records_created']} "
                f"bookings={summary['bookings_created']}"
            )
        )
