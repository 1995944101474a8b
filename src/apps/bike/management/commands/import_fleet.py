import json

from django.core.management.base import BaseCommand, CommandError

from bike.services_snapshot import FleetSnapshotService


class Command(BaseCommand):
    help = "Replace the whole fleet with the contents of a JSON snapshot file."

    def add_arguments(self, parser):
        parser.add_argument("path", help="Snapshot file produced by export_fleet.")

    def handle(self, *args, **options):
        path = options["path"]
        try:
            with open(path, encoding="utf-8") as fp:
                document = json.load(fp)
        except OSError as exc:
            raise CommandError(f"Cannot read {path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise CommandError(f"{path} is not valid JSON: {exc}") from exc

        try:
            summary = FleetSnapshotService.import_snapshot(document)
        except ValueError as exc:
            raise CommandError(str(exc)) from exc

        self.stdout.write(
            self.style.SUCCESS(
                "Fleet snapshot imported: "
                + " ".join(f"{key}={value}" for key, value in summary.items())
            )
        )
