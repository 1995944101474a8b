import json

from django.core.management.base import BaseCommand

from bike.services_snapshot import FleetSnapshotService


class Command(BaseCommand):
    help = "Write the whole fleet as a JSON snapshot to stdout or a file."

    def add_arguments(self, parser):
        parser.add_argument("--output", "-o", help="Target file path.")
        parser.add_argument("--indent", type=int, default=2)

    def handle(self, *args, **options):
        payload = json.dumps(
            FleetSnapshotService.export_snapshot(),
            indent=options["indent"],
            ensure_ascii=False,
        )
        output = options.get("output")
        if not output:
            self.stdout.write(payload)
            return

        with open(output, "w", encoding="utf-8") as fp:
            fp.write(payload)
        self.stdout.write(self.style.SUCCESS(f"Fleet snapshot written to {output}"))
