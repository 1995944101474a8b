#!/usr/bin/env python
import os
import sys
from pathlib import Path

APPS_DIR = Path(__file__).resolve().parent / "apps"


def main():
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")
    sys.path.insert(0, str(APPS_DIR))
    from django.core.management import execute_from_command_line

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
