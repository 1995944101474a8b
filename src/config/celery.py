import os
import sys
from pathlib import Path

from celery import Celery

APPS_DIR = Path(__file__).resolve().parents[1] / "apps"
if str(APPS_DIR) not in sys.path:
    sys.path.insert(0, str(APPS_DIR))

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("velofleet")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
