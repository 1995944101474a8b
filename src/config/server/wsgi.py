import os
import sys
from pathlib import Path

from django.core.wsgi import get_wsgi_application

APPS_DIR = Path(__file__).resolve().parents[2] / "apps"
if str(APPS_DIR) not in sys.path:
    sys.path.insert(0, str(APPS_DIR))

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.prod")

application = get_wsgi_application()
