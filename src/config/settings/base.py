import os
import sys
from datetime import timedelta
from pathlib import Path
from urllib.parse import urlparse

import dj_database_url
import sentry_sdk
from celery.schedules import crontab
from decouple import config
from sentry_sdk.integrations.celery import CeleryIntegration
from sentry_sdk.integrations.django import DjangoIntegration

BASE_DIR = Path(__file__).resolve().parent.parent.parent

IS_TEST_RUN = (
    "test" in sys.argv
    or "PYTEST_CURRENT_TEST" in os.environ
    or any("pytest" in arg for arg in sys.argv)
)
LOGS_ROOT = Path(config("LOGS_ROOT", default=BASE_DIR / "logs"))
DEBUG = config("DEBUG", default=False, cast=bool)
if IS_TEST_RUN:
    # Keep tests deterministic and avoid debug-only middleware/tooling side effects.
    DEBUG = False
SECRET_KEY = config(
    "DJANGO_SECRET_KEY",
    default="django-insecure-change-me-please-use-a-long-secret-key-for-local-dev",
)


def _split_csv_env(name: str, *, default: str = "") -> list[str]:
    raw_value = config(name, default=default)
    return [item.strip() for item in str(raw_value).split(",") if item.strip()]


ALLOWED_HOSTS = _split_csv_env("ALLOWED_HOSTS", default="localhost,127.0.0.1")
CORS_ALLOWED_ORIGINS = _split_csv_env("CORS_ALLOWED_ORIGINS")
CORS_ALLOW_ALL_ORIGINS = config("CORS_ALLOW_ALL_ORIGINS", default=False, cast=bool)
CORS_ALLOW_CREDENTIALS = config("CORS_ALLOW_CREDENTIALS", default=True, cast=bool)

DATABASE_URL = config(
    "DATABASE_URL",
    default=f"sqlite:///{BASE_DIR.parent / 'velofleet.sqlite3'}",
)
TEST_DATABASE_URL = config("TEST_DATABASE_URL", default="sqlite:///:memory:")
ACTIVE_DATABASE_URL = TEST_DATABASE_URL if IS_TEST_RUN else DATABASE_URL

REDIS_HOST = config("REDIS_HOST", default="localhost")
REDIS_PORT = config("REDIS_PORT", default=6379, cast=int)
REDIS_DB = config("REDIS_DB", default=0, cast=int)
REDIS_CACHE_DB = config("REDIS_CACHE_DB", default=1, cast=int)
REDIS_URL = config(
    "REDIS_URL",
    default=f"redis://{REDIS_HOST}:{REDIS_PORT}/{REDIS_DB}",
)
REDIS_CACHE_URL = config(
    "REDIS_CACHE_URL",
    default=f"redis://{REDIS_HOST}:{REDIS_PORT}/{REDIS_CACHE_DB}",
)

UNFOLD_APPS = [
    "unfold",
    "unfold.contrib.filters",
    "unfold.contrib.forms",
    "unfold.contrib.inlines",
]

DJANGO_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
]

THIRD_PARTY_APPS = [
    "rest_framework",
    "rest_framework_simplejwt",
    "rest_framework_simplejwt.token_blacklist",
    "django_filters",
    "corsheaders",
    "drf_spectacular",
    "django_celery_beat",
]

LOCAL_APPS = [
    "core",
    "api",
    "bike",
    "maintenance",
    "booking",
]

INSTALLED_APPS = UNFOLD_APPS + DJANGO_APPS + THIRD_PARTY_APPS + LOCAL_APPS

MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "core.middlewares.request_id.RequestIDMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

ASGI_APPLICATION = "config.server.asgi.application"
WSGI_APPLICATION = "config.server.wsgi.application"

DATABASES = {
    "default": dj_database_url.parse(
        url=ACTIVE_DATABASE_URL,
        conn_max_age=600,
        conn_health_checks=True,
    )
}

if IS_TEST_RUN:
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
            "LOCATION": "velofleet-cache",
        }
    }
else:
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.redis.RedisCache",
            "LOCATION": REDIS_CACHE_URL,
            "TIMEOUT": None,
        }
    }

CELERY_BROKER_URL = config("CELERY_BROKER_URL", default=REDIS_URL)
CELERY_RESULT_BACKEND = config("CELERY_RESULT_BACKEND", default=CELERY_BROKER_URL)
CELERY_ACCEPT_CONTENT = ["json"]
CELERY_TASK_SERIALIZER = "json"
CELERY_RESULT_SERIALIZER = "json"
CELERY_TIMEZONE = config("CELERY_TIMEZONE", default="UTC")
CELERY_ENABLE_UTC = True
CELERY_TASK_IGNORE_RESULT = True
CELERY_TASK_ALWAYS_EAGER = IS_TEST_RUN
CELERY_BEAT_SCHEDULER = "django_celery_beat.schedulers:DatabaseScheduler"
CELERY_BEAT_SCHEDULE = {
    "report-overdue-maintenance": {
        "task": "maintenance.tasks.report_overdue_maintenance",
        "schedule": crontab(minute=0),
    },
}

# Pending maintenance older than this many days is reported as overdue.
MAINTENANCE_OVERDUE_DAYS = config("MAINTENANCE_OVERDUE_DAYS", default=7, cast=int)

AUTH_PASSWORD_VALIDATORS = [
    {
        "NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.MinimumLengthValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.CommonPasswordValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.NumericPasswordValidator",
    },
]

LANGUAGE_CODE = "en-us"
TIME_ZONE = config("TIME_ZONE", default="UTC")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
MEDIA_URL = "media/"

STATIC_ROOT = BASE_DIR.parent / "cdn/static"
MEDIA_ROOT = BASE_DIR.parent / "cdn/media"

# Logging
LOGGING_TELEGRAM_BOT_TOKEN = config("LOGGING_TELEGRAM_BOT_TOKEN", default="")
LOGGING_TELEGRAM_CHAT_ID = config("LOGGING_TELEGRAM_CHAT_ID", default="")

SENTRY_DSN = config("SENTRY_DSN", default="")
SENTRY_ENVIRONMENT = config(
    "SENTRY_ENVIRONMENT",
    default="development" if DEBUG else "production",
)
SENTRY_RELEASE = config("SENTRY_RELEASE", default="")
SENTRY_TRACES_SAMPLE_RATE = config(
    "SENTRY_TRACES_SAMPLE_RATE",
    default=0.0,
    cast=float,
)
SENTRY_PROFILES_SAMPLE_RATE = config(
    "SENTRY_PROFILES_SAMPLE_RATE",
    default=0.0,
    cast=float,
)
SENTRY_SEND_DEFAULT_PII = config(
    "SENTRY_SEND_DEFAULT_PII",
    default=False,
    cast=bool,
)


def _clamp_sample_rate(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def _is_valid_sentry_dsn(value: str) -> bool:
    parsed = urlparse(value.strip())
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


SENTRY_TRACES_SAMPLE_RATE = _clamp_sample_rate(SENTRY_TRACES_SAMPLE_RATE)
SENTRY_PROFILES_SAMPLE_RATE = _clamp_sample_rate(SENTRY_PROFILES_SAMPLE_RATE)
SENTRY_ENABLED = _is_valid_sentry_dsn(SENTRY_DSN) and not IS_TEST_RUN
if SENTRY_ENABLED:
    sentry_sdk.init(
        dsn=SENTRY_DSN,
        environment=SENTRY_ENVIRONMENT,
        release=SENTRY_RELEASE or None,
        traces_sample_rate=SENTRY_TRACES_SAMPLE_RATE,
        profiles_sample_rate=SENTRY_PROFILES_SAMPLE_RATE,
        send_default_pii=SENTRY_SEND_DEFAULT_PII,
        integrations=[DjangoIntegration(), CeleryIntegration()],
    )

# Ensure logs directory exists
os.makedirs(LOGS_ROOT, exist_ok=True)

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "filters": {
        "request_context": {
            "()": "core.utils.logging.RequestContextFilter",
        },
    },
    "formatters": {
        "colored": {
            "()": "colorlog.ColoredFormatter",
            "format": (
                "%(log_color)s[%(asctime)s] [%(levelname)s] [request_id=%(request_id)s] "
                "%(name)s:%(module)s:%(filename)s:%(lineno)d "
                "%(funcName)s | %(message)s"
            ),
            "datefmt": "%Y-%m-%d %H:%M:%S",
            "log_colors": {
                "DEBUG": "white",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            },
        },
        "verbose": {
            "format": (
                "[%(asctime)s] [%(levelname)s] [request_id=%(request_id)s] "
                "%(name)s:%(module)s:%(filename)s:%(lineno)d "
                "%(funcName)s | %(message)s"
            ),
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "telegram": {
            "format": (
                "🚨 <b>VeloFleet Error Alert</b>\n"
                "🔴 <b>Level:</b> %(levelname)s\n"
                "💬 <b>Message:</b> %(message)s\n\n"
                "📍 <b>Location</b>\n"
                "• Module: <code>%(module)s:%(filename)s:%(lineno)d</code>\n"
                "• Function: <code>%(funcName)s</code>\n\n"
                "🌐 <b>Request Context</b>\n"
                "• User: %(user)s\n"
                "• Method: %(method)s\n"
                "• Path: %(path)s\n"
                "• IP: %(ip)s\n"
                "• Request ID: <code>%(request_id)s</code>\n\n"
                "🧵 <b>Traceback</b>\n<pre>%(traceback)s</pre>"
            )
        },
    },
    "handlers": {
        # Console
        "console": {
            "level": "INFO",
            "class": "logging.StreamHandler",
            "formatter": "colored",
            "filters": ["request_context"],
        },
        # Main app log (rotating)
        "app_file": {
            "level": "INFO",
            "class": "logging.handlers.TimedRotatingFileHandler",
            "filename": LOGS_ROOT / "app.log",
            "when": "midnight",
            "backupCount": 30,
            "formatter": "verbose",
            "filters": ["request_context"],
        },
        # Error log (rotating)
        "error_file": {
            "level": "ERROR",
            "class": "logging.handlers.TimedRotatingFileHandler",
            "filename": LOGS_ROOT / "error.log",
            "when": "midnight",
            "backupCount": 60,
            "formatter": "verbose",
            "filters": ["request_context"],
        },
        # Slow queries
        "slow_queries_file": {
            "level": "WARNING",
            "class": "logging.handlers.TimedRotatingFileHandler",
            "filename": LOGS_ROOT / "slow_queries.log",
            "when": "midnight",
            "backupCount": 30,
            "formatter": "verbose",
            "filters": ["request_context"],
        },
        # Telegram alerts
        "telegram_errors": {
            "level": "ERROR",
            "class": "core.utils.logging.TelegramErrorHandler",
            "bot_token": LOGGING_TELEGRAM_BOT_TOKEN,
            "chat_id": LOGGING_TELEGRAM_CHAT_ID,
            "filters": ["request_context"],
            "formatter": "telegram",
        },
    },
    "loggers": {
        # Django internal logs
        "django": {
            "handlers": ["app_file", "console"],
            "level": "INFO",
            "propagate": False,
        },
        # Django request errors → TELEGRAM!
        "django.request": {
            "handlers": ["telegram_errors", "error_file"],
            "level": "ERROR",
            "propagate": False,
        },
        # Slow queries
        "django.db.backends": {
            "handlers": ["slow_queries_file"],
            "level": "WARNING",
            "propagate": False,
        },
        # Universal logger (entire project)
        "": {
            "handlers": ["app_file", "console"],
            "level": "INFO",
        },
    },
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework_simplejwt.authentication.JWTAuthentication"
    ],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.IsAuthenticated"],
    "DEFAULT_PAGINATION_CLASS": "core.utils.pagination.CustomPagination",
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "PAGE_SIZE": 10,
    "EXCEPTION_HANDLER": "core.api.exceptions.custom_exception_handler",  # noqa
}

SPECTACULAR_SETTINGS = {
    "TITLE": "VeloFleet API",
    "DESCRIPTION": (
        "Bicycle rental fleet: inventory, workshop maintenance and booking calendar."
    ),
    "VERSION": "v1",
    "SERVE_INCLUDE_SCHEMA": False,
    "SCHEMA_PATH_PREFIX": r"/api/v[0-9]",
    "TAGS": [
        {
            "name": "Auth",
            "description": "JWT token obtain, refresh and verify endpoints.",
        },
        {
            "name": "Bikes",
            "description": "Fleet inventory, availability window and catalogue options.",
        },
        {
            "name": "Maintenance",
            "description": "Fault reports, workshop sessions and overdue notifications.",
        },
        {
            "name": "Bookings",
            "description": "Bike bookings, month calendar and date range picker.",
        },
        {
            "name": "Fleet Snapshot",
            "description": "Whole-fleet JSON export and import.",
        },
        {
            "name": "System / Health",
            "description": "System health and connectivity checks.",
        },
    ],
}

SIMPLE_JWT = {
    "ACCESS_TOKEN_LIFETIME": timedelta(hours=6),
    "REFRESH_TOKEN_LIFETIME": timedelta(days=1),
    "ROTATE_REFRESH_TOKENS": True,
    "BLACKLIST_AFTER_ROTATION": True,
    "AUTH_HEADER_TYPES": ("Bearer",),
}

UNFOLD = {
    "SITE_URL": "/admin/",
    "SITE_TITLE": "VeloFleet",
    "SITE_HEADER": "VeloFleet",
    "SITE_SUBHEADER": lambda request: (
        request.user.get_username()
        if request.user.is_authenticated
        else "Unknown User"
    ),
    "SIDEBAR": {
        "show_search": False,
    },
}

CORS_URLS_REGEX = r"^/api/.*$"
