import logging
import os

from .settings import *  # noqa: F403
from .settings import BASE_DIR, STORAGES
from .settings import LOGGING as BASE_LOGGING

logger = logging.getLogger(__name__)

DEBUG = True

# Disable secure cookies for local development
CSRF_COOKIE_SECURE = False

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "testserver"]

# Local development runs against sqlite unless a Postgres host is configured
if not os.getenv("DB_HOST"):
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
        }
    }

TRACING_MODE = os.getenv("TRACING_MODE", "off")

LOGGING = {
    **BASE_LOGGING,
    "loggers": {
        **BASE_LOGGING["loggers"],
        "django.db.backends": {
            "handlers": ["console"],
            "level": "DEBUG" if os.getenv("SQL_DEBUG") == "True" else "INFO",
            "propagate": False,
        },
        "gangroster": {
            "handlers": ["console"],
            "level": os.getenv("GANGROSTER_LOG_LEVEL", "DEBUG").upper(),
            "propagate": True,
        },
    },
}

# Check for environment variable to enable GCS testing
USE_GCS_IN_DEV = os.getenv("USE_GCS_IN_DEV", "False") == "True"

if USE_GCS_IN_DEV:
    from .storage_settings import configure_gcs_storage

    gcs_config = configure_gcs_storage(STORAGES)

    GS_BUCKET_NAME = gcs_config["GS_BUCKET_NAME"]
    GS_PROJECT_ID = gcs_config["GS_PROJECT_ID"]
    MEDIA_URL = gcs_config["MEDIA_URL"]
    logger.info(f"Using GCS bucket {GS_BUCKET_NAME} for media in development")
