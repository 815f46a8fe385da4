from .base import *
import os

DEBUG = True
ALLOWED_HOSTS = ["*"]

# 로컬 postgres 없이 띄울 때: DB_ENGINE=sqlite
if os.getenv("DB_ENGINE", "").lower() == "sqlite":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
        }
    }

LOGGING["loggers"] = {
    "academy": {"level": "DEBUG"},
    "apps.domains.assessments": {"level": "DEBUG"},
}
