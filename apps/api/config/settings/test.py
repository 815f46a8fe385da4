# PATH: apps/api/config/settings/test.py
from .base import *

DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

# 테스트는 env 와 무관하게 기본 정책 고정
ASSESSMENT_REATTEMPT_STRATEGY = "abandon"
ASSESSMENT_RESUME_TIMER = "elapsed"
ASSESSMENT_LAZY_EXPIRY = False
ASSESSMENT_EXPIRY_GRACE_SECONDS = 5
ASSESSMENT_WARNING_THRESHOLDS = "30,10"

LOGGING["root"]["level"] = "WARNING"
