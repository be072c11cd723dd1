"""
BOS – Django Settings (Policy Framework Host)
==============================================
Django serves as the configuration container for BOS.
BOS architecture is the authority — Django does not dictate structure.

The policy framework reads only POLICY_FRAMEWORK and LOGGING from here.
Nothing in this project sets DJANGO_SETTINGS_MODULE; a host applies
this module (and its LOGGING dict) by pointing DJANGO_SETTINGS_MODULE
at config.settings. Without that, PolicyFrameworkSettings falls back to
its built-in defaults.
"""

import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
# Required by Django itself; no policy framework code reads these.
SECRET_KEY = os.environ.get("BOS_SECRET_KEY", "bos-dev-key-replace-before-deployment")

DEBUG = os.environ.get("BOS_DEBUG", "1") == "1"

ALLOWED_HOSTS = []

# ── Installed Apps ────────────────────────────────────────────
# No models. The policy framework is pure Python.
INSTALLED_APPS = []

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# ── Policy Framework ──────────────────────────────────────────
# See core.policy.settings.PolicyFrameworkSettings for every key.
POLICY_FRAMEWORK = {
    "FUTURE_DATE_POSTING_MAX_DAYS": 60,
    "CREDIT_LIMIT_WARNING_THRESHOLD": "0.85",
    "ADJUSTMENT_REASON_MANDATORY_THRESHOLD": "-50",
    "DISABLED_POLICIES": [],
    "DEFAULT_STRATEGY": "COLLECT_ALL",
    "PARALLELIZE_SAME_ORDER_TIER": False,
    "MAX_CONCURRENCY": None,
}

# ── Logging ───────────────────────────────────────────────────
# Pipeline start/complete at INFO, per-policy detail at DEBUG.
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "bos": {
            "format": "%(asctime)s %(levelname)-8s %(name)s | %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "bos",
        },
    },
    "loggers": {
        "bos.policy": {
            "handlers": ["console"],
            "level": os.environ.get("BOS_POLICY_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}
