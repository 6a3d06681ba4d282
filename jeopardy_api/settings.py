"""
Django settings for the jeopardy_api project.

Every deployment-specific value comes from an environment variable; the
defaults are good enough for local development and the test suite.
"""

import os
import sys
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    return os.environ.get(name, str(default)).lower() in ("1", "true", "yes")


SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "django-insecure-jeopardy-development-key")

DEBUG = env_bool("DJANGO_DEBUG", False)

ALLOWED_HOSTS = [h for h in os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h]

TESTING = "test" in sys.argv or "pytest" in sys.argv[0]

INSTALLED_APPS = [
    "django.contrib.sessions",
    "django.contrib.staticfiles",
    "django_prometheus",
    "jeopardy_app",
]

MIDDLEWARE = [
    "django_prometheus.middleware.PrometheusBeforeMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "django_prometheus.middleware.PrometheusAfterMiddleware",
]

ROOT_URLCONF = "jeopardy_api.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
            ],
        },
    },
]

WSGI_APPLICATION = "jeopardy_api.wsgi.application"

# The test runner still expects a default database even though nothing is stored in it
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

# Boards live in process memory only
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "jeopardy",
    }
}

SESSION_ENGINE = "django.contrib.sessions.backends.cache"
SESSION_EXPIRE_AT_BROWSER_CLOSE = True

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Trivia provider and board size
JEOPARDY_PROVIDER_BASE_URL = os.environ.get("JEOPARDY_PROVIDER_BASE_URL", "https://jservice.io/api")
JEOPARDY_PROVIDER_TIMEOUT = float(os.environ.get("JEOPARDY_PROVIDER_TIMEOUT", "10"))
JEOPARDY_CATEGORY_COUNT = int(os.environ.get("JEOPARDY_CATEGORY_COUNT", "6"))
JEOPARDY_QUESTION_COUNT = int(os.environ.get("JEOPARDY_QUESTION_COUNT", "5"))

# Upper bound for how long a stuck load may block new games for a session
JEOPARDY_LOAD_LOCK_TIMEOUT = int(os.environ.get("JEOPARDY_LOAD_LOCK_TIMEOUT", "120"))

# Prometheus metrics endpoint
PROMETHEUS_METRICS_ENABLED = env_bool("PROMETHEUS_METRICS_ENABLED", True)
PROMETHEUS_METRICS_AUTH_USERNAME = os.environ.get("PROMETHEUS_METRICS_AUTH_USERNAME", "")
PROMETHEUS_METRICS_AUTH_PASSWORD = os.environ.get("PROMETHEUS_METRICS_AUTH_PASSWORD", "")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{asctime} {levelname} {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": os.environ.get("DJANGO_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
        "jeopardy_app": {
            "handlers": ["console"],
            "level": os.environ.get("JEOPARDY_LOG_LEVEL", "WARNING" if TESTING else "INFO"),
            "propagate": False,
        },
    },
}

PROMETHEUS_EXPORT_MIGRATIONS = False
