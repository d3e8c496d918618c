"""Base settings for all environments.

Common configuration for the booking engine: installed apps, engine
tunables (BOOKING_ENGINE) and structured logging via structlog.
Environment-specific overrides live in `dev.py` and `prod.py`.
"""

import os
from pathlib import Path

import structlog

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'replace-me-in-production')

DEBUG = False

ALLOWED_HOSTS: list[str] = os.environ.get('DJANGO_ALLOWED_HOSTS', '*').split(',')

INSTALLED_APPS = [
    'apps.bookings',
]

USE_TZ = True

TIME_ZONE = 'UTC'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Booking engine
# Clock units are whatever the injected clock counts (block heights, hours...).
BOOKING_ENGINE = {
    'MAX_BOOKINGS': int(os.environ.get('BOOKING_ENGINE_MAX_BOOKINGS', 10000)),
    'BOOKING_FEE': int(os.environ.get('BOOKING_ENGINE_BOOKING_FEE', 500)),
    'CANCELLATION_LEAD_TIME': int(os.environ.get('BOOKING_ENGINE_CANCELLATION_LEAD_TIME', 48)),
    'MIN_REPUTATION_SCORE': int(os.environ.get('BOOKING_ENGINE_MIN_REPUTATION_SCORE', 50)),
    'MAX_GUESTS': 20,
    'AUTHORITY': os.environ.get('BOOKING_ENGINE_AUTHORITY') or None,
}

# Logging
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

_shared_processors = [
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.stdlib.add_logger_name,
    structlog.processors.add_log_level,
    structlog.processors.StackInfoRenderer(),
]

structlog.configure(
    processors=[
        *_shared_processors,
        structlog.processors.format_exc_info,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": "structlog.stdlib.ProcessorFormatter",
            "processor": structlog.processors.JSONRenderer(),
            "foreign_pre_chain": _shared_processors,
        },
        "console": {
            "()": "structlog.stdlib.ProcessorFormatter",
            "processor": structlog.dev.ConsoleRenderer(colors=False),
            "foreign_pre_chain": _shared_processors,
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "level": "DEBUG",
        }
    },
    "root": {"handlers": ["console"], "level": "WARNING"},
    "loggers": {
        "django": {"handlers": ["console"], "level": "INFO", "propagate": False},
        # No handlers of their own: records propagate to the root console handler
        "apps": {"level": LOG_LEVEL},
        "shared": {"level": LOG_LEVEL},
    },
}
