"""Development settings for the booking engine.

Extends the base settings with debug mode and human-readable log output.
Tests run against this module. Do not use these settings in production!
"""

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# Readable console logs instead of JSON lines
LOGGING["handlers"]["console"]["formatter"] = "console"  # noqa: F405
