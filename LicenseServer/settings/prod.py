"""
Production settings for LicenseServer.
"""

import os

from django.core.exceptions import ImproperlyConfigured

from .base import *  # noqa: F403, F401

DEBUG = False

ALLOWED_HOSTS = os.environ.get("ALLOWED_HOSTS", "").split(",")

# Security settings
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = "DENY"

# Secrets must come from the environment
SECRET_KEY = os.environ.get("SECRET_KEY", "")
JWT_SECRET = os.environ.get("JWT_SECRET", "")
if not SECRET_KEY or not JWT_SECRET:
    raise ImproperlyConfigured("SECRET_KEY and JWT_SECRET must be set in production")

# Logging in production
LOGGING["handlers"]["file"] = {  # noqa: F405
    "class": "logging.handlers.RotatingFileHandler",
    "filename": os.environ.get("LOG_FILE", "/var/log/license_server/app.log"),
    "maxBytes": 1024 * 1024 * 10,  # 10 MB
    "backupCount": 10,
    "formatter": "json",
}
if os.environ.get("LOG_FILE"):
    LOGGING["root"]["handlers"].append("file")  # noqa: F405
