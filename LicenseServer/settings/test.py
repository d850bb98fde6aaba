"""
Test settings for LicenseServer.
"""

import os

from .base import *  # noqa: F403, F401
from .database import database_config

DEBUG = False

ENVIRONMENT = "test"

# Run against PostgreSQL or MySQL in CI with LICENSE_DB_ENGINE/DATABASE_URL,
# file-backed SQLite otherwise so worker threads share the test database
LICENSE_DB_ENGINE = os.environ.get("LICENSE_DB_ENGINE", "sqlite").lower()
DATABASES = {"default": database_config(LICENSE_DB_ENGINE, BASE_DIR)}  # noqa: F405
if LICENSE_DB_ENGINE == "sqlite":
    DATABASES["default"]["NAME"] = str(BASE_DIR / "test_licenses.db")  # noqa: F405
    DATABASES["default"]["TEST"] = {"NAME": str(BASE_DIR / "test_licenses_test.db")}  # noqa: F405

# Fast password hashing for tests
BCRYPT_ROUNDS = 4

JWT_SECRET = "test-jwt-secret-with-enough-length-for-hs256"
JWT_EXPIRES_IN = 3600

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin123"

STORE_TIMEOUT_SECONDS = 10.0

# Disable logging during tests
LOGGING_CONFIG = None
