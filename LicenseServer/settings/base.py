"""
Base Django settings for LicenseServer.

These settings are shared across all environments.
Environment-specific overrides are in dev.py, test.py, and prod.py
"""
import os
from pathlib import Path

from .database import database_config
from .logging import get_logging_config

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

ENVIRONMENT = os.environ.get("ENVIRONMENT", "production")

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get(
    "SECRET_KEY", "django-insecure-3n$w8q^v2l!x@h7k0c*r+e5t_z9m(b1a)d4f6g&j%y#p-s=u"
)

ALLOWED_HOSTS = os.environ.get("ALLOWED_HOSTS", "*").split(",")

# Application definition
INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    # Third party
    "rest_framework",
    "drf_spectacular",
    # Local apps
    "core",
    "licenses.apps.LicensesConfig",
    "admins.apps.AdminsConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    # Custom middleware
    "core.middleware.observability.ObservabilityMiddleware",
    "core.middleware.metrics.MetricsMiddleware",
    "core.middleware.auth.AdminTokenMiddleware",
]

ROOT_URLCONF = "LicenseServer.urls"

WSGI_APPLICATION = "LicenseServer.wsgi.application"
ASGI_APPLICATION = "LicenseServer.asgi.application"

# Database
LICENSE_DB_ENGINE = os.environ.get("LICENSE_DB_ENGINE", "sqlite").lower()
DATABASES = {"default": database_config(LICENSE_DB_ENGINE, BASE_DIR)}

# Per-call timeout for license store operations, in seconds
STORE_TIMEOUT_SECONDS = float(os.environ.get("STORE_TIMEOUT_SECONDS", "10"))

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Admin passwords: bcrypt, cost factor from BCRYPT_ROUNDS
PASSWORD_HASHERS = [
    "admins.infrastructure.hashers.ConfigurableBCryptSHA256PasswordHasher",
]
BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

# Admin session tokens
JWT_SECRET = os.environ.get("JWT_SECRET", SECRET_KEY)
JWT_ALGORITHM = os.environ.get("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_IN = int(os.environ.get("JWT_EXPIRES_IN", str(24 * 60 * 60)))

# Bootstrap admin, created after migrate when absent
ADMIN_USERNAME = os.environ.get("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "admin123")

# Licenses
LICENSE_DURATION_DAYS = int(os.environ.get("LICENSE_DURATION_DAYS", "365"))

# REST Framework
REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [],
    "UNAUTHENTICATED_USER": None,
    "EXCEPTION_HANDLER": "api.exceptions.custom_exception_handler",
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

# drf-spectacular settings
SPECTACULAR_SETTINGS = {
    "TITLE": "License Server API",
    "DESCRIPTION": (
        "Issues, binds, validates and revokes software licenses. "
        "Admin endpoints require a bearer token from /api/admin/login."
    ),
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
    "SCHEMA_PATH_PREFIX": "/api",
    "TAGS": [
        {"name": "License API", "description": "Licensee-facing validation and issuance"},
        {"name": "Admin API", "description": "Admin license management and audit trail"},
    ],
    "APPEND_COMPONENTS": {
        "securitySchemes": {
            "AdminBearer": {
                "type": "http",
                "scheme": "bearer",
                "bearerFormat": "JWT",
                "description": "Token returned by /api/admin/login.",
            },
        },
    },
}

# Observability
LOG_LEVEL = os.environ.get("LOG_LEVEL", "").upper() or None
LOGGING = get_logging_config(ENVIRONMENT, LOG_LEVEL)
