"""
Development settings for LicenseServer.
"""

import os

from .base import *  # noqa: F403, F401
from .logging import get_logging_config

DEBUG = True

ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "0.0.0.0"]

LOGGING = get_logging_config(ENVIRONMENT, LOG_LEVEL)  # noqa: F405

# Cheaper hashes for local work
BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "10"))
