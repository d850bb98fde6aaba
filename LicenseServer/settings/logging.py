"""
Logging configuration for structured JSON logging.
"""

import sys

from pythonjsonlogger import jsonlogger

APP_LOGGERS = ("core", "api", "licenses", "audit", "admins")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that tags every record with the service name."""

    def add_fields(self, log_record, record, message_dict):
        """Add custom fields to log record."""
        super().add_fields(log_record, record, message_dict)
        log_record["service"] = "license-server"
        log_record.setdefault("level", record.levelname)


def get_logging_config(environment: str = "development", level: str = None) -> dict:
    """
    Get logging configuration for the application.

    Args:
        environment: Environment name (development, production, test)
        level: Log level for application loggers (derived from environment if omitted)

    Returns:
        Django logging configuration dictionary
    """
    log_level = level or ("DEBUG" if environment == "development" else "INFO")
    app_logger = {"handlers": ["console"], "level": log_level, "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": CustomJsonFormatter,
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s %(pathname)s %(lineno)d",
            },
            "verbose": {
                "format": "{levelname} {asctime} {module} {process:d} {thread:d} {message}",
                "style": "{",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": sys.stdout,
            },
        },
        "root": {
            "handlers": ["console"],
            "level": log_level,
        },
        "loggers": {
            "django": {
                "handlers": ["console"],
                "level": "INFO",
                "propagate": False,
            },
            "django.request": {
                "handlers": ["console"],
                "level": "WARNING",
                "propagate": False,
            },
            "django.db.backends": {
                "handlers": ["console"],
                "level": "WARNING",
                "propagate": False,
            },
            **{name: dict(app_logger) for name in APP_LOGGERS},
        },
    }
