"""
License store backend engines.

One store class per engine. The engine is picked once, from the
vendor of the configured Django connection, and the resulting store
is handed to every component that needs persistence.
"""
import logging
from typing import Dict, Type

from django.conf import settings
from django.db import connections

from core.domain.exceptions import InternalError
from licenses.infrastructure.stores.base import DjangoLicenseStore
from licenses.infrastructure.stores.mysql import MySQLLicenseStore
from licenses.infrastructure.stores.postgresql import PostgresLicenseStore
from licenses.infrastructure.stores.sqlite import SqliteLicenseStore

logger = logging.getLogger(__name__)

STORE_CLASSES: Dict[str, Type[DjangoLicenseStore]] = {
    store_class.vendor: store_class
    for store_class in (SqliteLicenseStore, PostgresLicenseStore, MySQLLicenseStore)
}

_stores: Dict[str, DjangoLicenseStore] = {}


def build_store(using: str = "default") -> DjangoLicenseStore:
    """
    Construct a store for a Django database alias.

    Args:
        using: Django database alias

    Returns:
        Store instance for the alias' engine

    Raises:
        InternalError: If the engine has no store implementation
    """
    vendor = connections[using].vendor
    store_class = STORE_CLASSES.get(vendor)
    if store_class is None:
        raise InternalError(f"Unsupported database engine: {vendor}")
    timeout = getattr(settings, "STORE_TIMEOUT_SECONDS", None) or 10.0
    logger.info("Using %s license store", vendor, extra={"alias": using})
    return store_class(using=using, timeout=float(timeout))


def get_license_store(using: str = "default") -> DjangoLicenseStore:
    """Return the process-wide store for an alias, building it on first use."""
    if using not in _stores:
        _stores[using] = build_store(using)
    return _stores[using]


__all__ = [
    "DjangoLicenseStore",
    "MySQLLicenseStore",
    "PostgresLicenseStore",
    "SqliteLicenseStore",
    "STORE_CLASSES",
    "build_store",
    "get_license_store",
]
