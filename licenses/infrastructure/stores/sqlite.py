"""
Embedded SQLite engine.
"""
import threading
from typing import ContextManager

from django.db import IntegrityError

from licenses.infrastructure.stores.base import DjangoLicenseStore


class SqliteLicenseStore(DjangoLicenseStore):
    """
    License store on the embedded SQLite file engine.

    SQLite allows a single writer per database file, so writes from all
    request threads of this process are queued on one lock instead of
    failing with "database is locked".
    """

    vendor = "sqlite"

    _write_lock = threading.Lock()

    def write_guard(self) -> ContextManager:
        """Serialize writes across threads."""
        return self._write_lock

    def is_unique_violation(self, error: IntegrityError) -> bool:
        """sqlite3 only reports constraint failures through the message."""
        return "UNIQUE constraint failed" in str(error)
