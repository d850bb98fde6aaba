"""
PostgreSQL engine.
"""
from django.db import IntegrityError

from licenses.infrastructure.stores.base import DjangoLicenseStore

UNIQUE_VIOLATION = "23505"


class PostgresLicenseStore(DjangoLicenseStore):
    """
    License store on PostgreSQL.

    Writes run concurrently; row-level locking in the server keeps the
    conditional binding update atomic.
    """

    vendor = "postgresql"

    def is_unique_violation(self, error: IntegrityError) -> bool:
        """Check the SQLSTATE reported by psycopg2 (pgcode) or psycopg 3 (sqlstate)."""
        cause = error.__cause__ or error
        code = getattr(cause, "pgcode", None) or getattr(cause, "sqlstate", None)
        return code == UNIQUE_VIOLATION
