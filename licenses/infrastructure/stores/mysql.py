"""
MySQL engine.
"""
from django.db import IntegrityError

from licenses.infrastructure.stores.base import DjangoLicenseStore

ER_DUP_ENTRY = 1062


class MySQLLicenseStore(DjangoLicenseStore):
    """
    License store on MySQL / MariaDB (InnoDB).

    Django connects with CLIENT.FOUND_ROWS, so UPDATE row counts are
    matched rows like on the other engines.
    """

    vendor = "mysql"

    def is_unique_violation(self, error: IntegrityError) -> bool:
        """mysqlclient puts the server error number first in args."""
        cause = error.__cause__ or error
        args = getattr(cause, "args", ())
        return bool(args) and args[0] == ER_DUP_ENTRY
