"""
License store port (interface).

This defines the one contract every backend engine implements:
licenses, audit entries and admin users. Implementations are in
the infrastructure layer and are selected once at startup.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from admins.domain.admin_user import AdminUser
from audit.domain.entry import AuditLogEntry
from core.domain.value_objects import LicenseStats
from licenses.domain.license import License, NewLicense

UPDATABLE_FIELDS = frozenset(
    {"user_email", "user_name", "notes", "is_active", "machine_id", "expires_at"}
)


class LicenseStore(ABC):
    """
    Abstract store for licenses, audit entries and admin users.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    Callers never see engine-specific types: timestamps are aware
    UTC datetimes, flags are bools and ids are ints.
    """

    vendor: str = ""

    @abstractmethod
    async def create_license(self, data: NewLicense) -> License:
        """
        Insert a new license.

        Args:
            data: License data with a freshly generated key

        Returns:
            Stored License entity

        Raises:
            DuplicateKeyError: If the key exists or was ever issued before
        """
        pass

    @abstractmethod
    async def get_license_by_key(self, key: str) -> Optional[License]:
        """
        Find a license by key.

        Args:
            key: License key

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def bind_and_record_usage(self, key: str, machine_id: str) -> bool:
        """
        Bind (or confirm) a machine and count one successful use.

        Must be a single conditional update: it only applies while the
        license is unbound or bound to `machine_id`, active and not
        expired.

        Args:
            key: License key
            machine_id: Requesting machine identifier

        Returns:
            True if the row was updated
        """
        pass

    @abstractmethod
    async def revoke(self, key: str) -> int:
        """
        Deactivate a license.

        Args:
            key: License key

        Returns:
            Number of rows changed (0 if unknown or already revoked)
        """
        pass

    @abstractmethod
    async def update(self, key: str, fields: Dict[str, Any]) -> int:
        """
        Apply a partial update.

        Args:
            key: License key
            fields: Subset of UPDATABLE_FIELDS

        Returns:
            Number of rows affected
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> int:
        """
        Hard delete a license.

        Args:
            key: License key

        Returns:
            Number of rows deleted
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[License]:
        """Return all licenses, newest created first."""
        pass

    @abstractmethod
    async def stats(self) -> LicenseStats:
        """Return license counts, expiry evaluated at query time."""
        pass

    @abstractmethod
    async def append_log(self, entry: AuditLogEntry) -> int:
        """
        Append an audit entry.

        Args:
            entry: Entry to write

        Returns:
            Id of the new entry
        """
        pass

    @abstractmethod
    async def list_logs(self, limit: int = 100, offset: int = 0) -> List[AuditLogEntry]:
        """
        Return audit entries, newest first.

        Args:
            limit: Maximum number of entries
            offset: Number of entries to skip

        Returns:
            List of AuditLogEntry entities
        """
        pass

    @abstractmethod
    async def get_admin(self, username: str) -> Optional[AdminUser]:
        """
        Find an admin user by username.

        Args:
            username: Admin username

        Returns:
            AdminUser entity or None if not found
        """
        pass

    @abstractmethod
    async def touch_admin_login(self, username: str) -> int:
        """
        Record a login time for an admin user.

        Args:
            username: Admin username

        Returns:
            Number of rows affected
        """
        pass

    @abstractmethod
    async def ensure_admin(self, username: str, password_hash: str) -> bool:
        """
        Create an admin user unless one with this username exists.

        Args:
            username: Admin username
            password_hash: Already hashed password

        Returns:
            True if the user was created
        """
        pass
