"""
License query handlers.

Read-only handlers: license info, admin listing, statistics and
the audit trail.
"""
from typing import List

from audit.domain.entry import AuditLogEntry
from audit.services import AuditLogger
from core.domain.value_objects import LicenseStats
from licenses.application.queries.get_license_info import GetLicenseInfoQuery
from licenses.application.queries.list_audit_logs import ListAuditLogsQuery
from licenses.domain.license import License
from licenses.domain.services import LicenseValidator
from licenses.ports.license_store import LicenseStore


class GetLicenseInfoHandler:
    """Handler for GetLicenseInfoQuery."""

    def __init__(self, validator: LicenseValidator):
        """Initialize handler with the validator."""
        self.validator = validator

    async def handle(self, query: GetLicenseInfoQuery) -> License:
        """
        Handle get license info query.

        Unlike validation this never binds, counts or audits.

        Args:
            query: GetLicenseInfoQuery

        Returns:
            License entity

        Raises:
            LicenseNotFoundError: If no license has this key
            LicenseRevokedError: If the license is revoked
            LicenseExpiredError: If the license has expired
        """
        return await self.validator.inspect(query.license_key)


class ListLicensesHandler:
    """Handler for listing every license."""

    def __init__(self, store: LicenseStore):
        """Initialize handler with store."""
        self.store = store

    async def handle(self) -> List[License]:
        """Return all licenses, newest created first."""
        return await self.store.list_all()


class GetLicenseStatsHandler:
    """Handler for license statistics."""

    def __init__(self, store: LicenseStore):
        """Initialize handler with store."""
        self.store = store

    async def handle(self) -> LicenseStats:
        """Return license counts."""
        return await self.store.stats()


class ListAuditLogsHandler:
    """Handler for ListAuditLogsQuery."""

    def __init__(self, audit_logger: AuditLogger):
        """Initialize handler with the audit logger."""
        self.audit_logger = audit_logger

    async def handle(self, query: ListAuditLogsQuery) -> List[AuditLogEntry]:
        """
        Handle list audit logs query.

        Args:
            query: ListAuditLogsQuery

        Returns:
            List of AuditLogEntry entities, newest first
        """
        return await self.audit_logger.list(limit=query.limit, offset=query.offset)
