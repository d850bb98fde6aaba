"""
Audit logging service.

Writes audit entries through the license store. A failed write never
changes the outcome of the operation that triggered it: it is logged
and counted, then the caller carries on.
"""
import logging
from typing import Any, Dict, List, Optional

from audit.domain.entry import AuditAction, AuditLogEntry, RequestContext
from core.domain.exceptions import DomainException, ValidationError
from core.metrics import audit_log_failures_total
from licenses.ports.license_store import LicenseStore

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 1000


class AuditLogger:
    """Append-only audit trail on top of a LicenseStore."""

    def __init__(self, store: LicenseStore):
        """Initialize logger with the store."""
        self.store = store

    async def record(
        self,
        license_key: str,
        action: AuditAction,
        context: Optional[RequestContext] = None,
        machine_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> Optional[int]:
        """
        Append one audit entry.

        Args:
            license_key: Key the event is about
            action: Audit action
            context: Request origin (IP address, user agent)
            machine_id: Machine identifier involved, if any
            details: Structured event details

        Returns:
            Entry id, or None if the entry could not be written
        """
        context = context or RequestContext()
        try:
            entry = AuditLogEntry(
                license_key=license_key,
                action=action,
                machine_id=machine_id,
                ip_address=context.ip_address,
                user_agent=context.user_agent,
                details=details or {},
            )
            return await self.store.append_log(entry)
        except (DomainException, ValueError) as e:
            audit_log_failures_total.labels(action=str(action)).inc()
            logger.error(
                "Failed to write audit entry",
                extra={"action": str(action), "license_key": license_key, "error": str(e)},
                exc_info=True,
            )
            return None

    async def list(self, limit: int = 100, offset: int = 0) -> List[AuditLogEntry]:
        """
        Return audit entries, newest first.

        Args:
            limit: Page size, 1 to MAX_PAGE_SIZE
            offset: Number of entries to skip

        Returns:
            List of AuditLogEntry entities
        """
        if limit < 1 or limit > MAX_PAGE_SIZE:
            raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")
        if offset < 0:
            raise ValidationError("Offset must not be negative")
        return await self.store.list_logs(limit=limit, offset=offset)
