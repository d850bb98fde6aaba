"""
AuditLogEntry domain entity.

Entries are immutable records of one lifecycle or validation event.
They reference a license by key only, so they outlive deleted licenses.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class AuditAction(Enum):
    """Audit action names, as stored in `license_logs.action`."""

    VALIDATION_ATTEMPT = "validation_attempt"
    LICENSE_CREATED = "license_created"
    LICENSE_REVOKED = "license_revoked"
    ADMIN_LICENSE_CREATED = "admin_license_created"
    ADMIN_LICENSE_REVOKED = "admin_license_revoked"
    ADMIN_LICENSE_UPDATED = "admin_license_updated"
    ADMIN_LICENSE_DELETED = "admin_license_deleted"

    def __str__(self) -> str:
        """Return action as string."""
        return self.value


@dataclass(frozen=True)
class RequestContext:
    """Where a request came from, recorded on every audit entry."""

    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


@dataclass(frozen=True)
class AuditLogEntry:
    """
    AuditLogEntry domain entity.

    `id` and `timestamp` are None until the store has written the entry.
    """

    license_key: str
    action: AuditAction
    machine_id: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    timestamp: Optional[datetime] = None
    id: Optional[int] = None

    def __post_init__(self):
        """Validate audit entry."""
        if not self.license_key:
            raise ValueError("License key is required")
        if not isinstance(self.action, AuditAction):
            raise ValueError(f"Unknown audit action: {self.action}")
