"""
License lifecycle handlers.

Handlers for revoke, update and delete license commands.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from audit.domain.entry import AuditAction
from audit.services import AuditLogger
from core.domain.exceptions import LicenseNotFoundError, ValidationError
from core.domain.value_objects import Email
from core.metrics import licenses_revoked_total
from licenses.application.commands.delete_license import DeleteLicenseCommand
from licenses.application.commands.revoke_license import RevokeLicenseCommand
from licenses.application.commands.update_license import UpdateLicenseCommand
from licenses.ports.license_store import UPDATABLE_FIELDS, LicenseStore

logger = logging.getLogger(__name__)


class RevokeLicenseHandler:
    """Handler for RevokeLicenseCommand."""

    def __init__(self, store: LicenseStore, audit_logger: AuditLogger):
        """Initialize handler with store and audit logger."""
        self.store = store
        self.audit_logger = audit_logger

    async def handle(self, command: RevokeLicenseCommand) -> int:
        """
        Handle revoke license command.

        Revoking an unknown or already revoked license is not an error;
        it changes nothing and writes no audit entry.

        Args:
            command: RevokeLicenseCommand

        Returns:
            Number of rows changed
        """
        if not command.license_key:
            raise ValidationError("License key is required")

        changed = await self.store.revoke(command.license_key)
        if changed == 0:
            return 0

        admin = command.actor is not None
        await self.audit_logger.record(
            command.license_key,
            AuditAction.ADMIN_LICENSE_REVOKED if admin else AuditAction.LICENSE_REVOKED,
            context=command.context,
            details={"admin": command.actor} if admin else {"message": "License revoked"},
        )
        licenses_revoked_total.labels(channel="admin" if admin else "api").inc()
        logger.info("License revoked", extra={"license_key": command.license_key})
        return changed


class UpdateLicenseHandler:
    """Handler for UpdateLicenseCommand."""

    def __init__(self, store: LicenseStore, audit_logger: AuditLogger):
        """Initialize handler with store and audit logger."""
        self.store = store
        self.audit_logger = audit_logger

    def _clean(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        """
        Check a partial update before it reaches the store.

        Args:
            changes: Requested field changes

        Returns:
            Changes safe to apply

        Raises:
            ValidationError: If a field is immutable, unknown or invalid
        """
        if not changes:
            raise ValidationError("No fields to update")
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        cleaned = dict(changes)
        if "user_email" in cleaned:
            try:
                Email(cleaned["user_email"])
            except ValueError as e:
                raise ValidationError(str(e)) from e
        if "user_name" in cleaned and not cleaned["user_name"]:
            raise ValidationError("User name cannot be empty")
        if "is_active" in cleaned and not isinstance(cleaned["is_active"], bool):
            raise ValidationError("is_active must be a boolean")
        if "machine_id" in cleaned:
            cleaned["machine_id"] = cleaned["machine_id"] or None
        if "expires_at" in cleaned:
            expires_at = cleaned["expires_at"]
            if not isinstance(expires_at, datetime) or expires_at.tzinfo is None:
                raise ValidationError("expires_at must be a timezone-aware datetime")
            if expires_at <= datetime.now(timezone.utc):
                raise ValidationError("expires_at must be in the future")
        return cleaned

    async def handle(self, command: UpdateLicenseCommand) -> int:
        """
        Handle update license command.

        Args:
            command: UpdateLicenseCommand

        Returns:
            Number of rows affected

        Raises:
            ValidationError: If the update is invalid
            LicenseNotFoundError: If no license has this key
        """
        if not command.license_key:
            raise ValidationError("License key is required")
        changes = self._clean(command.changes)

        affected = await self.store.update(command.license_key, changes)
        if affected == 0:
            raise LicenseNotFoundError()

        await self.audit_logger.record(
            command.license_key,
            AuditAction.ADMIN_LICENSE_UPDATED,
            context=command.context,
            machine_id=changes.get("machine_id"),
            details={
                "admin": command.actor,
                "updates": {
                    name: value.isoformat() if isinstance(value, datetime) else value
                    for name, value in changes.items()
                },
            },
        )
        logger.info(
            "License updated",
            extra={"license_key": command.license_key, "fields": sorted(changes)},
        )
        return affected


class DeleteLicenseHandler:
    """Handler for DeleteLicenseCommand."""

    def __init__(self, store: LicenseStore, audit_logger: AuditLogger):
        """Initialize handler with store and audit logger."""
        self.store = store
        self.audit_logger = audit_logger

    async def handle(self, command: DeleteLicenseCommand) -> int:
        """
        Handle delete license command.

        Args:
            command: DeleteLicenseCommand

        Returns:
            Number of rows deleted

        Raises:
            LicenseNotFoundError: If no license has this key
        """
        if not command.license_key:
            raise ValidationError("License key is required")

        deleted = await self.store.delete(command.license_key)
        if deleted == 0:
            raise LicenseNotFoundError()

        await self.audit_logger.record(
            command.license_key,
            AuditAction.ADMIN_LICENSE_DELETED,
            context=command.context,
            details={"admin": command.actor},
        )
        logger.info("License deleted", extra={"license_key": command.license_key})
        return deleted
