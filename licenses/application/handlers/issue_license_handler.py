"""
IssueLicenseHandler.

Handles the issue license command.
"""

import logging

from audit.domain.entry import AuditAction
from audit.services import AuditLogger
from core.domain.exceptions import DuplicateKeyError
from core.metrics import licenses_issued_total
from licenses.application.commands.issue_license import IssueChannel, IssueLicenseCommand
from licenses.domain.license import License, NewLicense
from licenses.domain.license_key import KeyGenerator
from licenses.ports.license_store import LicenseStore

logger = logging.getLogger(__name__)

MAX_KEY_ATTEMPTS = 3


class IssueLicenseHandler:
    """Handler for IssueLicenseCommand."""

    def __init__(
        self,
        store: LicenseStore,
        audit_logger: AuditLogger,
        key_generator: KeyGenerator = None,
        max_attempts: int = MAX_KEY_ATTEMPTS,
    ):
        """Initialize handler with store and audit logger."""
        self.store = store
        self.audit_logger = audit_logger
        self.key_generator = key_generator or KeyGenerator()
        self.max_attempts = max_attempts

    async def handle(self, command: IssueLicenseCommand) -> License:
        """
        Handle issue license command.

        A key collision is retried with a freshly generated key; only
        when every attempt collides does the caller see the error.

        Args:
            command: IssueLicenseCommand

        Returns:
            Stored License entity

        Raises:
            ValidationError: If the licensee data is invalid
            DuplicateKeyError: If every generated key collided
        """
        # Validates input before any key is generated or stored
        NewLicense.issue(
            key="",
            user_email=command.user_email,
            user_name=command.user_name,
            duration_days=command.duration_days,
            notes=command.notes,
        )

        license = None
        for attempt in range(1, self.max_attempts + 1):
            data = NewLicense.issue(
                key=self.key_generator.generate(),
                user_email=command.user_email,
                user_name=command.user_name,
                duration_days=command.duration_days,
                notes=command.notes,
            )
            try:
                license = await self.store.create_license(data)
                break
            except DuplicateKeyError:
                logger.warning(
                    "License key collision",
                    extra={"attempt": attempt, "max_attempts": self.max_attempts},
                )
        if license is None:
            logger.error("Could not generate a unique license key", extra={"attempts": self.max_attempts})
            raise DuplicateKeyError(
                f"Could not generate a unique license key after {self.max_attempts} attempts"
            )

        admin = command.channel is IssueChannel.ADMIN
        details = {
            "user_email": command.user_email,
            "user_name": command.user_name,
            "duration_days": command.duration_days,
        }
        if admin:
            details["admin"] = command.actor
        await self.audit_logger.record(
            license.key,
            AuditAction.ADMIN_LICENSE_CREATED if admin else AuditAction.LICENSE_CREATED,
            context=command.context,
            details=details,
        )
        licenses_issued_total.labels(channel=str(command.channel)).inc()
        logger.info(
            "License issued",
            extra={"license_key": license.key, "channel": str(command.channel)},
        )
        return license
