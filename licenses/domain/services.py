"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from audit.domain.entry import AuditAction, RequestContext
from audit.services import AuditLogger
from core.domain.exceptions import (
    InternalError,
    LicenseExpiredError,
    LicenseNotFoundError,
    LicenseRejectedError,
    LicenseRevokedError,
    MachineMismatchError,
    ValidationError,
)
from core.metrics import license_validations_total
from licenses.domain.license import License, LicenseState
from licenses.domain.machine import host_machine_id
from licenses.ports.license_store import LicenseStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LicenseValidator:
    """
    The license validation state machine.

    Rules are checked in order: unknown key, revoked, expired, bound to
    another machine. Anything else binds or confirms the machine with one
    conditional store update. Every call leaves exactly one
    `validation_attempt` audit entry.
    """

    def __init__(
        self,
        store: LicenseStore,
        audit_logger: AuditLogger,
        machine_id_provider: Callable[[], str] = host_machine_id,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        Initialize validator.

        Args:
            store: License store
            audit_logger: Audit logger
            machine_id_provider: Fallback machine id when the caller sends none
            clock: Source of the current time
        """
        self.store = store
        self.audit_logger = audit_logger
        self.machine_id_provider = machine_id_provider
        self.clock = clock

    async def validate(
        self,
        key: str,
        machine_id: Optional[str] = None,
        context: Optional[RequestContext] = None,
    ) -> License:
        """
        Validate a license for a machine.

        Args:
            key: License key
            machine_id: Requesting machine id (host id if omitted)
            context: Request origin for the audit entry

        Returns:
            License snapshot after binding and usage recording

        Raises:
            ValidationError: If the key is missing
            LicenseNotFoundError: If no license has this key
            LicenseRevokedError: If the license is revoked
            LicenseExpiredError: If the license has expired
            MachineMismatchError: If bound to another machine
            InternalError: If the store fails; the attempt is still audited
        """
        if not key or not isinstance(key, str):
            raise ValidationError("License key is required")
        machine_id = machine_id or self.machine_id_provider()

        try:
            license = await self._bind(key, machine_id)
        except (LicenseNotFoundError, LicenseRejectedError) as e:
            reason = getattr(e, "reason", "not_found")
            license_validations_total.labels(outcome=reason).inc()
            logger.info(
                "License validation rejected",
                extra={"license_key": key, "machine_id": machine_id, "reason": reason},
            )
            await self.audit_logger.record(
                key,
                AuditAction.VALIDATION_ATTEMPT,
                context=context,
                machine_id=machine_id,
                details={"success": False, "reason": reason, "message": e.message},
            )
            raise
        except InternalError as e:
            license_validations_total.labels(outcome="internal_error").inc()
            await self.audit_logger.record(
                key,
                AuditAction.VALIDATION_ATTEMPT,
                context=context,
                machine_id=machine_id,
                details={"success": False, "reason": "internal_error", "message": e.message},
            )
            raise

        license_validations_total.labels(outcome="accepted").inc()
        await self.audit_logger.record(
            key,
            AuditAction.VALIDATION_ATTEMPT,
            context=context,
            machine_id=machine_id,
            details={"success": True, "usage_count": license.usage_count},
        )
        return license

    async def _bind(self, key: str, machine_id: str) -> License:
        """Evaluate the rules, then bind through the conditional update."""
        current = await self.store.get_license_by_key(key)
        if current is None:
            raise LicenseNotFoundError()
        current.ensure_usable_by(machine_id, self.clock())

        if not await self.store.bind_and_record_usage(key, machine_id):
            # Lost a race: re-read and report what changed underneath us.
            latest = await self.store.get_license_by_key(key)
            if latest is None:
                raise LicenseNotFoundError()
            latest.ensure_usable_by(machine_id, self.clock())
            raise MachineMismatchError(machine_id=machine_id)

        bound = await self.store.get_license_by_key(key)
        if bound is None:
            raise LicenseNotFoundError()
        return bound

    async def inspect(self, key: str) -> License:
        """
        Return a license if it is currently valid, without touching it.

        Args:
            key: License key

        Returns:
            License entity

        Raises:
            LicenseNotFoundError: If no license has this key
            LicenseRevokedError: If the license is revoked
            LicenseExpiredError: If the license has expired
        """
        if not key:
            raise ValidationError("License key is required")
        license = await self.store.get_license_by_key(key)
        if license is None:
            raise LicenseNotFoundError()
        state = license.state(self.clock())
        if state is LicenseState.REVOKED:
            raise LicenseRevokedError()
        if state is LicenseState.EXPIRED:
            raise LicenseExpiredError()
        return license
