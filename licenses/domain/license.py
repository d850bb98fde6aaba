"""
License domain entity.

This is the core domain entity representing a license.
It contains business logic and is independent of infrastructure.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from core.domain.exceptions import (
    LicenseExpiredError,
    LicenseRevokedError,
    MachineMismatchError,
    ValidationError,
)
from core.domain.value_objects import Email


class LicenseState(Enum):
    """State of a license as seen at a given instant."""

    UNBOUND = "unbound"
    BOUND = "bound"
    EXPIRED = "expired"
    REVOKED = "revoked"

    def __str__(self) -> str:
        """Return state as string."""
        return self.value


@dataclass(frozen=True)
class NewLicense:
    """Data for a license that has not been stored yet."""

    key: str
    user_email: str
    user_name: str
    created_at: datetime
    expires_at: datetime
    notes: Optional[str] = None

    def __post_init__(self):
        """Validate new license data."""
        if not self.user_email or not self.user_name:
            raise ValidationError("User email and name are required")
        try:
            Email(self.user_email)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        if self.expires_at <= self.created_at:
            raise ValidationError("Expiration must be after creation")

    @classmethod
    def issue(
        cls,
        key: str,
        user_email: str,
        user_name: str,
        duration_days: int,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "NewLicense":
        """
        Build the data for a freshly issued license.

        Args:
            key: Generated license key
            user_email: Licensee email
            user_name: Licensee name
            duration_days: Validity period in days
            notes: Optional free text
            now: Issue time (defaults to current UTC time)

        Returns:
            NewLicense instance
        """
        if isinstance(duration_days, bool) or not isinstance(duration_days, int) or duration_days < 1:
            raise ValidationError("Duration must be a positive number of days")
        created_at = now or datetime.now(timezone.utc)
        return cls(
            key=key,
            user_email=user_email,
            user_name=user_name,
            created_at=created_at,
            expires_at=created_at + timedelta(days=duration_days),
            notes=notes or None,
        )


@dataclass(frozen=True)
class License:
    """
    License domain entity.

    A snapshot of one stored license row. Mutations happen in the
    store; this object only answers questions about its state.
    """

    id: int
    key: str
    user_email: str
    user_name: str
    created_at: datetime
    expires_at: datetime
    machine_id: Optional[str] = None
    is_active: bool = True
    last_used: Optional[datetime] = None
    usage_count: int = 0
    notes: Optional[str] = field(default=None)

    @property
    def is_bound(self) -> bool:
        """Return True once a machine has been bound."""
        return self.machine_id is not None

    def is_expired(self, current_time: Optional[datetime] = None) -> bool:
        """
        Check expiry at the given instant.

        Args:
            current_time: Current time (defaults to now, UTC)

        Returns:
            True if the expiry lies in the past
        """
        check_time = current_time or datetime.now(timezone.utc)
        return self.expires_at < check_time

    def state(self, current_time: Optional[datetime] = None) -> LicenseState:
        """Return the license state, revocation taking precedence over expiry."""
        if not self.is_active:
            return LicenseState.REVOKED
        if self.is_expired(current_time):
            return LicenseState.EXPIRED
        if self.is_bound:
            return LicenseState.BOUND
        return LicenseState.UNBOUND

    def is_valid(self, current_time: Optional[datetime] = None) -> bool:
        """Return True if the license is active and not expired."""
        return self.state(current_time) in (LicenseState.UNBOUND, LicenseState.BOUND)

    def ensure_usable_by(self, machine_id: str, current_time: Optional[datetime] = None) -> None:
        """
        Check the rejection rules in precedence order.

        Args:
            machine_id: Requesting machine identifier
            current_time: Current time (defaults to now, UTC)

        Raises:
            LicenseRevokedError: If the license is inactive
            LicenseExpiredError: If the license has expired
            MachineMismatchError: If bound to another machine
        """
        if not self.is_active:
            raise LicenseRevokedError(machine_id=machine_id)
        if self.is_expired(current_time):
            raise LicenseExpiredError(machine_id=machine_id)
        if self.is_bound and self.machine_id != machine_id:
            raise MachineMismatchError(machine_id=machine_id)
