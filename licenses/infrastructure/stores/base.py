"""
Django ORM implementation of the LicenseStore port.

This adapter converts between domain entities and Django ORM models.
Engine-specific behaviour (error classification, write serialization)
is supplied by one subclass per backend engine.
"""
import asyncio
import contextlib
import functools
import logging
from datetime import datetime
from datetime import timezone as dt_timezone
from typing import Any, Callable, ContextManager, Dict, List, Optional

from asgiref.sync import sync_to_async
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Count, F, Q
from django.utils import timezone

from admins.domain.admin_user import AdminUser
from audit.domain.entry import AuditAction, AuditLogEntry
from core.domain.exceptions import DomainException, DuplicateKeyError, InternalError, ValidationError
from core.domain.value_objects import LicenseStats
from licenses.domain.license import License, NewLicense
from licenses.infrastructure.models import AdminUser as AdminUserModel
from licenses.infrastructure.models import License as LicenseModel
from licenses.infrastructure.models import LicenseLog as LicenseLogModel
from licenses.ports.license_store import UPDATABLE_FIELDS, LicenseStore

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


def store_operation(write: bool = False) -> Callable:
    """
    Turn a blocking ORM method into a bounded async store call.

    The wrapped method runs through sync_to_async, under the engine's
    write guard when `write` is set, and is abandoned after the store
    timeout. Driver errors never leave the store: unique violations
    become DuplicateKeyError, everything else InternalError.
    """

    def decorator(method: Callable) -> Callable:
        def run(self, *args, **kwargs):
            try:
                if write:
                    with self.write_guard():
                        return method(self, *args, **kwargs)
                return method(self, *args, **kwargs)
            except DomainException:
                raise
            except IntegrityError as e:
                if self.is_unique_violation(e):
                    raise DuplicateKeyError() from e
                logger.error(
                    "Integrity error in %s", method.__name__, extra={"vendor": self.vendor}, exc_info=True
                )
                raise InternalError() from e
            except DatabaseError as e:
                logger.error(
                    "Store operation %s failed", method.__name__, extra={"vendor": self.vendor}, exc_info=True
                )
                raise InternalError() from e

        @functools.wraps(method)
        async def wrapper(self, *args, **kwargs):
            try:
                return await asyncio.wait_for(
                    sync_to_async(run)(self, *args, **kwargs), timeout=self.timeout
                )
            except asyncio.TimeoutError as e:
                logger.error(
                    "Store operation %s timed out after %ss",
                    method.__name__,
                    self.timeout,
                    extra={"vendor": self.vendor},
                )
                raise InternalError("Store operation timed out") from e

        return wrapper

    return decorator


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize a stored timestamp to an aware UTC datetime."""
    if value is None:
        return None
    if timezone.is_naive(value):
        return timezone.make_aware(value, dt_timezone.utc)
    return value.astimezone(dt_timezone.utc)


class DjangoLicenseStore(LicenseStore):
    """
    Django ORM implementation of LicenseStore.

    This adapter:
    1. Converts Django models to domain entities
    2. Runs every call bounded by a timeout, off the event loop
    3. Implements repository interface
    """

    vendor = ""

    def __init__(self, using: str = "default", timeout: float = DEFAULT_TIMEOUT_SECONDS):
        """
        Initialize store.

        Args:
            using: Django database alias
            timeout: Seconds before a store call is abandoned
        """
        self.using = using
        self.timeout = timeout

    def write_guard(self) -> ContextManager:
        """Context held around every write; engines may serialize here."""
        return contextlib.nullcontext()

    def is_unique_violation(self, error: IntegrityError) -> bool:
        """Return True if the driver reported a unique constraint violation."""
        raise NotImplementedError

    def _licenses(self):
        return LicenseModel.objects.using(self.using)

    def _logs(self):
        return LicenseLogModel.objects.using(self.using)

    def _admins(self):
        return AdminUserModel.objects.using(self.using)

    def _license_to_domain(self, model: LicenseModel) -> License:
        """
        Convert Django model to domain entity.

        Args:
            model: Django License model

        Returns:
            License domain entity
        """
        return License(
            id=int(model.pk),
            key=model.license_key,
            machine_id=model.machine_id or None,
            user_email=model.user_email,
            user_name=model.user_name,
            created_at=_aware(model.created_at),
            expires_at=_aware(model.expires_at),
            is_active=bool(model.is_active),
            last_used=_aware(model.last_used),
            usage_count=int(model.usage_count),
            notes=model.notes,
        )

    def _log_to_domain(self, model: LicenseLogModel) -> AuditLogEntry:
        """Convert Django model to audit entry."""
        return AuditLogEntry(
            id=int(model.pk),
            license_key=model.license_key,
            action=AuditAction(model.action),
            machine_id=model.machine_id,
            ip_address=model.ip_address,
            user_agent=model.user_agent,
            details=model.details or {},
            timestamp=_aware(model.timestamp),
        )

    def _admin_to_domain(self, model: AdminUserModel) -> AdminUser:
        """Convert Django model to admin entity."""
        return AdminUser(
            id=int(model.pk),
            username=model.username,
            password_hash=model.password_hash,
            created_at=_aware(model.created_at),
            last_login=_aware(model.last_login),
        )

    @store_operation(write=True)
    def create_license(self, data: NewLicense) -> License:
        """
        Insert a new license.

        A key that shows up in the audit trail belonged to a license
        that was since deleted and counts as a collision.
        """
        with transaction.atomic(using=self.using):
            if self._logs().filter(license_key=data.key).exists():
                raise DuplicateKeyError()
            model = self._licenses().create(
                license_key=data.key,
                user_email=data.user_email,
                user_name=data.user_name,
                created_at=data.created_at,
                expires_at=data.expires_at,
                notes=data.notes,
            )
        return self._license_to_domain(model)

    @store_operation()
    def get_license_by_key(self, key: str) -> Optional[License]:
        """Find a license by key."""
        model = self._licenses().filter(license_key=key).first()
        if model is None:
            return None
        return self._license_to_domain(model)

    @store_operation(write=True)
    def bind_and_record_usage(self, key: str, machine_id: str) -> bool:
        """Bind or confirm a machine in one conditional UPDATE."""
        now = timezone.now()
        updated = (
            self._licenses()
            .filter(license_key=key, is_active=True, expires_at__gte=now)
            .filter(Q(machine_id__isnull=True) | Q(machine_id=machine_id))
            .update(
                machine_id=machine_id,
                usage_count=F("usage_count") + 1,
                last_used=now,
            )
        )
        return updated > 0

    @store_operation(write=True)
    def revoke(self, key: str) -> int:
        """
        Deactivate a license.

        Only active rows match, so every engine reports zero for a
        license that is already revoked.
        """
        return self._licenses().filter(license_key=key, is_active=True).update(is_active=False)

    @store_operation(write=True)
    def update(self, key: str, fields: Dict[str, Any]) -> int:
        """Apply a partial update to the updatable columns."""
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
        if not fields:
            raise ValidationError("No fields to update")
        return self._licenses().filter(license_key=key).update(**fields)

    @store_operation(write=True)
    def delete(self, key: str) -> int:
        """Hard delete a license."""
        deleted, _ = self._licenses().filter(license_key=key).delete()
        return deleted

    @store_operation()
    def list_all(self) -> List[License]:
        """Return all licenses, newest created first."""
        models = self._licenses().order_by("-created_at", "-id")
        return [self._license_to_domain(model) for model in models]

    @store_operation()
    def stats(self) -> LicenseStats:
        """Count licenses; expiry is compared against the application clock."""
        now = timezone.now()
        counts = self._licenses().aggregate(
            total=Count("id"),
            active=Count("id", filter=Q(is_active=True)),
            revoked=Count("id", filter=Q(is_active=False)),
            expired=Count("id", filter=Q(expires_at__lt=now)),
            bound=Count("id", filter=Q(machine_id__isnull=False)),
        )
        return LicenseStats(**{name: int(value or 0) for name, value in counts.items()})

    @store_operation(write=True)
    def append_log(self, entry: AuditLogEntry) -> int:
        """Append an audit entry."""
        model = self._logs().create(
            license_key=entry.license_key,
            action=entry.action.value,
            machine_id=entry.machine_id,
            ip_address=entry.ip_address,
            user_agent=entry.user_agent,
            details=entry.details,
            timestamp=entry.timestamp or timezone.now(),
        )
        return int(model.pk)

    @store_operation()
    def list_logs(self, limit: int = 100, offset: int = 0) -> List[AuditLogEntry]:
        """Return audit entries, newest first."""
        if limit < 0 or offset < 0:
            raise ValidationError("Limit and offset must not be negative")
        models = self._logs().order_by("-timestamp", "-id")[offset : offset + limit]
        return [self._log_to_domain(model) for model in models]

    @store_operation()
    def get_admin(self, username: str) -> Optional[AdminUser]:
        """Find an admin user by username."""
        model = self._admins().filter(username=username).first()
        if model is None:
            return None
        return self._admin_to_domain(model)

    @store_operation(write=True)
    def touch_admin_login(self, username: str) -> int:
        """Record a login time for an admin user."""
        return self._admins().filter(username=username).update(last_login=timezone.now())

    @store_operation(write=True)
    def ensure_admin(self, username: str, password_hash: str) -> bool:
        """Create an admin user unless one with this username exists."""
        _, created = self._admins().get_or_create(
            username=username,
            defaults={"password_hash": password_hash},
        )
        return created
