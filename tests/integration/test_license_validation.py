"""
Integration tests for license validation, issuance and lifecycle handlers.
"""

import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock, patch

import pytest

from audit.domain.entry import AuditAction, RequestContext
from core.domain.exceptions import (
    DuplicateKeyError,
    InternalError,
    LicenseExpiredError,
    LicenseNotFoundError,
    LicenseRevokedError,
    MachineMismatchError,
    ValidationError,
)
from licenses.application.commands.delete_license import DeleteLicenseCommand
from licenses.application.commands.issue_license import IssueChannel, IssueLicenseCommand
from licenses.application.commands.revoke_license import RevokeLicenseCommand
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.application.handlers.license_lifecycle_handlers import (
    DeleteLicenseHandler,
    RevokeLicenseHandler,
)


class FixedKeyGenerator:
    """Returns the given keys in order."""

    def __init__(self, *keys):
        self.keys = list(keys)

    def generate(self):
        return self.keys.pop(0)


@pytest.mark.django_db(transaction=True)
@pytest.mark.integration
@pytest.mark.asyncio
class TestLicenseValidator:
    """Integration tests for LicenseValidator."""

    async def test_bind_then_confirm_then_mismatch(self, issue_handler, validator, store):
        """Test the create, validate M1 twice, validate M2 scenario."""
        license = await issue_handler.handle(
            IssueLicenseCommand(user_email="user@example.com", user_name="User", duration_days=365)
        )

        first = await validator.validate(license.key, "M1")
        assert first.machine_id == "M1"
        assert first.usage_count == 1

        second = await validator.validate(license.key, "M1")
        assert second.usage_count == 2

        with pytest.raises(MachineMismatchError) as exc_info:
            await validator.validate(license.key, "M2")
        assert exc_info.value.machine_id == "M2"
        assert (await store.get_license_by_key(license.key)).usage_count == 2

    async def test_revoked_after_use(self, issue_handler, validator, store, audit_logger):
        """Test a revoked license is rejected for its own machine."""
        license = await issue_handler.handle(
            IssueLicenseCommand(user_email="user@example.com", user_name="User", duration_days=365)
        )
        await validator.validate(license.key, "M1")
        await RevokeLicenseHandler(store, audit_logger).handle(
            RevokeLicenseCommand(license_key=license.key)
        )

        with pytest.raises(LicenseRevokedError):
            await validator.validate(license.key, "M1")

    async def test_unknown_key(self, validator):
        """Test an unknown key is rejected as not found."""
        with pytest.raises(LicenseNotFoundError):
            await validator.validate("DOES-NOT-EXIST", "M1")

    async def test_missing_key(self, validator, store):
        """Test a missing key fails before the store is used."""
        with pytest.raises(ValidationError):
            await validator.validate("", "M1")
        assert await store.list_logs() == []

    async def test_expired_license(self, make_license, validator, store):
        """Test an expired license is rejected and not counted."""
        license = await make_license(expires_in=-timedelta(days=1))

        with pytest.raises(LicenseExpiredError):
            await validator.validate(license.key, "M1")
        assert (await store.get_license_by_key(license.key)).usage_count == 0

    async def test_revoked_unbound_license(self, make_license, validator, store):
        """Test a revoked license is rejected even if it was never used."""
        license = await make_license()
        await store.revoke(license.key)

        with pytest.raises(LicenseRevokedError):
            await validator.validate(license.key, "M1")

    async def test_host_machine_id_fallback(self, make_license, validator, host_machine_id):
        """Test a validation without machine id binds the host id."""
        license = await make_license()

        validated = await validator.validate(license.key)

        assert validated.machine_id == host_machine_id

    async def test_every_attempt_is_audited(self, make_license, validator, store):
        """Test accepted and rejected attempts each leave one entry."""
        license = await make_license()
        context = RequestContext(ip_address="192.0.2.1", user_agent="desktop/2.1")

        await validator.validate(license.key, "M1", context=context)
        with pytest.raises(MachineMismatchError):
            await validator.validate(license.key, "M2", context=context)
        with pytest.raises(LicenseNotFoundError):
            await validator.validate("UNKNOWN", "M3", context=context)

        entries = await store.list_logs()
        assert [entry.action for entry in entries] == [AuditAction.VALIDATION_ATTEMPT] * 3
        unknown, mismatch, accepted = entries
        assert accepted.details == {"success": True, "usage_count": 1}
        assert accepted.ip_address == "192.0.2.1"
        assert accepted.user_agent == "desktop/2.1"
        assert mismatch.machine_id == "M2"
        assert mismatch.details["success"] is False
        assert mismatch.details["reason"] == "machine_mismatch"
        assert unknown.license_key == "UNKNOWN"
        assert unknown.details["reason"] == "not_found"

    async def test_store_failure_is_audited(self, make_license, validator, store):
        """Test a bind that fails in the store still leaves one entry."""
        license = await make_license()
        failing_bind = AsyncMock(side_effect=InternalError("Store operation timed out"))

        with patch.object(store, "bind_and_record_usage", failing_bind):
            with pytest.raises(InternalError):
                await validator.validate(license.key, "M1")

        (entry,) = await store.list_logs()
        assert entry.action == AuditAction.VALIDATION_ATTEMPT
        assert entry.license_key == license.key
        assert entry.machine_id == "M1"
        assert entry.details["success"] is False
        assert entry.details["reason"] == "internal_error"

    async def test_concurrent_first_validations(self, make_license, validator, store):
        """Test two machines racing for an unbound license: one binds."""
        license = await make_license()

        results = await asyncio.gather(
            validator.validate(license.key, "M1"),
            validator.validate(license.key, "M2"),
            return_exceptions=True,
        )

        accepted = [result for result in results if not isinstance(result, Exception)]
        rejected = [result for result in results if isinstance(result, Exception)]
        assert len(accepted) == 1
        assert len(rejected) == 1
        assert isinstance(rejected[0], MachineMismatchError)
        stored = await store.get_license_by_key(license.key)
        assert stored.machine_id == accepted[0].machine_id
        assert stored.usage_count == 1

    async def test_inspect_is_read_only(self, make_license, validator, store):
        """Test info lookups never bind, count or audit."""
        license = await make_license()

        inspected = await validator.inspect(license.key)

        assert inspected.key == license.key
        stored = await store.get_license_by_key(license.key)
        assert stored.machine_id is None
        assert stored.usage_count == 0
        assert await store.list_logs() == []

    async def test_inspect_rejects_invalid(self, make_license, validator, store):
        """Test info refuses revoked, expired and unknown licenses."""
        revoked = await make_license()
        await store.revoke(revoked.key)
        expired = await make_license(expires_in=-timedelta(days=1))

        with pytest.raises(LicenseRevokedError):
            await validator.inspect(revoked.key)
        with pytest.raises(LicenseExpiredError):
            await validator.inspect(expired.key)
        with pytest.raises(LicenseNotFoundError):
            await validator.inspect("UNKNOWN")


@pytest.mark.django_db(transaction=True)
@pytest.mark.integration
@pytest.mark.asyncio
class TestIssueLicenseHandler:
    """Integration tests for IssueLicenseHandler."""

    async def test_issue_self_service(self, issue_handler, store):
        """Test a self-service license is stored unbound and audited."""
        license = await issue_handler.handle(
            IssueLicenseCommand(
                user_email="user@example.com",
                user_name="User",
                duration_days=30,
                notes="trial",
            )
        )

        assert license.machine_id is None
        assert license.notes == "trial"
        assert license.expires_at - license.created_at == timedelta(days=30)
        (entry,) = await store.list_logs()
        assert entry.action == AuditAction.LICENSE_CREATED
        assert entry.details == {"user_email": "user@example.com", "user_name": "User", "duration_days": 30}

    async def test_issue_by_admin(self, issue_handler, store):
        """Test an admin-issued license is audited with the admin name."""
        license = await issue_handler.handle(
            IssueLicenseCommand(
                user_email="user@example.com",
                user_name="User",
                duration_days=30,
                channel=IssueChannel.ADMIN,
                actor="admin",
            )
        )

        (entry,) = await store.list_logs()
        assert entry.license_key == license.key
        assert entry.action == AuditAction.ADMIN_LICENSE_CREATED
        assert entry.details["admin"] == "admin"

    async def test_retries_on_collision(self, store, audit_logger, make_license):
        """Test a colliding key is replaced by a fresh one."""
        await make_license(key="TAKEN")
        handler = IssueLicenseHandler(
            store, audit_logger, key_generator=FixedKeyGenerator("TAKEN", "FREE")
        )

        license = await handler.handle(
            IssueLicenseCommand(user_email="user@example.com", user_name="User", duration_days=30)
        )

        assert license.key == "FREE"

    async def test_gives_up_after_max_attempts(self, store, audit_logger, make_license):
        """Test repeated collisions surface as DuplicateKeyError."""
        await make_license(key="TAKEN")
        handler = IssueLicenseHandler(
            store,
            audit_logger,
            key_generator=FixedKeyGenerator("TAKEN", "TAKEN", "TAKEN"),
            max_attempts=3,
        )

        with pytest.raises(DuplicateKeyError):
            await handler.handle(
                IssueLicenseCommand(user_email="user@example.com", user_name="User", duration_days=30)
            )

    async def test_invalid_input_stores_nothing(self, issue_handler, store):
        """Test validation happens before any key is stored."""
        with pytest.raises(ValidationError):
            await issue_handler.handle(
                IssueLicenseCommand(user_email="broken", user_name="User", duration_days=30)
            )
        assert await store.list_all() == []


@pytest.mark.django_db(transaction=True)
@pytest.mark.integration
@pytest.mark.asyncio
class TestLifecycleHandlers:
    """Integration tests for revoke and delete handlers."""

    async def test_revoke_audits_once(self, make_license, store, audit_logger):
        """Test only the revoke that changed a row is audited."""
        license = await make_license()
        handler = RevokeLicenseHandler(store, audit_logger)

        assert await handler.handle(RevokeLicenseCommand(license_key=license.key, actor="admin")) == 1
        assert await handler.handle(RevokeLicenseCommand(license_key=license.key, actor="admin")) == 0

        (entry,) = await store.list_logs()
        assert entry.action == AuditAction.ADMIN_LICENSE_REVOKED
        assert entry.details == {"admin": "admin"}

    async def test_delete(self, make_license, store, audit_logger):
        """Test delete removes the license and keeps the audit entry."""
        license = await make_license()
        handler = DeleteLicenseHandler(store, audit_logger)

        await handler.handle(DeleteLicenseCommand(license_key=license.key, actor="admin"))

        assert await store.get_license_by_key(license.key) is None
        (entry,) = await store.list_logs()
        assert entry.action == AuditAction.ADMIN_LICENSE_DELETED
        with pytest.raises(LicenseNotFoundError):
            await handler.handle(DeleteLicenseCommand(license_key=license.key, actor="admin"))
