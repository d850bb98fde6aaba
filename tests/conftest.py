"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime, timedelta, timezone

import pytest
from django.conf import settings

from admins.infrastructure.hashers import PasswordHasher
from admins.infrastructure.tokens import TokenService
from admins.services import AdminAuthenticator
from admins.signals import create_default_admin
from audit.services import AuditLogger
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.domain.license import NewLicense
from licenses.domain.license_key import generate_license_key
from licenses.domain.services import LicenseValidator
from licenses.infrastructure.stores import build_store

HOST_MACHINE_ID = "host-machine-0001"


@pytest.fixture
def store():
    """Fixture for a LicenseStore on the test database."""
    return build_store("default")


@pytest.fixture
def audit_logger(store):
    """Fixture for AuditLogger."""
    return AuditLogger(store)


@pytest.fixture
def host_machine_id():
    """Fixture for the machine id used when a request carries none."""
    return HOST_MACHINE_ID


@pytest.fixture
def validator(store, audit_logger, host_machine_id):
    """Fixture for LicenseValidator with a fixed host machine id."""
    return LicenseValidator(store, audit_logger, machine_id_provider=lambda: host_machine_id)


@pytest.fixture
def issue_handler(store, audit_logger):
    """Fixture for IssueLicenseHandler."""
    return IssueLicenseHandler(store, audit_logger)


@pytest.fixture
def token_service():
    """Fixture for TokenService with the test secret."""
    return TokenService(secret=settings.JWT_SECRET, lifetime_seconds=3600)


@pytest.fixture
def authenticator(store, token_service):
    """Fixture for AdminAuthenticator."""
    return AdminAuthenticator(store, PasswordHasher(), token_service)


@pytest.fixture
def make_license(store):
    """
    Fixture returning a coroutine that stores a license.

    `expires_in` may be negative to create an already expired license.
    """

    async def _make(
        user_email="user@example.com",
        user_name="Test User",
        expires_in=timedelta(days=365),
        created_at=None,
        key=None,
    ):
        now = datetime.now(timezone.utc)
        expires_at = now + expires_in
        created_at = created_at or min(now, expires_at - timedelta(days=1))
        data = NewLicense(
            key=key or generate_license_key(),
            user_email=user_email,
            user_name=user_name,
            created_at=created_at,
            expires_at=expires_at,
        )
        return await store.create_license(data)

    return _make


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def admin_token(db, api_client):
    """Fixture for a bearer token of the bootstrap admin."""
    create_default_admin(sender=None)
    response = api_client.post(
        "/api/admin/login",
        {"username": settings.ADMIN_USERNAME, "password": settings.ADMIN_PASSWORD},
        format="json",
    )
    assert response.status_code == 200, response.content
    return response.json()["token"]


@pytest.fixture
def admin_client(api_client, admin_token):
    """Fixture for an API client sending the admin bearer token."""
    api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {admin_token}")
    return api_client
