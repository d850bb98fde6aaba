"""
Wiring of domain services for the API views.

The store is built once per process for the configured engine; the
lighter services are built per request from current settings.
"""
from django.conf import settings
from django.http import HttpRequest

from admins.infrastructure.hashers import PasswordHasher
from admins.infrastructure.tokens import TokenService
from admins.services import AdminAuthenticator
from audit.domain.entry import RequestContext
from audit.services import AuditLogger
from licenses.domain.services import LicenseValidator
from licenses.infrastructure.stores import get_license_store
from licenses.ports.license_store import LicenseStore


def license_store() -> LicenseStore:
    """Return the process-wide license store."""
    return get_license_store()


def audit_logger() -> AuditLogger:
    """Return an audit logger on the license store."""
    return AuditLogger(license_store())


def license_validator() -> LicenseValidator:
    """Return the license validator."""
    return LicenseValidator(license_store(), audit_logger())


def admin_authenticator() -> AdminAuthenticator:
    """Return the admin authenticator configured from settings."""
    tokens = TokenService(
        secret=settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        lifetime_seconds=settings.JWT_EXPIRES_IN,
    )
    return AdminAuthenticator(license_store(), PasswordHasher(), tokens)


def request_context(request: HttpRequest) -> RequestContext:
    """Extract the audit request context from an HTTP request."""
    return RequestContext(
        ip_address=request.META.get("REMOTE_ADDR"),
        user_agent=request.META.get("HTTP_USER_AGENT"),
    )
