"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""
from typing import Optional


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainException):
    """Raised when request input is missing or malformed."""

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(DomainException):
    """Base exception for unknown records."""

    def __init__(self, message: str = "Not found", code: str = "NOT_FOUND"):
        super().__init__(message, code=code)


class LicenseNotFoundError(NotFoundError):
    """Raised when a license is not found."""

    def __init__(self, message: str = "License not found"):
        super().__init__(message, code="LICENSE_NOT_FOUND")


class AdminNotFoundError(NotFoundError):
    """Raised when an admin user is not found."""

    def __init__(self, message: str = "Admin user not found"):
        super().__init__(message, code="ADMIN_NOT_FOUND")


class DuplicateKeyError(DomainException):
    """Raised when a license key collides with an existing one."""

    def __init__(self, message: str = "License key already exists"):
        super().__init__(message, code="DUPLICATE_KEY")


class LicenseRejectedError(DomainException):
    """
    Base exception for terminal validation outcomes.

    Carries the machine identifier the validation was evaluated for,
    so callers can echo it back.
    """

    reason = "rejected"

    def __init__(self, message: str, code: str, machine_id: Optional[str] = None):
        super().__init__(message, code=code)
        self.machine_id = machine_id


class LicenseRevokedError(LicenseRejectedError):
    """Raised when a license has been revoked."""

    reason = "revoked"

    def __init__(self, message: str = "License has been revoked", machine_id: Optional[str] = None):
        super().__init__(message, code="LICENSE_REVOKED", machine_id=machine_id)


class LicenseExpiredError(LicenseRejectedError):
    """Raised when a license has expired."""

    reason = "expired"

    def __init__(self, message: str = "License expired", machine_id: Optional[str] = None):
        super().__init__(message, code="LICENSE_EXPIRED", machine_id=machine_id)


class MachineMismatchError(LicenseRejectedError):
    """Raised when a license is bound to a different machine."""

    reason = "machine_mismatch"

    def __init__(
        self,
        message: str = "License already used on another machine",
        machine_id: Optional[str] = None,
    ):
        super().__init__(message, code="MACHINE_MISMATCH", machine_id=machine_id)


class AuthError(DomainException):
    """Raised on bad credentials or an invalid/expired session token."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, code="AUTH_ERROR")


class InternalError(DomainException):
    """Raised when the backend is unavailable or fails unexpectedly."""

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message, code="INTERNAL_ERROR")
