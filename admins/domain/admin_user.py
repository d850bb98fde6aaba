"""
AdminUser domain entity.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class AdminUser:
    """
    AdminUser domain entity.

    Created once by the bootstrap step and only touched on login.
    """

    id: int
    username: str
    password_hash: str
    created_at: datetime
    last_login: Optional[datetime] = None

    def __post_init__(self):
        """Validate admin user entity."""
        if not self.username:
            raise ValueError("Username is required")
        if not self.password_hash:
            raise ValueError("Password hash is required")


@dataclass(frozen=True)
class TokenClaims:
    """Verified claims carried by an admin session token."""

    username: str
    id: int
    issued_at: datetime
    expires_at: datetime
