"""
Admin session tokens.

HS256-signed JWTs carrying the admin's username and id.
"""
from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt

from admins.domain.admin_user import AdminUser, TokenClaims
from core.domain.exceptions import AuthError

DEFAULT_ALGORITHM = "HS256"
DEFAULT_LIFETIME_SECONDS = 24 * 60 * 60


class TokenService:
    """Issues and verifies signed, time-bounded admin tokens."""

    def __init__(
        self,
        secret: str,
        algorithm: str = DEFAULT_ALGORITHM,
        lifetime_seconds: int = DEFAULT_LIFETIME_SECONDS,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        """
        Initialize token service.

        Args:
            secret: Shared server secret
            algorithm: JWT signing algorithm
            lifetime_seconds: Token validity period
            clock: Source of the current time
        """
        if not secret:
            raise ValueError("Token secret is required")
        self.secret = secret
        self.algorithm = algorithm
        self.lifetime = timedelta(seconds=lifetime_seconds)
        self.clock = clock

    def issue(self, admin: AdminUser) -> str:
        """
        Issue a token for an admin user.

        Args:
            admin: Authenticated admin user

        Returns:
            Encoded JWT
        """
        now = self.clock()
        payload = {
            "username": admin.username,
            "id": admin.id,
            "iat": now,
            "exp": now + self.lifetime,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify a token's signature and expiry.

        Args:
            token: Encoded JWT

        Returns:
            TokenClaims

        Raises:
            AuthError: If the token is malformed, tampered with or expired
        """
        if not token or not isinstance(token, str):
            raise AuthError("Authentication token required")
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise AuthError("Authentication token expired") from e
        except jwt.InvalidTokenError as e:
            raise AuthError("Invalid authentication token") from e

        username = payload.get("username")
        admin_id = payload.get("id")
        if not isinstance(username, str) or not username or not isinstance(admin_id, int):
            raise AuthError("Invalid authentication token")
        return TokenClaims(
            username=username,
            id=admin_id,
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
