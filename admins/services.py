"""
Admin authentication services.

Login checks credentials against the stored bcrypt hash and issues a
session token; verify turns a token back into claims. Both fail with
AuthError and nothing else.
"""
import logging
from dataclasses import dataclass
from datetime import datetime

from asgiref.sync import sync_to_async

from admins.domain.admin_user import AdminUser, TokenClaims
from admins.infrastructure.hashers import PasswordHasher
from admins.infrastructure.tokens import TokenService
from core.domain.exceptions import AuthError, ValidationError
from licenses.ports.license_store import LicenseStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a successful login."""

    token: str
    admin: AdminUser
    expires_at: datetime


class AdminAuthenticator:
    """Credential check and session token handling for admin users."""

    def __init__(self, store: LicenseStore, hasher: PasswordHasher, tokens: TokenService):
        """
        Initialize authenticator.

        Args:
            store: License store holding admin users
            hasher: Password hasher
            tokens: Token service
        """
        self.store = store
        self.hasher = hasher
        self.tokens = tokens

    async def login(self, username: str, password: str) -> LoginResult:
        """
        Authenticate an admin and issue a token.

        Args:
            username: Admin username
            password: Raw password

        Returns:
            LoginResult with the token and the admin as stored before login

        Raises:
            ValidationError: If username or password is missing
            AuthError: If the credentials are wrong
        """
        if not username or not password:
            raise ValidationError("Username and password are required")

        admin = await self.store.get_admin(username)
        if admin is None:
            # Hash anyway so unknown usernames take as long as bad passwords
            await sync_to_async(self.hasher.hash)(password)
            logger.warning("Admin login failed", extra={"username": username, "reason": "unknown_user"})
            raise AuthError()

        if not await sync_to_async(self.hasher.verify)(password, admin.password_hash):
            logger.warning("Admin login failed", extra={"username": username, "reason": "bad_password"})
            raise AuthError()

        await self.store.touch_admin_login(username)
        token = self.tokens.issue(admin)
        claims = self.tokens.verify(token)
        logger.info("Admin logged in", extra={"username": username})
        return LoginResult(token=token, admin=admin, expires_at=claims.expires_at)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify a session token.

        Args:
            token: Encoded token

        Returns:
            TokenClaims

        Raises:
            AuthError: On any signature, expiry or format problem
        """
        return self.tokens.verify(token)


async def ensure_default_admin(
    store: LicenseStore, hasher: PasswordHasher, username: str, password: str
) -> bool:
    """
    Create the bootstrap admin unless it already exists.

    Args:
        store: License store
        hasher: Password hasher
        username: Admin username
        password: Raw password

    Returns:
        True if the admin was created
    """
    if not username or not password:
        raise ValidationError("Default admin username and password are required")
    if await store.get_admin(username) is not None:
        return False
    password_hash = await sync_to_async(hasher.hash)(password)
    created = await store.ensure_admin(username, password_hash)
    if created:
        logger.info("Default admin user created", extra={"username": username})
    return created
