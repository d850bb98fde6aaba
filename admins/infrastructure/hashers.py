"""
Password hashing for admin users.

bcrypt through Django's hasher framework, with the cost factor taken
from settings so it can be tuned per deployment.
"""
from django.conf import settings
from django.contrib.auth.hashers import BCryptSHA256PasswordHasher, check_password, make_password

DEFAULT_BCRYPT_ROUNDS = 12


class ConfigurableBCryptSHA256PasswordHasher(BCryptSHA256PasswordHasher):
    """BCryptSHA256PasswordHasher whose rounds come from settings.BCRYPT_ROUNDS."""

    @property
    def rounds(self) -> int:
        """Cost factor used for new hashes."""
        return int(getattr(settings, "BCRYPT_ROUNDS", DEFAULT_BCRYPT_ROUNDS))


class PasswordHasher:
    """Hashes and verifies admin passwords with the configured hashers."""

    def hash(self, password: str) -> str:
        """
        Hash a password.

        Args:
            password: Raw password

        Returns:
            Encoded hash, including algorithm, cost and salt
        """
        return make_password(password)

    def verify(self, password: str, encoded: str) -> bool:
        """
        Verify a password against an encoded hash.

        Uses the hasher's own constant-time verify.
        """
        if not password or not encoded:
            return False
        return check_password(password, encoded)
