"""
License key generation.

Keys are opaque 24-character uppercase hex strings. Uniqueness is
enforced by the store; generation only has to be unpredictable.
"""

import hashlib
import secrets
import time

LICENSE_KEY_LENGTH = 24
RANDOM_BYTES = 16


def generate_license_key() -> str:
    """
    Generate a fresh license key.

    A nanosecond timestamp is concatenated with random bytes and the
    SHA-256 digest of the result is truncated to 24 hex characters.

    Returns:
        Generated license key string
    """
    timestamp = str(time.time_ns())
    random_part = secrets.token_hex(RANDOM_BYTES)
    digest = hashlib.sha256((timestamp + random_part).encode()).hexdigest()
    return digest[:LICENSE_KEY_LENGTH].upper()


class KeyGenerator:
    """
    Produces license keys.

    Wrapped in a class so handlers can be given a deterministic
    generator in tests.
    """

    def generate(self) -> str:
        """Return a new license key."""
        return generate_license_key()
