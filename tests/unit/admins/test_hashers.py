"""
Unit tests for admin password hashing.
"""

from django.test import override_settings

from admins.infrastructure.hashers import ConfigurableBCryptSHA256PasswordHasher, PasswordHasher


class TestPasswordHasher:
    """Tests for PasswordHasher."""

    def test_hash_and_verify(self):
        """Test a password verifies against its own hash only."""
        hasher = PasswordHasher()
        encoded = hasher.hash("s3cret")

        assert encoded != "s3cret"
        assert encoded.startswith("bcrypt_sha256$")
        assert hasher.verify("s3cret", encoded) is True
        assert hasher.verify("wrong", encoded) is False

    def test_hashes_are_salted(self):
        """Test hashing the same password twice gives different hashes."""
        hasher = PasswordHasher()
        assert hasher.hash("s3cret") != hasher.hash("s3cret")

    def test_verify_empty_values(self):
        """Test empty password or hash never verifies."""
        hasher = PasswordHasher()
        assert hasher.verify("", hasher.hash("s3cret")) is False
        assert hasher.verify("s3cret", "") is False

    def test_rounds_from_settings(self):
        """Test the cost factor follows BCRYPT_ROUNDS."""
        with override_settings(BCRYPT_ROUNDS=5):
            assert ConfigurableBCryptSHA256PasswordHasher().rounds == 5
            encoded = PasswordHasher().hash("s3cret")

        assert "$05$" in encoded
