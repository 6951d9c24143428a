"""
Tests for password-based key derivation.
"""
import base64
import hashlib

import pytest

from zkvault.exceptions import InvalidInput
from zkvault.vault.kdf import (
    decode_salt,
    derive_key,
    derive_key_b64,
    generate_salt,
    generate_salt_b64,
)

SALT = bytes(range(16))
OTHER_SALT = bytes(range(16, 32))


@pytest.fixture(scope="module")
def key():
    return derive_key("correct horse battery staple", SALT)


class TestDeriveKey:
    """Tests for derive_key()."""

    def test_key_is_32_bytes(self, key):
        """Test the derived key is 256 bits."""
        assert isinstance(key, bytes)
        assert len(key) == 32

    def test_matches_pbkdf2_hmac_sha256(self, key):
        """Test derivation is PBKDF2-HMAC-SHA256 with 200k iterations."""
        expected = hashlib.pbkdf2_hmac(
            "sha256", "correct horse battery staple".encode("utf-8"), SALT, 200_000, 32,
        )
        assert key == expected

    def test_deterministic(self, key):
        """Test identical inputs give identical keys."""
        assert derive_key("correct horse battery staple", SALT) == key

    def test_different_salt_gives_different_key(self, key):
        """Test salts separate accounts with the same password."""
        assert derive_key("correct horse battery staple", OTHER_SALT) != key

    def test_different_password_gives_different_key(self, key):
        """Test a different password yields a different key."""
        assert derive_key("correct horse battery stapler", SALT) != key

    def test_accepts_bytearray_salt(self, key):
        """Test bytearray salts are accepted."""
        assert derive_key("correct horse battery staple", bytearray(SALT)) == key

    @pytest.mark.parametrize("salt", [b"", bytes(15), bytes(17), bytes(32)])
    def test_rejects_wrong_salt_size(self, salt):
        """Test salts that are not 16 bytes are rejected."""
        with pytest.raises(InvalidInput):
            derive_key("password", salt)

    def test_rejects_empty_password(self):
        """Test the empty password is rejected."""
        with pytest.raises(InvalidInput):
            derive_key("", SALT)

    def test_rejects_low_iterations(self):
        """Test iteration counts under 200,000 are rejected."""
        with pytest.raises(InvalidInput):
            derive_key("password", SALT, iterations=100_000)

    def test_invalid_input_is_value_error(self):
        """Test InvalidInput can be caught as ValueError."""
        with pytest.raises(ValueError):
            derive_key("", SALT)


class TestSalts:
    """Tests for salt generation and decoding."""

    def test_generate_salt_size(self):
        """Test generated salts are 16 bytes."""
        assert len(generate_salt()) == 16

    def test_generate_salt_is_random(self):
        """Test two salts differ."""
        assert generate_salt() != generate_salt()

    def test_generate_salt_b64(self):
        """Test base64 salts decode to 16 bytes."""
        assert len(base64.b64decode(generate_salt_b64())) == 16

    def test_decode_salt(self):
        """Test decoding a standard base64 salt."""
        assert decode_salt(base64.b64encode(SALT).decode()) == SALT

    @pytest.mark.parametrize("value", ["not base64!", "AAAA", "", "-_-_-_-_-_-_-_-_-_-_-A=="])
    def test_decode_salt_rejects(self, value):
        """Test invalid, short and URL-safe salts are rejected."""
        with pytest.raises(InvalidInput):
            decode_salt(value)

    def test_derive_key_b64(self, key):
        """Test the wire-form salt derives the same key."""
        salt_b64 = base64.b64encode(SALT).decode()
        assert derive_key_b64("correct horse battery staple", salt_b64) == key
