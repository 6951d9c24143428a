"""
Key derivation — master password + salt to a 256-bit AES key.

PBKDF2-HMAC-SHA256 with at least 200,000 iterations. Derivation is
deterministic: the server keeps only the salt, so the key must be
re-derivable from the password in every session.

Security Note:
    Never log or cache the password or the derived key.
"""
import base64
import binascii

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..exceptions import InvalidInput
from .config import KEY_LENGTH, MIN_PBKDF2_ITERATIONS, SALT_SIZE
from .entropy import random_bytes


def derive_key(
    password: str,
    salt: bytes,
    iterations: int = MIN_PBKDF2_ITERATIONS,
) -> bytes:
    """Derive a 32-byte encryption key from a master password.

    Args:
        password: User's master password (non-empty).
        salt: Per-account salt, exactly 16 bytes.
        iterations: PBKDF2 work factor, at least 200,000.

    Returns:
        32-byte derived key.

    Raises:
        InvalidInput: On empty password, wrong salt size or low iteration count.
    """
    if not isinstance(password, str) or not password:
        raise InvalidInput("Master password cannot be empty")
    if not isinstance(salt, (bytes, bytearray)) or len(salt) != SALT_SIZE:
        raise InvalidInput(f"Salt must be exactly {SALT_SIZE} bytes")
    if iterations < MIN_PBKDF2_ITERATIONS:
        raise InvalidInput(
            f"PBKDF2 iterations must be at least {MIN_PBKDF2_ITERATIONS}"
        )
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=bytes(salt),
        iterations=iterations,
    )
    return kdf.derive(password.encode("utf-8"))


def decode_salt(salt_b64: str) -> bytes:
    """Decode a standard-base64 salt and check its size."""
    try:
        salt = base64.b64decode(salt_b64, validate=True)
    except (binascii.Error, TypeError, ValueError):
        raise InvalidInput("Salt is not valid base64") from None
    if len(salt) != SALT_SIZE:
        raise InvalidInput(f"Salt must be exactly {SALT_SIZE} bytes")
    return salt


def derive_key_b64(
    password: str,
    salt_b64: str,
    iterations: int = MIN_PBKDF2_ITERATIONS,
) -> bytes:
    """Same as :func:`derive_key` with the salt in its wire (base64) form."""
    return derive_key(password, decode_salt(salt_b64), iterations)


def generate_salt() -> bytes:
    """Generate a fresh 16-byte account salt (signup)."""
    return random_bytes(SALT_SIZE)


def generate_salt_b64() -> str:
    return base64.b64encode(generate_salt()).decode("ascii")
