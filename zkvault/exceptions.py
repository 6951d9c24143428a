"""Vault Exceptions.

Every error raised by zkvault derives from ``VaultError``. Messages are
generic on purpose: none of them carry plaintext, passwords or key
material, and decryption errors never say *why* authentication failed.
"""


class VaultError(Exception):
    """Base class for all vault errors."""

    message: str = "Vault operation failed"

    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)


class InvalidInput(VaultError, ValueError):
    """Malformed salt, empty password, bad key length or bad parameter."""

    message = "Invalid input"


class DecryptionFailed(VaultError):
    """AEAD authentication failed: wrong key or tampered/corrupted data."""

    message = "Decryption failed. Invalid password or corrupted data."


class InvalidPassword(DecryptionFailed):
    """Raised by an unlocked session when its derived key cannot decrypt."""

    message = "Invalid password"


class MalformedRecord(VaultError):
    """Decryption succeeded but the content is not a vault record."""

    message = "Decrypted data is not a valid vault record"


class PasswordGenerationError(VaultError):
    message = "Password generation failed"


class NoCharacterClassSelected(PasswordGenerationError):
    message = "Please select at least one character type"


class LengthTooShort(PasswordGenerationError):
    message = "Password length is shorter than the number of selected character types"


class RandomSourceUnavailable(VaultError):
    """Secure randomness cannot be obtained. Never fall back."""

    message = "Secure random source is unavailable"


class SessionStateError(VaultError):
    """Operation not allowed in the current session state."""

    message = "Operation not allowed in the current session state"


class VaultLocked(SessionStateError):
    message = "Vault is locked"
