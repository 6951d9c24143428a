"""zkvault.

Client-side encryption core of a zero-knowledge password manager.
"""
from .version import __version__
from .exceptions import (
    VaultError,
    InvalidInput,
    DecryptionFailed,
    InvalidPassword,
    MalformedRecord,
    PasswordGenerationError,
    NoCharacterClassSelected,
    LengthTooShort,
    RandomSourceUnavailable,
    SessionStateError,
    VaultLocked,
)
from .data import SessionData
from .storage import SessionStorage, MemoryStorage
from .clipboard import ClipboardGuard
from .generator import PasswordConfig, generate_password
from .vault import (
    VaultConfig,
    VaultRecord,
    EncryptedVaultItem,
    SessionVault,
    SessionState,
)

__all__ = (
    '__version__',
    'VaultError',
    'InvalidInput',
    'DecryptionFailed',
    'InvalidPassword',
    'MalformedRecord',
    'PasswordGenerationError',
    'NoCharacterClassSelected',
    'LengthTooShort',
    'RandomSourceUnavailable',
    'SessionStateError',
    'VaultLocked',
    'SessionData',
    'SessionStorage',
    'MemoryStorage',
    'ClipboardGuard',
    'PasswordConfig',
    'generate_password',
    'VaultConfig',
    'VaultRecord',
    'EncryptedVaultItem',
    'SessionVault',
    'SessionState',
)
