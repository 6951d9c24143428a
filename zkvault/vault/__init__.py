"""Vault — zero-knowledge encryption of vault records.

Security Note (Threat Model):
    Keys are derived from the master password on the client and live
    only in process memory while the vault is unlocked. The server
    stores the salt and opaque ciphertext, it cannot decrypt anything.
    Decrypted records exist in process memory while in use; a memory
    dump of an unlocked client can expose them. This is an accepted
    limitation.
"""

from .config import VaultConfig
from .kdf import derive_key, derive_key_b64, generate_salt, generate_salt_b64
from .crypto import (
    encrypt_record,
    decrypt_record,
    seal,
    open_payload,
    is_valid_base64,
)
from .models import (
    VaultRecord,
    EncryptedPayload,
    EncryptedVaultItem,
    DecryptedVaultItem,
    ItemFailure,
    BatchResult,
)
from .batch import decrypt_items, filter_items
from .key_rotation import rekey_items
from .context import VaultContext
from .session_vault import SessionVault, SessionState

__all__ = [
    "VaultConfig",
    "derive_key",
    "derive_key_b64",
    "generate_salt",
    "generate_salt_b64",
    "encrypt_record",
    "decrypt_record",
    "seal",
    "open_payload",
    "is_valid_base64",
    "VaultRecord",
    "EncryptedPayload",
    "EncryptedVaultItem",
    "DecryptedVaultItem",
    "ItemFailure",
    "BatchResult",
    "decrypt_items",
    "filter_items",
    "rekey_items",
    "VaultContext",
    "SessionVault",
    "SessionState",
]
