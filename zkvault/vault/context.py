"""
VaultContext — the derived key of one unlocked session.

The context is created on unlock and destroyed on lock/logout. It is
the only object that holds the key; it is passed explicitly to whoever
needs to encrypt or decrypt, and is replaced as a whole, never mutated,
when the session unlocks again. ``destroy()`` overwrites the key buffer
with zeros.
"""
import threading
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Optional

from pydantic import ValidationError

from ..exceptions import InvalidInput, VaultLocked
from .batch import ItemLike, decrypt_items
from .config import KEY_LENGTH
from .crypto import open_payload, seal
from .key_rotation import rekey_items
from .models import BatchResult, EncryptedPayload, EncryptedVaultItem, VaultRecord


class VaultContext:
    """Owns a derived key between unlock and lock."""

    def __init__(self, key: bytes, max_workers: Optional[int] = None):
        if len(key) != KEY_LENGTH:
            raise InvalidInput(f"Encryption key must be exactly {KEY_LENGTH} bytes")
        self._key: Optional[bytearray] = bytearray(key)
        self._max_workers = max_workers
        self._lock = threading.Lock()
        self.created_at = datetime.now(timezone.utc)

    def __repr__(self) -> str:
        return f"<VaultContext active={self.active} created_at={self.created_at.isoformat()}>"

    @property
    def active(self) -> bool:
        return self._key is not None

    def _current_key(self) -> bytes:
        with self._lock:
            if self._key is None:
                raise VaultLocked()
            return bytes(self._key)

    def seal(self, record: VaultRecord) -> EncryptedPayload:
        return seal(record, self._current_key())

    def open(self, item: ItemLike) -> VaultRecord:
        if not isinstance(item, EncryptedVaultItem):
            try:
                item = EncryptedVaultItem.model_validate(item)
            except ValidationError:
                raise InvalidInput("Item must carry _id, ciphertext and iv") from None
        return open_payload(item.ciphertext, item.iv, self._current_key())

    def open_items(self, items: Iterable[ItemLike]) -> BatchResult:
        return decrypt_items(items, self._current_key(), max_workers=self._max_workers)

    def rekey_items(
        self,
        items: Iterable[ItemLike],
        new_key: bytes,
    ) -> tuple[list[EncryptedVaultItem], dict]:
        return rekey_items(items, self._current_key(), new_key)

    def destroy(self) -> None:
        """Zero and drop the key. Safe to call more than once."""
        with self._lock:
            if self._key is not None:
                for i in range(len(self._key)):
                    self._key[i] = 0
                self._key = None
