"""
Vault Re-keying — re-encrypt every item when the master password changes.

Each item is decrypted with the old derived key and sealed again with
the new one under a fresh IV. Items that cannot be opened are left
untouched and counted as errors, so a single corrupted entry does not
block the change for the rest of the vault. The caller uploads the
returned items to the persistence layer.

Security Note:
    Plaintext exists in memory only during re-encryption of each item.
    Never log plaintext or ciphertext values.
"""
import logging
from collections.abc import Iterable, Mapping
from typing import Any, Union

from pydantic import ValidationError

from ..exceptions import DecryptionFailed, InvalidInput, MalformedRecord
from .crypto import open_payload, seal
from .models import EncryptedVaultItem

logger = logging.getLogger("zkvault")


def rekey_items(
    items: Iterable[Union[EncryptedVaultItem, Mapping[str, Any]]],
    old_key: bytes,
    new_key: bytes,
) -> tuple[list[EncryptedVaultItem], dict]:
    """Re-encrypt items from ``old_key`` to ``new_key``.

    Args:
        items: Encrypted items (models or wire dicts).
        old_key: Derived key the items are currently sealed with.
        new_key: Derived key from the new master password.

    Returns:
        Tuple of (items, stats). ``items`` keeps the input order; failed
        items are returned unchanged. Stats has keys: total, rotated, errors.
    """
    try:
        parsed = [
            raw if isinstance(raw, EncryptedVaultItem) else EncryptedVaultItem.model_validate(raw)
            for raw in items
        ]
    except ValidationError:
        raise InvalidInput("Items must carry _id, ciphertext and iv") from None

    stats = {"total": 0, "rotated": 0, "errors": 0}
    rotated: list[EncryptedVaultItem] = []

    logger.info("Starting vault re-key of %d item(s)", len(parsed))

    for item in parsed:
        stats["total"] += 1
        try:
            record = open_payload(item.ciphertext, item.iv, old_key)
            payload = seal(record, new_key)
        except (DecryptionFailed, MalformedRecord) as err:
            logger.error(
                "Error re-keying vault item id=%s: %s", item.id, type(err).__name__,
            )
            stats["errors"] += 1
            rotated.append(item)
            continue
        rotated.append(
            item.model_copy(update={"ciphertext": payload.ciphertext, "iv": payload.iv})
        )
        stats["rotated"] += 1

    logger.info("Vault re-key complete: %s", stats)
    return rotated, stats
