"""
Batch decryption of a vault listing.

Each item is opened independently. A corrupted or undecryptable item
is skipped and reported as an ``ItemFailure``; it never aborts the
batch. With ``max_workers`` the items are opened on a thread pool, the
output order still follows the input order.

Security Note:
    Failures are logged by item id and error kind only.
"""
import logging
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional, Union

from pydantic import ValidationError

from ..exceptions import DecryptionFailed, MalformedRecord
from .crypto import open_payload
from .models import BatchResult, DecryptedVaultItem, EncryptedVaultItem, ItemFailure

logger = logging.getLogger("zkvault")

ItemLike = Union[EncryptedVaultItem, Mapping[str, Any]]


def _item_id(item: ItemLike) -> str:
    if isinstance(item, Mapping):
        return str(item.get("_id", item.get("id", "")))
    return str(getattr(item, "id", ""))


def _open_one(item: ItemLike, key: bytes) -> Union[DecryptedVaultItem, ItemFailure]:
    if not isinstance(item, EncryptedVaultItem):
        try:
            item = EncryptedVaultItem.model_validate(item)
        except ValidationError:
            item_id = _item_id(item)
            logger.warning("Failed to decrypt vault item id=%s: invalid item", item_id)
            return ItemFailure(id=item_id, reason="decryption_failed")
    try:
        record = open_payload(item.ciphertext, item.iv, key)
    except DecryptionFailed:
        logger.warning("Failed to decrypt vault item id=%s: decryption_failed", item.id)
        return ItemFailure(id=item.id, reason="decryption_failed")
    except MalformedRecord:
        logger.warning("Failed to decrypt vault item id=%s: malformed_record", item.id)
        return ItemFailure(id=item.id, reason="malformed_record")
    return DecryptedVaultItem(
        id=item.id,
        data=record,
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


def decrypt_items(
    items: Iterable[ItemLike],
    key: bytes,
    max_workers: Optional[int] = None,
) -> BatchResult:
    """Decrypt a list of encrypted vault items.

    Args:
        items: EncryptedVaultItem instances or their wire dicts.
        key: 32-byte derived key.
        max_workers: Thread pool size; ``None`` decrypts serially.

    Returns:
        BatchResult with the opened records and one failure per bad item.
    """
    parsed = list(items)
    if max_workers and len(parsed) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            outcomes = list(pool.map(lambda item: _open_one(item, key), parsed))
    else:
        outcomes = [_open_one(item, key) for item in parsed]

    result = BatchResult()
    for outcome in outcomes:
        if isinstance(outcome, ItemFailure):
            result.failures.append(outcome)
        else:
            result.records.append(outcome)
    logger.debug(
        "Vault batch decrypted: %d ok, %d failed",
        len(result.records), len(result.failures),
    )
    return result


def filter_items(
    items: Iterable[DecryptedVaultItem],
    term: str,
) -> list[DecryptedVaultItem]:
    """Client-side search on title, username and url (case-insensitive)."""
    if not term:
        return list(items)
    return [item for item in items if item.data.matches(term)]
