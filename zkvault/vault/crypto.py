"""
Vault Crypto Core — record serialization and AES-256-GCM encryption.

Format:
    plaintext  = orjson(VaultRecord, sorted keys)
    ciphertext = AES-GCM(key, iv, plaintext) (payload + 16B tag)
    iv         = 12 random bytes, fresh for every call

Security Note:
    Never log plaintext, ciphertext or key values.
    A wrong key and a tampered ciphertext both raise DecryptionFailed;
    callers cannot tell them apart.
"""
import base64
import binascii
import logging

import orjson
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from pydantic import ValidationError

from ..exceptions import DecryptionFailed, InvalidInput, MalformedRecord
from .config import IV_SIZE, KEY_LENGTH
from .entropy import random_bytes
from .models import EncryptedPayload, VaultRecord

logger = logging.getLogger("zkvault")

TAG_SIZE = 16

RECORD_FIELDS = frozenset(VaultRecord.model_fields)


# ---------------------------------------------------------------------------
# Base64 helpers (standard alphabet only)
# ---------------------------------------------------------------------------

def b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def b64decode(value: str) -> bytes:
    """Strict standard-base64 decode.

    Raises:
        ValueError: On URL-safe characters, bad padding or non-ASCII input.
    """
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, TypeError) as err:
        raise ValueError("invalid base64") from err


def is_valid_base64(value: str) -> bool:
    try:
        return b64encode(b64decode(value)) == value
    except ValueError:
        return False


# ---------------------------------------------------------------------------
# Record serialization
# ---------------------------------------------------------------------------

def serialize_record(record: VaultRecord) -> bytes:
    """Canonical JSON encoding of a record."""
    return orjson.dumps(record.model_dump(), option=orjson.OPT_SORT_KEYS)


def deserialize_record(data: bytes) -> VaultRecord:
    """Parse decrypted bytes back into a record.

    Every record field must be present; ``serialize_record`` always
    writes all of them, so a missing one means the payload is not a
    vault record.

    Raises:
        MalformedRecord: If the bytes are not a JSON object with every
            record field as text.
    """
    try:
        parsed = orjson.loads(data)
    except orjson.JSONDecodeError:
        raise MalformedRecord() from None
    if not isinstance(parsed, dict):
        raise MalformedRecord()
    if not RECORD_FIELDS.issubset(parsed):
        raise MalformedRecord()
    try:
        return VaultRecord.model_validate(parsed)
    except ValidationError:
        raise MalformedRecord() from None


# ---------------------------------------------------------------------------
# Encryption
# ---------------------------------------------------------------------------

def _cipher(key: bytes) -> AESGCM:
    if not isinstance(key, (bytes, bytearray)) or len(key) != KEY_LENGTH:
        raise InvalidInput(f"Encryption key must be exactly {KEY_LENGTH} bytes")
    return AESGCM(bytes(key))


def encrypt_record(record: VaultRecord, key: bytes) -> tuple[bytes, bytes]:
    """Encrypt a vault record.

    Args:
        record: Plaintext record.
        key: 32-byte derived key.

    Returns:
        Tuple of (ciphertext, iv). Both are needed for decryption.
    """
    if not isinstance(record, VaultRecord):
        try:
            record = VaultRecord.model_validate(record)
        except ValidationError:
            raise InvalidInput("Record fields must be text") from None
    cipher = _cipher(key)
    iv = random_bytes(IV_SIZE)
    ciphertext = cipher.encrypt(iv, serialize_record(record), None)
    return ciphertext, iv


def decrypt_record(ciphertext: bytes, iv: bytes, key: bytes) -> VaultRecord:
    """Decrypt and parse a vault record.

    Raises:
        DecryptionFailed: Authentication failed (wrong key or tampering).
        MalformedRecord: Decrypted content is not a vault record.
    """
    cipher = _cipher(key)
    if len(iv) != IV_SIZE or len(ciphertext) < TAG_SIZE:
        raise DecryptionFailed()
    try:
        plaintext = cipher.decrypt(bytes(iv), bytes(ciphertext), None)
    except InvalidTag:
        raise DecryptionFailed() from None
    return deserialize_record(plaintext)


def seal(record: VaultRecord, key: bytes) -> EncryptedPayload:
    """Encrypt a record into its base64 wire form."""
    ciphertext, iv = encrypt_record(record, key)
    return EncryptedPayload(ciphertext=b64encode(ciphertext), iv=b64encode(iv))


def open_payload(ciphertext_b64: str, iv_b64: str, key: bytes) -> VaultRecord:
    """Decrypt a record from its base64 wire form.

    Undecodable base64 is treated as corrupted data.
    """
    try:
        ciphertext = b64decode(ciphertext_b64)
        iv = b64decode(iv_b64)
    except ValueError:
        raise DecryptionFailed() from None
    return decrypt_record(ciphertext, iv, key)
