"""
Vault Models — plaintext records and their encrypted wire forms.

``VaultRecord`` only ever lives in memory. ``EncryptedVaultItem`` and
``EncryptedPayload`` are the only shapes that may leave the client;
their ``ciphertext`` and ``iv`` are standard base64 strings that the
persistence layer stores verbatim.
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

MASK_CHAR = "•"
MASK_MAX = 8


class VaultRecord(BaseModel):
    """Plaintext vault entry."""

    model_config = ConfigDict(extra="ignore")

    title: str = ""
    username: str = ""
    password: str = ""
    url: str = ""
    notes: str = ""

    def __repr__(self) -> str:
        # keep the secret out of tracebacks and logs
        return f"<VaultRecord title={self.title!r} username={self.username!r}>"

    __str__ = __repr__

    def masked_password(self) -> str:
        return MASK_CHAR * min(len(self.password), MASK_MAX)

    def matches(self, term: str) -> bool:
        """Case-insensitive search on title, username and url."""
        needle = term.lower()
        return (
            needle in self.title.lower()
            or needle in self.username.lower()
            or needle in self.url.lower()
        )


class EncryptedPayload(BaseModel):
    """Output of encryption: base64 ciphertext and IV."""

    model_config = ConfigDict(frozen=True)

    ciphertext: str
    iv: str


class EncryptedVaultItem(BaseModel):
    """A stored vault entry as returned by the items API."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    ciphertext: str
    iv: str
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class DecryptedVaultItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    data: VaultRecord
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")


class ItemFailure(BaseModel):
    """One item that could not be opened. Carries no content."""

    model_config = ConfigDict(frozen=True)

    id: str
    reason: Literal["decryption_failed", "malformed_record"]


class BatchResult(BaseModel):
    records: list[DecryptedVaultItem] = Field(default_factory=list)
    failures: list[ItemFailure] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.records) + len(self.failures)

    @property
    def all_failed(self) -> bool:
        """True when there was something to decrypt and nothing succeeded."""
        return bool(self.failures) and not self.records
