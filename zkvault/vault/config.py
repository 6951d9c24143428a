"""
Vault Configuration — Validated settings for key derivation and session hygiene.

Reads optional overrides from environment variables:
    VAULT_PBKDF2_ITERATIONS = <integer, minimum 200000>
    VAULT_CLIPBOARD_CLEAR_SECONDS = <float, seconds>
    VAULT_DECRYPT_WORKERS = <integer, thread pool size for batch decrypt>
    VAULT_SESSION_MAX_AGE = <integer, seconds a stored session stays valid>

Security Note:
    Configuration never holds key material, salts or passwords.
"""
import os
import logging
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..conf import CLIPBOARD_CLEAR_SECONDS

logger = logging.getLogger("zkvault")

MIN_PBKDF2_ITERATIONS = 200_000
SALT_SIZE = 16  # bytes
IV_SIZE = 12  # 96-bit GCM nonce
KEY_LENGTH = 32  # AES-256


def _env_int(name: str) -> Optional[int]:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError as err:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from err


def _env_float(name: str) -> Optional[float]:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return None
    try:
        return float(raw)
    except ValueError as err:
        raise ValueError(f"{name} must be a number, got {raw!r}") from err


class VaultConfig(BaseModel):
    """Validated vault configuration."""

    pbkdf2_iterations: int = Field(default=MIN_PBKDF2_ITERATIONS, ge=MIN_PBKDF2_ITERATIONS)
    clipboard_clear_seconds: float = Field(default=CLIPBOARD_CLEAR_SECONDS, gt=0)
    decrypt_workers: Optional[int] = Field(default=None, ge=1, le=64)
    session_max_age: Optional[int] = Field(default=None, ge=60)

    model_config = {"frozen": True}

    @field_validator("decrypt_workers")
    @classmethod
    def single_worker_is_serial(cls, v: Optional[int]) -> Optional[int]:
        """A pool of one worker is the same as decrypting serially."""
        if v == 1:
            return None
        return v

    @classmethod
    def from_env(cls) -> "VaultConfig":
        """Create VaultConfig by loading values from environment.

        Unset variables keep their defaults.

        Returns:
            Populated VaultConfig instance.
        """
        values = {
            "pbkdf2_iterations": _env_int("VAULT_PBKDF2_ITERATIONS"),
            "clipboard_clear_seconds": _env_float("VAULT_CLIPBOARD_CLEAR_SECONDS"),
            "decrypt_workers": _env_int("VAULT_DECRYPT_WORKERS"),
            "session_max_age": _env_int("VAULT_SESSION_MAX_AGE"),
        }
        config = cls(**{k: v for k, v in values.items() if v is not None})
        logger.debug(
            "Vault config loaded: iterations=%d clipboard_clear=%.1fs workers=%s",
            config.pbkdf2_iterations,
            config.clipboard_clear_seconds,
            config.decrypt_workers,
        )
        return config
