"""
SessionVault — lifecycle of the derived key for one user session.

States::

    LOGGED_OUT --login()--> LOGGED_IN_LOCKED --unlock()--> LOGGED_IN_UNLOCKED
                                  ^                               |
                                  +------------lock()-------------+
    any state --logout()--> LOGGED_OUT

Provides the public API of the vault client:
- ``login(salt_b64)`` — keep the account salt (never a key) in session storage
- ``restore(session_id)`` — pick the session up again after a reload
- ``unlock(password)`` — derive the key into a fresh ``VaultContext``
- ``encrypt`` / ``decrypt`` / ``decrypt_items`` / ``rekey`` — use the key
- ``copy_password`` — clipboard copy with a timed clear
- ``lock()`` / ``logout()`` / ``close()`` — drop the key

Security Note:
    Never log passwords, keys, plaintext or ciphertext. Only log session
    ids, identities, states and counts. There is no password check other
    than trying to decrypt: a wrong password derives a different key and
    every decrypt then fails, which is reported as ``InvalidPassword``.
"""
import logging
from collections.abc import Iterable
from enum import Enum
from typing import Any, Optional, Union

from ..clipboard import ClipboardGuard
from ..conf import SESSION_SALT
from ..data import SessionData
from ..exceptions import DecryptionFailed, InvalidPassword, SessionStateError, VaultLocked
from ..storage import MemoryStorage, SessionStorage
from .batch import ItemLike
from .config import VaultConfig
from .context import VaultContext
from .kdf import decode_salt, derive_key
from .models import BatchResult, EncryptedPayload, EncryptedVaultItem, VaultRecord

logger = logging.getLogger("zkvault")


class SessionState(str, Enum):
    LOGGED_OUT = "logged_out"
    LOCKED = "logged_in_locked"
    UNLOCKED = "logged_in_unlocked"


class SessionVault:
    """Owns the session salt and, while unlocked, the vault context.

    The derived key only ever exists inside the ``VaultContext`` created
    by ``unlock()``. Session storage holds the salt and identity, which
    is what lets a reloaded client ask for the password again instead of
    logging in from scratch.
    """

    def __init__(
        self,
        storage: Optional[SessionStorage] = None,
        config: Optional[VaultConfig] = None,
        clipboard: Optional[ClipboardGuard] = None,
    ):
        self._config = config or VaultConfig()
        self._storage = storage or MemoryStorage(max_age=self._config.session_max_age)
        self._clipboard = clipboard or ClipboardGuard(self._config.clipboard_clear_seconds)
        self._session: Optional[SessionData] = None
        self._context: Optional[VaultContext] = None

    def __enter__(self) -> "SessionVault":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<SessionVault state={self.state.value} session={self.session_id}>"

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        if self._session is None:
            return SessionState.LOGGED_OUT
        if self._context is not None and self._context.active:
            return SessionState.UNLOCKED
        return SessionState.LOCKED

    @property
    def session_id(self) -> Optional[str]:
        return self._session.session_id if self._session is not None else None

    @property
    def salt(self) -> Optional[str]:
        """The cached account salt (base64), None when logged out."""
        if self._session is None:
            return None
        return self._session.get(SESSION_SALT)

    @property
    def context(self) -> VaultContext:
        """The active vault context.

        Raises:
            VaultLocked: If the session is not unlocked.
        """
        if self.state is not SessionState.UNLOCKED:
            raise VaultLocked()
        return self._context

    @property
    def clipboard(self) -> ClipboardGuard:
        return self._clipboard

    def _discard_context(self) -> None:
        if self._context is not None:
            self._context.destroy()
            self._context = None

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def login(self, salt_b64: str, identity: Any = None) -> str:
        """Enter the locked state after the auth layer accepted the user.

        Args:
            salt_b64: Account encryption salt as returned by the login API.
            identity: Optional user identifier kept with the session.

        Returns:
            The new session id.

        Raises:
            InvalidInput: If the salt is not base64 of exactly 16 bytes.
        """
        decode_salt(salt_b64)
        self._discard_context()
        if self._session is not None:
            self._storage.delete_session(self._session.session_id)
        session = SessionData(identity=identity, new=True, max_age=self._config.session_max_age)
        session[SESSION_SALT] = salt_b64
        self._storage.save_session(session)
        self._session = session
        logger.info("Vault session %s opened (locked) for %s", session.session_id, session.identity)
        return session.session_id

    def restore(self, session_id: str) -> bool:
        """Resume a stored session after a reload.

        Returns:
            True if the session was found and is now locked.
        """
        session = self._storage.load_session(session_id)
        if session is None or SESSION_SALT not in session:
            logger.info("No stored vault session %s", session_id)
            return False
        self._discard_context()
        self._session = session
        logger.info("Vault session %s restored (locked)", session_id)
        return True

    def unlock(self, password: str) -> VaultContext:
        """Derive the key from the master password and unlock the vault.

        The password is not verified here; a wrong one surfaces as
        ``InvalidPassword`` on the first decrypt.

        Raises:
            SessionStateError: If there is no logged-in session.
            InvalidInput: If the password is empty.
        """
        if self._session is None:
            raise SessionStateError("Cannot unlock: not logged in")
        salt = decode_salt(self._session[SESSION_SALT])
        key = derive_key(password, salt, self._config.pbkdf2_iterations)
        context = VaultContext(key, max_workers=self._config.decrypt_workers)
        del key
        self._discard_context()
        self._context = context
        logger.info("Vault session %s unlocked", self._session.session_id)
        return context

    def lock(self) -> None:
        """Drop the derived key; the session stays logged in."""
        self._discard_context()
        self._clipboard.flush()
        if self._session is not None:
            logger.info("Vault session %s locked", self._session.session_id)

    def logout(self) -> None:
        """Drop the key, the salt and the stored session."""
        self._discard_context()
        self._clipboard.flush()
        if self._session is not None:
            session_id = self._session.session_id
            self._storage.delete_session(session_id)
            self._session.invalidate()
            self._session = None
            logger.info("Vault session %s logged out", session_id)

    def close(self) -> None:
        """Process/tab teardown: forget key and salt, keep stored session."""
        self._discard_context()
        self._clipboard.flush()
        self._session = None

    # ------------------------------------------------------------------
    # Vault operations (unlocked only)
    # ------------------------------------------------------------------

    def encrypt(self, record: VaultRecord) -> EncryptedPayload:
        return self.context.seal(record)

    def decrypt(self, item: ItemLike) -> VaultRecord:
        """Decrypt one item.

        Raises:
            InvalidPassword: If the derived key cannot authenticate the item.
            MalformedRecord: If the content is not a vault record.
        """
        try:
            return self.context.open(item)
        except DecryptionFailed as err:
            raise InvalidPassword() from err

    def decrypt_items(self, items: Iterable[ItemLike]) -> BatchResult:
        """Decrypt a vault listing, isolating per-item failures."""
        result = self.context.open_items(items)
        if result.all_failed:
            logger.warning(
                "Vault session %s: all %d item(s) failed to decrypt, "
                "the master password is probably wrong",
                self.session_id, len(result.failures),
            )
        return result

    def rekey(
        self,
        items: Iterable[ItemLike],
        new_password: str,
    ) -> tuple[list[EncryptedVaultItem], dict]:
        """Re-encrypt items under a key derived from ``new_password``.

        The account salt is kept; the session stays unlocked with the
        new key once the items are re-encrypted.
        """
        context = self.context
        salt = decode_salt(self._session[SESSION_SALT])
        new_key = derive_key(new_password, salt, self._config.pbkdf2_iterations)
        rotated, stats = context.rekey_items(items, new_key)
        self._discard_context()
        self._context = VaultContext(new_key, max_workers=self._config.decrypt_workers)
        del new_key
        return rotated, stats

    def copy_password(self, secret: Union[VaultRecord, str]) -> bool:
        """Copy a password to the clipboard; it is cleared after the timeout."""
        text = secret.password if isinstance(secret, VaultRecord) else secret
        return self._clipboard.copy(text)
