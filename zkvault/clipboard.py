"""
Clipboard hygiene for copied secrets.

``ClipboardGuard.copy()`` puts a secret on the system clipboard and
schedules a single-shot timer that overwrites it with an empty string.
Copying again before the timer fires cancels the pending timer and
starts a new countdown. Each timer carries a generation token; a timer
that was superseded but still fires (cancel lost the race) sees a stale
token and does nothing, so there is only ever one effective clear.

Clearing is best-effort: clipboard access can be revoked by the OS at
any time, so failures are logged and never raised.
"""
import logging
import threading
from typing import Any, Callable, Optional

import pyperclip

from .conf import CLIPBOARD_CLEAR_SECONDS

logger = logging.getLogger("zkvault")


class ClipboardGuard:
    """Copy text to the clipboard and clear it after ``clear_after`` seconds."""

    def __init__(
        self,
        clear_after: float = CLIPBOARD_CLEAR_SECONDS,
        copy: Optional[Callable[[str], None]] = None,
        timer_factory: Callable[..., Any] = threading.Timer,
    ):
        self.clear_after = clear_after
        self._copy = copy or pyperclip.copy
        self._timer_factory = timer_factory
        self._timer = None
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        """True while a clear is scheduled."""
        return self._timer is not None

    def copy(self, text: str) -> bool:
        """Copy ``text`` and (re)start the clear countdown.

        A failed copy leaves any pending clear in place, since the
        previous secret may still be on the clipboard.

        Returns:
            True if the text reached the clipboard, False otherwise.
        """
        with self._lock:
            try:
                self._copy(text)
            except Exception as err:
                logger.error("Clipboard copy failed: %s", type(err).__name__)
                return False
            self._cancel_locked()
            timer = self._timer_factory(
                self.clear_after, self._expire, args=(self._generation,)
            )
            timer.daemon = True
            self._timer = timer
            timer.start()
        logger.debug("Secret copied to clipboard, clearing in %.1fs", self.clear_after)
        return True

    def _expire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                # superseded by a newer copy or cancelled
                return
            self._timer = None
            self._clear_locked()

    def _cancel_locked(self) -> None:
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _clear_locked(self) -> None:
        try:
            self._copy("")
        except Exception as err:
            logger.warning("Failed to clear clipboard: %s", type(err).__name__)
        else:
            logger.debug("Clipboard cleared")

    def cancel(self) -> None:
        """Cancel the pending clear without touching the clipboard."""
        with self._lock:
            self._cancel_locked()

    def flush(self) -> None:
        """Cancel the pending clear and clear the clipboard now."""
        with self._lock:
            had_timer = self._timer is not None
            self._cancel_locked()
            if had_timer:
                self._clear_locked()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the pending clear has run.

        Returns:
            True if nothing is pending anymore.
        """
        timer = self._timer
        if timer is not None:
            timer.join(timeout)
        return self._timer is None
