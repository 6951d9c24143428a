import uuid
from typing import Optional, Any
from datetime import datetime, timezone
from collections.abc import Iterator, Mapping, MutableMapping
import jsonpickle
from .conf import (
    SESSION_KEY,
    SESSION_ID,
)


class SessionData(MutableMapping[str, str]):
    """Session dict-like object.

    Holds what a vault session may keep across a reload: the session id,
    the identity, the creation time and text values such as the base64
    encryption salt. Values must be ``str``; raw bytes (a derived key,
    a decoded salt) are refused so they can never reach storage.
    """

    def __init__(
        self,
        data: Optional[Mapping[str, Any]] = None,
        new: bool = False,
        id: Optional[str] = None,
        identity: Optional[Any] = None,
        max_age: Optional[int] = None
    ) -> None:
        self._data: dict[str, str] = {}
        # If new, mark as changed so it gets saved
        self._changed = bool(new)
        self._id_ = (data.get(SESSION_ID, None) if data else id) or uuid.uuid4().hex
        self._identity = (
            data.get(SESSION_KEY, None) if data else identity
        ) or self._id_
        self._new = new if data != {} else True
        self._max_age = max_age or None
        created = data.get('created', None) if data else None
        now = int(datetime.now(timezone.utc).timestamp())
        age = now - created if created else 0
        self._expired = max_age is not None and age > max_age
        if self._expired:
            data = None
        self._created = now if self._new or created is None else created
        if data is not None:
            for k, v in data.items():
                if k not in (SESSION_ID, SESSION_KEY, 'created'):
                    self._data[k] = v

    def __repr__(self) -> str:
        # values are omitted on purpose
        return (
            f'<Vault-Session [new:{self.new}, created:{self.created}] '
            f'data={list(self._data.keys())}>'
        )

    # --- Properties ---

    @property
    def new(self) -> bool:
        return self._new

    @property
    def session_id(self) -> str:
        return self._id_

    @property
    def identity(self) -> Optional[Any]:
        return self._identity

    @property
    def created(self) -> int:
        return self._created

    @property
    def expired(self) -> bool:
        """True when stored data was dropped because it exceeded max_age."""
        return self._expired

    @property
    def max_age(self) -> Optional[int]:
        return self._max_age

    @property
    def is_changed(self) -> bool:
        return self._changed

    @is_changed.setter
    def is_changed(self, value: bool) -> None:
        self._changed = value

    def session_data(self) -> dict:
        """Return the persistable snapshot, including session metadata."""
        return {
            **self._data,
            SESSION_ID: self._id_,
            SESSION_KEY: self._identity,
            'created': self._created,
        }

    def invalidate(self) -> None:
        """Clear all session data."""
        self._changed = True
        self._data = {}

    # --- Magic Methods ---

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(
                f"Session values must be text, got {type(value).__name__} for {key!r}"
            )
        self._data[key] = value
        self._changed = True

    def __delitem__(self, key: str) -> None:
        del self._data[key]
        self._changed = True

    # --- Encoding ---

    def encode(self) -> str:
        """encode

            Encode the session using jsonpickle.

        Raises:
            RuntimeError: Error converting data to json.

        Returns:
            str: json version of the session data
        """
        try:
            return jsonpickle.encode(self.session_data(), unpicklable=False, keys=True)
        except Exception as err:
            raise RuntimeError(err) from err

    @classmethod
    def decode(cls, payload: str, max_age: Optional[int] = None) -> "SessionData":
        """decode.

            Rebuild a session from a payload produced by :meth:`encode`.

        Raises:
            RuntimeError: Error converting data from json.
        """
        try:
            data = jsonpickle.decode(payload, keys=True)
        except Exception as err:
            raise RuntimeError(err) from err
        if not isinstance(data, dict):
            raise RuntimeError("Session payload is not a mapping")
        return cls(data=data, max_age=max_age)
