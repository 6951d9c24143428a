"""
Secure randomness for salts, IVs and password generation.

All draws come from the operating system CSPRNG through ``secrets``.
If the OS cannot provide randomness we raise ``RandomSourceUnavailable``;
there is no fallback to ``random``.
"""
import secrets

from ..exceptions import InvalidInput, RandomSourceUnavailable


def random_bytes(size: int) -> bytes:
    """Return ``size`` cryptographically secure random bytes.

    Raises:
        RandomSourceUnavailable: If the OS random source is missing.
    """
    if size < 1:
        raise InvalidInput(f"size must be positive, got {size}")
    try:
        return secrets.token_bytes(size)
    except (NotImplementedError, OSError) as err:
        raise RandomSourceUnavailable() from err


def random_below(upper: int) -> int:
    """Return a uniformly distributed integer in ``[0, upper)``.

    ``secrets.randbelow`` draws just enough random bits and rejects
    out-of-range values, so there is no modulo bias for any ``upper``.
    """
    if upper < 1:
        raise InvalidInput(f"upper bound must be positive, got {upper}")
    try:
        return secrets.randbelow(upper)
    except (NotImplementedError, OSError) as err:
        raise RandomSourceUnavailable() from err
