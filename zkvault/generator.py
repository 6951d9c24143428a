"""
Secure password generation.

Passwords are built from the enabled character classes: one character
is drawn from every class so each selected constraint holds even at
short lengths, the remaining positions are drawn from the union of the
classes, and the result is shuffled with Fisher-Yates. Every draw is an
unbiased index from the OS CSPRNG (see ``zkvault.vault.entropy``).
"""
import string
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import InvalidInput, LengthTooShort, NoCharacterClassSelected
from .vault.entropy import random_below

UPPERCASE = string.ascii_uppercase
LOWERCASE = string.ascii_lowercase
DIGITS = string.digits
SYMBOLS = '!@#$%^&*()-_=+[]{};:,.<>/?'

# Characters that look alike; symbols are never filtered
AMBIGUOUS = frozenset('l1I0Oo')


class PasswordConfig(BaseModel):
    """Generator options. Accepts snake_case or the camelCase wire names."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    length: int = Field(default=16, ge=1)
    use_uppercase: bool = Field(default=True, alias='useUppercase')
    use_lowercase: bool = Field(default=True, alias='useLowercase')
    use_digits: bool = Field(default=True, alias='useDigits')
    use_symbols: bool = Field(default=True, alias='useSymbols')
    exclude_ambiguous: bool = Field(default=True, alias='excludeAmbiguous')


def _strip_ambiguous(chars: str) -> str:
    return ''.join(c for c in chars if c not in AMBIGUOUS)


def character_classes(config: PasswordConfig) -> list[str]:
    """Return the non-empty character classes enabled by ``config``."""
    classes = []
    for enabled, chars in (
        (config.use_uppercase, UPPERCASE),
        (config.use_lowercase, LOWERCASE),
        (config.use_digits, DIGITS),
    ):
        if enabled:
            classes.append(_strip_ambiguous(chars) if config.exclude_ambiguous else chars)
    if config.use_symbols:
        classes.append(SYMBOLS)
    return [chars for chars in classes if chars]


def _with_options(config: PasswordConfig, options: dict) -> PasswordConfig:
    """Return ``config`` with ``options`` applied and validated.

    Options may use field names or their camelCase aliases.
    """
    names = {
        (field.alias or name): name for name, field in PasswordConfig.model_fields.items()
    }
    names.update({name: name for name in PasswordConfig.model_fields})
    unknown = sorted(set(options) - set(names))
    if unknown:
        raise InvalidInput(f"Unknown password options: {', '.join(unknown)}")
    values = config.model_dump()
    values.update({names[key]: value for key, value in options.items()})
    try:
        return PasswordConfig.model_validate(values)
    except ValueError as err:
        raise InvalidInput(str(err)) from err


def _choice(chars: str) -> str:
    return chars[random_below(len(chars))]


def generate_password(config: Optional[PasswordConfig] = None, **options) -> str:
    """Generate a random password.

    Args:
        config: Generator options. Keyword ``options`` build one when omitted.

    Returns:
        The generated password.

    Raises:
        InvalidInput: If an option is unknown or fails validation.
        NoCharacterClassSelected: If no usable character class is enabled.
        LengthTooShort: If ``length`` cannot hold one character per class.
        RandomSourceUnavailable: If secure randomness is not available.
    """
    if config is None:
        config = PasswordConfig()
    if options:
        config = _with_options(config, options)

    classes = character_classes(config)
    if not classes:
        raise NoCharacterClassSelected()
    if config.length < len(classes):
        raise LengthTooShort(
            f"Password length {config.length} cannot include "
            f"{len(classes)} character types"
        )

    charset = ''.join(classes)
    password = [_choice(chars) for chars in classes]
    password.extend(_choice(charset) for _ in range(config.length - len(password)))

    for i in range(len(password) - 1, 0, -1):
        j = random_below(i + 1)
        password[i], password[j] = password[j], password[i]

    return ''.join(password)
