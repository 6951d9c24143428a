"""
Tests for the secure password generator.
"""
import string
from collections import Counter
from unittest import mock

import pytest

from zkvault import generator
from zkvault.exceptions import (
    InvalidInput,
    LengthTooShort,
    NoCharacterClassSelected,
    RandomSourceUnavailable,
)
from zkvault.generator import (
    AMBIGUOUS,
    SYMBOLS,
    PasswordConfig,
    character_classes,
    generate_password,
)


class TestConstraints:
    """Tests for selected character classes."""

    @pytest.mark.parametrize("attempt", range(50))
    def test_upper_and_digits_only(self, attempt):
        """Test 12 chars with at least one uppercase and one digit, nothing else."""
        password = generate_password(PasswordConfig.model_validate({
            "length": 12,
            "useUppercase": True,
            "useDigits": True,
            "useLowercase": False,
            "useSymbols": False,
        }))
        assert len(password) == 12
        assert any(c in string.ascii_uppercase for c in password)
        assert any(c in string.digits for c in password)
        assert not any(c in string.ascii_lowercase for c in password)
        assert not any(c in SYMBOLS for c in password)

    @pytest.mark.parametrize("attempt", range(50))
    def test_every_class_at_minimum_length(self, attempt):
        """Test length 4 with four classes contains each class once."""
        password = generate_password(length=4)
        assert any(c in string.ascii_uppercase for c in password)
        assert any(c in string.ascii_lowercase for c in password)
        assert any(c in string.digits for c in password)
        assert any(c in SYMBOLS for c in password)

    @pytest.mark.parametrize("length", [1, 8, 16, 64, 128])
    def test_length(self, length):
        """Test the requested length is honored."""
        assert len(generate_password(length=length, use_symbols=False,
                                     use_digits=False, use_lowercase=False)) == length

    def test_symbols_only(self):
        """Test a symbols-only password."""
        password = generate_password(length=32, use_uppercase=False,
                                     use_lowercase=False, use_digits=False)
        assert set(password) <= set(SYMBOLS)

    def test_defaults(self):
        """Test default options give a 16 character password."""
        assert len(generate_password()) == 16

    def test_config_with_overrides(self):
        """Test keyword options override a config."""
        config = PasswordConfig(length=10)
        assert len(generate_password(config, length=20)) == 20

    def test_config_with_camelcase_overrides(self):
        """Test wire names override a config the same way field names do."""
        password = generate_password(PasswordConfig(), length=64, useSymbols=False)
        assert len(password) == 64
        assert not set(password) & set(SYMBOLS)


class TestAmbiguousExclusion:
    """Tests for excluding look-alike characters."""

    @pytest.mark.parametrize("attempt", range(20))
    def test_no_ambiguous_characters(self, attempt):
        """Test no l 1 I 0 O o in the output."""
        password = generate_password(length=128, exclude_ambiguous=True)
        assert not set(password) & AMBIGUOUS

    def test_classes_without_ambiguous(self):
        """Test exclusion removes look-alikes from letters and digits only."""
        classes = character_classes(PasswordConfig(exclude_ambiguous=True))
        upper, lower, digits, symbols = classes
        assert "I" not in upper and "O" not in upper
        assert "l" not in lower and "o" not in lower
        assert "0" not in digits and "1" not in digits
        assert symbols == SYMBOLS
        assert len(upper) == 24 and len(lower) == 24 and len(digits) == 8

    def test_classes_with_ambiguous(self):
        """Test full classes when exclusion is off."""
        classes = character_classes(PasswordConfig(exclude_ambiguous=False))
        assert [len(c) for c in classes] == [26, 26, 10, len(SYMBOLS)]


class TestFailures:
    """Tests for generator errors."""

    def test_no_class_selected(self):
        """Test all classes disabled."""
        with pytest.raises(NoCharacterClassSelected):
            generate_password(PasswordConfig.model_validate({
                "length": 8,
                "useUppercase": False,
                "useLowercase": False,
                "useDigits": False,
                "useSymbols": False,
            }))

    def test_length_too_short(self):
        """Test length smaller than the number of classes."""
        with pytest.raises(LengthTooShort):
            generate_password(length=3)

    def test_length_must_be_positive(self):
        """Test length 0 is invalid."""
        with pytest.raises(InvalidInput):
            generate_password(length=0)

    def test_overrides_are_validated(self):
        """Test options applied to a config get the same checks."""
        with pytest.raises(InvalidInput):
            generate_password(PasswordConfig(), length=-5, useSymbols=False)
        with pytest.raises(InvalidInput):
            generate_password(PasswordConfig(), length="many")

    def test_unknown_option(self):
        """Test a misspelled option is refused."""
        with pytest.raises(InvalidInput):
            generate_password(use_symbol=False)

    def test_random_source_unavailable(self):
        """Test missing OS randomness aborts instead of falling back."""
        with mock.patch("secrets.randbelow", side_effect=NotImplementedError):
            with pytest.raises(RandomSourceUnavailable):
                generate_password(length=12)


class TestShuffle:
    """Tests for placement of guaranteed characters."""

    def test_guaranteed_characters_are_not_always_first(self):
        """Test the first position is not always uppercase."""
        first = Counter()
        for _ in range(200):
            password = generate_password(length=4, use_symbols=False, use_lowercase=False)
            c = password[0]
            first["upper" if c.isupper() else "digit"] += 1
        assert first["upper"] > 0 and first["digit"] > 0

    def test_draws_use_unbiased_sampler(self):
        """Test every draw goes through random_below with the right bound."""
        calls = []

        def fake_below(upper):
            calls.append(upper)
            return 0

        with mock.patch.object(generator, "random_below", side_effect=fake_below):
            password = generate_password(length=5, use_symbols=False,
                                         use_lowercase=False, exclude_ambiguous=False)
        # 2 guaranteed, 3 fill from 36 chars, 4 shuffle swaps
        assert calls == [26, 10, 36, 36, 36, 5, 4, 3, 2]
        assert len(password) == 5
