"""Tests for phone normalization."""

import pytest

from scratch_alerts.core.exceptions import PhoneValidationError
from scratch_alerts.services.phone import normalize_phone


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("11987654321", "5511987654321"),
        ("(11) 98765-4321", "5511987654321"),
        ("+55 11 98765-4321", "5511987654321"),
        ("1133334444", "551133334444"),
        ("5511987654321@s.whatsapp.net", "5511987654321"),
    ],
)
def test_normalize_phone(raw: str, expected: str) -> None:
    """Non-digits are stripped and the country code is added once."""
    assert normalize_phone(raw) == expected


@pytest.mark.parametrize("raw", ["5511987654321", "551133334444", "11987654321"])
def test_normalize_phone_is_idempotent(raw: str) -> None:
    """Normalizing an already normalized number changes nothing."""
    once = normalize_phone(raw)
    assert normalize_phone(once) == once


@pytest.mark.parametrize("raw", ["", "123", "987654321", "55119876543210", "abc"])
def test_normalize_phone_rejects_wrong_length(raw: str) -> None:
    """Strict mode only accepts 10 or 11 national digits."""
    with pytest.raises(PhoneValidationError):
        normalize_phone(raw)


def test_lenient_mode_only_prefixes() -> None:
    """Lenient mode never validates the length."""
    assert normalize_phone("123", strict=False) == "55123"
    assert normalize_phone("55123", strict=False) == "55123"
