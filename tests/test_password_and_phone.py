"""Tests for password hashing and phone normalization."""

from spamshield.core.password import hash_password, verify_password
from spamshield.core.phone import normalize_phone


def test_hash_is_not_plaintext_and_verifies():
    """Stored hash differs from the plaintext; the plaintext verifies."""
    hashed = hash_password("hunter22")

    assert hashed != "hunter22"
    assert verify_password("hunter22", hashed)
    assert not verify_password("hunter23", hashed)


def test_hash_is_salted():
    """Same password hashes differently each time."""
    assert hash_password("same-password") != hash_password("same-password")


def test_verify_password_handles_missing_or_unknown_hash():
    assert not verify_password("anything", None)
    assert not verify_password("anything", "")
    assert not verify_password("anything", "not-a-bcrypt-hash")


def test_normalize_phone_strips_formatting():
    assert normalize_phone("(281) 788-2316") == "2817882316"
    assert normalize_phone("+1 281 788 2316") == "+12817882316"
    assert normalize_phone("281.788.2316") == "2817882316"


def test_normalize_phone_keeps_short_numbers_as_entered():
    """No country code is assumed."""
    assert normalize_phone("+1000") == "+1000"
    assert normalize_phone(" 12345 ") == "12345"


def test_normalize_phone_empty_values():
    assert normalize_phone(None) is None
    assert normalize_phone("") is None
    assert normalize_phone("  - ") is None
