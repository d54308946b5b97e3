"""Tests for PBKDF2 password key derivation."""

import hashlib

import pytest

from sealvault.core.crypto.kdf import (
    DERIVED_KEY_SIZE,
    PBKDF2_ITERATIONS,
    SALT_SIZE,
    derive_key_pbkdf2,
    generate_salt,
)


def test_parameters():
    assert PBKDF2_ITERATIONS == 100_000
    assert SALT_SIZE == 16
    assert DERIVED_KEY_SIZE == 32


def test_salt_is_random():
    salt = generate_salt()
    assert len(salt) == SALT_SIZE
    assert salt != generate_salt()


def test_matches_reference_pbkdf2():
    salt = bytes(range(16))
    expected = hashlib.pbkdf2_hmac("sha256", b"correct horse", salt, 100_000, 32)

    assert derive_key_pbkdf2("correct horse", salt) == expected


def test_deterministic_and_salt_sensitive():
    salt = generate_salt()
    key = derive_key_pbkdf2("password123", salt)

    assert len(key) == DERIVED_KEY_SIZE
    assert key == derive_key_pbkdf2("password123", salt)
    assert key != derive_key_pbkdf2("password124", salt)
    assert key != derive_key_pbkdf2("password123", bytes(16))


def test_unicode_password_is_utf8_encoded():
    salt = bytes(16)
    expected = hashlib.pbkdf2_hmac("sha256", "pässwörd".encode("utf-8"), salt, 100_000, 32)

    assert derive_key_pbkdf2("pässwörd", salt) == expected


def test_rejects_wrong_salt_size():
    with pytest.raises(ValueError):
        derive_key_pbkdf2("password123", bytes(8))
