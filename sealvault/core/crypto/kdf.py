"""
Password Key Derivation
=======================

Turns a password into the AES-256 key of a password-mode envelope.

    key = PBKDF2-HMAC-SHA256(utf8(password), salt, 100_000 iterations, 32 bytes)

The salt is random per envelope and stored in its ``salt`` field. The
iteration count is not stored anywhere, so it is part of the format:
changing it makes every existing password envelope unreadable.
"""

from __future__ import annotations

import secrets
from typing import Final

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

PBKDF2_ITERATIONS: Final[int] = 100_000
SALT_SIZE: Final[int] = 16
DERIVED_KEY_SIZE: Final[int] = 32


def generate_salt() -> bytes:
    return secrets.token_bytes(SALT_SIZE)


def derive_key_pbkdf2(password: str, salt: bytes, length: int = DERIVED_KEY_SIZE) -> bytes:
    """
    Derive an envelope key; the same password and salt always give the same key.

    Raises:
        ValueError: If salt is not SALT_SIZE bytes
    """
    if len(salt) != SALT_SIZE:
        raise ValueError(f"Salt must be exactly {SALT_SIZE} bytes")

    return PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=length,
        salt=salt,
        iterations=PBKDF2_ITERATIONS,
    ).derive(password.encode("utf-8"))
