"""
AES-256-GCM Content Cipher
==========================

Symmetric layer of the envelope engine.

Envelopes store the GCM tag in its own ``tag`` field, while the
``cryptography`` AEAD API returns ``ciphertext || tag`` as one value.
This module is the only place that splits and rejoins the two.

Parameters:
    key     32 bytes, fresh per file (public-key mode) or PBKDF2-derived
    nonce   12 bytes from the OS CSPRNG, fresh per seal
    tag     16 bytes
    AAD     none: the envelope's filename and sha256 fields are not bound

WARNING:
    A (key, nonce) pair must never seal two different plaintexts.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import Final, Optional, Tuple

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from sealvault.core.crypto.errors import AuthenticationFailure

AES_KEY_SIZE: Final[int] = 32
AES_NONCE_SIZE: Final[int] = 12
AES_TAG_SIZE: Final[int] = 16


@dataclass(frozen=True, slots=True)
class AesGcmResult:
    """Output of AesGcmCipher.encrypt(); the caller owns (and must protect) key."""

    ciphertext: bytes
    tag: bytes
    nonce: bytes
    key: bytes

    def __repr__(self) -> str:
        return f"AesGcmResult(ciphertext_len={len(self.ciphertext)})"


def _require_size(name: str, value: bytes | bytearray, size: int) -> None:
    if len(value) != size:
        raise ValueError(f"{name} must be exactly {size} bytes")


class AesGcmCipher:
    """
    AES-256-GCM with a detached tag.

    Usage:
        cipher = AesGcmCipher()
        key, nonce = cipher.generate_key(), cipher.generate_nonce()

        ciphertext, tag = cipher.seal(data, key, nonce)
        data = cipher.open(ciphertext, tag, key, nonce)

    Security Notes:
        - open() returns nothing unless the tag verifies
        - A failed open() raises AuthenticationFailure with a fixed
          message, whatever the cause (wrong key, edited ciphertext,
          edited tag or nonce)
    """

    __slots__ = ()

    @staticmethod
    def generate_key() -> bytes:
        return secrets.token_bytes(AES_KEY_SIZE)

    @staticmethod
    def generate_nonce() -> bytes:
        """Random 96-bit nonce; collisions are negligible well past 2^32 seals per key."""
        return secrets.token_bytes(AES_NONCE_SIZE)

    def seal(
        self,
        plaintext: bytes,
        key: bytes | bytearray,
        nonce: bytes,
    ) -> Tuple[bytes, bytes]:
        """
        Encrypt plaintext.

        Returns:
            (ciphertext, tag); the ciphertext is as long as the plaintext

        Raises:
            ValueError: If key or nonce has the wrong size
        """
        _require_size("Key", key, AES_KEY_SIZE)
        _require_size("Nonce", nonce, AES_NONCE_SIZE)

        combined = AESGCM(key).encrypt(nonce, plaintext, None)
        return combined[:-AES_TAG_SIZE], combined[-AES_TAG_SIZE:]

    def open(
        self,
        ciphertext: bytes,
        tag: bytes,
        key: bytes | bytearray,
        nonce: bytes,
    ) -> bytes:
        """
        Verify tag and decrypt.

        Raises:
            ValueError: If key, nonce or tag has the wrong size
            AuthenticationFailure: If verification fails
        """
        _require_size("Key", key, AES_KEY_SIZE)
        _require_size("Nonce", nonce, AES_NONCE_SIZE)
        _require_size("Tag", tag, AES_TAG_SIZE)

        try:
            return AESGCM(key).decrypt(nonce, ciphertext + tag, None)
        except InvalidTag:
            raise AuthenticationFailure() from None

    def encrypt(self, plaintext: bytes, key: Optional[bytes] = None) -> AesGcmResult:
        """Seal under a fresh nonce and, unless key is given, a fresh key."""
        key = key if key is not None else self.generate_key()
        nonce = self.generate_nonce()
        ciphertext, tag = self.seal(plaintext, key, nonce)
        return AesGcmResult(ciphertext=ciphertext, tag=tag, nonce=nonce, key=key)
