"""
Envelope Formats
================

The two self-contained JSON envelopes produced by the engine.

Public-key envelope (``.enc.json``):
    {
      "filename":   original filename,
      "nonce":      base64, 12 bytes,
      "tag":        base64, 16 bytes,
      "ciphertext": base64,
      "encAesKey":  base64, RSA-OAEP wrapped 32-byte key,
      "sha256":     64-char lowercase hex of the plaintext
    }

Password envelope (``.pwd.json``):
    {
      "filename", "salt" (base64, 16 bytes), "nonce", "tag",
      "ciphertext", "sha256"
    }

Binary fields are standard padded base64. Decoding is strict: every
required field must be present, correctly typed and correctly sized,
and an envelope of the other mode is reported as WrongEnvelopeShape.
"""

from __future__ import annotations

import binascii
import json
import re
from base64 import b64decode, b64encode
from dataclasses import dataclass
from typing import Any, Final, Mapping, Union

from sealvault.core.crypto.aes_gcm import AES_NONCE_SIZE, AES_TAG_SIZE
from sealvault.core.crypto.errors import MalformedEnvelope, WrongEnvelopeShape
from sealvault.core.crypto.kdf import SALT_SIZE

RSA_SHAPE: Final[str] = "rsa"
PASSWORD_SHAPE: Final[str] = "password"

RSA_FIELDS: Final[tuple[str, ...]] = (
    "filename", "nonce", "tag", "ciphertext", "encAesKey", "sha256",
)
PASSWORD_FIELDS: Final[tuple[str, ...]] = (
    "filename", "salt", "nonce", "tag", "ciphertext", "sha256",
)

_SHA256_HEX: Final[re.Pattern[str]] = re.compile(r"[0-9a-fA-F]{64}")


def _b64(data: bytes) -> str:
    return b64encode(data).decode("ascii")


def _require_str(obj: Mapping[str, Any], name: str) -> str:
    if name not in obj:
        raise MalformedEnvelope(f"Missing envelope field: {name}")
    value = obj[name]
    if not isinstance(value, str):
        raise MalformedEnvelope(f"Envelope field {name} must be a string")
    return value


def _require_b64(obj: Mapping[str, Any], name: str, size: int | None = None) -> bytes:
    text = _require_str(obj, name)
    try:
        value = b64decode(text, validate=True)
    except (binascii.Error, ValueError):
        raise MalformedEnvelope(f"Envelope field {name} is not valid base64") from None
    if size is not None and len(value) != size:
        raise MalformedEnvelope(f"Envelope field {name} must decode to {size} bytes")
    return value


def _require_sha256(obj: Mapping[str, Any]) -> str:
    value = _require_str(obj, "sha256")
    if not _SHA256_HEX.fullmatch(value):
        raise MalformedEnvelope("Envelope field sha256 must be 64 hex characters")
    return value.lower()


@dataclass(frozen=True, slots=True)
class RsaEnvelope:
    """Hybrid public-key envelope: AES-GCM content, RSA-OAEP wrapped key."""

    filename: str
    nonce: bytes
    tag: bytes
    ciphertext: bytes
    enc_aes_key: bytes
    sha256: str

    shape = RSA_SHAPE

    def to_dict(self) -> dict[str, str]:
        """Field-named, text-only form used on the wire."""
        return {
            "filename": self.filename,
            "nonce": _b64(self.nonce),
            "tag": _b64(self.tag),
            "ciphertext": _b64(self.ciphertext),
            "encAesKey": _b64(self.enc_aes_key),
            "sha256": self.sha256,
        }

    def to_json(self) -> str:
        """Serialize to indented JSON."""
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    @classmethod
    def from_dict(cls, obj: Mapping[str, Any]) -> "RsaEnvelope":
        """
        Build from a decoded JSON object.

        Raises:
            WrongEnvelopeShape: If obj is a password envelope
            MalformedEnvelope: If a field is missing or invalid
        """
        found = detect_shape(obj)
        if found != RSA_SHAPE:
            raise WrongEnvelopeShape(RSA_SHAPE, found)

        return cls(
            filename=_require_str(obj, "filename"),
            nonce=_require_b64(obj, "nonce", AES_NONCE_SIZE),
            tag=_require_b64(obj, "tag", AES_TAG_SIZE),
            ciphertext=_require_b64(obj, "ciphertext"),
            enc_aes_key=_require_b64(obj, "encAesKey"),
            sha256=_require_sha256(obj),
        )

    def __repr__(self) -> str:
        """Safe representation."""
        return f"RsaEnvelope(filename={self.filename!r}, ct_len={len(self.ciphertext)})"


@dataclass(frozen=True, slots=True)
class PasswordEnvelope:
    """Password envelope: AES-GCM content under a PBKDF2-derived key."""

    filename: str
    salt: bytes
    nonce: bytes
    tag: bytes
    ciphertext: bytes
    sha256: str

    shape = PASSWORD_SHAPE

    def to_dict(self) -> dict[str, str]:
        """Field-named, text-only form used on the wire."""
        return {
            "filename": self.filename,
            "salt": _b64(self.salt),
            "nonce": _b64(self.nonce),
            "tag": _b64(self.tag),
            "ciphertext": _b64(self.ciphertext),
            "sha256": self.sha256,
        }

    def to_json(self) -> str:
        """Serialize to indented JSON."""
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    @classmethod
    def from_dict(cls, obj: Mapping[str, Any]) -> "PasswordEnvelope":
        """
        Build from a decoded JSON object.

        Raises:
            WrongEnvelopeShape: If obj is a public-key envelope
            MalformedEnvelope: If a field is missing or invalid
        """
        found = detect_shape(obj)
        if found != PASSWORD_SHAPE:
            raise WrongEnvelopeShape(PASSWORD_SHAPE, found)

        return cls(
            filename=_require_str(obj, "filename"),
            salt=_require_b64(obj, "salt", SALT_SIZE),
            nonce=_require_b64(obj, "nonce", AES_NONCE_SIZE),
            tag=_require_b64(obj, "tag", AES_TAG_SIZE),
            ciphertext=_require_b64(obj, "ciphertext"),
            sha256=_require_sha256(obj),
        )

    def __repr__(self) -> str:
        """Safe representation."""
        return f"PasswordEnvelope(filename={self.filename!r}, ct_len={len(self.ciphertext)})"


Envelope = Union[RsaEnvelope, PasswordEnvelope]


def detect_shape(obj: Mapping[str, Any]) -> str:
    """
    Classify a decoded envelope object by its distinguishing field.

    ``encAesKey`` marks a public-key envelope, ``salt`` a password
    envelope. Having both or neither is malformed.
    """
    has_key = "encAesKey" in obj
    has_salt = "salt" in obj

    if has_key and not has_salt:
        return RSA_SHAPE
    if has_salt and not has_key:
        return PASSWORD_SHAPE
    if has_key and has_salt:
        raise MalformedEnvelope("Envelope has both encAesKey and salt fields")
    raise MalformedEnvelope("Envelope has neither encAesKey nor salt field")


class EnvelopeCodec:
    """
    Text codec for both envelope shapes.

    Usage:
        text = EnvelopeCodec.encode(envelope)
        envelope = EnvelopeCodec.decode_rsa(text)       # strict shape
        envelope = EnvelopeCodec.decode(text)           # either shape
    """

    __slots__ = ()

    @staticmethod
    def encode(envelope: Envelope) -> str:
        """Serialize an envelope to JSON text."""
        return envelope.to_json()

    @staticmethod
    def _load(text: str | bytes) -> Mapping[str, Any]:
        try:
            obj = json.loads(text)
        except (ValueError, RecursionError):
            # JSONDecodeError, UnicodeDecodeError, or nesting too deep to parse
            raise MalformedEnvelope("Envelope is not valid JSON") from None
        if not isinstance(obj, dict):
            raise MalformedEnvelope("Envelope must be a JSON object")
        return obj

    @classmethod
    def decode_rsa(cls, text: str | bytes) -> RsaEnvelope:
        """Parse a public-key envelope, rejecting password envelopes."""
        return RsaEnvelope.from_dict(cls._load(text))

    @classmethod
    def decode_password(cls, text: str | bytes) -> PasswordEnvelope:
        """Parse a password envelope, rejecting public-key envelopes."""
        return PasswordEnvelope.from_dict(cls._load(text))

    @classmethod
    def decode(cls, text: str | bytes) -> Envelope:
        """Parse either envelope shape."""
        obj = cls._load(text)
        if detect_shape(obj) == RSA_SHAPE:
            return RsaEnvelope.from_dict(obj)
        return PasswordEnvelope.from_dict(obj)
