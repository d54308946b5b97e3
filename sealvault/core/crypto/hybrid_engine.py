"""
Envelope Encryption Engine
==========================

Composes the primitives into the two end-to-end protection modes.

Public-Key Mode:
    plaintext
        ↓ SHA-256 fingerprint
        ↓ AES-256-GCM (random key, random nonce)
    ciphertext + tag
        ↓ RSA-OAEP wrap (content key)
    RsaEnvelope → JSON text

Password Mode:
    plaintext
        ↓ SHA-256 fingerprint
        ↓ PBKDF2-HMAC-SHA256 (password, random salt) → key
        ↓ AES-256-GCM (derived key, random nonce)
    ciphertext + tag
    PasswordEnvelope → JSON text

Opening reverses the pipeline: decode, recover the key, verify-and-
decrypt, then re-check the fingerprint.

Failure Policy:
    - Any failure up to and including AES-GCM verification aborts the
      call with a typed error; nothing partial is returned
    - A fingerprint mismatch after successful decryption is NOT an
      error. The plaintext is returned with fingerprint_valid=False,
      since the AEAD tag already vouches for authenticity and the
      fingerprint only flags an independently edited sha256 field

Concurrency:
    The engine holds no per-call state. One instance can serve
    concurrent calls from several threads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from cryptography.hazmat.primitives.asymmetric import rsa

from sealvault.core.crypto.aes_gcm import AesGcmCipher
from sealvault.core.crypto.envelope import EnvelopeCodec, PasswordEnvelope, RsaEnvelope
from sealvault.core.crypto.errors import WeakPassword
from sealvault.core.crypto.fingerprint import fingerprint, matches
from sealvault.core.crypto.kdf import derive_key_pbkdf2, generate_salt
from sealvault.core.crypto.keypair import KeyPairManager, RsaKeyPair
from sealvault.core.crypto.rsa_oaep import RsaOaepWrapper
from sealvault.core.memory.zeroization import ZeroizeContext
from sealvault.security.constants import MIN_PASSWORD_LENGTH

PublicKeyLike = Union[rsa.RSAPublicKey, RsaKeyPair, str]
PrivateKeyLike = Union[rsa.RSAPrivateKey, RsaKeyPair, str]


@dataclass(frozen=True, slots=True)
class OpenedFile:
    """
    Result of opening an envelope.

    Attributes:
        data: Decrypted plaintext
        filename: Filename recorded at seal time
        fingerprint_valid: Whether the plaintext matches the recorded SHA-256
    """

    data: bytes
    filename: str
    fingerprint_valid: bool

    def __repr__(self) -> str:
        """Safe representation without exposing plaintext."""
        return (
            f"OpenedFile(filename={self.filename!r}, size={len(self.data)}, "
            f"fingerprint_valid={self.fingerprint_valid})"
        )


class EnvelopeEngine:
    """
    Seals and opens file envelopes in public-key or password mode.

    Usage:
        engine = EnvelopeEngine()
        keypair = engine.generate_keypair()

        text = engine.seal_with_public_key(data, "report.pdf", keypair.public_key)
        opened = engine.open_with_private_key(text, keypair.private_key)

        text = engine.seal_with_password(data, "report.pdf", "correct horse")
        opened = engine.open_with_password(text, "correct horse")

    Keys may be passed as key objects, as an RsaKeyPair, or as exported
    key text.

    Security Notes:
        - Fresh content key, nonce and salt on every seal
        - Content and derived keys are wiped when each call returns
        - Error messages never include key material or plaintext
    """

    __slots__ = ("_aes", "_wrapper", "_keys", "_min_password_length", "_log")

    def __init__(
        self,
        min_password_length: int = MIN_PASSWORD_LENGTH,
        key_manager: Optional[KeyPairManager] = None,
    ) -> None:
        """
        Initialize the envelope engine.

        Args:
            min_password_length: Shortest password accepted for password-mode sealing
            key_manager: Key pair manager (default: RSA-2048)
        """
        self._aes = AesGcmCipher()
        self._wrapper = RsaOaepWrapper()
        self._keys = key_manager or KeyPairManager()
        self._min_password_length = min_password_length
        self._log = logging.getLogger("sealvault.engine")

    @classmethod
    def from_config(cls, config) -> "EnvelopeEngine":
        """Build an engine from a SecureConfig's security section."""
        return cls(
            min_password_length=config.security.min_password_length,
            key_manager=KeyPairManager(key_size=config.security.rsa_key_size),
        )

    @property
    def key_manager(self) -> KeyPairManager:
        return self._keys

    @property
    def min_password_length(self) -> int:
        return self._min_password_length

    def generate_keypair(self) -> RsaKeyPair:
        """Generate a recipient key pair."""
        return self._keys.generate()

    # ------------------------------------------------------------------
    # Public-key mode
    # ------------------------------------------------------------------

    def seal_rsa_envelope(
        self,
        data: bytes,
        filename: str,
        public_key: PublicKeyLike,
    ) -> RsaEnvelope:
        """
        Encrypt data for the holder of public_key.

        Args:
            data: Plaintext bytes (any length, including empty)
            filename: Original filename, stored in clear
            public_key: Recipient public key

        Returns:
            RsaEnvelope

        Raises:
            KeyImportError: If public_key is key text that cannot be imported
        """
        data = bytes(data)
        self._check_filename(filename)
        recipient = self._resolve_public_key(public_key)

        sha256 = fingerprint(data)
        key = bytearray(self._aes.generate_key())
        with ZeroizeContext(key):
            nonce = self._aes.generate_nonce()
            ciphertext, tag = self._aes.seal(data, key, nonce)
            enc_aes_key = self._wrapper.wrap(key, recipient)

        self._log.info("Sealed %d bytes in public-key mode", len(data))
        return RsaEnvelope(
            filename=filename,
            nonce=nonce,
            tag=tag,
            ciphertext=ciphertext,
            enc_aes_key=enc_aes_key,
            sha256=sha256,
        )

    def seal_with_public_key(
        self,
        data: bytes,
        filename: str,
        public_key: PublicKeyLike,
    ) -> str:
        """Encrypt data for public_key and return the envelope JSON text."""
        return EnvelopeCodec.encode(self.seal_rsa_envelope(data, filename, public_key))

    def open_rsa_envelope(
        self,
        envelope: RsaEnvelope,
        private_key: PrivateKeyLike,
    ) -> OpenedFile:
        """
        Decrypt a public-key envelope.

        Raises:
            KeyImportError: If private_key is key text that cannot be imported
            AsymmetricUnwrapFailure: Wrong private key or corrupted wrapped key
            AuthenticationFailure: Ciphertext, tag or nonce was tampered with
        """
        owner = self._resolve_private_key(private_key)

        key = bytearray(self._wrapper.unwrap(envelope.enc_aes_key, owner))
        with ZeroizeContext(key):
            plaintext = self._aes.open(envelope.ciphertext, envelope.tag, key, envelope.nonce)

        return self._finish_open(plaintext, envelope.filename, envelope.sha256, "public-key")

    def open_with_private_key(
        self,
        envelope_text: str | bytes,
        private_key: PrivateKeyLike,
    ) -> OpenedFile:
        """
        Decode and decrypt public-key envelope text.

        Raises:
            MalformedEnvelope: Text does not parse as an envelope
            WrongEnvelopeShape: Text is a password envelope
            plus everything open_rsa_envelope() raises
        """
        return self.open_rsa_envelope(EnvelopeCodec.decode_rsa(envelope_text), private_key)

    # ------------------------------------------------------------------
    # Password mode
    # ------------------------------------------------------------------

    def check_password_policy(self, password: str) -> None:
        """
        Enforce the minimum length for password-mode sealing.

        Raises:
            WeakPassword: If the password is shorter than the minimum
        """
        if not isinstance(password, str) or len(password) < self._min_password_length:
            raise WeakPassword(self._min_password_length)

    def seal_password_envelope(
        self,
        data: bytes,
        filename: str,
        password: str,
    ) -> PasswordEnvelope:
        """
        Encrypt data under a key derived from password.

        Raises:
            WeakPassword: If password fails the minimum length policy
        """
        data = bytes(data)
        self._check_filename(filename)
        self.check_password_policy(password)

        sha256 = fingerprint(data)
        salt = generate_salt()
        key = bytearray(derive_key_pbkdf2(password, salt))
        with ZeroizeContext(key):
            nonce = self._aes.generate_nonce()
            ciphertext, tag = self._aes.seal(data, key, nonce)

        self._log.info("Sealed %d bytes in password mode", len(data))
        return PasswordEnvelope(
            filename=filename,
            salt=salt,
            nonce=nonce,
            tag=tag,
            ciphertext=ciphertext,
            sha256=sha256,
        )

    def seal_with_password(self, data: bytes, filename: str, password: str) -> str:
        """Encrypt data under password and return the envelope JSON text."""
        return EnvelopeCodec.encode(self.seal_password_envelope(data, filename, password))

    def open_password_envelope(
        self,
        envelope: PasswordEnvelope,
        password: str,
    ) -> OpenedFile:
        """
        Decrypt a password envelope.

        The length policy is not applied here: whatever password sealed
        the envelope must be able to open it.

        Raises:
            AuthenticationFailure: Wrong password or tampered envelope
        """
        if not isinstance(password, str):
            raise TypeError("password must be a string")

        key = bytearray(derive_key_pbkdf2(password, envelope.salt))
        with ZeroizeContext(key):
            plaintext = self._aes.open(envelope.ciphertext, envelope.tag, key, envelope.nonce)

        return self._finish_open(plaintext, envelope.filename, envelope.sha256, "password")

    def open_with_password(self, envelope_text: str | bytes, password: str) -> OpenedFile:
        """
        Decode and decrypt password envelope text.

        Raises:
            MalformedEnvelope: Text does not parse as an envelope
            WrongEnvelopeShape: Text is a public-key envelope
            AuthenticationFailure: Wrong password or tampered envelope
        """
        return self.open_password_envelope(EnvelopeCodec.decode_password(envelope_text), password)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _finish_open(self, plaintext: bytes, filename: str, sha256: str, mode: str) -> OpenedFile:
        valid = matches(sha256, plaintext)
        if valid:
            self._log.info("Opened %d bytes in %s mode", len(plaintext), mode)
        else:
            self._log.warning(
                "Opened %d bytes in %s mode but content fingerprint does not match",
                len(plaintext),
                mode,
            )
        return OpenedFile(data=plaintext, filename=filename, fingerprint_valid=valid)

    @staticmethod
    def _check_filename(filename: str) -> None:
        if not isinstance(filename, str):
            raise TypeError("filename must be a string")

    def _resolve_public_key(self, public_key: PublicKeyLike) -> rsa.RSAPublicKey:
        if isinstance(public_key, RsaKeyPair):
            return public_key.public_key
        if isinstance(public_key, str):
            return self._keys.import_public(public_key)
        return public_key

    def _resolve_private_key(self, private_key: PrivateKeyLike) -> rsa.RSAPrivateKey:
        if isinstance(private_key, RsaKeyPair):
            return private_key.private_key
        if isinstance(private_key, str):
            return self._keys.import_private(private_key)
        return private_key
