"""
SealVault Cryptographic Core
============================

File-encryption envelope engine with two protection modes.

Architecture:
    1. AES-256-GCM: content encryption
    2. RSA-OAEP (SHA-256): per-file content key wrapping
    3. PBKDF2-HMAC-SHA256: password-derived content keys
    4. SHA-256: advisory plaintext fingerprint

Security Properties:
    - All content encryption is authenticated (AEAD)
    - Fresh content key, nonce and salt per seal
    - Constant-time fingerprint comparison
    - Secure RNG for all random values

WARNING: This module handles sensitive cryptographic material.
         Incorrect usage can compromise security.
"""

from sealvault.core.crypto.aes_gcm import AesGcmCipher, AesGcmResult
from sealvault.core.crypto.envelope import (
    EnvelopeCodec,
    PasswordEnvelope,
    RsaEnvelope,
)
from sealvault.core.crypto.errors import (
    AsymmetricUnwrapFailure,
    AuthenticationFailure,
    KeyImportError,
    MalformedEnvelope,
    SealVaultError,
    WeakPassword,
    WrongEnvelopeShape,
)
from sealvault.core.crypto.fingerprint import fingerprint, matches
from sealvault.core.crypto.hybrid_engine import EnvelopeEngine, OpenedFile
from sealvault.core.crypto.kdf import derive_key_pbkdf2, generate_salt
from sealvault.core.crypto.keypair import KeyPairManager, RsaKeyPair
from sealvault.core.crypto.rsa_oaep import RsaOaepWrapper

__all__ = [
    "AesGcmCipher",
    "AesGcmResult",
    "RsaOaepWrapper",
    "derive_key_pbkdf2",
    "generate_salt",
    "fingerprint",
    "matches",
    "EnvelopeCodec",
    "RsaEnvelope",
    "PasswordEnvelope",
    "KeyPairManager",
    "RsaKeyPair",
    "EnvelopeEngine",
    "OpenedFile",
    "SealVaultError",
    "KeyImportError",
    "AsymmetricUnwrapFailure",
    "AuthenticationFailure",
    "MalformedEnvelope",
    "WrongEnvelopeShape",
    "WeakPassword",
]
