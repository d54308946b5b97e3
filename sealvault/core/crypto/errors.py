"""
Envelope Engine Errors
======================

Typed failures raised by the envelope engine.

Every failure aborts the operation except a fingerprint mismatch,
which is reported as a flag on the opened result and never raised.

Messages are deliberately generic: callers decide what to show users,
and nothing here reveals which byte or which check failed.
"""

from __future__ import annotations


class SealVaultError(Exception):
    """Base class for all envelope engine errors."""
    pass


class KeyImportError(SealVaultError):
    """Exported key text is malformed, has the wrong markers, or an undecodable body."""
    pass


class AsymmetricUnwrapFailure(SealVaultError):
    """
    Wrapped content key could not be recovered.

    Raised for a private key that does not match the wrapping public key
    and for a corrupted wrapped blob alike.
    """
    pass


class AuthenticationFailure(SealVaultError):
    """
    AEAD tag verification failed.

    Covers a wrong symmetric key, a wrong password and a tampered
    ciphertext, tag or nonce. The message never says which.
    """

    def __init__(self, message: str = "authentication failed") -> None:
        super().__init__(message)


class MalformedEnvelope(SealVaultError):
    """Envelope text failed to parse or is missing/invalid fields."""
    pass


class WrongEnvelopeShape(MalformedEnvelope):
    """Envelope parsed, but belongs to the other protection mode."""

    def __init__(self, expected: str, found: str) -> None:
        self.expected = expected
        self.found = found
        super().__init__(f"expected a {expected} envelope, got a {found} envelope")


class WeakPassword(SealVaultError, ValueError):
    """Password rejected by the minimum length policy for password-mode sealing."""

    def __init__(self, min_length: int) -> None:
        self.min_length = min_length
        super().__init__(f"Password must be at least {min_length} characters")
