"""
Content fingerprinting.

SHA-256 over the plaintext, recorded in the envelope at seal time and
re-checked after decryption. Advisory only: the AEAD tag is what
guarantees authenticity.
"""

from __future__ import annotations

import hashlib
import hmac


def fingerprint(data: bytes) -> str:
    """Return the lowercase hex SHA-256 of data (64 characters)."""
    return hashlib.sha256(data).hexdigest()


def matches(expected: str, data: bytes) -> bool:
    """Check data against a previously recorded fingerprint."""
    if not isinstance(expected, str):
        return False
    # compare_digest rejects non-ASCII str, so compare encoded bytes
    return hmac.compare_digest(
        expected.lower().encode("utf-8"),
        fingerprint(data).encode("ascii"),
    )
