"""
SealVault - File Encryption Envelopes
=====================================

Seals files into portable JSON envelopes, either for an RSA key holder
(hybrid AES-GCM + RSA-OAEP) or under a password (AES-GCM + PBKDF2),
and opens them again with an advisory SHA-256 fingerprint check.

Security Notice:
- No secrets are logged
- Fail-closed design pattern
- Key material is wiped after each operation
"""

from sealvault.core.config import SecureConfig
from sealvault.core.crypto.hybrid_engine import EnvelopeEngine, OpenedFile
from sealvault.core.logging import get_secure_logger
from sealvault.security.password_strength import calculate_password_strength

__version__ = "0.1.0"
__author__ = "SealVault Team"

__all__ = [
    "SecureConfig",
    "EnvelopeEngine",
    "OpenedFile",
    "calculate_password_strength",
    "get_secure_logger",
    "__version__",
]
