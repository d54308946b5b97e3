"""
Security Constants
==================

Defines security-related constants used throughout the application.
Sizes and iteration counts live next to the primitives that use them
(aes_gcm.py, kdf.py, keypair.py).
"""

from typing import Final

# Password Requirements
MIN_PASSWORD_LENGTH: Final[int] = 8

# Encryption Settings
ENCRYPTION_ALGORITHM: Final[str] = "AES-256-GCM"
KEY_WRAP_ALGORITHM: Final[str] = "RSA-OAEP-SHA256"

# Key Derivation
KEY_DERIVATION_FUNCTION: Final[str] = "PBKDF2-SHA256"

# Envelope file suffixes
RSA_ENVELOPE_SUFFIX: Final[str] = ".enc.json"
PASSWORD_ENVELOPE_SUFFIX: Final[str] = ".pwd.json"
PUBLIC_KEY_FILENAME: Final[str] = "public.pem"
PRIVATE_KEY_FILENAME: Final[str] = "private.pem"
