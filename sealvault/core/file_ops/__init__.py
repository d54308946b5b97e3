"""
SealVault File Operations Module
================================

Seals files on disk into envelopes and opens them again.

Security Features:
- Per-file random content keys (public-key mode)
- Per-file random salts (password mode)
- Integrity verification before anything is written
- Recovered filenames sanitized before use
- Private key exports created owner-only

Components:
- encrypt.py: File sealing and key pair export
- decrypt.py: Envelope opening and recovered-file writing
"""

from sealvault.core.file_ops.encrypt import (
    FileEncryptor,
    encrypt_file,
    encrypt_file_with_password,
    export_keypair,
)
from sealvault.core.file_ops.decrypt import (
    FileDecryptor,
    DecryptedFile,
    decrypt_file,
    decrypt_file_with_password,
)

__all__ = [
    "FileEncryptor",
    "encrypt_file",
    "encrypt_file_with_password",
    "export_keypair",
    "FileDecryptor",
    "DecryptedFile",
    "decrypt_file",
    "decrypt_file_with_password",
]
