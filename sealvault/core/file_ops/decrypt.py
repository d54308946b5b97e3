"""
File Decryption Module
======================

Opens JSON envelopes from disk and writes the recovered file.

Security Properties:
- Integrity checked BEFORE any content is written (AES-GCM tag)
- Fail-closed: a failed open writes nothing
- The recorded filename is sanitized before it touches the filesystem
- Fingerprint mismatches are reported, not fatal

Decryption Flow:
1. Read envelope text
2. Open with private key or password (engine)
3. Sanitize recorded filename, resolve output path
4. Write recovered bytes, return a DecryptedFile record
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from cryptography.hazmat.primitives.asymmetric import rsa

from sealvault.core.crypto.fingerprint import fingerprint
from sealvault.core.crypto.hybrid_engine import EnvelopeEngine, OpenedFile
from sealvault.core.crypto.keypair import RsaKeyPair
from sealvault.utils.paths import recovered_file_path

PrivateKeySource = Union[rsa.RSAPrivateKey, RsaKeyPair, str, Path]

_log = logging.getLogger("sealvault.file_ops")


@dataclass(frozen=True)
class DecryptedFile:
    """
    Record of a recovered file written to disk.

    Attributes:
        path: Where the plaintext was written
        filename: Filename recorded in the envelope (unsanitized)
        size: Plaintext size in bytes
        sha256: Fingerprint of the recovered plaintext
        fingerprint_valid: Whether it matched the envelope's recorded fingerprint
    """

    path: Path
    filename: str
    size: int
    sha256: str
    fingerprint_valid: bool

    def __repr__(self) -> str:
        """Safe representation."""
        return (
            f"DecryptedFile(path={str(self.path)!r}, size={self.size}, "
            f"fingerprint_valid={self.fingerprint_valid})"
        )


def _read_envelope(envelope_path: Path | str) -> tuple[Path, str]:
    envelope_path = Path(envelope_path)
    if not envelope_path.is_file():
        raise FileNotFoundError(f"Envelope not found: {envelope_path}")
    return envelope_path, envelope_path.read_text(encoding="utf-8")


class FileDecryptor:
    """
    Opens envelopes from disk.

    Usage:
        decryptor = FileDecryptor()

        result = decryptor.decrypt_file("report.pdf.enc.json", Path("private.pem"))
        result = decryptor.decrypt_file_with_password("report.pdf.pwd.json", "hunter2hunter2")

        if not result.fingerprint_valid:
            warn_user(result.path)
    """

    __slots__ = ("_engine",)

    def __init__(self, engine: Optional[EnvelopeEngine] = None) -> None:
        self._engine = engine or EnvelopeEngine()

    def decrypt_file(
        self,
        envelope_path: Path | str,
        private_key: PrivateKeySource,
        output_dir: Optional[Path | str] = None,
        overwrite: bool = False,
    ) -> DecryptedFile:
        """
        Open a public-key envelope file.

        Args:
            envelope_path: Path to a .enc.json envelope
            private_key: Key object, key pair, key text, or Path to a key file
            output_dir: Directory for the recovered file (default: envelope's directory)
            overwrite: Replace an existing file of the same name

        Returns:
            DecryptedFile

        Raises:
            FileNotFoundError: If the envelope does not exist
            FileExistsError: If the output exists and overwrite is False
            MalformedEnvelope / WrongEnvelopeShape: Envelope text is invalid
            KeyImportError, AsymmetricUnwrapFailure, AuthenticationFailure
        """
        envelope_path, text = _read_envelope(envelope_path)
        if isinstance(private_key, Path):
            private_key = private_key.read_text(encoding="utf-8")

        opened = self._engine.open_with_private_key(text, private_key)
        return self._write(opened, envelope_path, output_dir, overwrite)

    def decrypt_file_with_password(
        self,
        envelope_path: Path | str,
        password: str,
        output_dir: Optional[Path | str] = None,
        overwrite: bool = False,
    ) -> DecryptedFile:
        """
        Open a password envelope file.

        Raises:
            FileNotFoundError: If the envelope does not exist
            FileExistsError: If the output exists and overwrite is False
            MalformedEnvelope / WrongEnvelopeShape: Envelope text is invalid
            AuthenticationFailure: Wrong password or tampered envelope
        """
        envelope_path, text = _read_envelope(envelope_path)

        opened = self._engine.open_with_password(text, password)
        return self._write(opened, envelope_path, output_dir, overwrite)

    @staticmethod
    def _write(
        opened: OpenedFile,
        envelope_path: Path,
        output_dir: Optional[Path | str],
        overwrite: bool,
    ) -> DecryptedFile:
        directory = Path(output_dir) if output_dir is not None else envelope_path.parent
        directory.mkdir(parents=True, exist_ok=True)

        target = recovered_file_path(directory, opened.filename)
        if target.exists() and not overwrite:
            raise FileExistsError(f"Output file already exists: {target}")

        target.write_bytes(opened.data)
        _log.info("Wrote recovered file %s", target.name)

        return DecryptedFile(
            path=target,
            filename=opened.filename,
            size=len(opened.data),
            sha256=fingerprint(opened.data),
            fingerprint_valid=opened.fingerprint_valid,
        )


def decrypt_file(
    envelope_path: Path | str,
    private_key: PrivateKeySource,
    output_dir: Optional[Path | str] = None,
    overwrite: bool = False,
) -> DecryptedFile:
    """Convenience function to open a public-key envelope file."""
    return FileDecryptor().decrypt_file(envelope_path, private_key, output_dir, overwrite)


def decrypt_file_with_password(
    envelope_path: Path | str,
    password: str,
    output_dir: Optional[Path | str] = None,
    overwrite: bool = False,
) -> DecryptedFile:
    """Convenience function to open a password envelope file."""
    return FileDecryptor().decrypt_file_with_password(envelope_path, password, output_dir, overwrite)
