"""
File Encryption Module
======================

Seals files on disk into JSON envelopes next to the original.

Output Naming:
    report.pdf  ->  report.pdf.enc.json   (public-key mode)
    report.pdf  ->  report.pdf.pwd.json   (password mode)

Key Export:
    export_keypair() writes public.pem and private.pem; the private key
    file is created owner-read/write only on POSIX systems.
"""

from __future__ import annotations

import logging
import os
import platform
from pathlib import Path
from typing import Optional, Tuple, Union

from cryptography.hazmat.primitives.asymmetric import rsa

from sealvault.core.crypto.hybrid_engine import EnvelopeEngine
from sealvault.core.crypto.keypair import KeyPairManager, RsaKeyPair
from sealvault.security.constants import (
    PASSWORD_ENVELOPE_SUFFIX,
    PRIVATE_KEY_FILENAME,
    PUBLIC_KEY_FILENAME,
    RSA_ENVELOPE_SUFFIX,
)

PublicKeySource = Union[rsa.RSAPublicKey, RsaKeyPair, str, Path]

_log = logging.getLogger("sealvault.file_ops")


def _read_source(source_path: Path | str) -> Tuple[Path, bytes]:
    source_path = Path(source_path)

    if not source_path.exists():
        raise FileNotFoundError(f"File not found: {source_path}")

    if not source_path.is_file():
        raise ValueError(f"Not a file: {source_path}")

    return source_path, source_path.read_bytes()


def _envelope_path(source_path: Path, suffix: str, output_path: Optional[Path | str]) -> Path:
    if output_path is None:
        return source_path.with_name(source_path.name + suffix)
    return Path(output_path)


def _write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


class FileEncryptor:
    """
    Seals files from disk.

    Usage:
        encryptor = FileEncryptor()

        envelope_path = encryptor.encrypt_file("report.pdf", Path("public.pem"))
        envelope_path = encryptor.encrypt_file_with_password("report.pdf", "hunter2hunter2")

    Security Notes:
        - The envelope stores the original filename (not the directory) in clear
        - The original file is left untouched
    """

    __slots__ = ("_engine",)

    def __init__(self, engine: Optional[EnvelopeEngine] = None) -> None:
        self._engine = engine or EnvelopeEngine()

    @property
    def engine(self) -> EnvelopeEngine:
        return self._engine

    def encrypt_file(
        self,
        source_path: Path | str,
        public_key: PublicKeySource,
        output_path: Optional[Path | str] = None,
    ) -> Path:
        """
        Seal a file for the holder of public_key.

        Args:
            source_path: File to encrypt
            public_key: Key object, key pair, key text, or Path to a key file
            output_path: Envelope path (default: <source>.enc.json)

        Returns:
            Path to the written envelope

        Raises:
            FileNotFoundError: If source file doesn't exist
            KeyImportError: If the public key text is invalid
        """
        source_path, content = _read_source(source_path)
        if isinstance(public_key, Path):
            public_key = public_key.read_text(encoding="utf-8")

        envelope_text = self._engine.seal_with_public_key(content, source_path.name, public_key)

        output_path = _envelope_path(source_path, RSA_ENVELOPE_SUFFIX, output_path)
        _write_text(output_path, envelope_text)
        _log.info("Wrote public-key envelope for %s", source_path.name)

        return output_path

    def encrypt_file_with_password(
        self,
        source_path: Path | str,
        password: str,
        output_path: Optional[Path | str] = None,
    ) -> Path:
        """
        Seal a file under a password.

        Args:
            source_path: File to encrypt
            password: Password (at least the engine's minimum length)
            output_path: Envelope path (default: <source>.pwd.json)

        Returns:
            Path to the written envelope

        Raises:
            FileNotFoundError: If source file doesn't exist
            WeakPassword: If the password is too short
        """
        source_path, content = _read_source(source_path)

        envelope_text = self._engine.seal_with_password(content, source_path.name, password)

        output_path = _envelope_path(source_path, PASSWORD_ENVELOPE_SUFFIX, output_path)
        _write_text(output_path, envelope_text)
        _log.info("Wrote password envelope for %s", source_path.name)

        return output_path


def export_keypair(
    keypair: RsaKeyPair,
    directory: Path | str,
    overwrite: bool = False,
) -> Tuple[Path, Path]:
    """
    Write a key pair as public.pem and private.pem.

    Args:
        keypair: Key pair to export
        directory: Target directory (created if missing)
        overwrite: Replace existing key files

    Returns:
        Tuple of (public_key_path, private_key_path)

    Raises:
        FileExistsError: If a key file exists and overwrite is False
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    public_path = directory / PUBLIC_KEY_FILENAME
    private_path = directory / PRIVATE_KEY_FILENAME

    if not overwrite:
        for path in (public_path, private_path):
            if path.exists():
                raise FileExistsError(f"Key file already exists: {path}")

    _write_text(public_path, KeyPairManager.export_public(keypair))

    # Create the private key file with owner-only permissions from the start
    private_text = KeyPairManager.export_private(keypair)
    if platform.system().lower() != "windows":
        fd = os.open(private_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(private_text)
        private_path.chmod(0o600)
    else:
        _write_text(private_path, private_text)

    _log.info("Exported key pair to %s", directory)
    return public_path, private_path


def encrypt_file(
    source_path: Path | str,
    public_key: PublicKeySource,
    output_path: Optional[Path | str] = None,
) -> Path:
    """
    Convenience function to seal a file in public-key mode.

    Returns:
        Path to encrypted envelope
    """
    return FileEncryptor().encrypt_file(source_path, public_key, output_path)


def encrypt_file_with_password(
    source_path: Path | str,
    password: str,
    output_path: Optional[Path | str] = None,
) -> Path:
    """
    Convenience function to seal a file in password mode.

    Returns:
        Path to encrypted envelope
    """
    return FileEncryptor().encrypt_file_with_password(source_path, password, output_path)
