"""
RSA-OAEP Key Wrapping
=====================

Wraps the per-file AES-256 content key under a recipient's RSA public key.

Padding:
    - OAEP with MGF1(SHA-256), SHA-256 label hash, empty label
    - A 2048-bit modulus leaves room for up to 190 bytes of secret;
      only 32-byte content keys are ever wrapped

Failure Model:
    unwrap() never returns wrong bytes. A mismatched private key or a
    corrupted blob both raise AsymmetricUnwrapFailure.
"""

from __future__ import annotations

import logging

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from sealvault.core.crypto.aes_gcm import AES_KEY_SIZE
from sealvault.core.crypto.errors import AsymmetricUnwrapFailure

logger = logging.getLogger("sealvault.crypto")


def _oaep_padding() -> padding.OAEP:
    return padding.OAEP(
        mgf=padding.MGF1(algorithm=hashes.SHA256()),
        algorithm=hashes.SHA256(),
        label=None,
    )


class RsaOaepWrapper:
    """
    Asymmetric wrapper for symmetric content keys.

    Usage:
        wrapper = RsaOaepWrapper()
        wrapped = wrapper.wrap(content_key, keypair.public_key)
        content_key = wrapper.unwrap(wrapped, keypair.private_key)
    """

    __slots__ = ()

    def wrap(self, key_bytes: bytes | bytearray, public_key: rsa.RSAPublicKey) -> bytes:
        """
        Encrypt a symmetric key with the recipient's public key.

        Args:
            key_bytes: Raw symmetric key (32 bytes)
            public_key: Recipient RSA public key

        Returns:
            Wrapped key, the size of the RSA modulus

        Raises:
            TypeError: If public_key is not an RSA public key
        """
        if not isinstance(public_key, rsa.RSAPublicKey):
            raise TypeError("public_key must be an RSA public key")

        return public_key.encrypt(bytes(key_bytes), _oaep_padding())

    def unwrap(self, wrapped: bytes, private_key: rsa.RSAPrivateKey) -> bytes:
        """
        Recover a symmetric key with the matching private key.

        Args:
            wrapped: Output of wrap()
            private_key: RSA private key matching the wrapping public key

        Returns:
            The 32-byte symmetric key

        Raises:
            AsymmetricUnwrapFailure: Wrong private key, corrupted blob,
                or a recovered key of the wrong length
        """
        if not isinstance(private_key, rsa.RSAPrivateKey):
            raise AsymmetricUnwrapFailure("private key is not an RSA private key")

        try:
            key_bytes = private_key.decrypt(wrapped, _oaep_padding())
        except ValueError:
            logger.debug("OAEP decryption rejected wrapped key")
            raise AsymmetricUnwrapFailure("wrapped key could not be recovered") from None

        if len(key_bytes) != AES_KEY_SIZE:
            raise AsymmetricUnwrapFailure("wrapped key has unexpected length")

        return key_bytes
