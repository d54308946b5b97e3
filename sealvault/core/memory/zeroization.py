"""
Key Buffer Zeroization
======================

Wipes content keys and password-derived keys once a seal or open call
is done with them.

The engine copies each key into a bytearray, hands that buffer to the
cipher, and wraps the call in ZeroizeContext so the buffer is wiped on
every exit path, including AuthenticationFailure.

Limitations:
    Immutable ``bytes`` copies made by the crypto backend or by the
    caller are out of reach. This narrows the window, it does not close it.
"""

from __future__ import annotations

import ctypes
from contextlib import contextmanager
from typing import Iterator


def secure_zero(buffer: bytearray | memoryview) -> None:
    """
    Overwrite a mutable buffer in place.

    bytearrays get three ``memset`` passes on their storage; memoryviews
    get a single slice assignment of zeros, since they may not expose a
    buffer ctypes can address.
    """
    size = len(buffer)
    if not size:
        return

    if isinstance(buffer, memoryview):
        buffer[:] = bytes(size)
        return

    address = ctypes.addressof((ctypes.c_char * size).from_buffer(buffer))
    for fill in (0x00, 0xFF, 0x00):
        ctypes.memset(address, fill, size)


@contextmanager
def ZeroizeContext(*buffers: bytearray) -> Iterator[None]:
    """
    Wipe buffers when the block exits, normally or by exception.

    Usage:
        key = bytearray(derive_key_pbkdf2(password, salt))
        with ZeroizeContext(key):
            plaintext = cipher.open(ciphertext, tag, key, nonce)
    """
    try:
        yield
    finally:
        for buffer in buffers:
            secure_zero(buffer)
