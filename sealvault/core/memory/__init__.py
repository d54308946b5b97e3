"""
SealVault Memory Security Module
================================

Best-effort wiping of key material.

WARNING:
- Python's memory model doesn't guarantee secure erasure
- These are best-effort mitigations
"""

from sealvault.core.memory.zeroization import secure_zero, ZeroizeContext

__all__ = [
    "secure_zero",
    "ZeroizeContext",
]
