"""
Security module - Password policy, constants and crypto self-tests.

Security Considerations:
- Use only approved cryptographic algorithms (AES-256-GCM, RSA-OAEP, PBKDF2)
- Follow fail-closed design principles
- No custom cryptography implementations
"""

from sealvault.security.constants import (
    MIN_PASSWORD_LENGTH,
    ENCRYPTION_ALGORITHM,
    KEY_WRAP_ALGORITHM,
    KEY_DERIVATION_FUNCTION,
)
from sealvault.security.hardening import (
    CryptoSelfTest,
    CheckResult,
    SecurityCheckResult,
)
from sealvault.security.password_strength import (
    PasswordStrength,
    PasswordStrengthResult,
    calculate_password_strength,
)

__all__ = [
    "MIN_PASSWORD_LENGTH",
    "ENCRYPTION_ALGORITHM",
    "KEY_WRAP_ALGORITHM",
    "KEY_DERIVATION_FUNCTION",
    "CryptoSelfTest",
    "CheckResult",
    "SecurityCheckResult",
    "PasswordStrength",
    "PasswordStrengthResult",
    "calculate_password_strength",
]
