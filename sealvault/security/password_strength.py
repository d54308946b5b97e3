"""
Password Strength Scoring
=========================

Advisory scoring for passwords used in password-mode sealing.

Score bonuses (independent, summed, capped at 100):
    length >= 8             +20
    length >= 12            +15
    length >= 16            +15
    uppercase letter        +15
    lowercase letter        +15
    digit                   +15
    special character       +20

Strength:
    score >= 80  -> high
    score >= 50  -> medium
    otherwise    -> low

Only the 8-character minimum is enforced (by the engine, as WeakPassword);
everything else here is advice.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Final

MAX_SCORE: Final[int] = 100

_UPPER: Final[re.Pattern[str]] = re.compile(r"[A-Z]")
_LOWER: Final[re.Pattern[str]] = re.compile(r"[a-z]")
_DIGIT: Final[re.Pattern[str]] = re.compile(r"[0-9]")
_SPECIAL: Final[re.Pattern[str]] = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")

STRONG_PASSWORD_MESSAGE: Final[str] = "Strong password!"


class PasswordStrength(str, Enum):
    """Coarse strength rating."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class PasswordStrengthResult:
    """
    Scored password.

    Attributes:
        strength: low, medium or high
        score: 0-100
        feedback: Ordered advice, or the strong-password confirmation
    """

    strength: PasswordStrength
    score: int
    feedback: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "strength": self.strength.value,
            "score": self.score,
            "feedback": list(self.feedback),
        }

    def __repr__(self) -> str:
        """Safe representation (the password itself is never kept)."""
        return f"PasswordStrengthResult(strength={self.strength.value}, score={self.score})"


def calculate_password_strength(password: str) -> PasswordStrengthResult:
    """
    Score a password.

    Args:
        password: Candidate password

    Returns:
        PasswordStrengthResult
    """
    feedback: list[str] = []
    score = 0
    length = len(password)

    if length >= 8:
        score += 20
    if length >= 12:
        score += 15
    if length >= 16:
        score += 15

    if length < 8:
        feedback.append("Use at least 8 characters")

    if _UPPER.search(password):
        score += 15
    else:
        feedback.append("Add uppercase letters")

    if _LOWER.search(password):
        score += 15
    else:
        feedback.append("Add lowercase letters")

    if _DIGIT.search(password):
        score += 15
    else:
        feedback.append("Add numbers")

    if _SPECIAL.search(password):
        score += 20
    else:
        feedback.append("Add special characters")

    score = min(score, MAX_SCORE)

    if score >= 80:
        strength = PasswordStrength.HIGH
        if not feedback:
            feedback.append(STRONG_PASSWORD_MESSAGE)
    elif score >= 50:
        strength = PasswordStrength.MEDIUM
    else:
        strength = PasswordStrength.LOW

    return PasswordStrengthResult(strength=strength, score=score, feedback=feedback)
