"""Password checks done before encryption.

Only an empty password is refused outright. Everything else is advisory: the
CLI shows the feedback as a warning and carries on.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Literal

MIN_PASSWORD_LENGTH = 8
RECOMMENDED_PASSWORD_LENGTH = 12

StrengthLevel = Literal["weak", "fair", "good", "strong"]

_COMMON_PASSWORDS: frozenset[str] = frozenset(
    {
        "password", "password1", "password123", "passw0rd", "123456", "12345678",
        "123456789", "1234567890", "qwerty", "qwerty123", "abc123", "111111",
        "000000", "iloveyou", "admin", "letmein", "welcome", "monkey", "dragon",
        "master", "sunshine", "princess", "football", "baseball", "trustno1",
        "hello", "secret", "123123", "654321", "1q2w3e4r", "zxcvbnm", "hunter2",
    }
)

_CHARSETS = (
    (re.compile(r"[a-z]"), 26),
    (re.compile(r"[A-Z]"), 26),
    (re.compile(r"[0-9]"), 10),
    (re.compile(r"[^a-zA-Z0-9]"), 32),
)


@dataclass(frozen=True)
class PasswordStrength:
    level: StrengthLevel
    entropy_bits: float
    feedback: list[str] = field(default_factory=list)

    @property
    def acceptable(self) -> bool:
        return self.level in ("good", "strong")


class WeakPasswordError(ValueError):
    """Raised when a password cannot be used at all."""


def require_password(password: str) -> None:
    if not password:
        raise WeakPasswordError("Password cannot be empty")


def estimate_entropy(password: str) -> float:
    """Estimate password entropy in bits from length and character classes."""
    pool = sum(size for pattern, size in _CHARSETS if pattern.search(password))
    if not password or pool == 0:
        return 0.0
    return len(password) * math.log2(pool)


def evaluate_password(password: str) -> PasswordStrength:
    feedback: list[str] = []
    if len(password) < MIN_PASSWORD_LENGTH:
        feedback.append(f"Use at least {MIN_PASSWORD_LENGTH} characters")
    classes = sum(1 for pattern, _size in _CHARSETS if pattern.search(password))
    if classes < 2:
        feedback.append("Mix letters, digits and symbols")
    common = password.lower() in _COMMON_PASSWORDS
    if common:
        feedback.append("This password is on lists of commonly used passwords")

    entropy = estimate_entropy(password)
    if common or len(password) < MIN_PASSWORD_LENGTH or entropy < 40:
        level: StrengthLevel = "weak"
    elif entropy < 60:
        level = "fair"
    elif entropy < 80 or len(password) < RECOMMENDED_PASSWORD_LENGTH:
        level = "good"
    else:
        level = "strong"
    return PasswordStrength(level=level, entropy_bits=entropy, feedback=feedback)
