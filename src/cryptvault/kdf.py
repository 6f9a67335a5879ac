"""Password handling: key derivation and strength rating.

The key is a single unsalted SHA-256 of the password. This is kept as-is
so existing ciphertexts stay readable; a salted or iterated KDF would be
a new file format.
"""

from __future__ import annotations

from enum import Enum

from .sha256 import sha256


class Strength(str, Enum):
    WEAK = "weak"
    MEDIUM = "medium"
    STRONG = "strong"


def _as_bytes(password: str | bytes) -> bytes:
    if isinstance(password, str):
        # undecodable argv bytes arrive as lone surrogates; hash the raw bytes
        return password.encode("utf-8", errors="surrogateescape")
    if isinstance(password, (bytes, bytearray)):
        return bytes(password)
    raise TypeError(f"password must be str or bytes, got {type(password).__name__}")


def derive_key(password: str | bytes) -> bytes:
    """Derive the 32-byte AES-256 key for ``password``.

    Args:
        password: Text (UTF-8 encoded first) or raw bytes

    Returns:
        32-byte key, equal to SHA-256(password)
    """
    return sha256(_as_bytes(password))


def password_score(password: str) -> int:
    """Score a password from 0 to 5.

    One point each for length >= 8, length >= 12, mixed case, a digit and
    any other character. Each character counts toward the first of
    upper / lower / digit / other that it matches.
    """
    score = 0
    if len(password) >= 8:
        score += 1
    if len(password) >= 12:
        score += 1

    has_upper = has_lower = has_digit = has_special = False
    for ch in password:
        if ch.isupper():
            has_upper = True
        elif ch.islower():
            has_lower = True
        elif ch.isdigit():
            has_digit = True
        else:
            has_special = True

    if has_upper and has_lower:
        score += 1
    if has_digit:
        score += 1
    if has_special:
        score += 1
    return score


def password_strength(password: str) -> Strength:
    score = password_score(password)
    if score <= 1:
        return Strength.WEAK
    if score <= 3:
        return Strength.MEDIUM
    return Strength.STRONG
