"""
auth/passwords.py -- One-way salted password hashing.

bcrypt is used directly (no passlib wrapper). bcrypt.gensalt() draws a fresh
random salt on every call, so hashing the same password twice yields two
different digests. bcrypt.checkpw() re-derives the digest with the stored
salt and cost, so verification takes the same time whether the password is
right or wrong.

Layer rule: no imports from api/ or posts/.
"""

from __future__ import annotations

import bcrypt

# bcrypt rejects (or, before 5.0, silently truncates) input past 72 bytes.
MAX_PASSWORD_BYTES = 72


def password_too_long(plain: str) -> bool:
    """Return True if the UTF-8 encoding of plain exceeds bcrypt's input limit."""
    return len(plain.encode("utf-8")) > MAX_PASSWORD_BYTES


def hash_password(plain: str) -> str:
    """Return a bcrypt hash of the given plaintext password.

    Callers reject passwords over MAX_PASSWORD_BYTES first; the limit counts
    bytes, so a 40-character accented password is already too long.
    """
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    A malformed or empty digest fails closed: bcrypt raises ValueError for an
    unparseable salt, which is reported here as a mismatch. A password over
    MAX_PASSWORD_BYTES never matches, since no stored hash was made from one.
    """
    if not hashed or password_too_long(plain):
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


# Computed once at module load. login() verifies against this when the
# username does not exist so both failure branches pay the bcrypt cost.
DUMMY_HASH: str = hash_password("postboard_timing_dummy")
