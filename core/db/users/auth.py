"""
Password hashing and verification.
"""
from __future__ import annotations

import base64
import hashlib

import bcrypt

DEFAULT_ROUNDS = 12


def _encode(raw_password: str) -> bytes:
    # bcrypt ignores (or rejects) input past 72 bytes, so feed it a fixed
    # 44-byte digest of the whole password instead.
    digest = hashlib.sha256(raw_password.encode("utf-8")).digest()
    return base64.b64encode(digest)


def hash_password(raw_password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Salted bcrypt hash; two calls with the same input give different strings."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_encode(raw_password), salt).decode("utf-8")


def verify_password(raw_password: str, password_hash: str) -> bool:
    if not raw_password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(_encode(raw_password), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False


__all__ = ["DEFAULT_ROUNDS", "hash_password", "verify_password"]
