"""
moviebase.auth.passwords

Password hashing and verification (bcrypt).

Responsibilities:
- Produce salted, deliberately slow hashes for storage.
- Verify a plaintext password against a stored hash.
"""

from __future__ import annotations

import bcrypt

# bcrypt only looks at the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72
DEFAULT_ROUNDS = 12


def hash_password(plaintext: str, *, rounds: int = DEFAULT_ROUNDS) -> str:
    secret = plaintext.encode("utf-8")
    if len(secret) > BCRYPT_MAX_BYTES:
        raise ValueError(f"Password exceeds {BCRYPT_MAX_BYTES} bytes")
    return bcrypt.hashpw(secret, bcrypt.gensalt(rounds=rounds)).decode("ascii")


def verify_password(plaintext: str, stored_hash: str) -> bool:
    """
    Return whether `plaintext` matches `stored_hash`.

    A mismatch is a normal `False`. A stored hash that bcrypt cannot parse is a
    data/programming error and raises `ValueError`.
    """

    secret = plaintext.encode("utf-8")
    try:
        hashed = stored_hash.encode("ascii")
        if len(secret) > BCRYPT_MAX_BYTES:
            # Never accepted by `hash_password`; the call only validates the hash.
            bcrypt.checkpw(b"", hashed)
            return False
        return bcrypt.checkpw(secret, hashed)
    except ValueError as e:
        raise ValueError("Malformed password hash") from e
