"""Password hashing with bcrypt."""

from __future__ import annotations

import bcrypt

from jokedrop.errors import InvalidArgument

DEFAULT_ROUNDS = 12
# bcrypt only looks at the first 72 bytes of the secret
MAX_PASSWORD_BYTES = 72


def hash_password(raw: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Return a salted bcrypt hash for *raw*."""
    secret = raw.encode("utf-8")
    if len(secret) > MAX_PASSWORD_BYTES:
        raise InvalidArgument(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(secret, bcrypt.gensalt(rounds)).decode("utf-8")


def verify_password(raw: str, stored: str) -> bool:
    """Check *raw* against a hash produced by :func:`hash_password`."""
    secret = raw.encode("utf-8")
    if not stored or len(secret) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(secret, stored.encode("utf-8"))
    except ValueError:
        # not a bcrypt hash
        return False
