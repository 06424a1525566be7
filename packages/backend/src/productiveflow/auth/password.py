"""Password hashing utilities.

bcrypt handles salting; the work factor comes from settings.bcrypt_rounds
(12 by default, roughly 100ms per hash). Passwords are truncated to 72
bytes, bcrypt's input limit.
"""

import hashlib
import secrets

import bcrypt

from productiveflow.config import settings


def hash_password(password: str) -> str:
    pw_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a bcrypt hash. Malformed hashes never match."""
    try:
        pw_bytes = password.encode("utf-8")[:72]
        return bcrypt.checkpw(pw_bytes, password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False


# Burned on unknown emails so sign-in timing doesn't reveal which accounts exist.
_DUMMY_HASH: str | None = None


def verify_password_timing_safe(password: str, password_hash: str | None) -> bool:
    global _DUMMY_HASH
    if password_hash is None:
        if _DUMMY_HASH is None:
            _DUMMY_HASH = hash_password(secrets.token_urlsafe(16))
        verify_password(password, _DUMMY_HASH)
        return False
    return verify_password(password, password_hash)


# ─── Password reset tokens ──────────────────────────────


def new_reset_token() -> tuple[str, str]:
    """Return (token, sha256 hex digest). Only the digest is stored."""
    token = secrets.token_hex(32)
    return token, hash_reset_token(token)


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()
