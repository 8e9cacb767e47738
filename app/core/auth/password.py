"""Password hashing and verification utilities using bcrypt."""

from functools import lru_cache

import bcrypt

from app.core.config import get_settings

# bcrypt only looks at the first 72 bytes and bcrypt 5 refuses anything longer.
MAX_PASSWORD_BYTES = 72


def check_password_length(password: str) -> str:
    """Reject passwords bcrypt cannot hash. Returns the password unchanged."""
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return password


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    The cost factor comes from BCRYPT_ROUNDS (12 by default).

    Args:
        password: Plain text password to hash.

    Returns:
        Hashed password string.
    """
    salt = bcrypt.gensalt(rounds=get_settings().BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Args:
        plain_password: Plain text password to verify.
        hashed_password: Hashed password to compare against.

    Returns:
        True if password matches, False otherwise (including malformed hashes).
    """
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"), hashed_password.encode("utf-8")
        )
    except (ValueError, TypeError):
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("timing-equalizer")


def burn_password_check(plain_password: str) -> None:
    """Run a throwaway bcrypt comparison so unknown users cost as much as known ones."""
    verify_password(plain_password, _dummy_hash())
