"""Password hashing utilities.

Uses bcrypt directly. Hashing is intentionally slow; the work factor comes
from BCRYPT_ROUNDS.
"""

import logging

import bcrypt

from virtuebox import config

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _to_bytes(password: str) -> bytes:
    password_bytes = password.encode("utf-8")
    if len(password_bytes) > BCRYPT_MAX_BYTES:
        logger.warning(
            "Password exceeds %d bytes, truncating", BCRYPT_MAX_BYTES
        )
        password_bytes = password_bytes[:BCRYPT_MAX_BYTES]
    return password_bytes


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password.

    Returns:
        Hashed password (bcrypt hash string).
    """
    salt = bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_to_bytes(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a bcrypt hash.

    Args:
        plain_password: Plain text password to verify.
        hashed_password: Bcrypt hash string to verify against.

    Returns:
        True if password matches, False otherwise.
    """
    try:
        return bcrypt.checkpw(
            _to_bytes(plain_password), hashed_password.encode("utf-8")
        )
    except ValueError as e:
        # Malformed stored hash
        logger.error("Password verification error: %s", e)
        return False
