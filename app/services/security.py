"""
Security Service

Handles password hashing.

Security Features:
==================
1. Password hashing with bcrypt (passlib), random salt per password
2. Configurable cost factor (BCRYPT_ROUNDS)
3. Constant-time password verification

Hashing is CPU-bound and blocking. Callers are the synchronous route
handlers, which FastAPI executes in its thread pool, so hashing never runs
on the event loop.

Usage:
    from app.services.security import hash_password, verify_password

    hashed = hash_password("secret123")
    is_valid = verify_password("secret123", hashed)
"""

import logging

from passlib.context import CryptContext

from app.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

# -------------------------------------------------------------------------
# Password Hashing Configuration
# -------------------------------------------------------------------------
# - schemes: bcrypt generates a fresh random salt for every hash
# - deprecated: "auto" means old hashes are automatically upgraded
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


def hash_password(password: str) -> str:
    """
    Hash a plain text password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Bcrypt hash of the password (salt included)

    Example:
        >>> hashed = hash_password("secret123")
        >>> hashed.startswith("$2b$")
        True
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a stored hash.

    Uses constant-time comparison to prevent timing attacks. A stored value
    that is not a recognizable hash never matches.

    Args:
        plain_password: The password to verify
        hashed_password: The stored bcrypt hash

    Returns:
        True if password matches, False otherwise
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        logger.warning("Stored password hash is not in a recognized format")
        return False
