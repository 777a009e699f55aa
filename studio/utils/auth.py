"""
Password utilities for admin access.
The shared admin secret is only ever stored as a bcrypt hash.
"""
import bcrypt
from studio.config import settings

DEFAULT_ROUNDS = 12  # 12 rounds is secure and performant


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password
        rounds: bcrypt cost factor

    Returns:
        Hashed password string
    """
    hashed = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=rounds))
    return hashed.decode('utf-8')


def verify_password(password: str, hashed_password: str) -> bool:
    """Check a plain text password against a bcrypt hash; malformed hashes never match."""
    try:
        return bcrypt.checkpw(
            password.encode('utf-8'),
            hashed_password.encode('utf-8')
        )
    except ValueError:
        return False


def verify_admin_password(password: str) -> bool:
    """
    Verify the admin password against ADMIN_PASSWORD_HASH.

    Raises:
        ValueError: If ADMIN_PASSWORD_HASH is not configured
    """
    if not settings.ADMIN_PASSWORD_HASH:
        raise ValueError("ADMIN_PASSWORD_HASH not configured")

    return verify_password(password, settings.ADMIN_PASSWORD_HASH)
