"""
Password hashing with bcrypt. Plain passwords are never stored or echoed back.
"""

import bcrypt

BCRYPT_MAX_BYTES = 72


def _to_bytes(password: str) -> bytes:
    # bcrypt only uses the first 72 bytes and newer releases reject longer input
    return password.encode('utf-8')[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """
    Hash a password with a fresh bcrypt salt.

    Args:
        password: Plain text password

    Returns:
        bcrypt hash string (salt included) for storage
    """
    return bcrypt.hashpw(_to_bytes(password), bcrypt.gensalt()).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True if plain_password matches the stored bcrypt hash."""
    try:
        return bcrypt.checkpw(_to_bytes(plain_password), hashed_password.encode('utf-8'))
    except ValueError:
        # malformed hash in storage
        return False
