"""
Shared secret generation.
"""

import secrets

from . import base32
from .errors import InsufficientEntropySource, WeakSecretLength

MIN_SECRET_BYTES = 10  # 80 bits
DEFAULT_SECRET_BYTES = 20  # 160 bits, the HMAC-SHA1 output size


def generate_secret(byte_length: int = DEFAULT_SECRET_BYTES) -> bytes:
    """
    Generate a new random shared secret.

    Args:
        byte_length: Number of random bytes, at least MIN_SECRET_BYTES

    Returns:
        Raw secret bytes

    Raises:
        WeakSecretLength: If byte_length is below MIN_SECRET_BYTES
        InsufficientEntropySource: If the OS random source cannot be read
    """
    if byte_length < MIN_SECRET_BYTES:
        raise WeakSecretLength(byte_length, MIN_SECRET_BYTES)

    try:
        return secrets.token_bytes(byte_length)
    except (NotImplementedError, OSError) as e:
        raise InsufficientEntropySource("operating system random source is unavailable") from e


def random_base32(byte_length: int = DEFAULT_SECRET_BYTES) -> str:
    """Generate a new secret and return it Base32-encoded."""
    return base32.encode(generate_secret(byte_length))
