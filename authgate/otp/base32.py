"""
RFC 4648 Base32 codec for shared secrets.

Authenticator apps display and accept secrets without padding and do not
care about case, so encode() strips the padding and decode() accepts both
forms in any case.
"""

import base64
import binascii
import re

from .errors import InvalidEncoding

# Applied before upper(), which maps some non-ASCII letters into A-Z
_BASE32_RE = re.compile(r"[A-Za-z2-7]*=*")

# Unpadded data lengths that can occur (mod 8). 1, 3 and 6 never do.
_VALID_REMAINDERS = {0, 2, 4, 5, 7}


def encode(data: bytes) -> str:
    """
    Encode raw bytes as unpadded, upper case Base32.

    Args:
        data: Raw secret bytes

    Returns:
        Base32 string without trailing "=" characters
    """
    return base64.b32encode(bytes(data)).decode("ascii").rstrip("=")


def decode(text: str) -> bytes:
    """
    Decode Base32 text into raw bytes.

    Args:
        text: Base32 string, padded or unpadded, any case

    Returns:
        Decoded bytes

    Raises:
        InvalidEncoding: If the text contains characters outside the alphabet
            or the padding / length is malformed
    """
    if not isinstance(text, str):
        raise InvalidEncoding(f"expected str, got {type(text).__name__}")

    if not _BASE32_RE.fullmatch(text):
        raise InvalidEncoding("Base32 text contains characters outside A-Z2-7 or misplaced padding")

    body = text.upper().rstrip("=")
    pad_count = len(text) - len(body)

    if len(body) % 8 not in _VALID_REMAINDERS:
        raise InvalidEncoding(f"Base32 data length {len(body)} is impossible")

    expected_pad = -len(body) % 8
    if pad_count and pad_count != expected_pad:
        raise InvalidEncoding(f"expected {expected_pad} padding characters, got {pad_count}")

    try:
        return base64.b32decode(body + "=" * expected_pad)
    except binascii.Error as e:
        raise InvalidEncoding(str(e)) from e
