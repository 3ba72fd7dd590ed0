"""
HMAC-based one-time passwords (RFC 4226).
"""

import hashlib
import hmac
import struct
from enum import Enum
from typing import Optional

from .errors import InvalidParameter

MIN_DIGITS = 6
MAX_DIGITS = 10
DEFAULT_DIGITS = 6

_MAX_COUNTER = 2 ** 64


class HashAlgorithm(str, Enum):
    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"

    @property
    def digestmod(self):
        return _DIGESTS[self]

    @classmethod
    def parse(cls, name: str) -> "HashAlgorithm":
        """Accept members and "sha1", "SHA-256", "sha512" and similar spellings."""
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).upper().replace("-", ""))
        except ValueError:
            raise InvalidParameter(f"unsupported hash algorithm '{name}'") from None


_DIGESTS = {
    HashAlgorithm.SHA1: hashlib.sha1,
    HashAlgorithm.SHA256: hashlib.sha256,
    HashAlgorithm.SHA512: hashlib.sha512,
}


def check_digits(digits: int) -> None:
    if not MIN_DIGITS <= digits <= MAX_DIGITS:
        raise InvalidParameter(f"digits must be between {MIN_DIGITS} and {MAX_DIGITS}, got {digits}")


def dynamic_truncate(digest: bytes) -> int:
    """
    Reduce an HMAC digest to a 31-bit integer.

    The low nibble of the last byte selects an offset; the four bytes at that
    offset are read big-endian with the sign bit cleared.
    """
    offset = digest[-1] & 0x0F
    return struct.unpack(">I", digest[offset:offset + 4])[0] & 0x7FFFFFFF


def hotp(secret: bytes, counter: int, digits: int = DEFAULT_DIGITS,
         algorithm: HashAlgorithm = HashAlgorithm.SHA1) -> str:
    """
    Compute the HOTP code for a counter value.

    Args:
        secret: Raw shared secret bytes
        counter: Moving factor, 0 <= counter < 2**64
        digits: Length of the returned code (6-10)
        algorithm: HMAC hash function

    Returns:
        Zero-padded decimal code of exactly `digits` characters

    Raises:
        InvalidParameter: If the secret is empty or counter / digits are out of range
    """
    if not secret:
        raise InvalidParameter("secret must not be empty")
    if not 0 <= counter < _MAX_COUNTER:
        raise InvalidParameter(f"counter {counter} does not fit in 64 unsigned bits")
    check_digits(digits)

    digest = hmac.new(bytes(secret), struct.pack(">Q", counter), HashAlgorithm.parse(algorithm).digestmod).digest()
    code = dynamic_truncate(digest) % (10 ** digits)
    return str(code).zfill(digits)


def match_counters(secret: bytes, candidate: str, counters, digits: int = DEFAULT_DIGITS,
                   algorithm: HashAlgorithm = HashAlgorithm.SHA1) -> Optional[int]:
    """
    Compare a candidate against the code of every counter given.

    Every counter is computed and compared, with no early exit, so the time
    taken does not depend on where (or whether) the candidate matches.

    Returns:
        The first matching counter, or None
    """
    candidate_bytes = str(candidate).encode("utf-8")
    matched = None
    for counter in counters:
        expected = hotp(secret, counter, digits, algorithm).encode("ascii")
        if hmac.compare_digest(expected, candidate_bytes) and matched is None:
            matched = counter
    return matched


def hotp_verify(secret: bytes, candidate: str, counter: int, look_ahead: int = 0,
                digits: int = DEFAULT_DIGITS,
                algorithm: HashAlgorithm = HashAlgorithm.SHA1) -> Optional[int]:
    """
    Verify an HOTP code against `counter` and up to `look_ahead` later counters.

    Returns:
        How far ahead of `counter` the match was found (0 for an exact match),
        or None if the candidate matched nothing
    """
    if look_ahead < 0:
        raise InvalidParameter("look_ahead must not be negative")
    last = min(counter + look_ahead, _MAX_COUNTER - 1)
    matched = match_counters(secret, candidate, range(counter, last + 1), digits, algorithm)
    if matched is None:
        return None
    return matched - counter
