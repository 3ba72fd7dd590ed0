"""
Time-based one-time passwords (RFC 6238).

The counter is the number of whole time steps since `epoch`. Verification
accepts codes from `window` steps either side of the current one so that
small clock differences between server and authenticator app do not lock
users out.
"""

import time
from dataclasses import dataclass
from typing import Optional

from .errors import InvalidParameter
from .hotp import DEFAULT_DIGITS, HashAlgorithm, check_digits, hotp, match_counters

DEFAULT_STEP_SECONDS = 30
DEFAULT_WINDOW = 1
MAX_WINDOW = 10


@dataclass(frozen=True)
class TOTPParameters:
    """Settings that the server and the authenticator app must agree on."""
    digits: int = DEFAULT_DIGITS
    step_seconds: int = DEFAULT_STEP_SECONDS
    window: int = DEFAULT_WINDOW
    algorithm: HashAlgorithm = HashAlgorithm.SHA1
    epoch: int = 0

    def __post_init__(self):
        check_digits(self.digits)
        _check_step(self.step_seconds)
        _check_window(self.window)
        object.__setattr__(self, "algorithm", HashAlgorithm.parse(self.algorithm))


def _check_step(step_seconds: int) -> None:
    if step_seconds <= 0:
        raise InvalidParameter(f"step_seconds must be positive, got {step_seconds}")


def _check_window(window: int) -> None:
    if not 0 <= window <= MAX_WINDOW:
        raise InvalidParameter(f"window must be between 0 and {MAX_WINDOW}, got {window}")


def time_step(for_time: Optional[float] = None, step_seconds: int = DEFAULT_STEP_SECONDS,
              epoch: int = 0) -> int:
    """
    Return the counter for a Unix timestamp.

    Args:
        for_time: Unix time in seconds, defaults to now
        step_seconds: Length of one time step
        epoch: Unix time at which counting starts (T0)
    """
    _check_step(step_seconds)
    if for_time is None:
        for_time = time.time()
    if for_time < epoch:
        raise InvalidParameter(f"time {for_time} is before epoch {epoch}")
    return int((for_time - epoch) // step_seconds)


def seconds_remaining(for_time: Optional[float] = None, step_seconds: int = DEFAULT_STEP_SECONDS,
                      epoch: int = 0) -> int:
    """Seconds until the code for `for_time` rolls over."""
    _check_step(step_seconds)
    if for_time is None:
        for_time = time.time()
    return step_seconds - int((for_time - epoch) % step_seconds)


def totp_code(secret: bytes, for_time: Optional[float] = None,
              step_seconds: int = DEFAULT_STEP_SECONDS, digits: int = DEFAULT_DIGITS,
              algorithm: HashAlgorithm = HashAlgorithm.SHA1, epoch: int = 0) -> str:
    """
    Compute the TOTP code for a point in time.

    Args:
        secret: Raw shared secret bytes
        for_time: Unix time in seconds, defaults to now
        step_seconds: Length of one time step
        digits: Length of the returned code
        algorithm: HMAC hash function
        epoch: Unix time at which counting starts

    Returns:
        Zero-padded decimal code
    """
    return hotp(secret, time_step(for_time, step_seconds, epoch), digits, algorithm)


def totp_verify_delta(secret: bytes, candidate: str, for_time: Optional[float] = None,
                      step_seconds: int = DEFAULT_STEP_SECONDS, window: int = DEFAULT_WINDOW,
                      digits: int = DEFAULT_DIGITS, algorithm: HashAlgorithm = HashAlgorithm.SHA1,
                      epoch: int = 0) -> Optional[int]:
    """
    Verify a candidate code and report which time step it belonged to.

    All 2 * window + 1 codes are computed and compared in constant time.

    Returns:
        The step offset of the match (-window..window, 0 for the current
        step), or None if the candidate is not valid
    """
    _check_window(window)
    counter = time_step(for_time, step_seconds, epoch)
    first = max(counter - window, 0)
    matched = match_counters(secret, candidate, range(first, counter + window + 1), digits, algorithm)
    if matched is None:
        return None
    return matched - counter


def totp_verify(secret: bytes, candidate: str, for_time: Optional[float] = None,
                step_seconds: int = DEFAULT_STEP_SECONDS, window: int = DEFAULT_WINDOW,
                digits: int = DEFAULT_DIGITS, algorithm: HashAlgorithm = HashAlgorithm.SHA1,
                epoch: int = 0) -> bool:
    """
    Check a candidate code against the current step and `window` steps either side.

    Returns:
        True if the candidate matches any code in the window
    """
    return totp_verify_delta(secret, candidate, for_time, step_seconds, window,
                             digits, algorithm, epoch) is not None
