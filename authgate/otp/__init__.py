"""
HOTP / TOTP one-time password core.

Pure functions only: nothing in this package logs, stores or performs I/O
apart from reading the OS random source and the system clock.
"""

from .errors import (
    InsufficientEntropySource,
    InvalidEncoding,
    InvalidParameter,
    OTPError,
    WeakSecretLength,
)
from .hotp import HashAlgorithm, dynamic_truncate, hotp, hotp_verify
from .keygen import MIN_SECRET_BYTES, generate_secret, random_base32
from .service import Registration, VerificationOutcome, VerificationService
from .totp import (
    MAX_WINDOW,
    TOTPParameters,
    seconds_remaining,
    time_step,
    totp_code,
    totp_verify,
    totp_verify_delta,
)
from .uri import build_uri

__all__ = [
    "HashAlgorithm",
    "InsufficientEntropySource",
    "InvalidEncoding",
    "InvalidParameter",
    "MAX_WINDOW",
    "MIN_SECRET_BYTES",
    "OTPError",
    "Registration",
    "TOTPParameters",
    "VerificationOutcome",
    "VerificationService",
    "WeakSecretLength",
    "build_uri",
    "dynamic_truncate",
    "generate_secret",
    "hotp",
    "hotp_verify",
    "random_base32",
    "seconds_remaining",
    "time_step",
    "totp_code",
    "totp_verify",
    "totp_verify_delta",
]
