"""
Exceptions raised by the one-time password core.
"""


class OTPError(Exception):
    """Base class for every error raised by authgate.otp."""


class InvalidEncoding(OTPError):
    """Input is not valid Base32 (bad character, misplaced or wrong amount of padding)."""


class WeakSecretLength(OTPError):
    """Requested secret is shorter than the minimum accepted length."""

    def __init__(self, byte_length: int, minimum: int):
        self.byte_length = byte_length
        self.minimum = minimum
        super().__init__(f"secret length {byte_length} bytes is below the minimum of {minimum} bytes")


class InsufficientEntropySource(OTPError):
    """The operating system random source is unavailable."""


class InvalidParameter(OTPError, ValueError):
    """A digits, counter, time step, window or label argument is out of range."""
