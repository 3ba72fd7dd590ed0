"""
otpauth:// provisioning URIs, the payload of the QR code scanned by authenticator apps.
"""

from urllib.parse import quote

from . import base32
from .errors import InvalidParameter
from .hotp import DEFAULT_DIGITS, HashAlgorithm, check_digits
from .totp import DEFAULT_STEP_SECONDS


def _quote(value: str) -> str:
    # ":" separates issuer and account in the label, so it must be encoded too
    return quote(value, safe="")


def build_uri(secret: bytes, account_label: str, issuer: str = "", digits: int = DEFAULT_DIGITS,
              step_seconds: int = DEFAULT_STEP_SECONDS,
              algorithm: HashAlgorithm = HashAlgorithm.SHA1) -> str:
    """
    Build the key URI for a TOTP secret.

    Args:
        secret: Raw shared secret bytes
        account_label: Account name shown in the authenticator app
        issuer: Service name shown in the authenticator app, may be empty
        digits: Code length
        step_seconds: Time step length (the "period" parameter)
        algorithm: HMAC hash function, only written to the URI when not SHA1

    Returns:
        otpauth://totp/{issuer}:{account}?secret=...&issuer=...&digits=...&period=...
    """
    if not account_label:
        raise InvalidParameter("account_label must not be empty")
    if step_seconds <= 0:
        raise InvalidParameter(f"step_seconds must be positive, got {step_seconds}")
    check_digits(digits)
    algorithm = HashAlgorithm.parse(algorithm)

    label = _quote(account_label)
    params = [f"secret={base32.encode(secret)}"]
    if issuer:
        label = f"{_quote(issuer)}:{label}"
        params.append(f"issuer={_quote(issuer)}")
    params.append(f"digits={digits}")
    params.append(f"period={step_seconds}")
    if algorithm is not HashAlgorithm.SHA1:
        params.append(f"algorithm={algorithm.value}")

    return f"otpauth://totp/{label}?{'&'.join(params)}"
