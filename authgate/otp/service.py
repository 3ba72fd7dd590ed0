"""
Second-factor façade used by the HTTP layer and the CLI.

The service never stores anything and never sees passwords: registration
hands back a secret for the caller to persist, login verification is given
the secret the caller loaded.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

from . import base32
from .keygen import DEFAULT_SECRET_BYTES, generate_secret
from .totp import TOTPParameters, totp_verify
from .uri import build_uri


class VerificationOutcome(str, Enum):
    VERIFIED = "verified"
    REJECTED_BAD_CODE = "rejected_bad_code"
    REJECTED_MISSING_SECRET = "rejected_missing_secret"

    @property
    def accepted(self) -> bool:
        return self is VerificationOutcome.VERIFIED


@dataclass(frozen=True)
class Registration:
    secret: bytes
    secret_base32: str
    provisioning_uri: str


class VerificationService:
    def __init__(self, issuer: str, parameters: Optional[TOTPParameters] = None,
                 secret_length: int = DEFAULT_SECRET_BYTES,
                 clock: Callable[[], float] = time.time):
        self.issuer = issuer
        self.parameters = parameters or TOTPParameters()
        self.secret_length = secret_length
        self.clock = clock

    def register(self, account_identity: str) -> Registration:
        """
        Create a fresh secret and the provisioning URI for an account.

        Args:
            account_identity: Username shown as the account label

        Returns:
            Registration holding the raw secret, its Base32 form for storage
            and the otpauth:// URI for display
        """
        secret = generate_secret(self.secret_length)
        uri = build_uri(
            secret,
            account_identity,
            self.issuer,
            digits=self.parameters.digits,
            step_seconds=self.parameters.step_seconds,
            algorithm=self.parameters.algorithm,
        )
        return Registration(secret=secret, secret_base32=base32.encode(secret), provisioning_uri=uri)

    def verify_login(self, stored_secret: Union[bytes, str, None], candidate_code: str,
                     now: Optional[float] = None) -> VerificationOutcome:
        """
        Check a one-time code against the stored secret.

        Args:
            stored_secret: Raw secret bytes or their Base32 text, None if the
                account never enrolled
            candidate_code: Code typed by the user
            now: Unix time to verify at, defaults to the service clock

        Returns:
            VerificationOutcome

        Raises:
            InvalidEncoding: If a stored Base32 secret is corrupt
        """
        if not stored_secret:
            return VerificationOutcome.REJECTED_MISSING_SECRET
        if isinstance(stored_secret, str):
            stored_secret = base32.decode(stored_secret)

        params = self.parameters
        verified = totp_verify(
            stored_secret,
            candidate_code,
            for_time=self.clock() if now is None else now,
            step_seconds=params.step_seconds,
            window=params.window,
            digits=params.digits,
            algorithm=params.algorithm,
            epoch=params.epoch,
        )
        if verified:
            return VerificationOutcome.VERIFIED
        return VerificationOutcome.REJECTED_BAD_CODE
