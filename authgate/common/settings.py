"""
Runtime configuration loaded from environment variables and the .env file.
"""

import logging
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from authgate.otp import HashAlgorithm, TOTPParameters
from authgate.otp.keygen import DEFAULT_SECRET_BYTES, MIN_SECRET_BYTES


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    dev: bool = False
    log_level: str = "INFO"

    # Storage
    database_url: str = "memory://"
    redis_url: str = "redis://localhost:6379/0"

    # Comma separated CORS origins
    frontend_url: str = ""

    # One-time passwords
    otp_issuer: str = "AuthGate"
    otp_digits: int = Field(6, ge=6, le=10)
    otp_period: int = Field(30, gt=0)
    otp_window: int = Field(1, ge=0, le=10)
    otp_algorithm: HashAlgorithm = HashAlgorithm.SHA1
    otp_secret_bytes: int = Field(DEFAULT_SECRET_BYTES, ge=MIN_SECRET_BYTES)

    # Abuse protection
    anti_abuse_enabled: bool = True
    max_failed_attempts: int = Field(10, gt=0)
    ban_duration_hours: int = Field(48, gt=0)
    rate_limit_enabled: bool = True
    auth_rate_limit: str = "10/minute"

    @field_validator("otp_algorithm", mode="before")
    @classmethod
    def _parse_algorithm(cls, value):
        return HashAlgorithm.parse(value)

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"unknown log level '{value}'")
        return value

    @property
    def frontend_urls(self) -> List[str]:
        return [url.strip() for url in self.frontend_url.split(",") if url.strip()]

    @property
    def uses_memory_store(self) -> bool:
        return self.database_url.startswith("memory://")

    def totp_parameters(self) -> TOTPParameters:
        return TOTPParameters(
            digits=self.otp_digits,
            step_seconds=self.otp_period,
            window=self.otp_window,
            algorithm=self.otp_algorithm,
        )

    @classmethod
    def from_env(cls) -> "Settings":
        return cls()
