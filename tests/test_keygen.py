"""Tests for shared secret generation."""

import secrets

import pytest

from authgate.otp import (
    MIN_SECRET_BYTES,
    InsufficientEntropySource,
    WeakSecretLength,
    base32,
    generate_secret,
    random_base32,
)


def test_default_secret_is_160_bits():
    assert len(generate_secret()) == 20


def test_minimum_length_is_accepted():
    secret = generate_secret(10)
    assert isinstance(secret, bytes)
    assert len(secret) >= 10


@pytest.mark.parametrize("length", [0, 1, 5, MIN_SECRET_BYTES - 1])
def test_short_secrets_are_rejected(length):
    with pytest.raises(WeakSecretLength) as excinfo:
        generate_secret(length)
    assert excinfo.value.minimum == MIN_SECRET_BYTES
    assert excinfo.value.byte_length == length


def test_secrets_do_not_repeat():
    seen = {generate_secret(10) for _ in range(10_000)}
    assert len(seen) == 10_000


def test_unavailable_random_source_is_fatal(monkeypatch):
    def broken(n):
        raise NotImplementedError("no source of randomness")

    monkeypatch.setattr(secrets, "token_bytes", broken)
    with pytest.raises(InsufficientEntropySource):
        generate_secret(20)


def test_os_error_from_random_source_is_fatal(monkeypatch):
    def broken(n):
        raise OSError("getrandom failed")

    monkeypatch.setattr(secrets, "token_bytes", broken)
    with pytest.raises(InsufficientEntropySource):
        generate_secret(20)


def test_random_base32_decodes_to_requested_length():
    encoded = random_base32(16)
    assert len(base32.decode(encoded)) == 16
    assert "=" not in encoded
