"""Tests for the HOTP engine against RFC 4226 and pyotp."""

import hashlib

import pyotp
import pytest

from authgate.otp import HashAlgorithm, InvalidParameter, base32, dynamic_truncate, hotp, hotp_verify

RFC4226_SECRET = b"12345678901234567890"

# RFC 4226 appendix D
RFC4226_CODES = [
    "755224", "287082", "359152", "969429", "338314",
    "254676", "287922", "162583", "399871", "520489",
]


@pytest.mark.parametrize("counter, expected", list(enumerate(RFC4226_CODES)))
def test_rfc4226_vectors(counter, expected):
    assert hotp(RFC4226_SECRET, counter) == expected


def test_dynamic_truncation_rfc_example():
    # RFC 4226 section 5.4
    digest = bytes.fromhex("1f8698690e02ca16618550ef7f19da8e945b555a")
    assert dynamic_truncate(digest) == 0x50EF7F19
    assert dynamic_truncate(digest) % 10 ** 6 == 872921


def test_truncation_masks_the_top_bit():
    digest = bytes([0xFF] * 19 + [0x00])  # offset 0, first four bytes all ones
    assert dynamic_truncate(digest) == 0x7FFFFFFF


def test_is_deterministic():
    codes = {hotp(RFC4226_SECRET, 42) for _ in range(100)}
    assert len(codes) == 1


def test_codes_are_zero_padded():
    for counter in range(300):
        code = hotp(RFC4226_SECRET, counter)
        assert len(code) == 6 and code.isdigit()


@pytest.mark.parametrize("digits", [6, 7, 8, 9, 10])
def test_digit_lengths(digits):
    assert len(hotp(RFC4226_SECRET, 7, digits=digits)) == digits


def test_eight_digit_code_shares_low_digits():
    assert hotp(RFC4226_SECRET, 1, digits=8).endswith(hotp(RFC4226_SECRET, 1, digits=6))


@pytest.mark.parametrize("algorithm, digest", [
    (HashAlgorithm.SHA1, hashlib.sha1),
    (HashAlgorithm.SHA256, hashlib.sha256),
    (HashAlgorithm.SHA512, hashlib.sha512),
])
def test_matches_pyotp(algorithm, digest):
    secret = bytes(range(1, 33))
    reference = pyotp.HOTP(base32.encode(secret), digest=digest)
    for counter in (0, 1, 2, 1000, 2 ** 32 + 5):
        assert hotp(secret, counter, algorithm=algorithm) == reference.at(counter)


def test_accepts_algorithm_name():
    assert hotp(RFC4226_SECRET, 0, algorithm="SHA1") == "755224"


def test_algorithm_parse_spellings():
    assert HashAlgorithm.parse("sha-256") is HashAlgorithm.SHA256
    assert HashAlgorithm.parse("sha512") is HashAlgorithm.SHA512
    with pytest.raises(InvalidParameter):
        HashAlgorithm.parse("md5")


@pytest.mark.parametrize("name", ["sha256", "SHA-256", "sha-256"])
def test_accepts_lowercase_and_hyphenated_names(name):
    assert hotp(RFC4226_SECRET, 7, algorithm=name) == hotp(RFC4226_SECRET, 7, algorithm=HashAlgorithm.SHA256)


def test_unsupported_algorithm_is_an_otp_error():
    with pytest.raises(InvalidParameter):
        hotp(RFC4226_SECRET, 0, algorithm="md5")


@pytest.mark.parametrize("counter", [-1, 2 ** 64])
def test_counter_out_of_range(counter):
    with pytest.raises(InvalidParameter):
        hotp(RFC4226_SECRET, counter)


def test_largest_counter_is_accepted():
    assert len(hotp(RFC4226_SECRET, 2 ** 64 - 1)) == 6


@pytest.mark.parametrize("digits", [0, 5, 11])
def test_digits_out_of_range(digits):
    with pytest.raises(InvalidParameter):
        hotp(RFC4226_SECRET, 0, digits=digits)


def test_empty_secret_is_rejected():
    with pytest.raises(InvalidParameter):
        hotp(b"", 0)


def test_hotp_verify_exact_counter():
    assert hotp_verify(RFC4226_SECRET, "755224", counter=0) == 0
    assert hotp_verify(RFC4226_SECRET, "287082", counter=0) is None


def test_hotp_verify_look_ahead():
    assert hotp_verify(RFC4226_SECRET, "969429", counter=1, look_ahead=3) == 2
    assert hotp_verify(RFC4226_SECRET, "520489", counter=1, look_ahead=3) is None


def test_hotp_verify_rejects_garbage_without_error():
    assert hotp_verify(RFC4226_SECRET, "", counter=0) is None
    assert hotp_verify(RFC4226_SECRET, "75522", counter=0) is None
    assert hotp_verify(RFC4226_SECRET, "７５５２２４", counter=0) is None


def test_hotp_verify_negative_look_ahead():
    with pytest.raises(InvalidParameter):
        hotp_verify(RFC4226_SECRET, "755224", counter=0, look_ahead=-1)
