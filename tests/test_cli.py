"""Tests for the authgate-otp command line tool."""

import pyotp
import pytest

from authgate.cli import otp_tool
from authgate.otp import base32

SECRET_B32 = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("OTP_DIGITS", "OTP_PERIOD", "OTP_WINDOW", "OTP_ALGORITHM", "OTP_ISSUER", "OTP_SECRET_BYTES"):
        monkeypatch.delenv(name, raising=False)


def run_cli(argv):
    with pytest.raises(SystemExit) as excinfo:
        otp_tool.main(argv)
    return excinfo.value.code


def test_secret(capsys):
    assert run_cli(["secret", "--bytes", "16"]) == 0
    assert len(base32.decode(capsys.readouterr().out.strip())) == 16


def test_code_at_fixed_time(capsys):
    assert run_cli(["code", "--secret", SECRET_B32, "--time", "59"]) == 0
    out = capsys.readouterr()
    assert out.out.strip() == pyotp.TOTP(SECRET_B32).at(59)
    assert "valid for 1s" in out.err


def test_verify(capsys):
    code = pyotp.TOTP(SECRET_B32).at(1_700_000_000 - 30)
    assert run_cli(["verify", "--secret", SECRET_B32, "--code", code, "--time", "1700000000"]) == 0
    assert "step offset -1" in capsys.readouterr().out


def test_verify_outside_window(capsys):
    code = pyotp.TOTP(SECRET_B32).at(1_700_000_000 - 30)
    args = ["verify", "--secret", SECRET_B32, "--code", code, "--time", "1700000000", "--window", "0"]
    assert run_cli(args) == 1
    assert capsys.readouterr().out.strip() == "invalid"


def test_uri(capsys):
    assert run_cli(["uri", "--secret", SECRET_B32, "--account", "alice", "--issuer", "Example"]) == 0
    assert capsys.readouterr().out.strip() == (
        f"otpauth://totp/Example:alice?secret={SECRET_B32}&issuer=Example&digits=6&period=30"
    )


def test_bad_secret(capsys):
    assert run_cli(["code", "--secret", "not base32!"]) == 2
    assert "Error" in capsys.readouterr().err


def test_weak_secret_length(capsys):
    assert run_cli(["secret", "--bytes", "5"]) == 2


def test_create_account_validates_input(capsys):
    from authgate.cli import create_account

    with pytest.raises(SystemExit) as excinfo:
        create_account.main(["--username", "ab", "--password", "Password123"])
    assert excinfo.value.code == 1
    assert "Username must be at least 3 characters" in capsys.readouterr().out


def test_create_account_needs_a_database(monkeypatch, capsys):
    from authgate.cli import create_account

    monkeypatch.setenv("DATABASE_URL", "memory://")
    with pytest.raises(SystemExit) as excinfo:
        create_account.main(["--username", "alice", "--password", "Password123"])
    assert excinfo.value.code == 1
    assert "DATABASE_URL must point at PostgreSQL" in capsys.readouterr().out
