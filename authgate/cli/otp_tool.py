"""
Command line helper for TOTP secrets and codes.
Usage:
    authgate-otp secret [--bytes 20]
    authgate-otp code --secret <base32> [--time <unix>]
    authgate-otp verify --secret <base32> --code <code> [--time <unix>]
    authgate-otp uri --secret <base32> --account <name> [--issuer <name>]

OTP parameters (digits, period, window, algorithm) come from the same
environment variables the server reads.
"""

import argparse
import sys

from authgate.common.settings import Settings
from authgate.otp import (
    OTPError,
    base32,
    build_uri,
    random_base32,
    seconds_remaining,
    totp_code,
    totp_verify_delta,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate and check TOTP secrets and codes")
    sub = parser.add_subparsers(dest="command", required=True)

    secret = sub.add_parser("secret", help="Generate a new Base32 secret")
    secret.add_argument("--bytes", type=int, default=None, help="Secret length in bytes")

    code = sub.add_parser("code", help="Print the current code for a secret")
    code.add_argument("--secret", required=True, help="Base32 secret")
    code.add_argument("--time", type=float, default=None, help="Unix time instead of now")

    verify = sub.add_parser("verify", help="Check a code against a secret")
    verify.add_argument("--secret", required=True, help="Base32 secret")
    verify.add_argument("--code", required=True, help="Code to check")
    verify.add_argument("--time", type=float, default=None, help="Unix time instead of now")
    verify.add_argument("--window", type=int, default=None, help="Accepted steps of clock drift")

    uri = sub.add_parser("uri", help="Print the otpauth:// provisioning URI")
    uri.add_argument("--secret", required=True, help="Base32 secret")
    uri.add_argument("--account", required=True, help="Account label")
    uri.add_argument("--issuer", default=None, help="Issuer label")

    return parser


def run(args, settings: Settings) -> int:
    params = settings.totp_parameters()

    if args.command == "secret":
        print(random_base32(args.bytes or settings.otp_secret_bytes))
        return 0

    secret = base32.decode(args.secret)

    if args.command == "code":
        print(totp_code(secret, args.time, params.step_seconds, params.digits, params.algorithm))
        print(f"valid for {seconds_remaining(args.time, params.step_seconds)}s", file=sys.stderr)
        return 0

    if args.command == "verify":
        window = params.window if args.window is None else args.window
        delta = totp_verify_delta(secret, args.code, args.time, params.step_seconds, window,
                                  params.digits, params.algorithm)
        if delta is None:
            print("invalid")
            return 1
        print(f"valid (step offset {delta:+d})")
        return 0

    issuer = settings.otp_issuer if args.issuer is None else args.issuer
    print(build_uri(secret, args.account, issuer, params.digits, params.step_seconds, params.algorithm))
    return 0


def main(argv=None):
    """Main entry point for the CLI tool."""
    args = _build_parser().parse_args(argv)
    try:
        status = run(args, Settings.from_env())
    except OTPError as e:
        print(f"Error: {e}", file=sys.stderr)
        status = 2
    sys.exit(status)


if __name__ == "__main__":
    main()
