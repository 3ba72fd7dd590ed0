"""
CLI tool to create accounts enrolled for TOTP.
Usage: authgate-create-account --username <username> --password <password>
"""

import asyncio
import argparse
import sys

from authgate.api.auth.password_utils import hash_password
from authgate.common.qr import render_qr_png
from authgate.common.settings import Settings
from authgate.database.models import AuthBase, create_engine, create_sessionmaker
from authgate.database.store import AccountExists, SqlAccountStore
from authgate.otp import VerificationService


async def create_account(settings: Settings, username: str, password: str, qr_path: str = None) -> bool:
    """
    Create a new account with a fresh TOTP secret.

    Args:
        settings: Loaded settings, DATABASE_URL must point at PostgreSQL
        username: Username for the account
        password: Password for the account
        qr_path: Optional path to write the QR code PNG to

    Returns:
        True if the account was created
    """
    service = VerificationService(
        issuer=settings.otp_issuer,
        parameters=settings.totp_parameters(),
        secret_length=settings.otp_secret_bytes,
    )
    registration = service.register(username)

    engine = create_engine(settings.database_url)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(AuthBase.metadata.create_all)
        store = SqlAccountStore(create_sessionmaker(engine))
        await store.create_account(username, hash_password(password), registration.secret)
    except AccountExists:
        print(f"Error: account with username '{username}' already exists!")
        return False
    finally:
        await engine.dispose()

    if qr_path:
        with open(qr_path, "wb") as f:
            f.write(render_qr_png(registration.provisioning_uri))

    print("\n" + "=" * 80)
    print("Account created successfully!")
    print("=" * 80)
    print(f"\nUsername: {username}")
    print("Password: [set by you]")
    print("\nTOTP secret (for manual entry in the authenticator app):\n")
    print(f"   {registration.secret_base32}")
    print("\nTOTP URI (encoded in the QR code):\n")
    print(f"   {registration.provisioning_uri}")
    if qr_path:
        print(f"\nQR code written to {qr_path}")
    print("\nInstructions:")
    print("   1. Open Google Authenticator (or a compatible TOTP app)")
    print("   2. Add a new account by scanning the QR code or entering the secret manually")
    print(f"   3. Use the {settings.otp_digits}-digit code from the app to log in")
    print("=" * 80 + "\n")

    return True


def main(argv=None):
    """Main entry point for the CLI tool."""
    parser = argparse.ArgumentParser(
        description="Create an account with TOTP 2FA"
    )
    parser.add_argument(
        "--username",
        required=True,
        help="Username for the account"
    )
    parser.add_argument(
        "--password",
        required=True,
        help="Password for the account"
    )
    parser.add_argument(
        "--qr",
        dest="qr_path",
        help="Write the QR code PNG to this file"
    )

    args = parser.parse_args(argv)

    if len(args.username) < 3:
        print("Error: Username must be at least 3 characters long")
        sys.exit(1)

    if len(args.password) < 8:
        print("Error: Password must be at least 8 characters long")
        sys.exit(1)

    settings = Settings.from_env()
    if settings.uses_memory_store:
        print("Error: DATABASE_URL must point at PostgreSQL to create accounts from the CLI")
        sys.exit(1)

    success = asyncio.run(create_account(settings, args.username, args.password, args.qr_path))

    if not success:
        sys.exit(1)


if __name__ == "__main__":
    main()
