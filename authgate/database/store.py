"""
Account persistence.

AccountStore is the key-value contract the HTTP layer relies on: secrets are
saved and loaded by username. SqlAccountStore backs it with PostgreSQL,
MemoryAccountStore keeps everything in a dict for development and tests.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker

from authgate.otp import base32
from .models import Accounts


class AccountExists(Exception):
    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Account '{username}' already exists")


class AccountNotFound(Exception):
    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Account '{username}' does not exist")


@dataclass(frozen=True)
class AccountRecord:
    username: str
    password_hash: str
    totp_secret: Optional[str] = None
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None


class AccountStore:
    """Interface shared by the storage backends."""

    async def create_account(self, username: str, password_hash: str, secret: Optional[bytes]) -> AccountRecord:
        raise NotImplementedError

    async def get_account(self, username: str) -> Optional[AccountRecord]:
        raise NotImplementedError

    async def save_secret(self, username: str, secret: bytes) -> None:
        """Replace the secret of an existing account. The old secret stops working."""
        raise NotImplementedError

    async def record_login(self, username: str) -> None:
        raise NotImplementedError

    async def load_secret(self, username: str) -> Optional[bytes]:
        """Return the raw secret, or None if the account is unknown or not enrolled."""
        account = await self.get_account(username)
        if account is None or not account.totp_secret:
            return None
        return base32.decode(account.totp_secret)


class MemoryAccountStore(AccountStore):
    def __init__(self):
        self._accounts: Dict[str, AccountRecord] = {}

    async def create_account(self, username, password_hash, secret):
        if username in self._accounts:
            raise AccountExists(username)
        record = AccountRecord(
            username=username,
            password_hash=password_hash,
            totp_secret=base32.encode(secret) if secret else None,
            created_at=datetime.utcnow(),
        )
        self._accounts[username] = record
        return record

    async def get_account(self, username):
        return self._accounts.get(username)

    async def save_secret(self, username, secret):
        if username not in self._accounts:
            raise AccountNotFound(username)
        self._accounts[username] = replace(self._accounts[username], totp_secret=base32.encode(secret))

    async def record_login(self, username):
        if username in self._accounts:
            self._accounts[username] = replace(self._accounts[username], last_login=datetime.utcnow())


class SqlAccountStore(AccountStore):
    def __init__(self, sessionmaker: async_sessionmaker):
        self.sessionmaker = sessionmaker

    @staticmethod
    def _to_record(row: Accounts) -> AccountRecord:
        return AccountRecord(
            username=row.username,
            password_hash=row.password_hash,
            totp_secret=row.totp_secret,
            created_at=row.created_at,
            last_login=row.last_login,
        )

    async def _fetch(self, session, username: str) -> Optional[Accounts]:
        result = await session.execute(
            select(Accounts).where(Accounts.username == username)
        )
        return result.scalars().first()

    async def create_account(self, username, password_hash, secret):
        async with self.sessionmaker() as session:
            account = Accounts(
                username=username,
                password_hash=password_hash,
                totp_secret=base32.encode(secret) if secret else None,
            )
            session.add(account)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise AccountExists(username) from None
            # created_at is a server default and is not loaded after the insert
            return AccountRecord(username=username, password_hash=password_hash, totp_secret=account.totp_secret)

    async def get_account(self, username):
        async with self.sessionmaker() as session:
            account = await self._fetch(session, username)
            return self._to_record(account) if account else None

    async def save_secret(self, username, secret):
        async with self.sessionmaker() as session:
            account = await self._fetch(session, username)
            if account is None:
                raise AccountNotFound(username)
            account.totp_secret = base32.encode(secret)
            await session.commit()

    async def record_login(self, username):
        async with self.sessionmaker() as session:
            account = await self._fetch(session, username)
            if account is not None:
                account.last_login = datetime.utcnow()
                await session.commit()
