"""Tests for the in-memory account store and the SQLAlchemy model helpers."""

import asyncio

import pytest

from authgate.database.models import Accounts, async_database_url
from authgate.database.store import AccountExists, AccountNotFound, MemoryAccountStore
from authgate.otp import base32, generate_secret


def run(coro):
    return asyncio.run(coro)


def test_create_and_load_secret():
    store = MemoryAccountStore()
    secret = generate_secret()

    async def scenario():
        record = await store.create_account("alice", "hash", secret)
        assert record.totp_secret == base32.encode(secret)
        assert record.created_at is not None
        return await store.load_secret("alice")

    assert run(scenario()) == secret


def test_unknown_account_has_no_secret():
    assert run(MemoryAccountStore().load_secret("nobody")) is None


def test_account_without_secret():
    store = MemoryAccountStore()

    async def scenario():
        await store.create_account("bob", "hash", None)
        return await store.load_secret("bob")

    assert run(scenario()) is None


def test_duplicate_username():
    store = MemoryAccountStore()

    async def scenario():
        await store.create_account("alice", "hash", generate_secret())
        await store.create_account("alice", "other", generate_secret())

    with pytest.raises(AccountExists):
        run(scenario())


def test_save_secret_replaces_old_one():
    store = MemoryAccountStore()
    old, new = generate_secret(), generate_secret()

    async def scenario():
        await store.create_account("alice", "hash", old)
        await store.save_secret("alice", new)
        return await store.load_secret("alice")

    assert run(scenario()) == new


def test_save_secret_for_unknown_account():
    with pytest.raises(AccountNotFound):
        run(MemoryAccountStore().save_secret("nobody", generate_secret()))


def test_record_login_sets_timestamp():
    store = MemoryAccountStore()

    async def scenario():
        await store.create_account("alice", "hash", generate_secret())
        await store.record_login("alice")
        return await store.get_account("alice")

    assert run(scenario()).last_login is not None


def test_async_database_url():
    assert async_database_url("postgresql://u:p@db:5432/auth") == "postgresql+asyncpg://u:p@db:5432/auth"
    with pytest.raises(ValueError):
        async_database_url("sqlite:///auth.db")


def test_accounts_table_columns():
    columns = set(Accounts.__table__.columns.keys())
    assert columns == {"id", "username", "password_hash", "totp_secret", "created_at", "last_login"}
    assert Accounts.__table__.columns["totp_secret"].nullable
