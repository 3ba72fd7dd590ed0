import pytest
from fastapi.testclient import TestClient

from authgate.common.settings import Settings
from authgate.database.store import MemoryAccountStore
from authgate.main import create_app


class FakeRedis:
    """Just enough of redis.asyncio for the failed-attempt tracking."""

    def __init__(self):
        self.values = {}
        self.lists = {}
        self.closed = False

    async def get(self, key):
        return self.values.get(key)

    async def set(self, key, value, ex=None):
        self.values[key] = value

    async def delete(self, key):
        self.values.pop(key, None)
        self.lists.pop(key, None)

    async def rpush(self, key, value):
        self.lists.setdefault(key, []).append(value)

    async def expire(self, key, seconds):
        pass

    async def lrange(self, key, start, end):
        items = self.lists.get(key, [])
        return items[start:] if end == -1 else items[start:end + 1]

    async def aclose(self):
        self.closed = True


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        database_url="memory://",
        otp_issuer="AuthGate Test",
        anti_abuse_enabled=False,
        rate_limit_enabled=False,
    )


@pytest.fixture
def store():
    return MemoryAccountStore()


@pytest.fixture
def client(settings, store):
    app = create_app(settings, store=store)
    with TestClient(app) as test_client:
        yield test_client
