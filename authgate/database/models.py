import sqlalchemy
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from authgate.common.log_handler import log


class AuthBase(DeclarativeBase):
    pass


class Accounts(AuthBase):
    __tablename__ = 'accounts'
    id = sqlalchemy.Column(sqlalchemy.Integer, primary_key=True)
    username = sqlalchemy.Column(sqlalchemy.String, unique=True, nullable=False)
    password_hash = sqlalchemy.Column(sqlalchemy.String, nullable=False)
    totp_secret = sqlalchemy.Column(sqlalchemy.String, nullable=True)  # unpadded base32, NULL until enrolled
    created_at = sqlalchemy.Column(sqlalchemy.DateTime, server_default=sqlalchemy.func.now())
    last_login = sqlalchemy.Column(sqlalchemy.DateTime, nullable=True)


def async_database_url(url: str) -> str:
    """Turn a plain postgresql:// URL (the form alembic uses) into its asyncpg variant."""
    if not url or not url.startswith("postgresql://"):
        raise ValueError("DATABASE_URL must be a postgresql:// URL")
    return "postgresql+asyncpg://" + url[len("postgresql://"):]


def create_engine(url: str) -> AsyncEngine:
    try:
        return create_async_engine(async_database_url(url), echo=False, pool_size=20, max_overflow=10, pool_recycle=3600, pool_pre_ping=True)
    except Exception as e:
        log.critical(f"Database connection failed: {e}")
        raise


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


"""
Aquire a session with:
async with sessionmaker() as session:
"""
