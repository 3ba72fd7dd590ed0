import asyncio
from contextlib import asynccontextmanager
from typing import Optional

import redis.asyncio as redis
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from authgate.api import router as api_router
from authgate.api.anti_abuse import setup_ban_middleware
from authgate.api.rate_limiter import configure_limiter, limiter
from authgate.common.log_handler import log
from authgate.common.settings import Settings
from authgate.database.models import AuthBase, create_engine, create_sessionmaker
from authgate.database.store import AccountStore, MemoryAccountStore, SqlAccountStore
from authgate.otp import VerificationService


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    engine = None

    if app.state.store is None:
        if settings.uses_memory_store:
            log.warning("Using in-memory account store, accounts are lost on restart")
            app.state.store = MemoryAccountStore()
        else:
            engine = create_engine(settings.database_url)
            async with engine.begin() as conn:
                log.info("Creating database tables if they do not exist")
                await conn.run_sync(AuthBase.metadata.create_all)
            app.state.store = SqlAccountStore(create_sessionmaker(engine))

    if settings.anti_abuse_enabled and app.state.redis is None:
        app.state.redis = redis.from_url(settings.redis_url, encoding="utf-8", decode_responses=True)
        log.info("Redis client for failed-attempt tracking initialized")

    try:
        yield
    finally:
        if engine is not None:
            await engine.dispose()
            log.info("Database engine disposed")
        if app.state.redis is not None:
            await app.state.redis.aclose()
            log.info("Redis connection closed")


def create_app(settings: Optional[Settings] = None, store: Optional[AccountStore] = None, redis_client=None) -> FastAPI:
    settings = settings or Settings.from_env()
    log.setLevel(settings.log_level)

    if settings.dev:
        app = FastAPI(debug=True, title="AuthGate DEVELOPMENT", lifespan=lifespan)
        log.warning("Starting **development** server")
    else:
        app = FastAPI(title="AuthGate", lifespan=lifespan, openapi_url=None, docs_url=None, redoc_url=None)

    app.state.settings = settings
    app.state.store = store
    app.state.redis = redis_client
    app.state.verification_service = VerificationService(
        issuer=settings.otp_issuer,
        parameters=settings.totp_parameters(),
        secret_length=settings.otp_secret_bytes,
    )

    configure_limiter(settings)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.include_router(api_router)

    if settings.anti_abuse_enabled:
        setup_ban_middleware(app)

    allowed_origins = list(settings.frontend_urls)
    if settings.dev:
        allowed_origins += ["http://localhost:3000", "http://localhost:5000", "http://localhost:8000"]
        log.warning("CORS allowed origins set for development")
    if allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allowed_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )
    else:
        log.warning("FRONTEND_URL is not set, CORS middleware disabled")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    log.warning("Starting development server")
    if app.state.settings.anti_abuse_enabled:
        from authgate.api.anti_abuse import reset_ip_ban

        async def _reset_local_ban():
            client = redis.from_url(app.state.settings.redis_url, decode_responses=True)
            await reset_ip_ban(client, "127.0.0.1")
            await client.aclose()

        asyncio.run(_reset_local_ban())
    uvicorn.run("authgate.main:app", host="0.0.0.0", port=8001, reload=True)
