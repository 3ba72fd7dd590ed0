from datetime import datetime, timedelta
from fastapi import Request
from typing import Callable, Awaitable
from authgate.common.log_handler import log
from .utils import api_response, client_ip

# Redis keys: failed_ip:<ip> is a list of failure timestamps,
# banned_ip:<ip> holds the ISO time the ban ends.


async def is_ip_banned(r, ip: str):
    ban = await r.get(f"banned_ip:{ip}")
    if ban:
        if isinstance(ban, bytes):
            ban = ban.decode()
        ban_dt = datetime.fromisoformat(ban)
        if datetime.utcnow() < ban_dt:
            return True, (ban_dt - datetime.utcnow())
        else:
            await r.delete(f"banned_ip:{ip}")
    return False, None


async def register_failed_ip(request: Request) -> bool:
    """Count a failed attempt for the client address, banning it once the limit is reached."""
    r = getattr(request.app.state, "redis", None)
    if r is None:
        return False
    settings = request.app.state.settings
    ban_duration = timedelta(hours=settings.ban_duration_hours)
    ip = client_ip(request)

    key = f"failed_ip:{ip}"
    now_iso = datetime.utcnow().isoformat()
    await r.rpush(key, now_iso)
    await r.expire(key, int(ban_duration.total_seconds()))
    attempts = await r.lrange(key, 0, -1)
    log.debug(f"{ip} failed attempts: {len(attempts)}")
    if len(attempts) >= settings.max_failed_attempts:
        log.info(f"Banned IP address: {ip}")
        ban_until = datetime.utcnow() + ban_duration
        await r.set(f"banned_ip:{ip}", ban_until.isoformat(),
                    ex=int(ban_duration.total_seconds()))
        await r.delete(key)
        return True
    return False


def setup_ban_middleware(app):
    @app.middleware("http")
    async def ban_middleware(request: Request, call_next: Callable[[Request], Awaitable]):
        r = getattr(request.app.state, "redis", None)
        if r is None:
            return await call_next(request)
        banned, retry = await is_ip_banned(r, client_ip(request))
        if banned:
            retry_seconds = int(retry.total_seconds())
            return api_response(message="Your IP is banned", data=f"retry_after_seconds: {retry_seconds}", success=False, status_code=403, headers={"Retry-After": str(retry_seconds)})
        return await call_next(request)


async def reset_ip_ban(r, ip: str):
    await r.delete(f"banned_ip:{ip}")
    await r.delete(f"failed_ip:{ip}")
