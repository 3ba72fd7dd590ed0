from slowapi.util import get_remote_address
import slowapi

limiter = slowapi.Limiter(key_func=get_remote_address)

_auth_rate_limit = "10/minute"


def auth_rate_limit() -> str:
    """Limit for the auth routes, evaluated on every request so settings apply after import."""
    return _auth_rate_limit


def configure_limiter(settings) -> None:
    global _auth_rate_limit
    _auth_rate_limit = settings.auth_rate_limit
    limiter.enabled = settings.rate_limit_enabled
