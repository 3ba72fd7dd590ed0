from fastapi import Request
from fastapi.responses import JSONResponse
from typing import Any, Optional

from authgate.database.store import AccountStore
from authgate.otp import VerificationService


def api_response(
    data: Any = None,
    message: Optional[str] = None,
    success: bool = True,
    status_code: int = 200,
    headers: dict = None,
):
    payload = {
        "success": success,
        "message": message,
        "data": data
    }

    return JSONResponse(
        content=payload,
        status_code=status_code,
        headers=headers
    )


def client_ip(request: Request) -> str:
    return request.headers.get("X-Forwarded-For") or (request.client.host if request.client else "unknown")


def get_store(request: Request) -> AccountStore:
    return request.app.state.store


def get_verification_service(request: Request) -> VerificationService:
    return request.app.state.verification_service
