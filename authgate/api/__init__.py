from fastapi import APIRouter
from authgate.api.auth.router import router as auth_router

router = APIRouter(prefix="/api")
router.include_router(auth_router)


@router.get("/")
async def index():
    return {"message": "AuthGate is running. POST /api/auth/register to enroll, /api/auth/login to authenticate."}
