"""
Pydantic schemas for registration and two-factor login.
"""

from typing import Optional

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    """Request body for account registration."""
    username: str = Field(..., min_length=3, max_length=64, description="Account username")
    password: str = Field(..., min_length=8, max_length=72, description="Account password")

    class Config:
        json_schema_extra = {
            "example": {
                "username": "alice",
                "password": "SecurePassword123"
            }
        }


class LoginRequest(BaseModel):
    """Request body for password + TOTP login. Also used to authorize re-provisioning."""
    username: str = Field(..., min_length=3, max_length=64, description="Account username")
    password: str = Field(..., min_length=8, max_length=72, description="Account password")
    totp_code: str = Field(..., pattern=r"^[0-9]{6,10}$", description="Current code from the authenticator app")

    class Config:
        json_schema_extra = {
            "example": {
                "username": "alice",
                "password": "SecurePassword123",
                "totp_code": "123456"
            }
        }


class ProvisioningData(BaseModel):
    username: str
    secret: str = Field(..., description="Base32 secret for manual entry in the authenticator app")
    provisioning_uri: str = Field(..., description="otpauth:// URI encoded in the QR code")
    qr_code: str = Field(..., description="QR code as a data:image/png;base64 URL")


class ProvisioningResponse(BaseModel):
    """Response from registration and re-provisioning."""
    success: bool = Field(..., description="Whether the operation was successful")
    message: str = Field(..., description="Status message")
    data: Optional[ProvisioningData] = Field(None, description="Provisioning data if successful")

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "message": "Account registered",
                "data": {
                    "username": "alice",
                    "secret": "JBSWY3DPEHPK3PXPJBSWY3DPEHPK3PXP",
                    "provisioning_uri": "otpauth://totp/AuthGate:alice?secret=JBSWY3DPEHPK3PXPJBSWY3DPEHPK3PXP&issuer=AuthGate&digits=6&period=30",
                    "qr_code": "data:image/png;base64,iVBORw0KGgo..."
                }
            }
        }


class LoginResponse(BaseModel):
    """Response from the login endpoint."""
    success: bool = Field(..., description="Whether authentication was successful")
    message: str = Field(..., description="Status message")
    data: Optional[dict] = Field(None, description="Verification outcome")

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "message": "Login successful",
                "data": {
                    "username": "alice",
                    "outcome": "verified"
                }
            }
        }
