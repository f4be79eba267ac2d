"""
Auth schemas: request bodies and responses for signup, signin, OTP and token operations.
"""
from pydantic import EmailStr, Field, field_validator
from typing import Optional

from app.models.enums import AccountType
from app.schemas.base import CamelModel


class SignupRequest(CamelModel):
    email: EmailStr
    password: str
    account_type: AccountType

    @field_validator("password")
    @classmethod
    def password_strong(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        return v


class VerifyOTPRequest(CamelModel):
    email: EmailStr
    otp: str = Field(min_length=1)


class SigninRequest(CamelModel):
    email: EmailStr
    password: str


class RefreshTokenRequest(CamelModel):
    refresh_token: str = Field(min_length=1)


class LogoutRequest(CamelModel):
    refresh_token: Optional[str] = None


class TokenResponse(CamelModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class MessageResponse(CamelModel):
    message: str
