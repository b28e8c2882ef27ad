"""Pydantic schemas for the auth and second-factor API."""

from datetime import datetime
import re

from pydantic import BaseModel, Field, field_validator

_CODE_RE = re.compile(r"^[0-9]{6}$")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class CodeRequest(BaseModel):
    code: str  # 6-digit one-time code from the authenticator app

    @field_validator("code")
    @classmethod
    def _validate_code(cls, value: str) -> str:
        if not _CODE_RE.fullmatch(value):
            raise ValueError("must be exactly 6 digits")
        return value


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=20)
    email: str = Field(max_length=254)
    password: str = Field(min_length=8)

    @field_validator("username")
    @classmethod
    def _trim_username(cls, value: str) -> str:
        text = value.strip()
        if len(text) < 3:
            raise ValueError("must be at least 3 characters")
        return text

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        email = value.strip().lower()
        if not _EMAIL_RE.fullmatch(email):
            raise ValueError("must be a valid email address")
        return email


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class UserRead(BaseModel):
    id: int
    username: str
    email: str
    is_two_factor_enabled: bool
    is_online: bool
    last_seen: datetime | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class IdentityRead(BaseModel):
    id: int
    email: str
    username: str

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class LoginResponse(TokenResponse):
    requires_2fa: bool = False
    user: IdentityRead | None = None  # omitted until the second factor is satisfied


class RegisterResponse(TokenResponse):
    user: UserRead


class EnrollmentResponse(BaseModel):
    secret: str
    provisioning_uri: str


class SecondFactorLoginResponse(TokenResponse):
    user: IdentityRead
    two_factor_enabled: bool = True


class StatusResponse(BaseModel):
    enabled: bool


class MessageResponse(BaseModel):
    message: str


class VerifyResponse(BaseModel):
    valid: bool
    user: IdentityRead
    expires_at: datetime
