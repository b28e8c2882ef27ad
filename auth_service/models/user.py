"""User model: identity, password hash and second-factor record."""

from datetime import datetime, timezone
from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    __tablename__ = "user_account"

    id: int | None = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True)
    username: str = Field(unique=True, index=True)
    hashed_password: str
    two_factor_secret: str | None = None  # base32 TOTP secret; None when unset
    is_two_factor_enabled: bool = Field(default=False)
    is_online: bool = Field(default=False)
    last_seen: datetime | None = None
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
