"""Password checks for registration and login."""

import bcrypt

from auth_service.models.user import User
from auth_service.services.credentials import Identity
from auth_service.services.user_store import SqlUserStore


def hash_password(password: str) -> str:
    pw = password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    pw = plain.encode("utf-8")[:72]
    return bcrypt.checkpw(pw, hashed.encode("utf-8"))


def authenticate_user(store: SqlUserStore, email: str, password: str) -> User | None:
    """Return the active user for ``email`` if ``password`` matches, else None."""
    user = store.find_by_email(email)
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def identity_of(user: User) -> Identity:
    return Identity(id=user.id, email=user.email, username=user.username)
