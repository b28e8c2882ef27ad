"""Authentication API: register, login, logout, current user, token introspection."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError

from auth_service.api.deps import get_codec, get_store, require_full_session
from auth_service.models.user import User
from auth_service.schemas.auth import (
    IdentityRead,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    UserRead,
    VerifyResponse,
)
from auth_service.services.auth import authenticate_user, hash_password, identity_of
from auth_service.services.credentials import CredentialCodec, FullSession
from auth_service.services.user_store import SqlUserStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(
    body: RegisterRequest,
    store: SqlUserStore = Depends(get_store),
    codec: CredentialCodec = Depends(get_codec),
):
    if store.find_by_email(body.email) or store.find_by_username(body.username):
        raise HTTPException(status_code=409, detail="User already exists")

    user = User(
        username=body.username,
        email=body.email,
        hashed_password=hash_password(body.password),
    )
    try:
        store.create(user)
    except IntegrityError:
        # Lost a race with a concurrent registration for the same name
        raise HTTPException(status_code=409, detail="User already exists")

    logger.info(f"Registered user {user.id}")
    token = codec.mint(identity_of(user), partial=False)
    return RegisterResponse(access_token=token, user=UserRead.model_validate(user))


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    store: SqlUserStore = Depends(get_store),
    codec: CredentialCodec = Depends(get_codec),
):
    """Check the password; 2FA accounts get a partial credential only."""
    user = authenticate_user(store, body.email, body.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    store.set_presence(user.id, online=True)
    identity = identity_of(user)
    if user.is_two_factor_enabled and user.two_factor_secret:
        token = codec.mint(identity, partial=True)
        return LoginResponse(access_token=token, requires_2fa=True)

    token = codec.mint(identity, partial=False)
    return LoginResponse(access_token=token, user=IdentityRead.model_validate(identity))


@router.post("/logout", response_model=MessageResponse)
def logout(
    session: FullSession = Depends(require_full_session),
    store: SqlUserStore = Depends(get_store),
):
    """Mark the user offline. The credential itself stays valid until it expires."""
    try:
        store.set_presence(session.identity.id, online=False)
    except LookupError:
        raise HTTPException(status_code=404, detail="User not found")
    logger.info(f"User {session.identity.id} logged out")
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserRead)
def me(
    session: FullSession = Depends(require_full_session),
    store: SqlUserStore = Depends(get_store),
):
    user = store.find_by_identity(session.identity.id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/verify", response_model=VerifyResponse)
def verify(session: FullSession = Depends(require_full_session)):
    """Token introspection for sibling services."""
    return VerifyResponse(
        valid=True,
        user=IdentityRead.model_validate(session.identity),
        expires_at=session.expires_at,
    )
