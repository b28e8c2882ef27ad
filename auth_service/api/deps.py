"""Shared API dependencies: service wiring and the two access guards."""

import logging
from functools import lru_cache
from typing import NoReturn

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from auth_service.config import settings
from auth_service.database import get_session
from auth_service.services.credentials import (
    CredentialCodec,
    CredentialFailure,
    FullSession,
    SessionCredential,
)
from auth_service.services.enrollment import SecondFactorProtocol
from auth_service.services.errors import ErrorKind, Failure
from auth_service.services.two_factor import TwoFactorLifecycle
from auth_service.services.user_store import SqlUserStore

logger = logging.getLogger(__name__)

# auto_error=False so a missing header gets the same 401 as a bad token
bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_codec() -> CredentialCodec:
    return CredentialCodec.from_settings(settings)


def get_store(session: Session = Depends(get_session)) -> SqlUserStore:
    return SqlUserStore(session)


def get_lifecycle(store: SqlUserStore = Depends(get_store)) -> TwoFactorLifecycle:
    return TwoFactorLifecycle(
        store,
        issuer=settings.totp_issuer,
        valid_window=settings.totp_valid_window,
    )


def get_protocol(
    lifecycle: TwoFactorLifecycle = Depends(get_lifecycle),
    codec: CredentialCodec = Depends(get_codec),
) -> SecondFactorProtocol:
    return SecondFactorProtocol(lifecycle, codec)


def raise_failure(failure: Failure, status_code: int | None = None) -> NoReturn:
    """Convert a service failure into the HTTP rejection for its kind."""
    kind = failure.kind
    headers = {"WWW-Authenticate": "Bearer"} if kind is ErrorKind.UNAUTHORIZED else None
    raise HTTPException(
        status_code=status_code or kind.status_code,
        detail=kind.message,
        headers=headers,
    )


def _decode(
    credentials: HTTPAuthorizationCredentials | None,
    codec: CredentialCodec,
) -> SessionCredential:
    if credentials is None:
        raise_failure(Failure(ErrorKind.UNAUTHORIZED))
    result = codec.verify(credentials.credentials)
    if isinstance(result, CredentialFailure):
        # The reason stays in the log; the caller only ever sees 401.
        logger.info(f"Rejected credential: {result.value}")
        raise_failure(Failure(ErrorKind.UNAUTHORIZED))
    return result


def require_full_session(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    codec: CredentialCodec = Depends(get_codec),
) -> FullSession:
    """Admit only fully authenticated sessions.

    A partial session is rejected exactly like a bad token, so an
    unauthenticated caller learns nothing about the account's 2FA state.
    """
    session = _decode(credentials, codec)
    if not isinstance(session, FullSession):
        raise_failure(Failure(ErrorKind.UNAUTHORIZED))
    request.state.session = session
    return session


def require_session(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    codec: CredentialCodec = Depends(get_codec),
) -> SessionCredential:
    """Admit partial and full sessions (login-time 2FA step only)."""
    session = _decode(credentials, codec)
    request.state.session = session
    return session


def _session_from_header(request: Request, codec: CredentialCodec) -> SessionCredential | None:
    scheme, _, token = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    result = codec.verify(token.strip())
    if isinstance(result, CredentialFailure):
        return None
    return result


def rate_limit_key(request: Request, codec: CredentialCodec | None = None) -> str:
    """Key for the rate limiter: the authenticated user, else the client address.

    Works before or after the guards. A guard leaves the session on
    request.state; without one the bearer header is decoded here, and a
    partial session keys by user as well.
    """
    session = getattr(request.state, "session", None)
    if session is None:
        session = _session_from_header(request, codec or get_codec())
    if session is not None:
        return f"user:{session.identity.id}"
    host = request.client.host if request.client else "unknown"
    return f"ip:{host}"
