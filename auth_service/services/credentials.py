"""Session credentials: signed, self-contained JWTs tagged partial or full.

A credential carries the caller identity, whether the second factor is still
pending, and an expiry. There is no server-side session table, so every
service instance that shares the signing secret can verify any credential.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable

from jose import JWTError, jwt

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Identity:
    id: int
    email: str
    username: str


@dataclass(frozen=True)
class FullSession:
    identity: Identity
    expires_at: datetime

    is_partial = False


@dataclass(frozen=True)
class PartialSession:
    """Password accepted, second factor still pending."""

    identity: Identity
    expires_at: datetime

    is_partial = True


SessionCredential = FullSession | PartialSession


class CredentialFailure(str, Enum):
    EXPIRED = "expired"
    MALFORMED = "malformed"
    BAD_SIGNATURE = "bad_signature"


class CredentialCodec:
    """Mints and verifies session credentials with a shared HMAC secret."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(days=7),
        clock: Clock = utcnow,
    ):
        if not secret:
            raise ValueError("signing secret must not be empty")
        self.secret = secret
        self.algorithm = algorithm
        self.lifetime = lifetime
        self.clock = clock

    @classmethod
    def from_settings(cls, settings, clock: Clock = utcnow) -> "CredentialCodec":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            lifetime=timedelta(minutes=settings.jwt_expire_minutes),
            clock=clock,
        )

    def mint(self, identity: Identity, partial: bool = False) -> str:
        """Sign a credential for ``identity`` expiring ``lifetime`` from now."""
        expire = int((self.clock() + self.lifetime).timestamp())
        payload = {
            "id": identity.id,
            "email": identity.email,
            "username": identity.username,
            "isPartial": partial,
            "exp": expire,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> SessionCredential | CredentialFailure:
        """Decode ``token`` without touching any store.

        Returns the session on success, otherwise the specific failure. Callers
        facing the network must not reveal which failure occurred.
        """
        try:
            jwt.get_unverified_claims(token)
        except JWTError:
            return CredentialFailure.MALFORMED

        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTError:
            return CredentialFailure.BAD_SIGNATURE

        try:
            identity = Identity(
                id=_require(claims, "id", int),
                email=_require(claims, "email", str),
                username=_require(claims, "username", str),
            )
            partial = _require(claims, "isPartial", bool)
            exp = _require(claims, "exp", int)
        except ValueError:
            return CredentialFailure.MALFORMED

        if exp < self.clock().timestamp():
            return CredentialFailure.EXPIRED

        expires_at = datetime.fromtimestamp(exp, tz=timezone.utc)
        if partial:
            return PartialSession(identity=identity, expires_at=expires_at)
        return FullSession(identity=identity, expires_at=expires_at)


def _require(claims: dict, name: str, kind: type):
    value = claims.get(name)
    # bool is an int subclass; an id of True is not an id
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ValueError(f"claim {name!r} missing or not {kind.__name__}")
    return value
