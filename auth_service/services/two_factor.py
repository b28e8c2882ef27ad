"""Second-factor secret lifecycle (TOTP, RFC 6238).

Per user the record is in one of three states::

    UNSET --generate--> PENDING_ENROLLMENT --confirm--> ENABLED
    PENDING_ENROLLMENT --generate--> PENDING_ENROLLMENT (secret replaced)
    ENABLED --generate--> PENDING_ENROLLMENT (enforcement dropped)
    ENABLED --disable--> UNSET

Disabling erases the secret, so re-enrolling always needs a fresh scan.
"""

import logging
from dataclasses import dataclass
from enum import Enum

import pyotp

from auth_service.services.credentials import Clock, Identity, utcnow
from auth_service.services.errors import ErrorKind, Failure
from auth_service.services.user_store import UserStore

logger = logging.getLogger(__name__)


class TwoFactorState(str, Enum):
    UNSET = "unset"
    PENDING_ENROLLMENT = "pending_enrollment"
    ENABLED = "enabled"


@dataclass(frozen=True)
class Enrollment:
    secret: str
    provisioning_uri: str


class TwoFactorLifecycle:
    def __init__(
        self,
        store: UserStore,
        issuer: str,
        valid_window: int = 1,
        clock: Clock = utcnow,
    ):
        self.store = store
        self.issuer = issuer
        self.valid_window = valid_window
        self.clock = clock

    def state(self, identity: Identity) -> TwoFactorState:
        user = self.store.find_by_identity(identity.id)
        if user is None or not user.two_factor_secret:
            return TwoFactorState.UNSET
        if user.is_two_factor_enabled:
            return TwoFactorState.ENABLED
        return TwoFactorState.PENDING_ENROLLMENT

    def generate(self, identity: Identity) -> Enrollment:
        """Store a fresh secret with the factor disabled, replacing any prior one."""
        secret = pyotp.random_base32()
        uri = pyotp.TOTP(secret).provisioning_uri(
            name=identity.email,
            issuer_name=self.issuer,
        )
        self.store.update(
            identity.id,
            two_factor_secret=secret,
            is_two_factor_enabled=False,
        )
        logger.info(f"2FA enrollment started for user {identity.id}")
        return Enrollment(secret=secret, provisioning_uri=uri)

    def confirm(self, identity: Identity, code: str) -> Failure | None:
        """Enable the factor if ``code`` matches the stored secret."""
        user = self.store.find_by_identity(identity.id)
        if user is None or not user.two_factor_secret:
            return Failure(ErrorKind.SETUP_NOT_INITIATED)

        if not self._matches(user.two_factor_secret, code):
            logger.warning(f"2FA confirmation failed for user {identity.id}")
            return Failure(ErrorKind.INVALID_CODE)

        self.store.update(identity.id, is_two_factor_enabled=True)
        logger.info(f"2FA enabled for user {identity.id}")
        return None

    def verify(self, identity: Identity, code: str) -> bool:
        """Login-time check; only an enabled factor can be satisfied."""
        user = self.store.find_by_identity(identity.id)
        if user is None or not user.is_two_factor_enabled or not user.two_factor_secret:
            return False
        return self._matches(user.two_factor_secret, code)

    def disable(self, identity: Identity) -> None:
        if self.store.find_by_identity(identity.id) is None:
            return
        self.store.update(
            identity.id,
            two_factor_secret=None,
            is_two_factor_enabled=False,
        )
        logger.info(f"2FA disabled for user {identity.id}")

    def status(self, identity: Identity) -> bool:
        user = self.store.find_by_identity(identity.id)
        return bool(user and user.is_two_factor_enabled)

    def _matches(self, secret: str, code: str) -> bool:
        totp = pyotp.TOTP(secret)
        return totp.verify(code, for_time=self.clock(), valid_window=self.valid_window)
