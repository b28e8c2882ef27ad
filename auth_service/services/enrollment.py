"""Second-factor enrollment and login-time verification.

Drives the secret lifecycle on behalf of an already-guarded session and
mints the upgraded full credential once a partial session proves the code.
"""

import logging
from dataclasses import dataclass

from auth_service.services.credentials import CredentialCodec, Identity, SessionCredential
from auth_service.services.errors import ErrorKind, Failure
from auth_service.services.two_factor import Enrollment, TwoFactorLifecycle, TwoFactorState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpgradedSession:
    token: str
    identity: Identity


class SecondFactorProtocol:
    def __init__(self, lifecycle: TwoFactorLifecycle, codec: CredentialCodec):
        self.lifecycle = lifecycle
        self.codec = codec

    def begin_enrollment(self, session: SessionCredential) -> Enrollment:
        return self.lifecycle.generate(session.identity)

    def confirm_enrollment(self, session: SessionCredential, code: str) -> Failure | None:
        # The caller already holds a full session, so nothing is re-issued.
        return self.lifecycle.confirm(session.identity, code)

    def verify_second_factor(
        self, session: SessionCredential, code: str
    ) -> UpgradedSession | Failure:
        """Exchange a valid code for a full credential.

        A wrong code changes no state; throttling repeated attempts is the
        rate limiter's job.
        """
        identity = session.identity
        if self.lifecycle.state(identity) is not TwoFactorState.ENABLED:
            return Failure(ErrorKind.NOT_ENABLED)

        if not self.lifecycle.verify(identity, code):
            logger.warning(f"2FA login verification failed for user {identity.id}")
            return Failure(ErrorKind.INVALID_CODE)

        token = self.codec.mint(identity, partial=False)
        logger.info(f"Issued full session for user {identity.id} after 2FA")
        return UpgradedSession(token=token, identity=identity)

    def disable_second_factor(self, session: SessionCredential) -> None:
        self.lifecycle.disable(session.identity)

    def second_factor_status(self, session: SessionCredential) -> bool:
        return self.lifecycle.status(session.identity)
