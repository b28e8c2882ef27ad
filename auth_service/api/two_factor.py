"""Second-factor API: enrollment, login-time verification, disable, status."""

from fastapi import APIRouter, Depends, HTTPException, status

from auth_service.api.deps import (
    get_protocol,
    get_store,
    raise_failure,
    require_full_session,
    require_session,
)
from auth_service.schemas.auth import (
    CodeRequest,
    EnrollmentResponse,
    IdentityRead,
    MessageResponse,
    SecondFactorLoginResponse,
    StatusResponse,
)
from auth_service.services.credentials import FullSession, SessionCredential
from auth_service.services.enrollment import SecondFactorProtocol
from auth_service.services.errors import ErrorKind, Failure
from auth_service.services.user_store import SqlUserStore

router = APIRouter(prefix="/api/auth/2fa", tags=["2fa"])


@router.post("/generate", response_model=EnrollmentResponse)
def begin_enrollment(
    session: FullSession = Depends(require_full_session),
    protocol: SecondFactorProtocol = Depends(get_protocol),
):
    """Create a new secret; the URI is meant to be shown as a QR code."""
    try:
        enrollment = protocol.begin_enrollment(session)
    except LookupError:
        raise HTTPException(status_code=404, detail="User not found")
    return EnrollmentResponse(
        secret=enrollment.secret,
        provisioning_uri=enrollment.provisioning_uri,
    )


@router.post("/turn-on", response_model=MessageResponse)
def confirm_enrollment(
    body: CodeRequest,
    session: FullSession = Depends(require_full_session),
    protocol: SecondFactorProtocol = Depends(get_protocol),
):
    failure = protocol.confirm_enrollment(session, body.code)
    if failure is not None:
        raise_failure(failure)
    return MessageResponse(message="2FA enabled successfully")


@router.post("/authenticate", response_model=SecondFactorLoginResponse)
def verify_second_factor(
    body: CodeRequest,
    session: SessionCredential = Depends(require_session),
    protocol: SecondFactorProtocol = Depends(get_protocol),
    store: SqlUserStore = Depends(get_store),
):
    """Upgrade a partial session to a full one."""
    result = protocol.verify_second_factor(session, body.code)
    if isinstance(result, Failure):
        if result.kind is ErrorKind.INVALID_CODE:
            raise_failure(result, status_code=status.HTTP_401_UNAUTHORIZED)
        raise_failure(result)
    store.set_presence(result.identity.id, online=True)
    return SecondFactorLoginResponse(
        access_token=result.token,
        user=IdentityRead.model_validate(result.identity),
        two_factor_enabled=True,
    )


@router.post("/turn-off", response_model=MessageResponse)
def disable_second_factor(
    session: FullSession = Depends(require_full_session),
    protocol: SecondFactorProtocol = Depends(get_protocol),
):
    protocol.disable_second_factor(session)
    return MessageResponse(message="2FA disabled successfully")


@router.get("/status", response_model=StatusResponse)
def second_factor_status(
    session: FullSession = Depends(require_full_session),
    protocol: SecondFactorProtocol = Depends(get_protocol),
):
    return StatusResponse(enabled=protocol.second_factor_status(session))
