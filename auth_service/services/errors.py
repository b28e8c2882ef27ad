"""Failure kinds returned by the access-control services.

Services return a ``Failure`` instead of raising; the API layer turns it into
an ``HTTPException`` with the status and message carried by the kind.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    UNAUTHORIZED = "unauthorized"
    INVALID_REQUEST_FORMAT = "invalid_request_format"
    SETUP_NOT_INITIATED = "setup_not_initiated"
    INVALID_CODE = "invalid_code"
    NOT_ENABLED = "not_enabled"

    @property
    def status_code(self) -> int:
        return _STATUS[self]

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_STATUS = {
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.INVALID_REQUEST_FORMAT: 400,
    ErrorKind.SETUP_NOT_INITIATED: 400,
    ErrorKind.INVALID_CODE: 400,
    ErrorKind.NOT_ENABLED: 400,
}

_MESSAGES = {
    ErrorKind.UNAUTHORIZED: "Unauthorized",
    ErrorKind.INVALID_REQUEST_FORMAT: "Invalid code format",
    ErrorKind.SETUP_NOT_INITIATED: "2FA setup not initiated",
    ErrorKind.INVALID_CODE: "Invalid code",
    ErrorKind.NOT_ENABLED: "2FA not enabled for this user",
}


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
