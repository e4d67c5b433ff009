"""
Tagged outcomes returned by the championship services.

Services never raise to the transport layer. They return a ServiceResult that
is either a success carrying data or a failure carrying an ErrorKind, a
human-readable message and optional details. Routes turn it into a response
with to_response().

ERROR RESPONSE STRUCTURE:
{
    "success": false,
    "error": "ErrorKind",
    "message": "Human-readable description",
    "details": {} (optional)
}
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from fastapi import HTTPException, status

from schoolsports_backend.core.config import TEST_MODE

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Failure taxonomy shared by every core operation."""

    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL = "INTERNAL_ERROR"


STATUS_FOR_KIND = {
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@dataclass
class ServiceResult:
    success: bool
    message: str
    status_code: int = status.HTTP_200_OK
    data: Any = None
    error: Optional[ErrorKind] = None
    details: Any = None

    @classmethod
    def ok(cls, message: str, data: Any = None, status_code: int = status.HTTP_200_OK) -> "ServiceResult":
        return cls(success=True, message=message, status_code=status_code, data=data)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str, details: Any = None) -> "ServiceResult":
        return cls(
            success=False,
            message=message,
            status_code=STATUS_FOR_KIND[kind],
            error=kind,
            details=details,
        )


def error_body(result: ServiceResult) -> dict:
    body = {
        "success": False,
        "error": result.error.value if result.error else ErrorKind.INTERNAL.value,
        "message": result.message,
    }
    # Internal diagnostics stay hidden outside of test mode
    if result.details is not None and (result.error != ErrorKind.INTERNAL or TEST_MODE):
        body["details"] = result.details
    return body


def to_response(result: ServiceResult) -> dict:
    """Render a successful result or raise the matching HTTPException."""
    if not result.success:
        raise HTTPException(status_code=result.status_code, detail=error_body(result))
    return {"success": True, "message": result.message, "data": result.data}
