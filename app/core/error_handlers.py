from datetime import datetime

from fastapi import Request, status
from fastapi.responses import JSONResponse

from app.core.exceptions import (
    BackendError,
    ConflictError,
    DomainError,
    InternalError,
    InvalidPayloadError,
    NotFoundError,
    ValidationError,
)
from app.core.logging import get_logger

logger = get_logger(__name__)


ERROR_STATUS_MAP: dict[type[DomainError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    InvalidPayloadError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_409_CONFLICT,
    BackendError: status.HTTP_502_BAD_GATEWAY,
    InternalError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = ERROR_STATUS_MAP.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)

    if exc.__cause__ is not None:
        logger.error(
            "domain_error",
            code=exc.code,
            kind=exc.kind.value,
            cause=repr(exc.__cause__),
        )

    return JSONResponse(
        status_code=status_code,
        content={
            "data": None,
            "meta": {
                "request_id": getattr(request.state, "request_id", None),
                "timestamp": datetime.utcnow().isoformat() + "Z",
            },
            "errors": [
                {
                    "code": exc.code,
                    "kind": exc.kind.value,
                    "message": exc.message,
                    "details": exc.details,
                }
            ],
        },
    )
