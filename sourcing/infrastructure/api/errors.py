"""Domain error → HTTP status mapping."""

from fastapi import HTTPException, status

from sourcing.domain.errors import (
    ConflictError,
    DomainError,
    ExternalServiceError,
    InvalidTransition,
    NotFoundError,
    PreconditionFailed,
    ValidationError,
)

# Checked in order; subclasses before their bases
_STATUS_BY_ERROR: list[tuple[type[DomainError], int]] = [
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (InvalidTransition, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (PreconditionFailed, status.HTTP_412_PRECONDITION_FAILED),
    (ConflictError, status.HTTP_409_CONFLICT),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ExternalServiceError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def to_http(exc: DomainError) -> HTTPException:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=code, detail={"code": exc.code, "message": str(exc)})
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"code": exc.code, "message": str(exc)},
    )
