"""Translate service errors into HTTP responses."""

from fastapi import HTTPException, status

from simple_notes.core.errors import (
    AlreadyExists,
    AuthenticationRequired,
    FailedPrecondition,
    InvalidArgument,
    InvalidCredentials,
    NotFound,
    PermissionDenied,
    ServiceError,
)

_STATUS_BY_ERROR: dict[type[ServiceError], int] = {
    AuthenticationRequired: status.HTTP_401_UNAUTHORIZED,
    InvalidCredentials: status.HTTP_401_UNAUTHORIZED,
    PermissionDenied: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_404_NOT_FOUND,
    InvalidArgument: status.HTTP_422_UNPROCESSABLE_ENTITY,
    AlreadyExists: status.HTTP_409_CONFLICT,
    FailedPrecondition: status.HTTP_409_CONFLICT,
}


def to_http_error(exc: ServiceError) -> HTTPException:
    """401 (no identity) and 403 (identity refused) stay distinct for clients."""
    status_code = _STATUS_BY_ERROR.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    headers = None
    if isinstance(exc, AuthenticationRequired):
        headers = {"WWW-Authenticate": "Bearer"}
    return HTTPException(status_code=status_code, detail=exc.message, headers=headers)
