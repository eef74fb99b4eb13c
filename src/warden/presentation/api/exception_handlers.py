"""Centralized exception handlers for the FastAPI application.

Identity errors are mapped to HTTP responses by their stable ``kind``.

Error Response Format:
    {
        "ok": false,
        "kind": "MACHINE_READABLE_ERROR_KIND",
        "message": "Human-readable error message"
    }

Usage:
    from warden.presentation.api.exception_handlers import setup_exception_handlers

    app = FastAPI()
    setup_exception_handlers(app)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from warden_identity.exceptions import ErrorKind, IdentityError

logger = logging.getLogger(__name__)


ERROR_KIND_TO_STATUS: dict[ErrorKind, int] = {
    # 400 Bad Request
    ErrorKind.INVALID_TOKEN: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_OR_EXPIRED_TOKEN: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_EMAIL: status.HTTP_400_BAD_REQUEST,
    ErrorKind.MISSING_EMAIL: status.HTTP_400_BAD_REQUEST,
    ErrorKind.WEAK_PASSWORD: status.HTTP_400_BAD_REQUEST,
    # 401 / 403
    ErrorKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.EMAIL_NOT_VERIFIED: status.HTTP_403_FORBIDDEN,
    # 404 Not Found
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    # 409 Conflict
    ErrorKind.DUPLICATE_IDENTITY: status.HTTP_409_CONFLICT,
    ErrorKind.CONCURRENT_MODIFICATION: status.HTTP_409_CONFLICT,
    # 5xx
    ErrorKind.STORE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.NOTIFICATION_FAILURE: status.HTTP_502_BAD_GATEWAY,
}


def status_for(error: IdentityError) -> int:
    return ERROR_KIND_TO_STATUS.get(error.kind, status.HTTP_400_BAD_REQUEST)


def error_response(error: IdentityError) -> JSONResponse:
    """Create a standardized error response."""
    return JSONResponse(
        status_code=status_for(error),
        content={
            "ok": False,
            "kind": error.kind.value,
            "message": error.message,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI application.

    Parameters
    ----------
    app
        The FastAPI application instance
    """

    @app.exception_handler(IdentityError)
    async def identity_exception_handler(
        request: Request,
        exc: IdentityError,
    ) -> JSONResponse:
        """Handle identity errors with the failure envelope."""
        status_code = status_for(exc)
        log = logger.error if status_code >= 500 else logger.warning
        log(
            "Identity error on %s %s: %s (kind=%s)",
            request.method,
            request.url.path,
            exc.message,
            exc.kind.value,
        )
        return error_response(exc)
