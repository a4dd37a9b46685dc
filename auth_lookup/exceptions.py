"""
Custom exception classes and FastAPI exception handlers.

The service layer raises these domain errors without importing HTTP concepts;
the handlers registered here translate them into JSON responses of the form
{"message": "...", "error_type": "..."}.

Exception hierarchy:
    ServiceError (base)
    ├── ValidationError   — 400, a required field is missing
    ├── AuthError         — 401, unknown email OR wrong password (same message)
    ├── NotFoundError     — 404, no document for (country, document_type)
    ├── ConflictError     — 409, unique constraint violation on insert
    └── InternalError     — 500, datastore/runtime failure (generic message;
                            the real cause is logged server-side only)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class ServiceError(Exception):
    """Base exception for all service domain errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_type: str = "internal_error"

    def __init__(self, detail: str = "An error occurred"):
        self.detail = detail
        super().__init__(self.detail)


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------

class ValidationError(ServiceError):
    """Raised when the request omits email or password."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_type = "validation_error"

    def __init__(self, detail: str = "Email and password are required."):
        super().__init__(detail)


class AuthError(ServiceError):
    """
    Raised when login fails.

    The message never says whether the email or the password was wrong,
    so responses cannot be used to discover registered accounts.
    """

    status_code = status.HTTP_401_UNAUTHORIZED
    error_type = "invalid_credentials"

    def __init__(self):
        super().__init__("Invalid email or password.")


class NotFoundError(ServiceError):
    """Raised when a lookup matches no rows."""

    status_code = status.HTTP_404_NOT_FOUND
    error_type = "not_found"


class ConflictError(ServiceError):
    """Raised when an insert hits a unique constraint (e.g. duplicate email)."""

    status_code = status.HTTP_409_CONFLICT
    error_type = "conflict"

    def __init__(self, detail: str = "Email already exists. Please use a different email."):
        super().__init__(detail)


class InternalError(ServiceError):
    """Raised after a datastore failure has been logged; carries a generic message."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_type = "internal_error"


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

def _error_response(status_code: int, message: str, error_type: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"message": message, "error_type": error_type},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Called once from create_app() in main.py. After registration no error
    reaches the ASGI server unhandled: domain errors map to their status,
    malformed bodies to 400, and anything else to a generic 500.
    """

    @app.exception_handler(ServiceError)
    async def service_error_handler(
        request: Request, exc: ServiceError
    ) -> JSONResponse:
        return _error_response(exc.status_code, exc.detail, exc.error_type)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # Pydantic's error list echoes the submitted input (passwords included)
        # so it is not sent back or logged.
        return _error_response(
            status.HTTP_400_BAD_REQUEST,
            "Invalid request body.",
            "validation_error",
        )

    # A handler registered for Exception runs inside Starlette's
    # ServerErrorMiddleware, which re-raises to the server after responding.
    # Catching in a middleware ends the error here.
    @app.middleware("http")
    async def catch_unhandled_errors(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return _error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "Internal server error.",
                "internal_error",
            )
