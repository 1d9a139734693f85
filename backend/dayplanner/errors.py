"""Domain error taxonomy and its mapping onto HTTP responses.

Services raise these exceptions; the handlers registered by
``register_error_handlers`` turn them into
``{"error": {"code": "...", "message": "..."}}`` JSON bodies.

Status code mapping:
- ``ValidationError`` (and FastAPI request validation) → 400
- ``AuthenticationError`` / ``TokenInvalid`` / ``TokenExpired`` → 401
- ``InvalidCredentials`` → 401
- ``NotFound`` → 404
- ``DuplicateUser`` → 409
- Any other ``Exception`` → 500
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class DayPlannerError(Exception):
    """Base class for errors that terminate a request with a known status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "INTERNAL_ERROR"
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DayPlannerError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"
    default_message = "Invalid input"


class AuthenticationError(DayPlannerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "AUTHENTICATION_ERROR"
    default_message = "Authentication required"


class TokenInvalid(AuthenticationError):
    default_message = "Token is not valid"


class TokenExpired(AuthenticationError):
    default_message = "Token has expired"


class InvalidCredentials(DayPlannerError):
    # One message for unknown email and wrong password alike.
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid credentials"

    def __init__(self):
        super().__init__(self.default_message)


class NotFound(DayPlannerError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    default_message = "Not found"


class DuplicateUser(DayPlannerError):
    status_code = status.HTTP_409_CONFLICT
    code = "DUPLICATE_USER"
    default_message = "User already exists"


def _error_body(code: str, message: str) -> dict:
    return {"error": {"code": code, "message": message}}


async def _handle_domain_error(request: Request, exc: DayPlannerError) -> JSONResponse:
    if isinstance(exc, (AuthenticationError, InvalidCredentials)):
        logger.warning("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
    else:
        logger.info("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.code, exc.message),
        headers=headers,
    )


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 with the first offending field for malformed request bodies."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = ValidationError.default_message
    logger.info("Request validation failed on %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(
        status_code=ValidationError.status_code,
        content=_error_body(ValidationError.code, message),
    )


class CatchAllErrorMiddleware(BaseHTTPMiddleware):
    """Convert any unhandled exception into the standard 500 envelope."""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception:
            logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
            return JSONResponse(
                status_code=DayPlannerError.status_code,
                content=_error_body(DayPlannerError.code, DayPlannerError.default_message),
            )


def register_error_handlers(app: FastAPI) -> None:
    """Attach the domain exception handlers and the catch-all middleware."""
    app.add_exception_handler(DayPlannerError, _handle_domain_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _handle_request_validation)  # type: ignore[arg-type]
    app.add_middleware(CatchAllErrorMiddleware)
