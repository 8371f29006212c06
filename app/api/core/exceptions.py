import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException

from app.api.utils.response_payloads import error_response

logger = logging.getLogger("app")

INVALID_EMAIL_MESSAGE = "Invalid email address"
EMAIL_CONFLICT_MESSAGE = "Email already registered"
PERSISTENCE_FAILURE_MESSAGE = "Failed to join waitlist"
INTERNAL_ERROR_MESSAGE = "Internal server error"
INVALID_REQUEST_MESSAGE = "Invalid request"


class WaitlistError(Exception):
    """
    Base class for failures of a waitlist signup.

    Attributes:
        status_code: HTTP status the failure is reported with.
        message: Client-facing message placed in the ``error`` field.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = INTERNAL_ERROR_MESSAGE

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.message
        super().__init__(self.detail)


class ValidationError(WaitlistError):
    """The submitted email is missing or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = INVALID_EMAIL_MESSAGE


class ConflictError(WaitlistError):
    """The email is already on the waitlist."""

    status_code = status.HTTP_409_CONFLICT
    message = EMAIL_CONFLICT_MESSAGE


class PersistenceError(WaitlistError):
    """
    The datastore rejected the insert for a reason other than uniqueness.

    ``detail`` carries the underlying cause for the server log only; the client
    always receives ``message``.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = PERSISTENCE_FAILURE_MESSAGE


async def waitlist_exception_handler(request: Request, exc: WaitlistError):
    """
    Handle waitlist domain errors raised outside the signup route.

    Args:
        request (Request): The incoming HTTP request.
        exc (WaitlistError): The domain error.

    Returns:
        JSONResponse: ``{"error": <message>}`` with the error's status code.
    """
    if isinstance(exc, PersistenceError):
        logger.error(f"Datastore failure on {request.url.path}: {exc.detail}")

    return error_response(status_code=exc.status_code, error=exc.message)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handle request validation errors raised by FastAPI.

    Args:
        request (Request): The incoming HTTP request.
        exc (RequestValidationError): The validation error raised by FastAPI/Pydantic.

    Returns:
        JSONResponse: 400 response with a generic invalid-request message.
    """
    logger.warning(f"Request validation failed on {request.url.path}: {exc.errors()}")

    return error_response(status_code=status.HTTP_400_BAD_REQUEST, error=INVALID_REQUEST_MESSAGE)


async def http_exception_handler(request: Request, exc: HTTPException):
    """
    Handle HTTP exceptions (4xx/5xx) and return a standardized JSON response.

    Args:
        request (Request): The incoming HTTP request.
        exc (HTTPException): The HTTP exception raised by FastAPI or Starlette routing.

    Returns:
        JSONResponse: Error response with the HTTP status code and detail.
    """
    logger.warning(f"HTTP exception: {exc.detail} ({exc.status_code})")

    return error_response(status_code=exc.status_code, error=str(exc.detail))


async def general_exception_handler(request: Request, exc: Exception):
    """
    Handle uncaught exceptions and return a standardized JSON response.

    Args:
        request (Request): The incoming HTTP request.
        exc (Exception): The unhandled exception.

    Returns:
        JSONResponse: 500 response that never echoes the cause.
    """
    logger.exception(f"Unhandled exception: {exc}")

    return error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        error=INTERNAL_ERROR_MESSAGE,
    )
