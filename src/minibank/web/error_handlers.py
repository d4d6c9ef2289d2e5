import logging

from fastapi import Request
from fastapi.responses import JSONResponse, Response

from minibank.errors import (
    AuthenticationError,
    DuplicateIdentityError,
    InvalidCredentialError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def create_json_error_response(status_code: int, message: str, error_type: str | None = None) -> JSONResponse:
    """Create JSON error response with optional type for machine parsing."""
    content = {"error": message}
    if error_type:
        content["type"] = error_type
    return JSONResponse(status_code=status_code, content=content)


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    if isinstance(exc, AuthenticationError):
        status_code = 401
        error_type = "unauthorized"
    elif isinstance(exc, InvalidCredentialError):
        status_code = 400
        error_type = "invalid_credentials"
    elif isinstance(exc, DuplicateIdentityError):
        status_code = 400
        error_type = "duplicate_identity"
    elif isinstance(exc, NotFoundError):
        status_code = 404
        error_type = "not_found"
    elif isinstance(exc, ValidationError):
        status_code = 400
        error_type = "validation_error"
    else:
        # Default for any other UserError subclass
        status_code = 400
        error_type = "bad_request"

    return create_json_error_response(status_code=status_code, message=str(exc), error_type=error_type)


async def request_validation_handler(_: Request, exc: Exception) -> Response:
    """Malformed request bodies are client errors (400), not FastAPI's default 422."""
    logger.debug("Rejected request body: %s", exc)
    return create_json_error_response(status_code=400, message="Invalid request body", error_type="validation_error")


async def store_error_handler(_: Request, exc: Exception) -> Response:
    """Handle database failures (500). The cause stays in the server log."""
    logger.error("Store error: %s", exc, exc_info=exc)
    return create_json_error_response(
        status_code=500, message="An unexpected error occurred.", error_type="internal_server_error"
    )


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.exception("Unexpected error: %s", exc)
    return create_json_error_response(
        status_code=500, message="An unexpected error occurred.", error_type="internal_server_error"
    )
