import structlog
from fastapi import Request
from fastapi.responses import JSONResponse, Response

from healthdesk.errors import ConflictError, NotAuthenticatedError, ValidationError

logger = structlog.get_logger(__name__)


def create_json_error_response(status_code: int, message: str, error_type: str | None = None) -> JSONResponse:
    """Create JSON error response with optional type for machine parsing."""
    content = {"message": message}
    if error_type:
        content["type"] = error_type
    return JSONResponse(status_code=status_code, content=content)


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    if isinstance(exc, NotAuthenticatedError):
        status_code = 401
        error_type = "not_authenticated"
    elif isinstance(exc, ConflictError):
        status_code = 409
        error_type = "conflict"
    elif isinstance(exc, ValidationError):
        status_code = 400
        error_type = "validation_error"
    else:
        # Default for any other UserError subclass
        status_code = 400
        error_type = "bad_request"

    return create_json_error_response(status_code=status_code, message=str(exc), error_type=error_type)


async def dependency_error_handler(request: Request, exc: Exception) -> Response:
    """Handle store and hasher failures (503) without leaking their details."""
    logger.error("dependency_failure", path=request.url.path, error=str(exc), exc_info=exc)
    return create_json_error_response(
        status_code=503, message="Service temporarily unavailable.", error_type="dependency_failure"
    )


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.exception("unexpected_error", exc_info=exc)
    return create_json_error_response(
        status_code=500, message="An unexpected error occurred.", error_type="internal_server_error"
    )
