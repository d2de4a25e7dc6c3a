import structlog
from fastapi import Request
from fastapi.responses import JSONResponse, Response

from ministry.errors import (
    AccessDeniedError,
    AccountDeactivatedError,
    AuthenticationError,
    DuplicateIdentityError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    NotFoundError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

# Most specific first
_ERROR_STATUS: list[tuple[type[Exception], int, str]] = [
    (InvalidCredentialsError, 401, "invalid_credentials"),
    (AccountDeactivatedError, 401, "account_deactivated"),
    (AuthenticationError, 401, "authentication_error"),
    (AccessDeniedError, 403, "access_denied"),
    (NotFoundError, 404, "not_found"),
    (DuplicateIdentityError, 400, "duplicate_identity"),
    (InvalidOrExpiredTokenError, 400, "invalid_or_expired_token"),
    (ValidationError, 400, "validation_error"),
]


def create_json_error_response(
    status_code: int, message: str, error_type: str | None = None, field: str | None = None
) -> JSONResponse:
    """Create JSON error response with optional type for machine parsing."""
    content = {"message": message}
    if error_type:
        content["type"] = error_type
    if field:
        content["field"] = field
    return JSONResponse(status_code=status_code, content=content)


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    # Default for any other UserError subclass
    status_code, error_type = 400, "bad_request"
    for error_class, code, name in _ERROR_STATUS:
        if isinstance(exc, error_class):
            status_code, error_type = code, name
            break

    field = exc.field if isinstance(exc, DuplicateIdentityError) else None
    return create_json_error_response(status_code=status_code, message=str(exc), error_type=error_type, field=field)


async def general_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.error("unexpected_error", path=request.url.path, exc_info=exc)
    return create_json_error_response(
        status_code=500, message="An unexpected error occurred.", error_type="internal_server_error"
    )
