import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from deltaiota.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from deltaiota.web.openapi import ErrorDetail, ErrorResponse

logger = structlog.get_logger(__name__)

JSON_MEDIA_TYPE = "application/json"

# Well-known conditions, rendered once at import
INTERNAL_SERVER_ERROR = "internal server error"
NOT_AUTHORIZED = "not authorized"
METHOD_NOT_ALLOWED = "method not allowed"
NOT_FOUND = "not found"

ERROR_CODES = {
    INTERNAL_SERVER_ERROR: 500,
    NOT_AUTHORIZED: 401,
    METHOD_NOT_ALLOWED: 405,
    NOT_FOUND: 404,
}

# Request body validation failures
INVALID_JSON_REQUEST = "invalid JSON request"
MISSING_PARAMETERS = "missing required parameters"
INVALID_PARAMETERS = "invalid parameters"


def error_body(status_code: int, message: str) -> bytes:
    """Serialize the standard error envelope."""
    return ErrorResponse(error=ErrorDetail(code=status_code, message=message)).model_dump_json().encode()


ERROR_BODIES = {message: error_body(code, message) for message, code in ERROR_CODES.items()}
_BODIES_BY_STATUS = {code: ERROR_BODIES[message] for message, code in ERROR_CODES.items()}


def create_json_error_response(status_code: int, message: str, headers: dict[str, str] | None = None) -> Response:
    return Response(content=error_body(status_code, message), status_code=status_code, headers=headers, media_type=JSON_MEDIA_TYPE)


def fixed_error_response(message: str, headers: dict[str, str] | None = None) -> Response:
    """Response for one of the well-known conditions, using its pre-serialized body."""
    return Response(
        content=ERROR_BODIES[message], status_code=ERROR_CODES[message], headers=headers, media_type=JSON_MEDIA_TYPE
    )


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    if isinstance(exc, AuthenticationError):
        status_code = 401
    elif isinstance(exc, NotFoundError):
        status_code = 404
    elif isinstance(exc, ConflictError):
        status_code = 409
    elif isinstance(exc, ValidationError):
        status_code = 400
    else:
        # Default for any other UserError subclass
        status_code = 400

    return create_json_error_response(status_code, str(exc))


async def http_exception_handler(_: Request, exc: Exception) -> Response:
    """Render routing and framework HTTP errors (404, 405, 500...) in the standard envelope."""
    if not isinstance(exc, StarletteHTTPException):
        raise TypeError(f"Unexpected exception type: {type(exc).__name__}")

    body = _BODIES_BY_STATUS.get(exc.status_code)
    if body is None:
        body = error_body(exc.status_code, str(exc.detail))
    return Response(content=body, status_code=exc.status_code, headers=exc.headers, media_type=JSON_MEDIA_TYPE)


async def validation_error_handler(_: Request, exc: Exception) -> Response:
    """Handle malformed request bodies (400)."""
    if not isinstance(exc, RequestValidationError):
        raise TypeError(f"Unexpected exception type: {type(exc).__name__}")

    errors = exc.errors()
    if any(error["type"] == "json_invalid" for error in errors) or any(
        error["type"] == "missing" and tuple(error["loc"]) == ("body",) for error in errors
    ):
        message = INVALID_JSON_REQUEST
    elif any(error["type"] == "missing" for error in errors):
        message = MISSING_PARAMETERS
    else:
        message = INVALID_PARAMETERS
    return create_json_error_response(400, message)


async def general_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.error("unexpected_error", method=request.method, path=request.url.path, exc_info=exc)
    return fixed_error_response(INTERNAL_SERVER_ERROR)
