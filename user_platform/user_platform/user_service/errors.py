"""
Service errors and the handlers that turn them into JSON responses.

Every error body is either a ``{"message": ...}`` object or, for validation
failures, a mapping of field name to a list of human-readable messages.
"""
import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base exception for errors that map onto an HTTP response."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Server Error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_content(self):
        return {"message": self.message}


class ValidationFailed(ServiceError):
    """Raised when request fields fail validation."""

    status_code = 422
    message = "The given data was invalid."

    def __init__(self, errors: Dict[str, List[str]]):
        super().__init__()
        self.errors = errors

    def to_content(self):
        return self.errors


class DuplicateEmail(ValidationFailed):
    """Raised when registering an email that already belongs to a user."""

    def __init__(self, email: str):
        super().__init__({"email": ["The email has already been taken."]})
        self.email = email


class AuthenticationFailed(ServiceError):
    """Raised on a login with an unknown email or a wrong password."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class Unauthenticated(ServiceError):
    """Raised when a protected route is called without a usable bearer token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthenticated."


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


# Message templates keyed by pydantic error type, worded like Laravel's validator
_MESSAGES = {
    "missing": "The {field} field is required.",
    "string_type": "The {field} field must be a string.",
    "string_too_short": "The {field} field must be at least {min_length} characters.",
    "string_too_long": "The {field} field must not be greater than {max_length} characters.",
    "email": "The {field} field must be a valid email address.",
    "bool_type": "The {field} field must be true or false.",
    "bool_parsing": "The {field} field must be true or false.",
    "int_parsing": "The {field} field must be an integer.",
    "int_type": "The {field} field must be an integer.",
}


def _field_name(loc) -> str:
    parts = [str(part) for part in loc if part not in ("body", "path", "query", "header")]
    return ".".join(parts) if parts else (str(loc[0]) if loc else "body")


def format_validation_errors(errors) -> Dict[str, List[str]]:
    """
    Collapse pydantic error dicts into ``{field: [messages]}``.

    Args:
        errors: Output of ``RequestValidationError.errors()`` or
                ``pydantic.ValidationError.errors()``

    Returns:
        Mapping of field name to its messages, in the order reported
    """
    formatted: Dict[str, List[str]] = {}
    for error in errors:
        field = _field_name(error.get("loc", ()))
        error_type = error.get("type")
        min_length = (error.get("ctx") or {}).get("min_length")
        if error_type == "string_too_short" and (error.get("input") == "" or min_length == 1):
            # An empty string counts as absent
            error_type = "missing"
        template = _MESSAGES.get(error_type)
        if template:
            ctx = error.get("ctx") or {}
            message = template.format(field=field.replace("_", " "), **ctx)
        else:
            message = error.get("msg") or "The {} field is invalid.".format(field)
        formatted.setdefault(field, []).append(message)
    return formatted


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = format_validation_errors(exc.errors())
        logger.info("Validation failed: path=%s fields=%s", request.url.path, sorted(errors))
        return JSONResponse(status_code=422, content=errors)

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        headers = None
        if isinstance(exc, Unauthenticated):
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(status_code=exc.status_code, content=exc.to_content(), headers=headers)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error: method=%s path=%s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": ServiceError.message},
        )
