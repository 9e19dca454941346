from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic.alias_generators import to_camel
from starlette.exceptions import HTTPException as StarletteHTTPException

from .logger import get_logger

logger = get_logger(__name__)


class ClubError(Exception):
    """Base class for errors that map onto an HTTP status."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    kind = "INTERNAL"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ClubError):
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "VALIDATION"

    def __init__(self, message: str, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.errors = errors or []


class UnauthorizedError(ClubError):
    status_code = status.HTTP_401_UNAUTHORIZED
    kind = "UNAUTHORIZED"


class ForbiddenError(ClubError):
    status_code = status.HTTP_403_FORBIDDEN
    kind = "FORBIDDEN"


class NotFoundError(ClubError):
    status_code = status.HTTP_404_NOT_FOUND
    kind = "NOT_FOUND"


class ConflictError(ClubError):
    status_code = status.HTTP_409_CONFLICT
    kind = "CONFLICT"


def reject_nulls(changes: Dict[str, Any], fields) -> None:
    """Fail a partial update that tries to null out required fields."""
    errors = [
        {"field": to_camel(field), "message": "Field may not be null"}
        for field in fields
        if field in changes and changes[field] is None
    ]
    if errors:
        raise ValidationError("Validation failed", errors=errors)


# Framework errors (unknown route, wrong method) reuse the same body shape
HTTP_ERROR_KINDS = {
    status.HTTP_400_BAD_REQUEST: "VALIDATION",
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
    status.HTTP_409_CONFLICT: "CONFLICT",
}


def _error_body(status_code: int, kind: str, message: str, **extra: Any) -> Dict[str, Any]:
    body = {"statusCode": status_code, "error": kind, "message": message}
    body.update(extra)
    return body


def _field_name(loc) -> str:
    # Drop the "body"/"query"/"path" prefix FastAPI puts first
    parts = [str(part) for part in loc[1:]] if len(loc) > 1 else [str(part) for part in loc]
    return ".".join(parts)


async def club_error_handler(request: Request, exc: ClubError) -> JSONResponse:
    extra = {}
    if isinstance(exc, ValidationError) and exc.errors:
        extra["errors"] = exc.errors
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.status_code, exc.kind, exc.message, **extra),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    kind = HTTP_ERROR_KINDS.get(exc.status_code, "HTTP_ERROR")
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.status_code, kind, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": _field_name(error.get("loc", ())), "message": error.get("msg", "Invalid value")}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(
            status.HTTP_400_BAD_REQUEST, "VALIDATION", "Validation failed", errors=errors
        ),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    principal = getattr(request.state, "principal", None)
    logger.exception(
        "Unhandled error during %s %s (principal=%s, params=%s)",
        request.method,
        request.url.path,
        principal.user_id if principal else None,
        dict(request.path_params),
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL", "Internal server error"
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ClubError, club_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
