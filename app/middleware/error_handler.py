# app/middleware/error_handler.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.errors import BookstoreError, ErrorKind, STATUS_CODES

logger = logging.getLogger(__name__)

HTTP_KINDS = {
    401: ErrorKind.AUTHENTICATION,
    404: ErrorKind.NOT_FOUND,
    409: ErrorKind.CONFLICT,
    422: ErrorKind.BUSINESS_LOGIC,
}


def error_response(status_code: int, message: str, kind: ErrorKind, details=None) -> JSONResponse:
    content = {"status": False, "message": message}

    # detail is only exposed outside production
    if not settings.is_production:
        content["error"] = {"kind": kind.value, "details": details or {}}

    return JSONResponse(status_code=status_code, content=content)


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part != "body"]
    message = first.get("msg", "Invalid value")
    if location:
        return f"{'.'.join(location)}: {message}"
    return message


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(BookstoreError)
    async def handle_bookstore_error(request: Request, exc: BookstoreError):
        if exc.kind == ErrorKind.INTERNAL:
            logger.error(f"{request.method} {request.url.path}: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path}: {exc.kind.value}: {exc.message}")
        return error_response(exc.status_code, exc.message, exc.kind, exc.details)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        message = _describe_validation_error(exc)
        return error_response(
            STATUS_CODES[ErrorKind.VALIDATION],
            message,
            ErrorKind.VALIDATION,
            {"errors": [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in exc.errors()]},
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code >= 500:
            kind = ErrorKind.INTERNAL
        else:
            kind = HTTP_KINDS.get(exc.status_code, ErrorKind.VALIDATION)
        return error_response(exc.status_code, str(exc.detail), kind)

    @app.exception_handler(IntegrityError)
    async def handle_integrity_error(request: Request, exc: IntegrityError):
        logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
        return error_response(
            STATUS_CODES[ErrorKind.CONFLICT],
            "Duplicate or invalid reference",
            ErrorKind.CONFLICT,
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        details = None if settings.is_production else {"exception": repr(exc)}
        return error_response(
            STATUS_CODES[ErrorKind.INTERNAL],
            "Internal server error",
            ErrorKind.INTERNAL,
            details,
        )
