"""
Application error type.

Every failure a request can end with is a ``BookstoreError`` tagged with one
``ErrorKind``. The kind decides the HTTP status at the boundary
(see ``app/middleware/error_handler.py``); ``details`` carries the
kind-specific payload (offending field, missing resource id, stock numbers).
"""
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation_error"
    AUTHENTICATION = "authentication_error"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    BUSINESS_LOGIC = "business_logic_error"
    INTERNAL = "internal_error"


STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.AUTHENTICATION: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.BUSINESS_LOGIC: 422,
    ErrorKind.INTERNAL: 500,
}


class BookstoreError(Exception):
    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.kind = kind
        self.message = message
        self.details = details or {}
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]

    def __repr__(self):
        return f"BookstoreError({self.kind.name}, {self.message!r})"


def validation_error(message: str, field: Optional[str] = None) -> BookstoreError:
    details = {"field": field} if field else {}
    return BookstoreError(ErrorKind.VALIDATION, message, details)


def authentication_error(message: str = "Authentication failed") -> BookstoreError:
    return BookstoreError(ErrorKind.AUTHENTICATION, message)


def not_found(resource: str, resource_id: Optional[str] = None) -> BookstoreError:
    if resource_id:
        message = f"{resource} with id {resource_id} not found"
    else:
        message = f"{resource} not found"
    return BookstoreError(
        ErrorKind.NOT_FOUND,
        message,
        {"resource": resource, "resource_id": resource_id},
    )


def conflict(message: str) -> BookstoreError:
    return BookstoreError(ErrorKind.CONFLICT, message)


def business_rule(message: str, **details: Any) -> BookstoreError:
    return BookstoreError(ErrorKind.BUSINESS_LOGIC, message, details)


def internal_error(message: str = "Internal server error") -> BookstoreError:
    return BookstoreError(ErrorKind.INTERNAL, message)
