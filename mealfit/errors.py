# -*- coding: utf-8 -*-
"""Error taxonomy and the uniform failure envelope returned by every endpoint."""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class AppError(Exception):
    status_code: int = 500
    code: Optional[str] = None
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, *, status_code: Optional[int] = None, code: Optional[str] = None) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        super().__init__(self.message)


class UnauthorizedError(AppError):
    status_code = 401
    code = "UNAUTHORIZED"
    default_message = "Unauthorized. Please sign in to continue."


class ForbiddenError(AppError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "Forbidden. You do not have access to this resource."


class ValidationError(AppError):
    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Invalid input data"

    def __init__(self, message: Optional[str] = None, details: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.details: List[Dict[str, Any]] = list(details or [])


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"


class DuplicateEntryError(AppError):
    status_code = 409
    code = "DUPLICATE_ENTRY"
    default_message = "Duplicate entry detected"


class DatabaseError(AppError):
    status_code = 500
    code = "DATABASE_ERROR"
    default_message = "Database operation failed. Please try again."


class SignInDenied(AppError):
    """Raised inside the sign-in flow only; surfaces as a redirect, never as JSON."""

    status_code = 403
    code = "ACCESS_DENIED"
    default_message = "Sign-in denied"


def error_envelope(error: AppError) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "error": error.message}
    if error.code:
        body["code"] = error.code
    if isinstance(error, ValidationError) and error.details:
        body["details"] = error.details
    return body


def success_envelope(data: Any) -> Dict[str, Any]:
    return {"success": True, "data": data}
