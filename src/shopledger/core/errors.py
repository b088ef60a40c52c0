"""Ledger exceptions and the JSON error body they render to."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Body of every non-2xx response raised through AppError."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict[str, Any]] = Field(None, description="Additional context")


class AppError(Exception):
    """Base for errors the API turns into an ErrorDetail response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_response(self) -> ErrorDetail:
        return ErrorDetail(
            code=self.code,
            message=self.message,
            details=self.details if self.details else None,
        )


class ValidationError(AppError):
    """Bad input pydantic cannot catch (empty patch, inverted date range)."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=422,
            details=details,
        )


class NotFoundError(AppError):
    """
    Unknown id, or an id owned by another shopkeeper.

    Both cases answer 404 so one tenant never learns which ids another holds.
    """

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            code="NOT_FOUND",
            message=f"{resource} with ID {resource_id} not found",
            status_code=404,
            details={"resource": resource, "resource_id": resource_id},
        )


class ConflictError(AppError):
    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="CONFLICT",
            message=message,
            status_code=409,
            details=details,
        )


class DuplicateFieldError(ConflictError):
    """A per-shopkeeper unique field (phone, whatsapp, invoice number) is taken."""

    def __init__(self, resource: str, field: str, value: str):
        label = field.replace("_", " ")
        super().__init__(
            f"{label.capitalize()} already exists for another {resource.lower()}",
            details={"resource": resource, "field": field, "value": value},
        )


class StaleBillError(ConflictError):
    """A bill's version changed between read and write."""

    def __init__(self):
        super().__init__("Bill was modified by another request, reload and retry")


class InvalidStateError(AppError):
    """The record exists but its state forbids the operation (deleted bill, ...)."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="INVALID_STATE",
            message=message,
            status_code=400,
            details=details,
        )


class UnauthorizedError(AppError):
    """No session, a stale session, or bad credentials."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            code="UNAUTHORIZED",
            message=message,
            status_code=401,
        )
