# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized error taxonomy for the catalog API. Every error a client can
# see is a CatalogException carrying its own status code and a short,
# actionable message. Internal details never reach the response body.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class CatalogException(Exception):
    """
    Base exception for the catalog API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "CATALOG_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Shirt Exceptions
# =============================================================================

class ShirtValidationError(CatalogException):
    """Raised when a required field is missing or cannot be coerced."""

    def __init__(self, field: str, reason: str):
        super().__init__(
            message=f"Invalid value for '{field}': {reason}",
            code="VALIDATION_ERROR",
            status_code=400,
            suggestion="Send brand and size as non-empty text and price as a non-negative number",
            details={"field": field}
        )


class InvalidShirtIdError(CatalogException):
    """Raised when an identifier is not a well-formed shirt ID."""

    def __init__(self, shirt_id: str):
        super().__init__(
            message=f"Invalid shirt ID: {shirt_id}",
            code="INVALID_ID",
            status_code=400,
            suggestion="Shirt IDs are UUIDs, e.g. 550e8400-e29b-41d4-a716-446655440000",
            details={"shirt_id": shirt_id}
        )


class ShirtNotFoundError(CatalogException):
    """Raised when a well-formed shirt ID doesn't exist."""

    def __init__(self, shirt_id: str):
        super().__init__(
            message=f"Shirt not found: {shirt_id}",
            code="SHIRT_NOT_FOUND",
            status_code=404,
            suggestion="Check that the shirt ID is correct and the shirt hasn't been deleted",
            details={"shirt_id": shirt_id}
        )


class ShirtWriteError(CatalogException):
    """Raised when a create or update cannot be completed."""

    def __init__(self, action: str):
        super().__init__(
            message=f"Failed to {action} shirt",
            code=f"SHIRT_{action.upper()}_FAILED",
            status_code=400,
            suggestion="Try again later or contact support if the issue persists",
        )


# =============================================================================
# Storage Exceptions
# =============================================================================

class PhotoStorageError(CatalogException):
    """Raised when a photo file cannot be written or removed."""

    def __init__(self, filename: str, error: str):
        super().__init__(
            message=f"Photo storage failed: {error}",
            code="PHOTO_STORAGE_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"filename": filename}
        )


class PhotoTooLargeError(CatalogException):
    """Raised when an uploaded photo exceeds the size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"Photo too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="PHOTO_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a photo smaller than {max_mb}MB",
            details={"size_mb": round(size_mb, 2), "max_mb": max_mb}
        )


class RecordStoreError(CatalogException):
    """Raised when the record store cannot be reached or rejects a query."""

    def __init__(self, operation: str):
        super().__init__(
            message=f"Record store error during {operation}",
            code="RECORD_STORE_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def catalog_exception_handler(
    request: Request,
    exc: CatalogException
) -> JSONResponse:
    """
    Convert CatalogException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle request parsing errors (malformed form data, bad query types).
    """
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
        }
    )
