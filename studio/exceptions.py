"""
Domain exceptions for the studio API.
Services raise these; the handler in main.py renders them as JSON responses.
"""
from typing import Any, Optional


class StudioError(Exception):
    """
    Base exception for the studio API.

    Carries the HTTP status and a machine-readable code so routes can let
    service errors propagate unchanged.
    """

    def __init__(
        self,
        message: str,
        code: str = "STUDIO_ERROR",
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "error": self.message,
            "detail": self.message,
            "code": self.code,
        }
        if self.details:
            result["details"] = self.details
        return result


class NotFoundError(StudioError):
    """Raised when an entity id does not exist."""

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(
            message=f"{entity} not found",
            code="NOT_FOUND",
            status_code=404,
            details={"entity": entity, "id": entity_id},
        )


class NoAdjacentEntityError(StudioError):
    """Raised when an entity is already first or last in its ordering scope."""

    def __init__(self, entity: str, entity_id: Any, direction: str):
        super().__init__(
            message=f"No {entity.lower()} to swap with",
            code="NO_ADJACENT_ENTITY",
            status_code=409,
            details={"entity": entity, "id": entity_id, "direction": direction},
        )


class WriteFailureError(StudioError):
    """Raised when the data store rejects a write. `step` is 1-based."""

    def __init__(self, entity: str, step: int, error: str):
        super().__init__(
            message=f"Failed to write {entity.lower()} at step {step}",
            code="WRITE_FAILURE",
            status_code=500,
            details={"entity": entity, "step": step, "error": error},
        )
        self.step = step


class UploadFailureError(StudioError):
    """Raised when the blob store rejects a file."""

    def __init__(self, filename: str, error: str):
        super().__init__(
            message=f"Failed to upload image: {error}",
            code="UPLOAD_FAILURE",
            status_code=502,
            details={"filename": filename, "error": error},
        )


class InvalidFileTypeError(StudioError):
    def __init__(self, filename: str, content_type: Optional[str]):
        super().__init__(
            message=f"File '{filename}' is not a valid image file",
            code="INVALID_FILE_TYPE",
            status_code=400,
            details={"filename": filename, "content_type": content_type},
        )


class ConflictError(StudioError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(
            message=message,
            code="CONFLICT",
            status_code=409,
            details=details,
        )


class StoreReadError(StudioError):
    """Raised when a read against the data store fails (never reported as an empty list)."""

    def __init__(self, what: str, error: str):
        super().__init__(
            message=f"Failed to retrieve {what}",
            code="STORE_READ_FAILURE",
            status_code=500,
            details={"error": error},
        )


class MissingFieldError(StudioError):
    """Raised when a required multipart form field is blank."""

    def __init__(self, field: str):
        super().__init__(
            message=f"{field} is required",
            code="VALIDATION_ERROR",
            status_code=400,
            details={"field": field.lower()},
        )
