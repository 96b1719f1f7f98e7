"""
Custom exception classes for the converter.

Dataset-level failures are reported by the conversion service as tagged
results; these exceptions exist for the HTTP and CLI layers, which need to
turn a failed result (or an unreadable upload) into an error response.
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        code: Error code (e.g., "MISSING_COLUMNS")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


# ===================
# DATASET ERRORS
# ===================

class EmptyDatasetError(ValidationError):
    """Uploaded sheet has a header but no data rows."""

    def __init__(self):
        super().__init__(
            code="EMPTY_DATASET",
            message="No data found in file"
        )


class MissingColumnsError(ValidationError):
    """Required Varlık İşlem Fişi columns are missing."""

    def __init__(self, missing: list[str]):
        super().__init__(
            code="MISSING_COLUMNS",
            message=f"Missing required columns: {', '.join(missing)}",
            details={"missing_columns": list(missing)}
        )


# ===================
# FILE ERRORS
# ===================

class SpreadsheetReadError(ValidationError):
    """Spreadsheet file could not be read."""

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="SPREADSHEET_READ_ERROR",
            message=message,
            details=details
        )


class UnsupportedFileTypeError(AppError):
    """File extension is not .xlsx or .csv (415)."""

    def __init__(self, filename: str, allowed: tuple[str, ...]):
        super().__init__(
            code="UNSUPPORTED_FILE_TYPE",
            message=f"Only {', '.join(allowed)} files are supported",
            status_code=415,
            details={"filename": filename, "allowed": list(allowed)}
        )


class FileTooLargeError(AppError):
    """Upload exceeds the configured size limit (413)."""

    def __init__(self, size_bytes: int, max_mb: int):
        super().__init__(
            code="FILE_TOO_LARGE",
            message=f"File exceeds {max_mb}MB",
            status_code=413,
            details={"size_bytes": size_bytes, "max_mb": max_mb}
        )


class EmptyUploadError(AppError):
    """Upload has no filename or no content (400)."""

    def __init__(self, message: str = "Uploaded file is empty"):
        super().__init__(
            code="EMPTY_UPLOAD",
            message=message,
            status_code=400
        )
