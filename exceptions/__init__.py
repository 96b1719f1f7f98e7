"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    ValidationError,

    # Dataset
    EmptyDatasetError,
    MissingColumnsError,

    # Files
    SpreadsheetReadError,
    UnsupportedFileTypeError,
    FileTooLargeError,
    EmptyUploadError,
)

__all__ = [
    # Base
    "AppError",
    "ValidationError",

    # Dataset
    "EmptyDatasetError",
    "MissingColumnsError",

    # Files
    "SpreadsheetReadError",
    "UnsupportedFileTypeError",
    "FileTooLargeError",
    "EmptyUploadError",
]
