"""
Spreadsheet readers module.
"""

from parsers.varlik_parser import (
    read_varlik_file,
    VarlikReadResult,
    SUPPORTED_EXTENSIONS,
)

__all__ = [
    "read_varlik_file",
    "VarlikReadResult",
    "SUPPORTED_EXTENSIONS",
]
