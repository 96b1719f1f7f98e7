"""
Business logic services.

Each service handles one step of the conversion.
"""

from services.conversion_service import (
    ConversionService,
    get_conversion_service,
    ConversionResult,
    ConversionStage,
    ValidationResult,
    ValidationStatus,
    validate_columns,
    validate_dataset,
    parse_item_name,
    normalize_price,
    map_record,
)
from services.export_service import ExportService, get_export_service

__all__ = [
    "ConversionService",
    "get_conversion_service",
    "ConversionResult",
    "ConversionStage",
    "ValidationResult",
    "ValidationStatus",
    "validate_columns",
    "validate_dataset",
    "parse_item_name",
    "normalize_price",
    "map_record",
    "ExportService",
    "get_export_service",
]
