"""
Catalog schema and API models.
"""

from models.catalog import (
    InputRecord,
    TitlePolicy,
    CatalogRecord,
    ConversionPreviewResponse,
    REQUIRED_COLUMNS,
    CATALOG_COLUMNS,
)

__all__ = [
    "InputRecord",
    "TitlePolicy",
    "CatalogRecord",
    "ConversionPreviewResponse",
    "REQUIRED_COLUMNS",
    "CATALOG_COLUMNS",
]
