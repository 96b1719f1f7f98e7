"""
Catalog import schema and Varlık İşlem Fişi column names.

CatalogRecord is the destination row handed to the workbook writer.
The response models below wrap it for the preview endpoint.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, Field


# An upstream row: column name -> cell value (text, number or empty)
InputRecord = Mapping[str, Any]


class TitlePolicy(str, Enum):
    """Rules for splitting malzemeAdi into ISBN and title."""
    POSITIONAL = "positional"          # last part = ISBN, part before it = title
    ISBN_VALIDATED = "isbn_validated"  # last part is an ISBN only if 10/13 digits


# ===================
# SOURCE COLUMNS
# ===================

COL_ITEM_NAME = "malzemeAdi"
COL_REGISTRY_NO = "sicilNo"
COL_BARCODE = "barKod"
COL_UNIT_PRICE = "birimFiyat"

REQUIRED_COLUMNS = (COL_ITEM_NAME, COL_REGISTRY_NO, COL_BARCODE, COL_UNIT_PRICE)


# ===================
# DESTINATION COLUMNS
# ===================

# Order matters: this is the header row of the catalog workbook
CATALOG_COLUMNS = (
    "ISBN",
    "Eser Adı",
    "Yazar",
    "Yayınevi",
    "Basım Yılı",
    "Baskı",
    "Demirbaş No",
    "Barkod",
    "Fiyat",
)


@dataclass(frozen=True)
class CatalogRecord:
    """One row of the library catalog import sheet."""
    isbn: str
    title: str
    registry_number: str
    barcode: str
    price: str
    # No source column feeds these yet
    author: str = ""
    publisher: str = ""
    publication_year: str = ""
    print_run: str = ""

    def values(self) -> tuple[str, ...]:
        """Cell values in CATALOG_COLUMNS order."""
        return (
            self.isbn,
            self.title,
            self.author,
            self.publisher,
            self.publication_year,
            self.print_run,
            self.registry_number,
            self.barcode,
            self.price,
        )

    def to_row(self) -> dict[str, str]:
        """Header -> value mapping, keys in CATALOG_COLUMNS order."""
        return dict(zip(CATALOG_COLUMNS, self.values()))


# ===================
# API SCHEMAS
# ===================

class ConversionPreviewResponse(BaseModel):
    """Preview of a converted Varlık İşlem Fişi upload."""
    filename: str
    policy: TitlePolicy
    row_count: int = Field(ge=0)
    columns: list[str] = Field(default_factory=lambda: list(CATALOG_COLUMNS))
    records: list[dict[str, str]] = Field(default_factory=list)
