"""
Export service — Generate library catalog import workbooks.

Writes converted CatalogRecords to a single worksheet: header row, then
one row per record in conversion order.
"""

from io import BytesIO
from typing import Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font, Border, Side
from openpyxl.utils import get_column_letter
import structlog

from models.catalog import CatalogRecord, CATALOG_COLUMNS

logger = structlog.get_logger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
DEFAULT_SHEET_NAME = "Sheet1"

MIN_COLUMN_WIDTH = 10
MAX_COLUMN_WIDTH = 60


def column_width(header: str, values: Sequence[str]) -> int:
    """Width that fits the longest cell, clamped to [10, 60]."""
    longest = max([len(header)] + [len(v) for v in values])
    return max(MIN_COLUMN_WIDTH, min(MAX_COLUMN_WIDTH, longest + 2))


class ExportService:
    """Service for generating catalog export files."""

    def __init__(self, sheet_name: str = DEFAULT_SHEET_NAME):
        self.sheet_name = sheet_name

    def generate_catalog_excel(
        self,
        records: Sequence[CatalogRecord],
        sheet_name: Optional[str] = None,
    ) -> BytesIO:
        """
        Generate the catalog import workbook.

        Every cell is written as text so ISBNs, barcodes and registry
        numbers keep their leading zeros.

        Args:
            records: Converted rows, written in the given order
            sheet_name: Overrides the service default

        Returns:
            BytesIO containing the Excel file
        """
        title = sheet_name or self.sheet_name

        logger.info(
            "generating_catalog_excel",
            record_count=len(records),
            sheet=title,
        )

        wb = Workbook()
        ws = wb.active
        ws.title = title

        # Styles
        bold_font = Font(bold=True)
        thin_border = Border(
            bottom=Side(style="thin", color="000000")
        )

        # Row 1: Column headers
        ws.append(list(CATALOG_COLUMNS))
        for cell in ws[1]:
            cell.font = bold_font
            cell.border = thin_border

        # Records (starting row 2)
        rows = [record.values() for record in records]
        for values in rows:
            ws.append(list(values))

        for row in ws.iter_rows(min_row=2):
            for cell in row:
                cell.number_format = "@"

        for idx, header in enumerate(CATALOG_COLUMNS, start=1):
            ws.column_dimensions[get_column_letter(idx)].width = column_width(
                header, [values[idx - 1] for values in rows]
            )

        ws.freeze_panes = "A2"

        logger.info(
            "catalog_excel_generated",
            rows_written=len(rows),
        )

        # Save to BytesIO
        output = BytesIO()
        wb.save(output)
        output.seek(0)

        return output


# Singleton instance
_export_service: Optional[ExportService] = None


def get_export_service() -> ExportService:
    """Get or create ExportService instance (sheet name from settings)."""
    global _export_service
    if _export_service is None:
        from config import settings
        _export_service = ExportService(settings.output_sheet_name)
    return _export_service
