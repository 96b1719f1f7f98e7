"""
Tests for export_service — Catalog import workbook generation.
"""

from io import BytesIO

import pytest
from openpyxl import load_workbook

from models.catalog import CatalogRecord, CATALOG_COLUMNS
from services.export_service import (
    column_width,
    ExportService,
    get_export_service,
    MIN_COLUMN_WIDTH,
    MAX_COLUMN_WIDTH,
)


@pytest.fixture
def catalog_records() -> list[CatalogRecord]:
    return [
        CatalogRecord(
            isbn="9786050837933",
            title="Kelebek Zihinli Çocuk",
            registry_number="2024/0001",
            barcode="0012345",
            price="125.50",
        ),
        CatalogRecord(
            isbn="",
            title="Bilim ve Teknik",
            registry_number="2024/0003",
            barcode="8690001000031",
            price="0.00",
        ),
    ]


def load_sheet(output: BytesIO):
    wb = load_workbook(output)
    return wb, wb.active


class TestColumnWidth:
    """Tests for column width sizing."""

    def test_minimum_width(self):
        assert column_width("ISBN", ["1"]) == MIN_COLUMN_WIDTH

    def test_fits_longest_value(self):
        assert column_width("Eser Adı", ["Kelebek Zihinli Çocuk"]) == len("Kelebek Zihinli Çocuk") + 2

    def test_maximum_width(self):
        assert column_width("Eser Adı", ["x" * 200]) == MAX_COLUMN_WIDTH

    def test_no_values(self):
        assert column_width("Demirbaş No", []) == max(MIN_COLUMN_WIDTH, len("Demirbaş No") + 2)


class TestGenerateCatalogExcel:
    """Tests for catalog workbook generation."""

    def test_returns_bytesio_at_start(self, catalog_records):
        output = ExportService().generate_catalog_excel(catalog_records)

        assert isinstance(output, BytesIO)
        assert output.tell() == 0

    def test_single_sheet_with_default_name(self, catalog_records):
        wb, ws = load_sheet(ExportService().generate_catalog_excel(catalog_records))

        assert wb.sheetnames == ["Sheet1"]
        assert ws.title == "Sheet1"

    def test_custom_sheet_name(self, catalog_records):
        wb, _ = load_sheet(ExportService("Katalog").generate_catalog_excel(catalog_records))
        assert wb.sheetnames == ["Katalog"]

        wb, _ = load_sheet(ExportService().generate_catalog_excel(catalog_records, sheet_name="Aktarım"))
        assert wb.sheetnames == ["Aktarım"]

    def test_header_row(self, catalog_records):
        _, ws = load_sheet(ExportService().generate_catalog_excel(catalog_records))

        headers = [cell.value for cell in ws[1]]
        assert tuple(headers) == CATALOG_COLUMNS
        assert all(cell.font.bold for cell in ws[1])

    def test_one_row_per_record_in_order(self, catalog_records):
        _, ws = load_sheet(ExportService().generate_catalog_excel(catalog_records))

        assert ws.max_row == 1 + len(catalog_records)
        assert ws["A2"].value == "9786050837933"
        assert ws["B2"].value == "Kelebek Zihinli Çocuk"
        assert ws["G2"].value == "2024/0001"
        assert ws["I2"].value == "125.50"
        assert ws["B3"].value == "Bilim ve Teknik"

    def test_values_written_as_text(self, catalog_records):
        _, ws = load_sheet(ExportService().generate_catalog_excel(catalog_records))

        assert ws["H2"].value == "0012345"
        assert ws["H2"].number_format == "@"
        assert isinstance(ws["I2"].value, str)

    def test_placeholder_columns_are_empty(self, catalog_records):
        _, ws = load_sheet(ExportService().generate_catalog_excel(catalog_records))

        for col in ("C", "D", "E", "F"):
            assert ws[f"{col}2"].value in (None, "")

    def test_empty_record_list_writes_header_only(self):
        _, ws = load_sheet(ExportService().generate_catalog_excel([]))

        assert ws.max_row == 1
        assert tuple(cell.value for cell in ws[1]) == CATALOG_COLUMNS

    def test_header_is_frozen(self, catalog_records):
        _, ws = load_sheet(ExportService().generate_catalog_excel(catalog_records))
        assert ws.freeze_panes == "A2"


class TestGetExportService:
    """Tests for singleton getter."""

    def test_returns_instance(self):
        service = get_export_service()
        assert isinstance(service, ExportService)

    def test_returns_same_instance(self):
        service1 = get_export_service()
        service2 = get_export_service()
        assert service1 is service2
