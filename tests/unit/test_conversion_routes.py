"""
Tests for the conversion API routes.

Uploads in-memory Varlık exports through the FastAPI test client.
"""

from io import BytesIO

import pytest
from openpyxl import load_workbook

from config import settings
from models.catalog import CATALOG_COLUMNS
from tests.factories import create_varlik_csv, create_varlik_excel

XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def upload(content: bytes, filename: str = "varlik.xlsx", content_type: str = XLSX) -> dict:
    return {"file": (filename, content, content_type)}


# ===================
# PREVIEW
# ===================

class TestPreviewConversion:
    """Tests for POST /api/conversions/preview."""

    def test_preview_xlsx(self, test_client, varlik_rows):
        response = test_client.post(
            "/api/conversions/preview",
            files=upload(create_varlik_excel(varlik_rows)),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["filename"] == "varlik.xlsx"
        assert data["policy"] == "isbn_validated"
        assert data["row_count"] == 3
        assert data["columns"] == list(CATALOG_COLUMNS)
        assert len(data["records"]) == 3
        assert list(data["records"][0].keys()) == list(CATALOG_COLUMNS)
        assert data["records"][0]["ISBN"] == "9786050837933"
        assert data["records"][0]["Eser Adı"] == "Kelebek Zihinli Çocuk"
        assert data["records"][0]["Fiyat"] == "125.50"
        assert data["records"][2]["Eser Adı"] == "Bilim ve Teknik"

    def test_preview_csv(self, test_client, varlik_rows):
        response = test_client.post(
            "/api/conversions/preview",
            files=upload(create_varlik_csv(varlik_rows, delimiter=";"), "varlik.csv", "text/csv"),
        )

        assert response.status_code == 200
        assert response.json()["records"][1]["Fiyat"] == "89.90"

    def test_policy_override(self, test_client):
        content = create_varlik_excel([["Category-Subcat-Some Title", "1", "2", "3"]])

        response = test_client.post(
            "/api/conversions/preview?policy=positional",
            files=upload(content),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["policy"] == "positional"
        assert data["records"][0]["ISBN"] == "Some Title"
        assert data["records"][0]["Eser Adı"] == "Subcat"

    def test_invalid_policy(self, test_client, varlik_rows):
        response = test_client.post(
            "/api/conversions/preview?policy=guess",
            files=upload(create_varlik_excel(varlik_rows)),
        )

        assert response.status_code == 422

    def test_missing_columns(self, test_client):
        content = create_varlik_excel(
            [["A-B-C", "1"]],
            columns=["malzemeAdi", "sicilNo"],
        )

        response = test_client.post("/api/conversions/preview", files=upload(content))

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "MISSING_COLUMNS"
        assert error["details"]["missing_columns"] == ["barKod", "birimFiyat"]

    def test_empty_dataset(self, test_client):
        response = test_client.post("/api/conversions/preview", files=upload(create_varlik_excel([])))

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "EMPTY_DATASET"

    def test_unsupported_file_type(self, test_client):
        response = test_client.post(
            "/api/conversions/preview",
            files=upload(b"%PDF-1.4", "varlik.pdf", "application/pdf"),
        )

        assert response.status_code == 415
        assert response.json()["error"]["code"] == "UNSUPPORTED_FILE_TYPE"

    def test_empty_upload(self, test_client):
        response = test_client.post("/api/conversions/preview", files=upload(b""))

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "EMPTY_UPLOAD"

    def test_part_without_filename_is_rejected(self, test_client):
        response = test_client.post("/api/conversions/preview", data={"file": "not a file"})

        assert response.status_code == 422

    def test_blank_row_is_converted(self, test_client, varlik_rows):
        rows = [varlik_rows[0], [None, None, None, None], varlik_rows[1]]

        response = test_client.post("/api/conversions/preview", files=upload(create_varlik_excel(rows)))

        data = response.json()
        assert data["row_count"] == 3
        assert data["records"][1]["ISBN"] == ""
        assert data["records"][1]["Fiyat"] == "0.00"

    def test_blank_rows_skipped_when_configured(self, test_client, varlik_rows, monkeypatch):
        monkeypatch.setattr(settings, "skip_blank_rows", True)
        rows = [varlik_rows[0], [None, None, None, None], varlik_rows[1]]

        response = test_client.post("/api/conversions/preview", files=upload(create_varlik_excel(rows)))

        assert response.json()["row_count"] == 2

    def test_file_too_large(self, test_client, varlik_rows, monkeypatch):
        monkeypatch.setattr(settings, "max_upload_mb", 1)
        content = create_varlik_csv(varlik_rows) + b"x" * (1024 * 1024)

        response = test_client.post(
            "/api/conversions/preview",
            files=upload(content, "varlik.csv", "text/csv"),
        )

        assert response.status_code == 413
        assert response.json()["error"]["code"] == "FILE_TOO_LARGE"

    def test_corrupt_xlsx(self, test_client):
        response = test_client.post("/api/conversions/preview", files=upload(b"not a workbook"))

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "SPREADSHEET_READ_ERROR"


# ===================
# EXPORT
# ===================

class TestExportConversion:
    """Tests for POST /api/conversions/export."""

    def test_export_returns_workbook(self, test_client, varlik_rows):
        response = test_client.post(
            "/api/conversions/export",
            files=upload(create_varlik_excel(varlik_rows)),
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == XLSX
        assert response.headers["content-disposition"] == 'attachment; filename="processedData.xlsx"'

        ws = load_workbook(BytesIO(response.content)).active
        assert ws.title == "Sheet1"
        assert tuple(cell.value for cell in ws[1]) == CATALOG_COLUMNS
        assert ws.max_row == 4
        assert ws["A2"].value == "9786050837933"
        assert ws["I3"].value == "89.90"

    def test_export_missing_columns(self, test_client):
        content = create_varlik_excel([["x"]], columns=["fisNo"])

        response = test_client.post("/api/conversions/export", files=upload(content))

        assert response.status_code == 422
        assert response.json()["error"]["details"]["missing_columns"] == [
            "malzemeAdi", "sicilNo", "barKod", "birimFiyat"
        ]


# ===================
# APP
# ===================

class TestAppEndpoints:
    """Tests for health and root endpoints."""

    def test_health(self, test_client):
        response = test_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["title_policy"] == "isbn_validated"

    def test_root_lists_endpoints(self, test_client):
        data = test_client.get("/").json()

        assert data["endpoints"]["preview"] == "/api/conversions/preview"
        assert data["endpoints"]["export"] == "/api/conversions/export"
