"""
Shared test fixtures.
"""

import sys
from pathlib import Path

# Add project root to Python path
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir))

import pytest

from tests.factories import VARLIK_COLUMNS


@pytest.fixture
def varlik_rows() -> list[list]:
    """Three realistic Varlık rows (Turkish price format)."""
    return [
        ["KARMA DİĞER KİTAPLAR-.MARKASIZ-Kelebek Zihinli Çocuk-9786050837933", "2024/0001", "8690001000017", "125,50"],
        ["ROMAN-YERLİ-Çalıkuşu-9789750719387", "2024/0002", "8690001000024", "89,90"],
        ["DERGİ-AYLIK-Bilim ve Teknik", "2024/0003", "8690001000031", "35"],
    ]


@pytest.fixture
def varlik_records(varlik_rows) -> list[dict]:
    """varlik_rows as reader output (column name -> value)."""
    return [dict(zip(VARLIK_COLUMNS, row)) for row in varlik_rows]


@pytest.fixture
def test_client():
    """
    Create FastAPI test client.

    Usage:
        def test_endpoint(test_client):
            response = test_client.get("/health")
            assert response.status_code == 200
    """
    from fastapi.testclient import TestClient
    from main import app

    return TestClient(app)
