"""
Test configuration and fixtures for the stock checker API test suite.

Provides:
- In-memory document source loaded with the stockcheck fixture exports
- FastAPI TestClient fixture with the catalog dependency overridden
"""
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from backend.api.main import app
from backend.api.routers.stock import get_catalog
from stockcheck import InMemoryDocumentSource, StockCatalog


FIXTURES_DIR = Path(__file__).resolve().parents[2] / "stockcheck" / "tests" / "fixtures"

STOCK_NAME = "stock.csv"
REAPPRO_NAME = "reappro.csv"


# ---------------------------------------------------------------------------
# Source fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def source():
    """In-memory source holding both fixture exports."""
    return InMemoryDocumentSource({
        STOCK_NAME: (FIXTURES_DIR / "stock_sample.csv").read_text(encoding="utf-8"),
        REAPPRO_NAME: (FIXTURES_DIR / "reappro_sample.csv").read_text(encoding="utf-8"),
    })


@pytest.fixture()
def empty_source():
    """Source where every fetch fails."""
    return InMemoryDocumentSource()


# ---------------------------------------------------------------------------
# Client fixtures
# ---------------------------------------------------------------------------

def _client_for(source: InMemoryDocumentSource):
    catalog = StockCatalog(source, stock_resource=STOCK_NAME, replenishment_resource=REAPPRO_NAME)
    app.dependency_overrides[get_catalog] = lambda: catalog
    return TestClient(app)


@pytest.fixture()
def client(source):
    """
    Provide a FastAPI TestClient whose catalog reads the fixture exports.
    """
    with _client_for(source) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def failing_client(empty_source):
    """TestClient whose catalog cannot load anything."""
    with _client_for(empty_source) as c:
        yield c
    app.dependency_overrides.clear()
