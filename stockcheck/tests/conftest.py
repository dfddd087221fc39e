"""
Shared fixtures for the stockcheck test suite.
"""

from pathlib import Path

import pytest

from stockcheck.catalog import StockCatalog
from stockcheck.sources import InMemoryDocumentSource

FIXTURES_DIR = Path(__file__).parent / "fixtures"
STOCK_CSV = FIXTURES_DIR / "stock_sample.csv"
REAPPRO_CSV = FIXTURES_DIR / "reappro_sample.csv"

STOCK_NAME = "stock.csv"
REAPPRO_NAME = "reappro.csv"


@pytest.fixture
def stock_text():
    return STOCK_CSV.read_text(encoding="utf-8")


@pytest.fixture
def reappro_text():
    return REAPPRO_CSV.read_text(encoding="utf-8")


@pytest.fixture
def source(stock_text, reappro_text):
    return InMemoryDocumentSource({STOCK_NAME: stock_text, REAPPRO_NAME: reappro_text})


@pytest.fixture
def catalog(source):
    return StockCatalog(source, stock_resource=STOCK_NAME, replenishment_resource=REAPPRO_NAME)
