# Stock Checker: on-hand stock and scheduled replenishment by reference,
# color and size. Siloed module - no imports from backend.

from .models import (
    ColumnMapping,
    ColumnRole,
    HeaderMode,
    ReplenishmentEntry,
    ReplenishmentRecord,
    ReplenishmentSummary,
    SizeAvailability,
    StockRecord,
)
from .normalize import (
    SIZE_ORDER,
    base_reference,
    canonical_size,
    color_key,
    date_sort_key,
    sort_sizes,
)
from .parsing import detect_columns, detect_delimiter, parse_document
from .stock_index import StockIndex, build_stock_index, index_stock_text, parse_stock
from .replenishment_index import (
    ReplenishmentIndex,
    build_replenishment_index,
    index_replenishment_text,
    parse_replenishment,
)
from .sources import (
    DocumentSource,
    FileDocumentSource,
    HttpDocumentSource,
    InMemoryDocumentSource,
    ResourceUnavailable,
)
from .loader import SingleFlightLoader
from .catalog import StockCatalog
from .config import Config, SourceConfig, build_catalog, build_source, load_config
from .report import export_csv, format_console

__version__ = "1.0.0"

__all__ = [
    # Models
    "ColumnMapping",
    "ColumnRole",
    "HeaderMode",
    "ReplenishmentEntry",
    "ReplenishmentRecord",
    "ReplenishmentSummary",
    "SizeAvailability",
    "StockRecord",
    # Normalization
    "SIZE_ORDER",
    "base_reference",
    "canonical_size",
    "color_key",
    "date_sort_key",
    "sort_sizes",
    # Parsing
    "detect_columns",
    "detect_delimiter",
    "parse_document",
    # Indices
    "StockIndex",
    "build_stock_index",
    "index_stock_text",
    "parse_stock",
    "ReplenishmentIndex",
    "build_replenishment_index",
    "index_replenishment_text",
    "parse_replenishment",
    # Sources
    "DocumentSource",
    "FileDocumentSource",
    "HttpDocumentSource",
    "InMemoryDocumentSource",
    "ResourceUnavailable",
    # Catalog
    "SingleFlightLoader",
    "StockCatalog",
    # Config
    "Config",
    "SourceConfig",
    "build_catalog",
    "build_source",
    "load_config",
    # Report
    "export_csv",
    "format_console",
]
