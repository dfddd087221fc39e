"""
Configuration for the stock checker.

Says where the two exports live and what they are called.
Config is declarative JSON - edit the file, not the code.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .catalog import DEFAULT_REPLENISHMENT_RESOURCE, DEFAULT_STOCK_RESOURCE, StockCatalog
from .sources import (
    DEFAULT_TIMEOUT_SECONDS,
    DocumentSource,
    FileDocumentSource,
    HttpDocumentSource,
)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "stock_check_config.json"
DEFAULT_BASE_URL = "https://files.karibanbrands.com/documents/"

SOURCE_TYPES = ("http", "file")


@dataclass
class SourceConfig:
    """Where raw exports are fetched from."""
    type: str = "http"
    base_url: str = DEFAULT_BASE_URL
    directory: Optional[str] = None     # For type "file"
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    encoding: Optional[str] = None      # None = UTF-8, then cp1252


@dataclass
class Config:
    """Full configuration for the stock checker."""
    source: SourceConfig = field(default_factory=SourceConfig)
    stock_resource: str = DEFAULT_STOCK_RESOURCE
    replenishment_resource: str = DEFAULT_REPLENISHMENT_RESOURCE


def load_config(config_path: str | Path = DEFAULT_CONFIG_PATH) -> Config:
    """
    Load configuration from JSON file.

    Args:
        config_path: Path to stock_check_config.json

    Returns:
        Config with source settings and resource names
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    source_data = data.get("source", {})
    source = SourceConfig(
        type=source_data.get("type", "http"),
        base_url=source_data.get("base_url", DEFAULT_BASE_URL),
        directory=source_data.get("directory"),
        timeout_seconds=float(source_data.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)),
        encoding=source_data.get("encoding"),
    )
    if source.type not in SOURCE_TYPES:
        raise ValueError(f"Unknown source type {source.type!r}, expected one of {SOURCE_TYPES}")

    resources = data.get("resources", {})
    return Config(
        source=source,
        stock_resource=resources.get("stock", DEFAULT_STOCK_RESOURCE),
        replenishment_resource=resources.get("replenishment", DEFAULT_REPLENISHMENT_RESOURCE),
    )


def use_directory(config: Config, directory: str | Path) -> Config:
    """Copy of config reading exports from a local directory instead."""
    source = SourceConfig(
        type="file",
        base_url=config.source.base_url,
        directory=str(directory),
        timeout_seconds=config.source.timeout_seconds,
        encoding=config.source.encoding,
    )
    return Config(
        source=source,
        stock_resource=config.stock_resource,
        replenishment_resource=config.replenishment_resource,
    )


def build_source(config: Config) -> DocumentSource:
    """Instantiate the DocumentSource described by config."""
    source = config.source
    if source.type == "file":
        if not source.directory:
            raise ValueError("File source requires a 'directory'")
        return FileDocumentSource(source.directory, encoding=source.encoding)
    if source.type == "http":
        return HttpDocumentSource(
            source.base_url,
            timeout=source.timeout_seconds,
            encoding=source.encoding,
        )
    raise ValueError(f"Unknown source type {source.type!r}")


def build_catalog(config: Config) -> StockCatalog:
    """StockCatalog over the configured source and resource names."""
    return StockCatalog(
        build_source(config),
        stock_resource=config.stock_resource,
        replenishment_resource=config.replenishment_resource,
    )
