"""
Stock Index - Lookup structures over the on-hand stock export.

Built once from the raw text, then only read:
- colors_by_ref: reference -> {color key: display color}
- sizes_by_color: (reference, color key) -> set of sizes
- quantities: (reference, color key, size) -> summed quantity

Variant references (NS221A, NS221AX) are grouped under their base
reference, and duplicate rows add up instead of overwriting each other.
"""

import logging
from dataclasses import dataclass, field

from .models import ColumnRole, HeaderMode, StockRecord
from .normalize import (
    base_reference,
    canonical_size,
    color_key,
    display_color,
    parse_quantity,
    sort_labels,
    sort_sizes,
)
from .parsing import STOCK_COLUMNS, ParsedDocument, parse_document

logger = logging.getLogger(__name__)


@dataclass
class StockIndex:
    """
    Indexed stock for (reference, color, size) lookups.

    Colors are matched on color_key; the first display form seen for a key
    is the one listed by colors_for().
    """
    colors_by_ref: dict[str, dict[str, str]] = field(default_factory=dict)
    sizes_by_color: dict[tuple[str, str], set[str]] = field(default_factory=dict)
    quantities: dict[tuple[str, str, str], int] = field(default_factory=dict)
    record_count: int = 0
    dropped_count: int = 0
    header_mode: HeaderMode = HeaderMode.HEADER

    def add(self, record: StockRecord):
        """Accumulate one record into the three maps."""
        key = color_key(record.color)

        colors = self.colors_by_ref.setdefault(record.base_reference, {})
        colors.setdefault(key, record.color)

        self.sizes_by_color.setdefault((record.base_reference, key), set()).add(record.size)

        stock_key = (record.base_reference, key, record.size)
        self.quantities[stock_key] = self.quantities.get(stock_key, 0) + record.quantity
        self.record_count += 1

    def unique_refs(self) -> list[str]:
        return sort_labels(self.colors_by_ref)

    def colors_for(self, ref: str) -> list[str]:
        colors = self.colors_by_ref.get(base_reference(ref), {})
        return sort_labels(colors.values())

    def sizes_for(self, ref: str, color: str) -> list[str]:
        sizes = self.sizes_by_color.get((base_reference(ref), color_key(color)), set())
        return sort_sizes(sizes)

    def stock(self, ref: str, color: str, size: str) -> int:
        """Summed quantity for the key, 0 when the key was never seen."""
        key = (base_reference(ref), color_key(color), canonical_size(size))
        return self.quantities.get(key, 0)


def parse_stock(document: ParsedDocument) -> tuple[list[StockRecord], int]:
    """
    Normalize parsed rows into StockRecords.

    Returns:
        (records, dropped) where dropped counts rows missing a reference,
        color or size
    """
    records = []
    dropped = 0

    for row in document.rows:
        ref = base_reference(row.get(ColumnRole.REFERENCE))
        color = display_color(row.get(ColumnRole.COLOR))
        size = canonical_size(row.get(ColumnRole.SIZE))

        if not ref or not color_key(color) or not size:
            dropped += 1
            continue

        records.append(StockRecord(
            base_reference=ref,
            color=color,
            size=size,
            quantity=parse_quantity(row.get(ColumnRole.QUANTITY)),
        ))

    return records, dropped


def build_stock_index(records: list[StockRecord]) -> StockIndex:
    """
    Build lookup index from stock records.

    Args:
        records: StockRecords from parse_stock

    Returns:
        StockIndex with quantities summed per (reference, color, size)
    """
    index = StockIndex()
    for record in records:
        index.add(record)
    return index


def index_stock_text(text: str, name: str = "stock") -> StockIndex:
    """Parse a raw stock export and index it in one pass."""
    document = parse_document(text, STOCK_COLUMNS, name=name)
    records, dropped = parse_stock(document)

    index = build_stock_index(records)
    index.dropped_count = dropped
    index.header_mode = document.mapping.mode

    logger.info(
        "Indexed %s: delimiter=%r mode=%s rows=%d dropped=%d keys=%d",
        name,
        document.delimiter,
        index.header_mode.value,
        index.record_count,
        dropped,
        len(index.quantities),
    )
    return index
