"""
Replenishment Index - Scheduled inbound stock grouped by receive date.

Rows are grouped on (base reference, color key, size); inside a group,
quantities are summed per receive date so one delivery split across
several export lines shows up once.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .models import (
    ColumnRole,
    HeaderMode,
    ReplenishmentEntry,
    ReplenishmentRecord,
    ReplenishmentSummary,
)
from .normalize import (
    UNKNOWN_DATE,
    base_reference,
    canonical_size,
    clean_cell,
    color_key,
    date_sort_key,
    display_color,
    is_known_date,
    parse_quantity,
)
from .parsing import REPLENISHMENT_COLUMNS, ParsedDocument, parse_document

logger = logging.getLogger(__name__)

GroupKey = tuple[str, str, str]


@dataclass
class ReplenishmentIndex:
    """
    Indexed replenishments for (reference, color, size) lookups.

    Attributes:
        by_key: (reference, color key, size) -> {receive date: summed quantity}
        day_labels: (reference, color key, size, day) -> first-seen date text
        record_count: Rows kept after normalization
        dropped_count: Rows missing a reference, color or size
        header_mode: Whether columns were found by header or by position
    """
    by_key: dict[GroupKey, dict[str, int]] = field(default_factory=dict)
    record_count: int = 0
    dropped_count: int = 0
    header_mode: HeaderMode = HeaderMode.HEADER
    day_labels: dict[tuple[str, str, str, int], str] = field(default_factory=dict, repr=False)

    def add(self, record: ReplenishmentRecord):
        key = (record.base_reference, record.color_key, record.size)
        by_date = self.by_key.setdefault(key, {})
        date = self._date_label(key, record.receive_date)
        by_date[date] = by_date.get(date, 0) + record.quantity
        self.record_count += 1

    def _date_label(self, key: GroupKey, raw: str) -> str:
        """One label per calendar day, whatever format it was written in."""
        if not is_known_date(raw):
            return raw
        return self.day_labels.setdefault((*key, date_sort_key(raw)), raw)

    def entries(self, ref: str, color: str, size: str) -> list[ReplenishmentEntry]:
        """Date-ascending entries, unknown dates last; empty when unseen."""
        key = (base_reference(ref), color_key(color), canonical_size(size))
        by_date = self.by_key.get(key)
        if not by_date:
            return []

        ordered = sorted(by_date.items(), key=lambda item: (date_sort_key(item[0]), item[0]))
        return [ReplenishmentEntry(date=d, quantity=q) for d, q in ordered]

    def summary(self, ref: str, color: str, size: str) -> Optional[ReplenishmentSummary]:
        """Total over all dates with the earliest known date, or None."""
        entries = self.entries(ref, color, size)
        if not entries:
            return None

        earliest = next((e.date for e in entries if is_known_date(e.date)), UNKNOWN_DATE)
        return ReplenishmentSummary(
            date=earliest,
            quantity=sum(e.quantity for e in entries),
        )


def parse_replenishment(document: ParsedDocument) -> tuple[list[ReplenishmentRecord], int]:
    """
    Normalize parsed rows into ReplenishmentRecords.

    An empty receive date becomes "-"; a missing quantity counts as 0.

    Returns:
        (records, dropped)
    """
    records = []
    dropped = 0

    for row in document.rows:
        ref = base_reference(row.get(ColumnRole.REFERENCE))
        color = display_color(row.get(ColumnRole.COLOR))
        key = color_key(color)
        size = canonical_size(row.get(ColumnRole.SIZE))

        if not ref or not key or not size:
            dropped += 1
            continue

        records.append(ReplenishmentRecord(
            base_reference=ref,
            color_key=key,
            color=color,
            size=size,
            receive_date=clean_cell(row.get(ColumnRole.RECEIVE_DATE)) or UNKNOWN_DATE,
            quantity=parse_quantity(row.get(ColumnRole.QUANTITY)),
        ))

    return records, dropped


def build_replenishment_index(records: list[ReplenishmentRecord]) -> ReplenishmentIndex:
    """Group records by key and receive date, summing quantities."""
    index = ReplenishmentIndex()
    for record in records:
        index.add(record)
    return index


def index_replenishment_text(text: str, name: str = "replenishment") -> ReplenishmentIndex:
    """Parse a raw replenishment export and index it in one pass."""
    document = parse_document(text, REPLENISHMENT_COLUMNS, name=name)
    records, dropped = parse_replenishment(document)

    index = build_replenishment_index(records)
    index.dropped_count = dropped
    index.header_mode = document.mapping.mode

    logger.info(
        "Indexed %s: delimiter=%r mode=%s rows=%d dropped=%d groups=%d",
        name,
        document.delimiter,
        index.header_mode.value,
        index.record_count,
        dropped,
        len(index.by_key),
    )
    return index
