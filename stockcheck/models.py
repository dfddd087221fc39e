"""
Data models for the stock checker.

All structured data uses frozen dataclasses: records are created once per
source row and never mutated afterwards.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .normalize import UNKNOWN_DATE


class ColumnRole(Enum):
    """Semantic role of a column in a source export."""
    REFERENCE = "reference"
    COLOR = "color"
    SIZE = "size"
    QUANTITY = "quantity"
    RECEIVE_DATE = "receive_date"


class HeaderMode(Enum):
    """
    How the rows of a document were mapped to column roles.

    HEADER means every role was found in the first line.
    POSITIONAL means at least one role was missing, so the whole document
    (first line included) was read with the fixed column order.
    """
    HEADER = "header"
    POSITIONAL = "positional"


@dataclass(frozen=True)
class ColumnMapping:
    """Outcome of header detection for one document."""
    mode: HeaderMode
    indices: dict[ColumnRole, int]
    missing: tuple[ColumnRole, ...] = ()

    @property
    def has_header(self) -> bool:
        return self.mode is HeaderMode.HEADER


@dataclass(frozen=True)
class StockRecord:
    """One on-hand stock row after normalization."""
    base_reference: str
    color: str                  # Display form (whitespace collapsed)
    size: str                   # Canonical size label
    quantity: int = 0


@dataclass(frozen=True)
class ReplenishmentRecord:
    """One scheduled inbound row after normalization."""
    base_reference: str
    color_key: str              # Accent/case/punctuation-insensitive key
    color: str                  # Display form, kept for reporting
    size: str
    receive_date: str = UNKNOWN_DATE    # Raw date text or the sentinel
    quantity: int = 0


@dataclass(frozen=True)
class ReplenishmentEntry:
    """Quantity expected on one receive date."""
    date: str
    quantity: int


@dataclass(frozen=True)
class ReplenishmentSummary:
    """
    Aggregate over all dated entries of one (reference, color, size).

    date is the earliest known date, or "-" when no entry carries one.
    """
    date: str
    quantity: int


@dataclass(frozen=True)
class SizeAvailability:
    """One line of the stock table for a reference and color."""
    size: str
    stock: int
    reappro_date: str = UNKNOWN_DATE
    reappro_quantity: Optional[int] = None
    reappro_detail: tuple[ReplenishmentEntry, ...] = field(default_factory=tuple)

    @property
    def in_stock(self) -> bool:
        return self.stock > 0
