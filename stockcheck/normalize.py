"""
Field normalization for stock and replenishment exports.

Every function here is pure: the same raw cell always maps to the same
canonical value, so records built from two different exports can be
joined on (reference, color, size).
"""

import re
import unicodedata
from datetime import datetime
from typing import Iterable, Optional

# Canonical size sequence, smallest first
SIZE_ORDER = ["2XS", "XS", "S", "M", "L", "XL", "XXL", "3XL", "4XL", "5XL", "6XL"]

SIZE_ALIASES = {
    "XXS": "2XS",
    "2XS": "2XS",
    "XS": "XS",
    "S": "S",
    "M": "M",
    "L": "L",
    "XL": "XL",
    "2XL": "XXL",
    "XXL": "XXL",
    "3XL": "3XL",
    "4XL": "4XL",
    "5XL": "5XL",
    "6XL": "6XL",
}

UNKNOWN_DATE = "-"

# Sorts after any YYYYMMDD value
DATE_SENTINEL = 100_000_000

DATE_FORMATS = [
    "%d/%m/%Y",      # EU slash: 15/03/2025
    "%Y-%m-%d",      # ISO: 2025-03-15
]

_BASE_REF_RE = re.compile(r"^([A-Za-z]+[0-9]+)")
_QUANTITY_RE = re.compile(r"^[+-]?\d+")
_SIZE_POSITION = {size: i for i, size in enumerate(SIZE_ORDER)}


def clean_cell(value: Optional[str]) -> str:
    """Trim a raw cell, treating None as empty."""
    if value is None:
        return ""
    return str(value).strip()


def base_reference(raw: Optional[str]) -> str:
    """
    Strip variant suffixes from a product reference.

    Examples:
        NS221AX -> NS221
        NS221A  -> NS221
        IB220   -> IB220
        12-ABC  -> 12-ABC (no letters+digits prefix, unchanged)
    """
    ref = clean_cell(raw)
    match = _BASE_REF_RE.match(ref)
    return match.group(1) if match else ref


def color_key(raw: Optional[str]) -> str:
    """
    Accent, case and punctuation insensitive key for a color name.

    Examples:
        "Forêt Green" -> "foretgreen"
        "Off-White"   -> "offwhite"
    """
    decomposed = unicodedata.normalize("NFD", clean_cell(raw))
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return re.sub(r"[^a-z0-9]", "", stripped.lower())


def display_color(raw: Optional[str]) -> str:
    """Color as shown to users: trimmed, inner whitespace collapsed."""
    return " ".join(clean_cell(raw).split())


def canonical_size(raw: Optional[str]) -> str:
    """
    Collapse size synonyms onto one label.

    Unknown labels come back uppercased without whitespace.
    """
    size = re.sub(r"\s+", "", clean_cell(raw)).upper()
    return SIZE_ALIASES.get(size, size)


def date_sort_key(raw: Optional[str]) -> int:
    """
    Integer YYYYMMDD for a DD/MM/YYYY or YYYY-MM-DD date.

    Missing, "-" and unparsable values return DATE_SENTINEL so they sort
    after every real date.
    """
    value = clean_cell(raw)
    if not value or value == UNKNOWN_DATE:
        return DATE_SENTINEL

    for fmt in DATE_FORMATS:
        try:
            parsed = datetime.strptime(value, fmt)
        except ValueError:
            continue
        return parsed.year * 10000 + parsed.month * 100 + parsed.day

    return DATE_SENTINEL


def is_known_date(raw: Optional[str]) -> bool:
    return date_sort_key(raw) != DATE_SENTINEL


def parse_quantity(raw: Optional[str]) -> int:
    """
    Parse a quantity cell to a non-negative int.

    Spaces (including non-breaking thousands separators) are dropped and
    the leading integer is kept: "1 200" -> 1200, "12.0" -> 12, "n/a" -> 0.
    """
    value = re.sub(r"\s", "", clean_cell(raw))
    match = _QUANTITY_RE.match(value)
    if not match:
        return 0
    return max(0, int(match.group(0)))


def sort_sizes(sizes: Iterable[str]) -> list[str]:
    """Canonical sizes in SIZE_ORDER, then any other label lexically."""
    unique = set(sizes)
    known = [s for s in SIZE_ORDER if s in unique]
    others = sorted(s for s in unique if s not in _SIZE_POSITION)
    return known + others


def sort_labels(values: Iterable[str]) -> list[str]:
    """Case-insensitive alphabetical order, raw value as tie-breaker."""
    return sorted(values, key=lambda v: (v.casefold(), v))
