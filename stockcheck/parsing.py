"""
Flat-text export parsing: delimiter detection, line splitting and header
role detection.

Exports come from two systems that disagree on almost everything:
- ";" or "," separators (no quoting, a separator inside a field is unsupported)
- English or French header names, in any case
- Sometimes no header line at all
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Optional

from .models import ColumnMapping, ColumnRole, HeaderMode

logger = logging.getLogger(__name__)

DELIMITER_SAMPLE_SIZE = 1000

# CRLF, CR or LF only; other Unicode line breaks stay inside the line
_NEWLINE = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class ColumnPattern:
    """
    Synonyms identifying one column role.

    Exact synonyms are tried against every header cell before any
    containment test, then the optional predicate.
    """
    exact: tuple[str, ...]
    contains: tuple[str, ...] = ()
    predicate: Optional[Callable[[str], bool]] = None

    def find(self, headers: list[str]) -> Optional[int]:
        testers = [
            lambda h: h in self.exact,
            lambda h: any(needle in h for needle in self.contains),
        ]
        if self.predicate is not None:
            testers.append(self.predicate)

        for tester in testers:
            for i, header in enumerate(headers):
                if header and tester(header):
                    return i
        return None


def _receive_date_header(header: str) -> bool:
    return "date" in header and ("receive" in header or "rec" in header)


REFERENCE_PATTERN = ColumnPattern(
    exact=("ref", "reference", "référence"),
    contains=("ref", "reference", "référence"),
)
COLOR_PATTERN = ColumnPattern(
    exact=("color", "colour", "couleur"),
    contains=("color", "colour", "couleur"),
)
SIZE_PATTERN = ColumnPattern(
    exact=("size", "taille"),
    contains=("size", "taille"),
)

# Dict order is the positional fallback order
STOCK_COLUMNS = {
    ColumnRole.REFERENCE: REFERENCE_PATTERN,
    ColumnRole.COLOR: COLOR_PATTERN,
    ColumnRole.SIZE: SIZE_PATTERN,
    ColumnRole.QUANTITY: ColumnPattern(
        exact=("stock", "qty", "quantity", "quantité"),
        contains=("stock", "qty", "quantity", "quantité"),
    ),
}

REPLENISHMENT_COLUMNS = {
    ColumnRole.REFERENCE: REFERENCE_PATTERN,
    ColumnRole.COLOR: COLOR_PATTERN,
    ColumnRole.SIZE: SIZE_PATTERN,
    ColumnRole.RECEIVE_DATE: ColumnPattern(
        exact=("date to receive", "date_to_receive", "datetorec"),
        contains=("date to receive", "date_to_receive", "datetorec"),
        predicate=_receive_date_header,
    ),
    ColumnRole.QUANTITY: ColumnPattern(
        exact=("quantity", "qty", "quantité"),
        contains=("quantity", "qty", "quantit"),
    ),
}


@dataclass
class ParsedDocument:
    """Raw cells of a document, keyed by column role."""
    delimiter: str
    mapping: ColumnMapping
    rows: list[dict[ColumnRole, Optional[str]]] = field(default_factory=list)


def detect_delimiter(text: str, sample_size: int = DELIMITER_SAMPLE_SIZE) -> str:
    """Pick ";" unless the opening slice holds strictly more commas."""
    sample = text[:sample_size]
    return ";" if sample.count(";") >= sample.count(",") else ","


def split_lines(text: str) -> list[str]:
    """Split on any newline convention, dropping blank lines."""
    lines = []
    for line in _NEWLINE.split(text):
        line = line.strip()
        if line:
            lines.append(line)
    return lines


def normalize_header(cell: str) -> str:
    """Lowercase, trim and collapse whitespace in a header cell."""
    return " ".join(cell.replace("\ufeff", "").split()).lower()


def detect_columns(
    header_cells: list[str],
    patterns: dict[ColumnRole, ColumnPattern],
) -> ColumnMapping:
    """
    Locate each role in the first row of a document.

    If any role is missing, the first row is treated as data and every
    role falls back to its position in `patterns`.
    """
    headers = [normalize_header(c) for c in header_cells]

    indices = {}
    missing = []
    for role, pattern in patterns.items():
        idx = pattern.find(headers)
        if idx is None:
            missing.append(role)
        else:
            indices[role] = idx

    if not missing:
        return ColumnMapping(mode=HeaderMode.HEADER, indices=indices)

    positional = {role: i for i, role in enumerate(patterns)}
    return ColumnMapping(
        mode=HeaderMode.POSITIONAL,
        indices=positional,
        missing=tuple(missing),
    )


def parse_document(
    text: str,
    patterns: dict[ColumnRole, ColumnPattern],
    name: str = "<document>",
) -> ParsedDocument:
    """
    Split a document into role-keyed raw cells.

    Cells are not normalized here; a row shorter than a role's column index
    gets None for that role.
    """
    delimiter = detect_delimiter(text)
    lines = split_lines(text)

    if not lines:
        mapping = detect_columns([], patterns)
        return ParsedDocument(delimiter=delimiter, mapping=mapping)

    mapping = detect_columns(lines[0].split(delimiter), patterns)
    if mapping.mode is HeaderMode.POSITIONAL:
        logger.warning(
            "%s: header roles not found (%s), reading columns by position",
            name,
            ", ".join(role.value for role in mapping.missing),
        )

    body = lines[1:] if mapping.has_header else lines

    rows = []
    for line in body:
        cells = line.split(delimiter)
        row = {}
        for role, idx in mapping.indices.items():
            row[role] = cells[idx] if idx < len(cells) else None
        rows.append(row)

    return ParsedDocument(delimiter=delimiter, mapping=mapping, rows=rows)
