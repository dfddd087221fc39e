"""
Tests for delimiter detection and header role detection.

Run with: pytest stockcheck/tests/test_parsing.py -v
"""

from stockcheck.models import ColumnRole, HeaderMode
from stockcheck.parsing import (
    REPLENISHMENT_COLUMNS,
    STOCK_COLUMNS,
    detect_columns,
    detect_delimiter,
    normalize_header,
    parse_document,
    split_lines,
)


class TestDetectDelimiter:

    def test_semicolon(self):
        assert detect_delimiter("ref;color;size;stock\nNS1;Red;S;1") == ";"

    def test_comma(self):
        assert detect_delimiter("ref,color,size,stock\nNS1,Red,S,1") == ","

    def test_tie_prefers_semicolon(self):
        assert detect_delimiter("a;b,c") == ";"
        assert detect_delimiter("") == ";"

    def test_only_opening_slice_counts(self):
        text = "a;b;c\n" + "," * 5000
        assert detect_delimiter(text, sample_size=6) == ";"


class TestSplitLines:

    def test_newline_conventions_and_blanks(self):
        text = "a\r\nb\n\n  \rc\r\n"
        assert split_lines(text) == ["a", "b", "c"]

    def test_other_line_breaks_stay_in_line(self):
        text = "NS1;Cr\x85me;S;1\nNS2;A\x0cB C;M;2\n"
        assert split_lines(text) == ["NS1;Cr\x85me;S;1", "NS2;A\x0cB C;M;2"]


class TestDetectColumns:
    """Header synonyms, exact before containment."""

    def test_english_stock_header(self):
        mapping = detect_columns(["Ref", "Color", "Size", "Qty"], STOCK_COLUMNS)
        assert mapping.mode is HeaderMode.HEADER
        assert mapping.indices == {
            ColumnRole.REFERENCE: 0,
            ColumnRole.COLOR: 1,
            ColumnRole.SIZE: 2,
            ColumnRole.QUANTITY: 3,
        }
        assert mapping.missing == ()

    def test_french_stock_header_any_order(self):
        mapping = detect_columns(["Quantité", "TAILLE", "Couleur", "Référence"], STOCK_COLUMNS)
        assert mapping.mode is HeaderMode.HEADER
        assert mapping.indices[ColumnRole.REFERENCE] == 3
        assert mapping.indices[ColumnRole.COLOR] == 2
        assert mapping.indices[ColumnRole.SIZE] == 1
        assert mapping.indices[ColumnRole.QUANTITY] == 0

    def test_containment_fallback(self):
        mapping = detect_columns(["Article Ref", "Color Name", "Size EU", "Stock on hand"], STOCK_COLUMNS)
        assert mapping.mode is HeaderMode.HEADER
        assert mapping.indices[ColumnRole.REFERENCE] == 0
        assert mapping.indices[ColumnRole.QUANTITY] == 3

    def test_exact_synonym_beats_earlier_containment(self):
        # "ref supplier" contains "ref" but "reference" is an exact synonym
        headers = ["Ref Supplier", "Reference", "Color", "Size", "Stock"]
        mapping = detect_columns(headers, STOCK_COLUMNS)
        assert mapping.indices[ColumnRole.REFERENCE] == 1

    def test_replenishment_date_variants(self):
        for header in ["DATE TO RECEIVE", "date_to_receive", "DateToRec", "Expected date to receive"]:
            mapping = detect_columns(["ref", "color", "size", header, "qty"], REPLENISHMENT_COLUMNS)
            assert mapping.mode is HeaderMode.HEADER, header
            assert mapping.indices[ColumnRole.RECEIVE_DATE] == 3

    def test_replenishment_date_predicate(self):
        mapping = detect_columns(["ref", "color", "size", "Date rec.", "quantity"], REPLENISHMENT_COLUMNS)
        assert mapping.indices[ColumnRole.RECEIVE_DATE] == 3

    def test_missing_role_falls_back_to_position(self):
        mapping = detect_columns(["ref", "color", "size", "warehouse"], STOCK_COLUMNS)
        assert mapping.mode is HeaderMode.POSITIONAL
        assert mapping.missing == (ColumnRole.QUANTITY,)
        assert mapping.indices == {
            ColumnRole.REFERENCE: 0,
            ColumnRole.COLOR: 1,
            ColumnRole.SIZE: 2,
            ColumnRole.QUANTITY: 3,
        }

    def test_replenishment_positional_order(self):
        mapping = detect_columns(["NS221A", "Red", "S", "01/02/2025", "4"], REPLENISHMENT_COLUMNS)
        assert mapping.mode is HeaderMode.POSITIONAL
        assert mapping.indices[ColumnRole.RECEIVE_DATE] == 3
        assert mapping.indices[ColumnRole.QUANTITY] == 4

    def test_header_normalization(self):
        assert normalize_header("\ufeffRéférence ") == "référence"
        assert normalize_header("DATE   TO  RECEIVE") == "date to receive"


class TestParseDocument:

    def test_header_document(self):
        doc = parse_document("ref;color;size;stock\nNS221A;Red;S;3\n", STOCK_COLUMNS)
        assert doc.delimiter == ";"
        assert doc.mapping.has_header
        assert doc.rows == [{
            ColumnRole.REFERENCE: "NS221A",
            ColumnRole.COLOR: "Red",
            ColumnRole.SIZE: "S",
            ColumnRole.QUANTITY: "3",
        }]

    def test_headerless_document_keeps_first_line(self):
        doc = parse_document("NS221A;Red;S;3\nNS221A;Red;M;4\n", STOCK_COLUMNS)
        assert doc.mapping.mode is HeaderMode.POSITIONAL
        assert len(doc.rows) == 2
        assert doc.rows[0][ColumnRole.REFERENCE] == "NS221A"

    def test_short_row_gets_none(self):
        doc = parse_document("ref;color;size;stock\nNS221A;Red\n", STOCK_COLUMNS)
        assert doc.rows[0][ColumnRole.SIZE] is None
        assert doc.rows[0][ColumnRole.QUANTITY] is None

    def test_empty_document(self):
        doc = parse_document("\n\n", STOCK_COLUMNS)
        assert doc.rows == []
        assert doc.mapping.mode is HeaderMode.POSITIONAL
