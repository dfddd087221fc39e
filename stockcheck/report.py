"""
Report Generator - Format availability rows for human consumption.

Produces a console table and CSV export for one reference and color.
"""

import csv
import io
from datetime import datetime
from typing import TextIO

from .models import ReplenishmentEntry, SizeAvailability
from .normalize import color_key

OUT_OF_STOCK = "Rupture"


def format_console(ref: str, color: str, rows: list[SizeAvailability], show_detail: bool = False) -> str:
    """
    Format an availability table for console display.

    Args:
        ref: Reference the rows belong to
        color: Color the rows belong to
        rows: Output of StockCatalog.get_availability
        show_detail: Whether to list every receive date under a size

    Returns:
        Formatted string for console output
    """
    if not rows:
        return f"No stock lines for {ref} / {color}.\n"

    lines = []
    lines.append(f"\nREFERENCE: {ref}   COLOR: {color}")
    lines.append("=" * 60)
    lines.append(f"{'SIZE':<8} {'STOCK':>10} {'REPLENISHMENT':>16} {'INCOMING':>10}")
    lines.append("-" * 60)

    for row in rows:
        stock_str = str(row.stock) if row.in_stock else OUT_OF_STOCK
        incoming = "-" if row.reappro_quantity is None else str(row.reappro_quantity)
        lines.append(f"{row.size:<8} {stock_str:>10} {row.reappro_date:>16} {incoming:>10}")

        if show_detail and len(row.reappro_detail) > 1:
            for entry in row.reappro_detail:
                lines.append(f"{'':<8} {'':>10} {entry.date:>16} {entry.quantity:>10}")

    total_stock = sum(r.stock for r in rows)
    total_incoming = sum(r.reappro_quantity or 0 for r in rows)
    out_of_stock = sum(1 for r in rows if not r.in_stock)

    lines.append("=" * 60)
    lines.append("SUMMARY")
    lines.append(f"  Sizes:          {len(rows)}")
    lines.append(f"  Total stock:    {total_stock}")
    lines.append(f"  Out of stock:   {out_of_stock}")
    lines.append(f"  Incoming:       {total_incoming}")
    lines.append("=" * 60)

    return "\n".join(lines)


def format_reappro(entries: list[ReplenishmentEntry]) -> str:
    """One line per receive date, plus the total."""
    if not entries:
        return "No replenishment scheduled.\n"

    lines = [f"{'DATE':<12} {'QUANTITY':>10}", "-" * 23]
    for entry in entries:
        lines.append(f"{entry.date:<12} {entry.quantity:>10}")
    lines.append("-" * 23)
    lines.append(f"{'TOTAL':<12} {sum(e.quantity for e in entries):>10}")
    return "\n".join(lines)


def export_csv(
    rows: list[SizeAvailability],
    output: TextIO | None = None,
    ref: str = "",
    color: str = "",
) -> str:
    """
    Export availability rows to CSV format.

    Args:
        rows: Availability rows to export
        output: Optional file handle to write to
        ref: Reference written on every line
        color: Color written on every line

    Returns:
        CSV string (also writes to output if provided)
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer)

    writer.writerow([
        "reference",
        "color",
        "size",
        "stock",
        "in_stock",
        "reappro_date",
        "reappro_quantity",
    ])

    for row in rows:
        writer.writerow([
            ref,
            color,
            row.size,
            row.stock,
            "yes" if row.in_stock else "no",
            row.reappro_date,
            "" if row.reappro_quantity is None else row.reappro_quantity,
        ])

    csv_content = buffer.getvalue()

    if output:
        output.write(csv_content)

    return csv_content


def generate_report_filename(ref: str, color: str | None = None, extension: str = "csv") -> str:
    """
    Generate a filename for the report.

    Args:
        ref: Reference the report covers
        color: Optional color to include
        extension: File extension (default "csv")

    Returns:
        Filename like "stock_NS221_forestgreen_2026-01-08.csv"
    """
    date_str = datetime.now().strftime("%Y-%m-%d")
    if color:
        return f"stock_{ref}_{color_key(color)}_{date_str}.{extension}"
    return f"stock_{ref}_{date_str}.{extension}"
