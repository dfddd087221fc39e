"""
CLI entry point for the stock checker.

Usage:
    python -m stockcheck refs
    python -m stockcheck colors NS221
    python -m stockcheck table NS221 "Forest Green" --output-csv
    python -m stockcheck reappro NS221 "Forest Green" S --source-dir ./exports
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from .config import DEFAULT_CONFIG_PATH, build_catalog, load_config, use_directory
from .catalog import StockCatalog
from .report import export_csv, format_console, format_reappro, generate_report_filename
from .sources import ResourceUnavailable


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stockcheck",
        description="Stock Checker - Look up on-hand stock and scheduled replenishment",
    )

    parser.add_argument(
        "--config",
        default=None,
        metavar="FILE",
        help="Config file (default: module's stock_check_config.json)",
    )

    parser.add_argument(
        "--source-dir",
        default=None,
        metavar="DIR",
        help="Read exports from this directory instead of the configured source",
    )

    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Shortcut for --log-level INFO",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("refs", help="List base references")

    colors = sub.add_parser("colors", help="List colors of a reference")
    colors.add_argument("ref")

    sizes = sub.add_parser("sizes", help="List sizes of a reference and color")
    sizes.add_argument("ref")
    sizes.add_argument("color")

    stock = sub.add_parser("stock", help="On-hand quantity for one size")
    stock.add_argument("ref")
    stock.add_argument("color")
    stock.add_argument("size")

    reappro = sub.add_parser("reappro", help="Scheduled replenishment for one size")
    reappro.add_argument("ref")
    reappro.add_argument("color")
    reappro.add_argument("size")

    table = sub.add_parser("table", help="Stock and replenishment for every size")
    table.add_argument("ref")
    table.add_argument("color")
    table.add_argument(
        "--output-csv",
        nargs="?",
        const="",
        default=None,
        metavar="FILE",
        help="Also write CSV (default name if FILE is omitted)",
    )
    table.add_argument(
        "--detail",
        action="store_true",
        help="List every receive date under each size",
    )

    return parser


async def run(args: argparse.Namespace, catalog: StockCatalog) -> str:
    """Execute one subcommand and return its console output."""
    if args.command == "refs":
        return "\n".join(await catalog.get_unique_refs())

    if args.command == "colors":
        return "\n".join(await catalog.get_colors_for(args.ref))

    if args.command == "sizes":
        return "\n".join(await catalog.get_sizes_for(args.ref, args.color))

    if args.command == "stock":
        return str(await catalog.get_stock(args.ref, args.color, args.size))

    if args.command == "reappro":
        entries = await catalog.get_reappro_all(args.ref, args.color, args.size)
        output = format_reappro(entries)
        summary = await catalog.get_reappro(args.ref, args.color, args.size)
        if summary:
            output += f"\n\nNext receive date: {summary.date} (total {summary.quantity})"
        return output

    if args.command == "table":
        rows = await catalog.get_availability(args.ref, args.color)
        output = format_console(args.ref, args.color, rows, show_detail=args.detail)
        if args.output_csv is not None:
            output_path = Path(args.output_csv or generate_report_filename(args.ref, args.color))
            with open(output_path, "w", newline="", encoding="utf-8") as f:
                export_csv(rows, output=f, ref=args.ref, color=args.color)
            output += f"\n\nCSV exported to: {output_path}"
        return output

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config_path = Path(args.config) if args.config else DEFAULT_CONFIG_PATH

    try:
        config = load_config(config_path)
        if args.source_dir:
            config = use_directory(config, args.source_dir)
        catalog = build_catalog(config)

        print(asyncio.run(run(args, catalog)))

    except ResourceUnavailable as e:
        print(f"Error: could not load {e.resource}: {e}", file=sys.stderr)
        sys.exit(1)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
