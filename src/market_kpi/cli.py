"""Command-line interface for computing KPIs and exporting dashboards.

Provides subcommands: `kpi`, `records`, and `export`. Each command is
implemented as a `cmd_*` function that accepts an argparse namespace.
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path

from dotenv import load_dotenv

from market_kpi.config import get_settings
from market_kpi.logging_config import configure_logging
from market_kpi.models import Dataset, FilterState

# CORE
from market_kpi.filters import with_segment_type
from market_kpi.metrics.calculator import compute_kpis
from market_kpi.selection.selector import resolve

# STORE
from market_kpi.store.frame import records_table
from market_kpi.store.load import DatasetLoadError, load_dataset

# PRESENT
from market_kpi.present.cards import build_cards, headline

# EXPORT
from market_kpi.export.package_client import (
    PackageExportError,
    download_package,
    upload_from_path,
)

log = logging.getLogger(__name__)

NO_DATA = "No data for this combination."


# --------------------------------------------------
# Helpers
# --------------------------------------------------
def _filter_from_args(args: argparse.Namespace) -> FilterState:
    """Build a FilterState from the shared filter options."""
    return FilterState(
        geographies=frozenset(args.geography or []),
        segment_type=args.segment_type,
        data_type=args.data_type,
        aggregation_level=args.level,
    )


def _load_or_exit(path: str) -> Dataset:
    try:
        return load_dataset(Path(path))
    except DatasetLoadError as e:
        log.error("%s", e)
        raise SystemExit(1) from e


# --------------------------------------------------
# KPI
# --------------------------------------------------
def cmd_kpi(args: argparse.Namespace) -> None:
    """Print the KPI headline and cards for the requested filters.

    Args:
        args: argparse namespace with `dataset` and the filter options.
    """
    dataset = _load_or_exit(args.dataset)
    kpi = compute_kpis(dataset, _filter_from_args(args), currency=args.currency)

    if kpi is None:
        print(NO_DATA)
        return

    print(headline(kpi))
    for card in build_cards(kpi):
        line = f"{card.title}: {card.value}"
        if card.caption:
            line += f" ({card.caption})"
        print(line)


# --------------------------------------------------
# RECORDS
# --------------------------------------------------
def cmd_records(args: argparse.Namespace) -> None:
    """Print the records the selector resolves for the requested filters."""
    dataset = _load_or_exit(args.dataset)
    flt = with_segment_type(_filter_from_args(args), dataset)
    selection = resolve(dataset.matrix(flt.data_type), flt)

    if selection.empty:
        print(NO_DATA)
        return

    log.info(
        "Tier %s selected %d record(s)%s",
        selection.tier,
        len(selection.records),
        " (geography filter dropped)" if selection.geography_dropped else "",
    )
    print(records_table(selection.records).to_string(index=False))


# --------------------------------------------------
# EXPORT
# --------------------------------------------------
def cmd_export(args: argparse.Namespace) -> None:
    """Generate a dashboard package and save it as `<project-name>.zip`.

    Args:
        args: argparse namespace with `value_file`, `volume_file`,
            `project_name` and `out_dir`.
    """
    s = get_settings()
    value = upload_from_path(Path(args.value_file))
    volume = upload_from_path(Path(args.volume_file)) if args.volume_file else None

    try:
        out_path = download_package(value, volume, args.project_name, Path(args.out_dir), settings=s)
    except PackageExportError as e:
        log.error("Dashboard generation failed: %s", e)
        raise SystemExit(1) from e

    print(out_path)


# --------------------------------------------------
# CLI
# --------------------------------------------------
def _add_filter_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("dataset", help="Path to the dataset JSON file")
    p.add_argument("--geography", action="append", default=None, help="Repeat for several geographies")
    p.add_argument("--segment-type", default=None)
    p.add_argument("--data-type", choices=["value", "volume"], default="value")
    p.add_argument("--level", type=int, default=None, help="Aggregation level (default: best available)")


def build_parser() -> argparse.ArgumentParser:
    """Build and return the top-level argument parser for the CLI.

    The returned parser has subcommands `kpi`, `records` and `export`.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    p = argparse.ArgumentParser(prog="market-kpi")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_kpi = sub.add_parser("kpi")
    _add_filter_options(p_kpi)
    p_kpi.add_argument("--currency", default=None)

    p_records = sub.add_parser("records")
    _add_filter_options(p_records)

    p_export = sub.add_parser("export")
    p_export.add_argument("--value-file", required=True)
    p_export.add_argument("--volume-file", default=None)
    p_export.add_argument("--project-name", required=True)
    p_export.add_argument("--out-dir", default=".")

    return p


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: parse args, configure logging and dispatch commands."""
    load_dotenv()
    configure_logging(Path("logs/market_kpi.log"))

    args = build_parser().parse_args(argv)

    if args.cmd == "kpi":
        cmd_kpi(args)
    elif args.cmd == "records":
        cmd_records(args)
    elif args.cmd == "export":
        cmd_export(args)
    else:
        raise SystemExit(2)


if __name__ == "__main__":
    main()
