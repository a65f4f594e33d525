from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from poisync.app import create_region, load_boundary, run_generate_reports, run_sync
from poisync.config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Mirror upstream points of interest")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("sync", help="Fetch the dataset, reconcile and write reports")

    reports = subparsers.add_parser("generate-reports", help="Write reports for all regions")
    reports.add_argument(
        "--date",
        type=str,
        help="Report date as YYYY-MM-DD (defaults to today, UTC)",
    )

    region = subparsers.add_parser("region", help="Region management commands")
    region_sub = region.add_subparsers(dest="region_command", required=True)
    region_add = region_sub.add_parser("add", help="Create a reporting region")
    region_add.add_argument("--name", type=str, required=True, help="Region name")
    region_add.add_argument(
        "--boundary",
        type=Path,
        help="GeoJSON file with the region boundary (omit for a global region)",
    )

    return parser.parse_args(list(argv))


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid date: {value}") from exc


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    as_of: date | None = None
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.command == "generate-reports" and parsed_args.date:
            as_of = _parse_date(parsed_args.date)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "sync":
            result = run_sync()
            log.info("Sync finished with status %s", result.status)
        elif parsed_args.command == "generate-reports":
            reports = run_generate_reports(as_of=as_of)
            log.info(
                "Reports for %s: inserted=%s, updated=%s",
                reports.as_of,
                reports.inserted,
                reports.updated,
            )
        elif parsed_args.command == "region" and parsed_args.region_command == "add":
            boundary = load_boundary(parsed_args.boundary) if parsed_args.boundary else None
            region = create_region(name=parsed_args.name, boundary=boundary)
            log.info("Created region %s", region.id)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
