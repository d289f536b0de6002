#!/usr/bin/env python3
"""
Fleet Compartments
Main entry point for the application
"""

import argparse
import sys
import logging
from pathlib import Path
from typing import Optional

# Add project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from config.constants import APP_NAME

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO"):
    """
    Configure logging for the application.

    Sets up console output with pretty formatting at the configured level.
    Suppresses noisy third-party loggers.
    """
    # Create formatter with timestamp, level, module name
    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    # Console handler (stderr, stdout is reserved for the status table)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    console_handler.set_name("fleet-console")

    # Root logger (replace our handler if main() runs more than once)
    root_logger = logging.getLogger()
    for handler in [h for h in root_logger.handlers if h.get_name() == "fleet-console"]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    # Suppress noisy third-party loggers
    logging.getLogger('openpyxl').setLevel(logging.WARNING)

    logging.info("=" * 60)
    logging.info(APP_NAME)
    logging.info(f"Logging initialized - Level: {level}")
    logging.info("=" * 60)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="fleet-compartments",
        description=f"{APP_NAME}: show trailer compartment status and import compartment sheets.",
    )
    parser.add_argument("--db", type=Path, help="SQLite database path (default from settings)")
    parser.add_argument("--import-file", type=Path, help="Compartment sheet (.xlsx, .xls, .csv)")
    parser.add_argument("--trailer-id", type=int, help="Trailer to import compartments into")
    parser.add_argument("--sheet", help="Sheet name (default: first sheet)")
    args = parser.parse_args(argv)

    if args.import_file and args.trailer_id is None:
        parser.error("--import-file requires --trailer-id")
    return args


def format_trailer_table(trailers) -> str:
    """Render trailers as a plain-text status table."""
    from domain.rules import missing_compartment_numbers, total_capacity

    header = f"{'ID':>4}  {'Code':<20} {'Name':<24} {'Comps':>5} {'Liters':>8}  {'Status':<8} Missing"
    lines = [header, "-" * len(header)]
    for trailer in trailers:
        missing = missing_compartment_numbers(trailer.compartments)
        lines.append(
            f"{trailer.id:>4}  {trailer.trailer_code:<20} {trailer.trailer_name[:24]:<24} "
            f"{trailer.number_of_compartments:>5} {total_capacity(trailer.compartments):>8}  "
            f"{trailer.status_label:<8} {', '.join(str(n) for n in missing) or '-'}"
        )
    if not trailers:
        lines.append("(no trailers)")
    return "\n".join(lines)


def run(ctx, import_file: Optional[Path] = None, sheet_name: Optional[str] = None) -> None:
    """
    Run the command against an application context.

    Imports into ctx's selected trailer when import_file is given,
    then prints the status table for every trailer.
    """
    from operations import import_trailer_compartments, get_import_summary, list_trailers

    if import_file:
        result = import_trailer_compartments(
            ctx.database, ctx.require_trailer(), import_file, sheet_name=sheet_name
        )
        summary = get_import_summary(result)
        logger.info(
            f"{ctx.user_name} imported {summary['imported']} compartments "
            f"into trailer {ctx.current_trailer_id}"
        )
        print(f"Imported {summary['imported']} compartments, {summary['failed']} failed")
        for error in summary["errors"]:
            print(f"  {error}")

    print(format_trailer_table(list_trailers(ctx.database)))


def main(argv=None) -> int:
    """Main application entry point."""
    from config.app_context import create_app_context
    from config.settings import get_settings
    from data import create_database
    from domain.exceptions import FleetBaseException

    args = parse_args(argv)
    settings = get_settings()

    # Setup logging FIRST
    setup_logging(settings.log_level)

    db_path = args.db or settings.database_path
    ctx = create_app_context(database=create_database(settings.database_type, path=db_path), settings=settings)
    logger.info(f"Session for {ctx.user_name}, database {db_path}")

    if args.trailer_id is not None:
        ctx = ctx.with_trailer(args.trailer_id)

    try:
        run(ctx, import_file=args.import_file, sheet_name=args.sheet)
        return 0

    except FleetBaseException as e:
        logger.error(f"{type(e).__name__}: {e}")
        print(f"\n❌ {e.message}", file=sys.stderr)
        return 1

    finally:
        ctx.database.close()


if __name__ == "__main__":
    sys.exit(main())
