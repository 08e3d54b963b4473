"""
CLI entry point for school-dates.

Usage:
    python -m school_dates refresh
    python -m school_dates --config /path/to/school.yml refresh
    python -m school_dates show --days 30
"""

import argparse
import asyncio
import json
import logging
import sys

import structlog

DEFAULT_STORE_DIR = "output/store"

# Log level mapping
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def setup_logging(level: str = "INFO", json_output: bool = False):
    """Configure structured logging."""
    log_level = LOG_LEVELS.get(level.upper(), logging.INFO)

    if json_output:
        renderer_processors = [
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderer_processors = [
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    # Logs go to stderr so stdout carries only command output
    structlog.configure(
        processors=[structlog.processors.add_log_level, *renderer_processors],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="school_dates",
        description="Turn a school's term-dates page into a calendar document",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Refresh using SCHOOL_DATES_* environment variables
  SCHOOL_DATES_SOURCE_URL=https://example.com/term-dates python -m school_dates refresh

  # Use a custom config file and store directory
  python -m school_dates --config /path/to/school.yml --store-dir /tmp/store refresh

  # Show items in the next 30 days
  python -m school_dates show --days 30
        """,
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to school.yml config file",
    )

    parser.add_argument(
        "--store-dir",
        type=str,
        help=f"Document store directory (default: config store_dir or {DEFAULT_STORE_DIR})",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )

    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Output logs as JSON (for production)",
    )

    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version and exit",
    )

    commands = parser.add_subparsers(dest="command")

    commands.add_parser(
        "refresh",
        help="Fetch the page and store the document if it changed",
    )

    show = commands.add_parser(
        "show",
        help="Print upcoming items from the stored document",
    )
    show.add_argument(
        "--days",
        type=int,
        default=90,
        help="Days ahead to include (default: 90)",
    )
    show.add_argument(
        "--school",
        type=str,
        help="School slug (default: from config)",
    )

    return parser


def _store_for(args, store_dir=None):
    from .storage.kv import FileKeyValueStore

    return FileKeyValueStore(args.store_dir or store_dir or DEFAULT_STORE_DIR)


async def run_refresh(args) -> int:
    """Run one refresh and print its summary."""
    from .config.loader import load_school_config
    from .refresher import SchoolDatesRefresher

    logger = structlog.get_logger(__name__)

    config = load_school_config(args.config)
    logger.info("starting_refresh", school=config.school_slug, url=config.source_url)

    refresher = SchoolDatesRefresher(
        config=config,
        store=_store_for(args, config.store_dir),
    )
    result = await refresher.refresh()

    print(json.dumps(result.summary(), indent=2))
    return 0


async def run_show(args) -> int:
    """Print upcoming items of the stored document."""
    from .query import format_day_part, load_school_dates, school_today, upcoming_items

    logger = structlog.get_logger(__name__)

    if args.school:
        school_slug, store_dir = args.school, None
    else:
        from .config.loader import load_school_config

        config = load_school_config(args.config)
        school_slug, store_dir = config.school_slug, config.store_dir

    document = await load_school_dates(_store_for(args, store_dir), school_slug)
    if document is None:
        logger.warning("document_not_found", school=school_slug)
        return 1

    for item in upcoming_items(document, school_today(), args.days):
        span = item.start_date
        if item.end_date != item.start_date:
            span = f"{item.start_date} .. {item.end_date}"
        # Same part on both ends is shown once
        parts = " ".join(dict.fromkeys(
            part for part in (
                format_day_part(item.start_day_part),
                format_day_part(item.end_day_part),
            ) if part
        ))
        line = f"{span}  {item.label}  [{item.type.value}]"
        print(f"{line}  {parts}" if parts else line)
    return 0


async def main_async(args) -> int:
    """Async main function."""
    if args.command == "show":
        return await run_show(args)
    return await run_refresh(args)


def main():
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args()

    # Version check
    if args.version:
        from . import __version__
        print(f"school-dates {__version__}")
        sys.exit(0)

    if not args.command:
        parser.print_help()
        sys.exit(2)

    # Setup logging
    setup_logging(args.log_level, args.json_logs)

    # Run async main
    try:
        sys.exit(asyncio.run(main_async(args)))
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        logger = structlog.get_logger(__name__)
        logger.exception("fatal_error", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
