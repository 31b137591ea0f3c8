# main.py

"""Entry point for the storefront catalog (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from storefront.config.logging_config import setup_logging
from storefront.models.filter_config import SortMode

logger = logging.getLogger("storefront.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="storefront",
        description="Solar product catalog: browse, filter and administer.",
        epilog="Run without arguments to launch the interactive TUI.",
    )
    parser.add_argument(
        "query",
        nargs="?",
        default=None,
        help="Search text matched against name and short description.",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        default=False,
        dest="list_only",
        help="Print the listing headlessly even without a query.",
    )
    parser.add_argument(
        "--sort",
        choices=[mode.value for mode in SortMode],
        default=SortMode.NEWEST.value,
        help="Listing order (default: newest).",
    )
    parser.add_argument(
        "--min-price",
        default=None,
        help="Minimum price in naira (inclusive).",
    )
    parser.add_argument(
        "--max-price",
        default=None,
        help="Maximum price in naira (inclusive).",
    )
    parser.add_argument(
        "--require-image",
        action="store_true",
        default=False,
        help="Only show products with a real image.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        dest="output_dir",
        help="Also save the listing as JSON into this directory.",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        default=False,
        help="Skip the remote fetch; use the saved snapshot.",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Run a connectivity health check on the hosted backend.",
    )
    return parser


def _wants_cli(args: argparse.Namespace) -> bool:
    """Any listing flag switches from the TUI to headless output."""
    return (
        args.query is not None
        or args.list_only
        or args.offline
        or args.require_image
        or args.min_price is not None
        or args.max_price is not None
        or args.sort != SortMode.NEWEST.value
        or args.output_format != "json"
        or args.output_dir is not None
    )


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from storefront.ui.app import StorefrontApp

    try:
        app = StorefrontApp()
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("storefront TUI shutting down")


def _run_cli(args: argparse.Namespace) -> None:
    """Print the filtered listing and exit."""
    from storefront.cli.runner import build_config, cli_list

    config = build_config(
        query=args.query,
        sort=args.sort,
        min_price=args.min_price,
        max_price=args.max_price,
        require_image=args.require_image,
    )
    exit_code = asyncio.run(
        cli_list(
            config,
            output_format=args.output_format,
            offline=args.offline,
            output_dir=args.output_dir,
        )
    )
    sys.exit(exit_code)


def _run_health_check() -> None:
    """Run backend connectivity health check."""
    from storefront.cli.runner import run_health_check

    exit_code = asyncio.run(run_health_check())
    sys.exit(exit_code)


def main() -> None:
    """Route to TUI (no args), health check, or headless listing."""
    log_file = setup_logging()
    logger.info("storefront starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    if args.health:
        _run_health_check()
    elif _wants_cli(args):
        _run_cli(args)
    else:
        _run_tui()


if __name__ == "__main__":
    main()
