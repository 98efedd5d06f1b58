from __future__ import annotations

import argparse
import json
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from metadata_aggregator.app import check_reconciliation, run_aggregation
from metadata_aggregator.config import ConfigurationError, configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Synchronise country metadata documents into the metadata bucket"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log at DEBUG level",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    aggregate = subparsers.add_parser("aggregate", help="Run one aggregation pass")
    aggregate.add_argument(
        "--dry-run",
        action="store_true",
        help="Fetch and validate documents without writing to the bucket",
    )

    subparsers.add_parser("health", help="Check that the bucket matches the config")

    return parser.parse_args(list(argv))


def _aggregate(args: argparse.Namespace) -> int:
    result = run_aggregation(dry_run=args.dry_run)
    if result.aborted or result.failed:
        return 1
    return 0


def _health() -> int:
    result = check_reconciliation()
    print(json.dumps(result.to_dict(), indent=2, sort_keys=True))  # noqa: T201
    return 0 if result.healthy else 1


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "aggregate":
            exit_code = _aggregate(parsed_args)
        elif parsed_args.command == "health":
            exit_code = _health()
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except ConfigurationError:
        log.exception("Invalid configuration")
        sys.exit(2)

    sys.exit(exit_code)


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
