"""Command-line entry point for the BIDFLOW matcher."""

import argparse
import json
import sys
import time
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from bidflow.config.environment import EnvironmentConfig, load_environment_config
from bidflow.config.exceptions import ConfigurationError
from bidflow.config.loader import load_catalog, validate_catalog_file
from bidflow.config.models import Catalog
from bidflow.domain.exceptions import InputError
from bidflow.domain.loader import load_announcements
from bidflow.domain.models import Announcement
from bidflow.logging import get_logger
from bidflow.logging.config import configure_logging
from bidflow.logging.context import log_context
from bidflow.matching.engine import RuleBasedMatcher
from bidflow.matching.utils import (
    build_match_payload,
    calculate_matching_stats,
    generate_match_summary,
)
from bidflow.matching.win_score import get_win_score_breakdown

logger = get_logger(__name__, component="cli")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with its three subcommands."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help="Path to catalog file (default: BIDFLOW_CATALOG_PATH, ./catalog.yaml, "
        "./config/catalog.yaml, then the packaged catalog)",
    )
    common.add_argument(
        "--format",
        dest="output_format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    common.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides LOG_LEVEL)",
    )

    parser = argparse.ArgumentParser(
        prog="bidflow",
        description="BIDFLOW matcher - score tender announcements against a product catalog",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    match_parser = subparsers.add_parser(
        "match", parents=[common], help="Match a single announcement"
    )
    match_parser.add_argument("--title", required=True, help="Announcement title")
    match_parser.add_argument("--organization", default="", help="Issuing organization")
    match_parser.add_argument("--description", default=None, help="Announcement body text")
    match_parser.add_argument(
        "--estimated-price", type=float, default=None, help="Estimated contract price"
    )
    match_parser.add_argument("--id", dest="announcement_id", default="", help="Announcement id")

    batch_parser = subparsers.add_parser(
        "batch", parents=[common], help="Match every announcement in a YAML or JSON file"
    )
    batch_parser.add_argument("file", type=Path, help="File with a list of announcements")

    validate_parser = subparsers.add_parser(
        "validate-catalog", parents=[common], help="Validate a catalog file"
    )
    validate_parser.add_argument("path", type=Path, help="Catalog file to validate")

    return parser


def _print_json(payload) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def run_match(args: argparse.Namespace, catalog: Catalog) -> int:
    try:
        announcement = Announcement(
            id=args.announcement_id,
            title=args.title,
            organization=args.organization,
            description=args.description,
            estimated_price=args.estimated_price,
        )
    except ValidationError as e:
        raise InputError(f"Invalid announcement: {e}")
    match_set = RuleBasedMatcher(catalog).match(announcement)
    win = get_win_score_breakdown(announcement, catalog, match_set=match_set)

    if args.output_format == "json":
        payload = build_match_payload(match_set)
        payload["win_score"] = win.score
        _print_json(payload)
    else:
        print(generate_match_summary(match_set))
        print("")
        print(f"Win score: {win.score} ({win.confidence})")
    return 0


def run_batch(args: argparse.Namespace, catalog: Catalog) -> int:
    announcements = load_announcements(args.file)
    matcher = RuleBasedMatcher(catalog)

    with log_context(batch_file=str(args.file)):
        match_sets = [matcher.match(announcement) for announcement in announcements]
    stats = calculate_matching_stats(match_sets)

    logger.info(
        f"Batch matched: {stats.proceed_count}/{stats.total} to proceed",
        extra={
            "event": "batch.completed",
            "total": stats.total,
            "proceed_count": stats.proceed_count,
            "match_rate": stats.match_rate,
        },
    )

    if args.output_format == "json":
        _print_json(
            {
                "results": [build_match_payload(match_set) for match_set in match_sets],
                "stats": stats.to_dict(),
            }
        )
        return 0

    for match_set in match_sets:
        print(generate_match_summary(match_set))
        print("-" * 60)
    print(f"Announcements: {stats.total}")
    print(f"Proceed: {stats.proceed_count} ({stats.match_rate:.0%})")
    print(f"Average best score: {stats.average_best_score}")
    for product_id, count in stats.best_match_counts.items():
        print(f"  {product_id}: {count}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the BIDFLOW matcher CLI.

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        Exit code (0 success, 1 configuration or input error)
    """
    load_dotenv()
    start_time = time.time()
    args = build_parser().parse_args(argv)

    try:
        env_config: EnvironmentConfig = load_environment_config()
        configure_logging(
            level=args.log_level or env_config.log_level,
            format_type=env_config.log_format,
            environment=env_config.environment,
        )

        if args.command == "validate-catalog":
            return 0 if validate_catalog_file(args.path) else 1

        catalog = load_catalog(args.catalog)
        logger.info(
            "Catalog loaded",
            extra={
                "event": "catalog.loaded",
                "catalog_version": catalog.version,
                "product_count": len(catalog.products),
            },
        )

        if args.command == "match":
            exit_code = run_match(args, catalog)
        else:
            exit_code = run_batch(args, catalog)

        logger.debug(
            "Command finished",
            extra={
                "event": "cli.completed",
                "command": args.command,
                "duration_seconds": round(time.time() - start_time, 3),
            },
        )
        return exit_code

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return 1
    except InputError as e:
        print(f"Input Error: {e}", file=sys.stderr)
        logger.error(
            f"Input error: {e}",
            extra={"event": "input.error", "error_type": type(e).__name__},
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
