#!/usr/bin/env python
"""
CLI for managing the personalized model.

Usage:
    python -m txncategorizer.cli.personalize update "coffee shop" Dining
    python -m txncategorizer.cli.personalize reset
    python -m txncategorizer.cli.personalize export ~/Documents
"""

import argparse
import sys

from txncategorizer.config import get_config
from txncategorizer.core.models import UpdateStatus
from txncategorizer.logging_config import setup_logging, get_logger


def _update(service, args, logger) -> int:
    timeout = get_config().classifier.update_timeout
    result = service.update(args.text, args.label).result(timeout=timeout)
    if result.succeeded:
        print(f"Learned {args.text!r} -> {result.label} (model version {result.model_version})")
        return 0
    if result.status == UpdateStatus.SKIPPED:
        print(f"Skipped: no known words in {args.text!r}")
        return 0
    logger.error("Update failed (%s): %s", result.status.value, result.error)
    return 1


def _reset(service, args, logger) -> int:
    service.reset()
    print("Personalized model removed; using the default model")
    return 0


def _export(service, args, logger) -> int:
    result = service.export(args.destination)
    if not result.success:
        logger.error("Export failed: %s", result.reason)
        return 1
    print(f"Model exported to {result.path}")
    return 0


def main():
    """Main entry point for the personalization CLI."""
    parser = argparse.ArgumentParser(
        description="Update, reset or export the personalized categorization model",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m txncategorizer.cli.personalize update "coffee shop" Dining
    python -m txncategorizer.cli.personalize reset
    python -m txncategorizer.cli.personalize export ./exports
        """,
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Set log level (default: INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    update_parser = subparsers.add_parser("update", help="Learn a description/category pair")
    update_parser.add_argument("text", help="Transaction description")
    update_parser.add_argument("label", help="Category")
    update_parser.set_defaults(handler=_update)

    reset_parser = subparsers.add_parser("reset", help="Revert to the default model")
    reset_parser.set_defaults(handler=_reset)

    export_parser = subparsers.add_parser("export", help="Copy the active model artifact")
    export_parser.add_argument("destination", help="Target file or directory")
    export_parser.set_defaults(handler=_export)

    args = parser.parse_args()

    setup_logging(level=args.log_level)
    logger = get_logger(__name__)

    try:
        from txncategorizer.ml.prediction_service import build_service

        with build_service() as service:
            exit_code = args.handler(service, args, logger)
    except Exception as e:
        logger.error("%s failed: %s", args.command, e, exc_info=True)
        sys.exit(1)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
