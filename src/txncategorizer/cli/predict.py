#!/usr/bin/env python
"""
CLI for categorizing transaction descriptions.

Usage:
    python -m txncategorizer.cli.predict "coffee shop"
    python -m txncategorizer.cli.predict "monthly bus pass" --json
"""

import argparse
import json
import sys

from txncategorizer.logging_config import setup_logging, get_logger


def main():
    """Main entry point for the prediction CLI."""
    parser = argparse.ArgumentParser(
        description="Predict the category of a transaction description",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m txncategorizer.cli.predict "coffee shop"
    python -m txncategorizer.cli.predict "electricity bill" --scores
    python -m txncategorizer.cli.predict "gas station" --json
        """,
    )
    parser.add_argument("text", help="Transaction description")
    parser.add_argument("--scores", action="store_true", help="Show every label score")
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set log level (default: WARNING)",
    )

    args = parser.parse_args()

    setup_logging(level=args.log_level)
    logger = get_logger(__name__)

    try:
        from txncategorizer.ml.prediction_service import build_service, select_label

        with build_service() as service:
            scores = service.predict_scores(args.text)
            label = select_label(scores, service.confidence_threshold)
            live = "personalized" if service.is_personalized else "default"

        if args.json:
            print(json.dumps({"text": args.text, "label": label, "scores": scores, "model": live}, indent=2))
        else:
            print(f"\n{args.text!r} -> {label or '(no confident category)'}")
            print(f"  Model: {live}")
            if args.scores:
                for name, score in sorted(scores.items(), key=lambda item: -item[1]):
                    print(f"  {name}: {score:.3f}")
            print()

    except Exception as e:
        logger.error("Prediction failed: %s", e, exc_info=True)
        if args.json:
            print(json.dumps({"error": str(e)}))
        else:
            print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
