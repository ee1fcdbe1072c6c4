#!/usr/bin/env python3
"""
CLI script to reconstruct analytics from access-log entries.

Usage:
    # Analyze a JSON array of log entries
    python scripts/analyze_logs.py --input data/access-logs.json

    # Write the full result as JSON
    python scripts/analyze_logs.py --input data/access-logs.ndjson --output report.json

    # Keep bot traffic in the metrics
    python scripts/analyze_logs.py --input data/access-logs.json --no-bot-filter
"""

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from traffic_analytics.config import Settings, get_settings, load_settings_file
from traffic_analytics.ingestion import IngestionError, load_log_entries
from traffic_analytics.pipeline import AnalyticsReconstructor, setup_logging

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Reconstruct bot-filtered analytics from access logs",
    )
    parser.add_argument(
        "--input",
        "-i",
        type=Path,
        required=True,
        help="Log file (JSON array or NDJSON, optionally gzipped)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Write the full analytics result to this JSON file",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML config file (default: traffic-analytics.yaml or env vars)",
    )
    parser.add_argument(
        "--no-bot-filter",
        action="store_true",
        help="Treat every entry as legitimate traffic",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on malformed records instead of skipping them",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args()


def load_settings(config_path: Path = None) -> Settings:
    """Load settings from an explicit file, or the default lookup."""
    if config_path:
        return load_settings_file(config_path)
    return get_settings()


def main() -> int:
    """Main entry point."""
    args = parse_args()
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        settings = load_settings(args.config)
    except Exception as e:
        logger.error(f"Failed to load settings: {e}")
        return 1

    errors = settings.validate()
    if errors:
        for error in errors:
            logger.error(f"Invalid setting: {error}")
        return 1

    if args.no_bot_filter:
        settings = replace(settings, filter_bots=False)

    try:
        entries = load_log_entries(args.input, strict_validation=args.strict)
    except (FileNotFoundError, IngestionError) as e:
        logger.error(f"Failed to load logs: {e}")
        return 1

    result = AnalyticsReconstructor.from_settings(settings).process_logs(entries)

    overview = result.overview
    print()
    print("Analytics (Bot-Filtered)")
    print("=" * 50)
    print(f"  Legitimate requests: {overview.total_requests:,}")
    print(f"  Bots filtered: {overview.total_bots:,} ({overview.bot_percentage:.2f}%)")
    if overview.date_range:
        print(
            f"  Date range: {overview.date_range.start} to {overview.date_range.end}"
        )
    print(f"  Unique visitors: {result.visitors.recommended:,}")
    print(f"  Impressions: {result.impressions.total:,}")
    print(f"  Sessions: {result.sessions.total:,}")
    print(f"  Avg session duration: {result.sessions.avg_duration_formatted}")
    print(f"  Bounce rate: {result.sessions.bounce_rate:.2f}%")

    if result.impressions.top_pages:
        print()
        print("Top pages:")
        for page in result.impressions.top_pages:
            print(f"  {page.impressions:>8,}  {page.path}")

    if result.errors:
        print()
        print("Errors:")
        for error in result.errors:
            print(f"  - {error}")

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, indent=2)
        logger.info(f"Wrote analytics to {args.output}")

    return 0 if not result.errors else 1


if __name__ == "__main__":
    sys.exit(main())
