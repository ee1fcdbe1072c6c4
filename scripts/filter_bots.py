#!/usr/bin/env python3
"""
CLI script to split access-log entries into legitimate and bot traffic.

Usage:
    python scripts/filter_bots.py --input data/access-logs.json
    python scripts/filter_bots.py --input data/access-logs.json --output filtered.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from traffic_analytics.classification import BotClassifier, LogPartitioner
from traffic_analytics.config import get_settings
from traffic_analytics.ingestion import IngestionError, load_log_entries
from traffic_analytics.pipeline import setup_logging

logger = logging.getLogger(__name__)


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Filter bot traffic from access logs",
    )
    parser.add_argument("--input", "-i", type=Path, required=True, help="Log file")
    parser.add_argument(
        "--output", "-o", type=Path, help="Write the partition to this JSON file"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )
    args = parser.parse_args()

    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        entries = load_log_entries(args.input)
    except (FileNotFoundError, IngestionError) as e:
        logger.error(f"Failed to load logs: {e}")
        return 1

    catalog = get_settings().build_catalog()
    result = LogPartitioner(BotClassifier(catalog)).partition(entries)

    print()
    print("Bot Filtering Results")
    print("=" * 50)
    print(f"  Total entries: {result.total:,}")
    print(f"  Legitimate: {len(result.legitimate):,}")
    print(f"  Bots detected: {len(result.bots):,}")
    print(f"  Bot percentage: {result.stats.bot_percentage:.2f}%")
    if result.stats.detection_methods:
        print()
        print("Detection methods:")
        for method, count in sorted(result.stats.detection_methods.items()):
            print(f"  {method}: {count:,}")

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, indent=2)
        logger.info(f"Wrote filtered logs to {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
