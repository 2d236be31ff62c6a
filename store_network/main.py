#!/usr/bin/env python3
"""Command-line entry point for the store network dashboard core.

This script:
1. Fetches the city, area and zone feeds plus the enrichment feeds
2. Aggregates them into cities, areas, zones and a store catalog
3. Logs a summary per browsing mode
4. Optionally exports the snapshot to CSV
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional

from store_network.client import NetworkApiClient
from store_network.export import export_snapshot_to_csv
from store_network.loader import NetworkLoader
from store_network.selection import NO_SELECTION, BrowseMode
from store_network.summary import describe_item, summarize_items_by_mode, summarize_selection

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def run(
    base_url: Optional[str] = None,
    boundaries_url: Optional[str] = None,
    export_dir: Optional[Path] = None,
    top: int = 5,
) -> int:
    """Load the network once and report on it.

    Args:
        base_url: Network API base URL (defaults to settings).
        boundaries_url: Boundary GeoJSON URL (defaults to settings).
        export_dir: Directory for CSV export, or None to skip it.
        top: Number of entries to log per browsing mode.

    Returns:
        Process exit code.
    """
    start_time = time.time()
    client = NetworkApiClient(base_url=base_url, boundaries_url=boundaries_url)
    loader = NetworkLoader(client)

    try:
        state = loader.refresh()
        if state.snapshot is None:
            logger.error(state.error)
            return 1

        snapshot = state.snapshot
        overall = summarize_selection(NO_SELECTION, snapshot)

        logger.info("=" * 60)
        logger.info(f"Stores: {overall.store_count} (geocoded {overall.geo_coverage}%)")
        logger.info(f"Boundaries: {'loaded' if state.boundaries is not None else 'unavailable'}")
        logger.info(f"Nearby businesses: {len(state.businesses)}")
        for mode in BrowseMode:
            logger.info(f"{summarize_items_by_mode(mode, snapshot)}:")
            for item in snapshot.items_for(mode)[:top]:
                logger.info(f"  {item.name}: {describe_item(item)}")
        logger.info("=" * 60)

        if export_dir is not None:
            export_snapshot_to_csv(snapshot, export_dir)

        stats = client.get_stats()
        elapsed = time.time() - start_time
        logger.info(f"API requests: {stats['request_count']}, errors: {stats['error_count']}")
        logger.info(f"Time elapsed: {elapsed:.1f}s")
        return 0
    finally:
        loader.close()


def main():
    """Parse arguments and run."""
    parser = argparse.ArgumentParser(
        description="Aggregate the retail store network and summarize it"
    )
    parser.add_argument("--base-url", help="Network API base URL")
    parser.add_argument("--boundaries-url", help="City boundary GeoJSON URL")
    parser.add_argument(
        "--export-dir",
        type=Path,
        help="Export cities/areas/zones/stores CSV files to this directory",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=5,
        help="Number of entries to list per browsing mode",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        code = run(
            base_url=args.base_url,
            boundaries_url=args.boundaries_url,
            export_dir=args.export_dir,
            top=args.top,
        )
    except Exception as e:
        logger.error(f"Run failed: {e}")
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
