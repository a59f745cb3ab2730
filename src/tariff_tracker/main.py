"""CLI entry point for the regional tariff tracker.

Usage:
    # Prefer cached regional payloads:
    python -m src.tariff_tracker.main

    # Re-download every region and overwrite its cache:
    python -m src.tariff_tracker.main --refresh-cache
"""

from __future__ import annotations

import argparse
import logging
import sys
import time

from ..common.config import TariffSettings, settings
from ..common.logging import setup_logging
from .aggregator import PriceTable
from .cache_store import CacheStore, build_cache_store
from .common.config import Config
from .common.http_client import HTTPClient
from .models import FetchStatus, RunSummary
from .region_fetcher import RegionFetcher, RegionListError

def run(
    config: Config | None = None,
    *,
    refresh: bool = False,
    cache_store: CacheStore | None = None,
    client: HTTPClient | None = None,
    tariff_settings: TariffSettings | None = None,
    logger: logging.Logger | None = None,
) -> RunSummary:
    """Fetch every region, build the price table and report the cheapest regions.

    Raises:
        RegionListError: When the region list is unavailable. Nothing is
            written in that case.
    """
    logger = logger or logging.getLogger(__name__)
    config = config or Config()
    tariff_settings = tariff_settings or settings.tariffs
    started = time.monotonic()

    logger.info("Starting MTS tariff price parser")
    if refresh:
        logger.info("Cache refresh mode enabled - all cached data will be refreshed")

    cache_store = cache_store or build_cache_store(config, logger)
    table = PriceTable(tariff_settings.mobile_tariff_type, logger=logger)
    summary = RunSummary()

    with RegionFetcher(
        config,
        cache_store,
        client=client,
        tariff_settings=tariff_settings,
        logger=logger,
    ) as fetcher:
        regions = fetcher.fetch_regions()
        summary.total_regions = len(regions)

        for index, region in enumerate(regions, start=1):
            logger.info(
                "Processing region %d/%d: %s (%s)",
                index,
                len(regions),
                region.title,
                region.alias,
            )
            result = fetcher.fetch(region, refresh=refresh)
            summary.record(result.status)

            if result.status is FetchStatus.FAILED or result.payload is None:
                logger.error(
                    "Skipping region %s due to data fetch failure", region.alias
                )
                continue

            table.add_region(region.alias, result.payload)

    result_path = config.result_abs_path
    logger.info("Saving data to file: %s", result_path)
    try:
        table.save(result_path)
    except OSError as exc:
        logger.error("Failed to save file %s: %s", result_path, exc)
    else:
        logger.info(
            "Successfully saved pricing data for %d tariffs to %s",
            len(table),
            result_path,
        )

    summary.prices = table.to_dict()
    summary.report = table.cheapest()

    logger.info("Cheapest regions for each tariff:")
    for entry in summary.report:
        logger.info("%s", entry.format_line(tariff_settings.currency))

    summary.elapsed_seconds = round(time.monotonic() - started, 2)
    logger.info(
        "Regions: %d cached, %d fetched, %d failed",
        summary.cached,
        summary.fetched,
        summary.failed,
    )
    logger.info("Parser completed in %.2f seconds", summary.elapsed_seconds)
    return summary


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="MTS Regional Tariff Price Tracker")
    parser.add_argument(
        "--refresh-cache",
        action="store_true",
        help="Ignore cached regional data and re-download every region",
    )

    args = parser.parse_args(argv)

    config = Config()
    run_logger = setup_logging(config.log_level)

    try:
        run(config, refresh=args.refresh_cache, logger=run_logger)
    except RegionListError as exc:
        run_logger.error("%s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
