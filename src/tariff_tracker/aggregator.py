"""Cross-region price table and cheapest-region search."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path

from ..common.models import CheapestRegion
from .models import RegionTariffPayload
from .price_extractor import extract_price


class PriceTable:
    """Tariff alias -> {region alias -> price}, built one region at a time.

    Only tariffs tagged with the mobile tariff type are priced. A
    (tariff, region) pair is stored only when a price could be extracted.
    """

    def __init__(
        self,
        mobile_tariff_type: str = "Mobile",
        logger: logging.Logger | None = None,
    ) -> None:
        self.mobile_tariff_type = mobile_tariff_type
        self.logger = logger or logging.getLogger(__name__)
        self.prices: dict[str, dict[str, float]] = {}

    def add_region(self, region_alias: str, payload: RegionTariffPayload) -> int:
        """Record the prices of one region's mobile tariffs.

        Returns:
            Number of (tariff, region) prices recorded.
        """
        if not isinstance(payload.data.get("actualTariffs"), list):
            self.logger.warning(
                "No tariff list in payload for region %s", region_alias
            )
            return 0

        added = 0
        for tariff in payload.tariffs:
            if not isinstance(tariff, dict):
                continue
            if tariff.get("tariffType") != self.mobile_tariff_type:
                continue

            tariff_alias = tariff.get("alias")
            if not isinstance(tariff_alias, str) or not tariff_alias:
                self.logger.warning(
                    "Skipping mobile tariff without alias in region %s", region_alias
                )
                continue

            price = extract_price(tariff)
            if price is None:
                self.logger.error(
                    "No price found for tariff %s in region %s",
                    tariff_alias,
                    region_alias,
                )
                continue

            self.prices.setdefault(tariff_alias, {})[region_alias] = price
            added += 1

        self.logger.debug("Recorded %d prices for region %s", added, region_alias)
        return added

    def cheapest(self) -> list[CheapestRegion]:
        return find_cheapest_regions(self.prices)

    def to_dict(self) -> dict[str, dict[str, float]]:
        return {tariff: dict(regions) for tariff, regions in self.prices.items()}

    def to_json(self) -> str:
        return json.dumps(self.prices, ensure_ascii=False, indent=2)

    def save(self, path: str | Path) -> Path:
        """Write the table as pretty-printed JSON, replacing any previous run."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(), encoding="utf-8")
        return path

    def __len__(self) -> int:
        return len(self.prices)


def find_cheapest_regions(
    prices: Mapping[str, Mapping[str, float]],
) -> list[CheapestRegion]:
    """Minimum price per tariff and every region that charges it.

    Regions keep their insertion order; ties are all reported. Tariffs
    without any regional price are left out.
    """
    report: list[CheapestRegion] = []
    for tariff_alias, by_region in prices.items():
        if not by_region:
            continue
        min_price = min(by_region.values())
        regions = [region for region, price in by_region.items() if price == min_price]
        report.append(
            CheapestRegion(tariff_alias=tariff_alias, min_price=min_price, regions=regions)
        )
    return report
