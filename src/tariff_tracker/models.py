"""Data models for regional tariff tracking."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from ..common.models import CheapestRegion, Region


# === Price representations ===

@dataclass(frozen=True)
class PackagePricing:
    """Configurable tariff: the entry package sets the comparable price."""

    fees: tuple[float, ...]

    @property
    def price(self) -> float:
        return min(self.fees)


@dataclass(frozen=True)
class FlatFeePricing:
    """Tariff with a single subscription fee."""

    fee: float

    @property
    def price(self) -> float:
        return self.fee


@dataclass(frozen=True)
class ParametrizedPricing:
    """Parametrized tariff priced by its default package."""

    default_package_price: float

    @property
    def price(self) -> float:
        return self.default_package_price


@dataclass(frozen=True)
class NoPricing:
    """No recognised price representation."""

    @property
    def price(self) -> None:
        return None


TariffPricing = Union[PackagePricing, FlatFeePricing, ParametrizedPricing, NoPricing]


# === Fetching ===

@dataclass(frozen=True)
class RegionTariffPayload:
    """Parsed tariff JSON of one regional page.

    ``data`` is the decoded object verbatim: the ``actualTariffs`` list plus
    whatever metadata the page embeds next to it.
    """

    region_alias: str
    data: dict[str, Any]

    @property
    def tariffs(self) -> list[Any]:
        tariffs = self.data.get("actualTariffs")
        return tariffs if isinstance(tariffs, list) else []


class FetchStatus(str, Enum):
    """Terminal state of a region fetch."""
    CACHED = "cached"
    FETCHED = "fetched"
    FAILED = "failed"


@dataclass
class RegionFetchResult:
    """Outcome of fetching one region."""

    region: Region
    status: FetchStatus
    payload: RegionTariffPayload | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.payload is not None


# === Run summary ===

@dataclass
class RunSummary:
    """Counters and report of one tracker run."""

    total_regions: int = 0
    cached: int = 0
    fetched: int = 0
    failed: int = 0
    prices: dict[str, dict[str, float]] = field(default_factory=dict)
    report: list[CheapestRegion] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    def record(self, status: FetchStatus) -> None:
        if status is FetchStatus.CACHED:
            self.cached += 1
        elif status is FetchStatus.FETCHED:
            self.fetched += 1
        else:
            self.failed += 1
