"""Comparable-price extraction for MTS tariff records.

A tariff carries its price in one of several shapes. They are checked in a
fixed priority order and the first one that yields a usable number wins:

1. ``configurableTariffSettings.packages`` - the cheapest package fee
2. ``subscriptionFee.numValue`` - a flat monthly fee
3. ``parametrizedTariffSettings.defaultPackagePrice``

Category filtering (mobile tariffs only) is the aggregator's job; this
module only looks at price shapes and does no I/O.
"""

from __future__ import annotations

import math
from typing import Any

from .models import (
    FlatFeePricing,
    NoPricing,
    PackagePricing,
    ParametrizedPricing,
    TariffPricing,
)


def classify_pricing(tariff: dict[str, Any]) -> TariffPricing:
    """Return the price representation of a tariff record."""
    if not isinstance(tariff, dict):
        return NoPricing()

    configurable = tariff.get("configurableTariffSettings")
    if isinstance(configurable, dict):
        packages = configurable.get("packages")
        if isinstance(packages, list):
            fees = [
                fee
                for fee in (_fee_value(package) for package in packages)
                if fee is not None
            ]
            if fees:
                return PackagePricing(fees=tuple(fees))

    fee = _fee_value(tariff)
    if fee is not None:
        return FlatFeePricing(fee=fee)

    parametrized = tariff.get("parametrizedTariffSettings")
    if isinstance(parametrized, dict):
        default_price = to_price(parametrized.get("defaultPackagePrice"))
        if default_price is not None:
            return ParametrizedPricing(default_package_price=default_price)

    return NoPricing()


def extract_price(tariff: dict[str, Any]) -> float | None:
    """Comparable price of a tariff, or None when no shape yields one."""
    return classify_pricing(tariff).price


def to_price(value: Any) -> float | None:
    """Coerce a JSON value into a non-negative finite price.

    Integers are returned as-is so they serialize without a decimal point.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        return None
    try:
        as_float = float(value)
    except OverflowError:
        return None
    if not math.isfinite(as_float):
        return None
    if value < 0:
        return None
    return value


def _fee_value(node: Any) -> float | None:
    """Read ``subscriptionFee.numValue`` from a tariff or package node."""
    if not isinstance(node, dict):
        return None
    fee = node.get("subscriptionFee")
    if not isinstance(fee, dict):
        return None
    return to_price(fee.get("numValue"))
