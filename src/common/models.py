"""Shared Pydantic data models for the tariff tracker.

These models define the contracts with the upstream region list and the
cheapest-region report. Module-local value types live in
``src/tariff_tracker/models.py``.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Region(BaseModel):
    """A regional storefront as listed by the region-list endpoint."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    alias: str = Field(min_length=1, description="Subdomain and cache key")
    title: str = ""


class CheapestRegion(BaseModel):
    """Cheapest-region report entry for one tariff."""
    tariff_alias: str
    min_price: float = Field(ge=0)
    regions: list[str] = Field(default_factory=list)

    @field_validator("min_price")
    @classmethod
    def _finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("min_price must be finite")
        return value

    def format_line(self, currency: str = "RUB") -> str:
        """Console report line, e.g. ``Tariff 'x': 250 RUB - Cheapest in regions: a, b``."""
        price = int(self.min_price) if self.min_price.is_integer() else self.min_price
        return (
            f"Tariff '{self.tariff_alias}': {price} {currency} - "
            f"Cheapest in regions: {', '.join(self.regions)}"
        )
