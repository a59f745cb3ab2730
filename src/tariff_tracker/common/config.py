"""Runtime configuration for the tariff tracker."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
_PROJECT_ROOT = Path(__file__).resolve().parents[3]
load_dotenv(_PROJECT_ROOT / ".env")


@dataclass
class Config:
    """Central configuration loaded from environment variables."""

    # Scraping
    request_timeout: int = 30
    rate_limit_rpm: int = 30

    # MTS endpoints
    regions_url: str = "https://mts.ru/api/bff/v1/regions/list"
    region_page_url: str = "https://{alias}.mts.ru/personal/export/dla-smartfona"

    # Cache
    cache_backend: str = field(
        default_factory=lambda: os.getenv("TARIFF_CACHE_BACKEND", "json")
    )
    cache_dir: str = field(
        default_factory=lambda: os.getenv("TARIFF_CACHE_DIR", "data/cache")
    )
    database_path: str = field(
        default_factory=lambda: os.getenv(
            "DATABASE_PATH", "data/tariff_cache.db"
        )
    )

    # Output
    result_path: str = field(
        default_factory=lambda: os.getenv("TARIFF_RESULT_PATH", "data/result.json")
    )

    log_level: str = field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO")
    )

    def __post_init__(self) -> None:
        """Load overrides from environment."""
        if timeout := os.getenv("REQUEST_TIMEOUT"):
            self.request_timeout = int(timeout)
        if rpm := os.getenv("RATE_LIMIT_REQUESTS_PER_MINUTE"):
            self.rate_limit_rpm = int(rpm)
        if url := os.getenv("MTS_REGIONS_URL"):
            self.regions_url = url
        if url := os.getenv("MTS_REGION_PAGE_URL"):
            self.region_page_url = url

    def region_url(self, alias: str) -> str:
        """Tariff page URL for one region."""
        return self.region_page_url.format(alias=alias)

    @property
    def cache_abs_dir(self) -> Path:
        """Resolve cache dir relative to project root."""
        return self._resolve(self.cache_dir)

    @property
    def database_abs_path(self) -> Path:
        """Resolve database path relative to project root."""
        return self._resolve(self.database_path)

    @property
    def result_abs_path(self) -> Path:
        """Resolve consolidated output path relative to project root."""
        return self._resolve(self.result_path)

    @staticmethod
    def _resolve(path: str) -> Path:
        p = Path(path)
        if p.is_absolute():
            return p
        return _PROJECT_ROOT / p
