"""MTS regional tariff page fetcher.

Each regional storefront (``https://<alias>.mts.ru``) renders its tariff
catalogue into the page as a JavaScript assignment::

    <script>window.globalSettings.tariffs = {"actualTariffs": [...]};</script>

The fetcher pulls that JSON out of the page, caches it per region and hands
the parsed payload to the aggregator. Region-level failures never raise out
of ``fetch``; they are logged and reported as ``FetchStatus.FAILED``.
"""

from __future__ import annotations

import json
import logging
import re

import requests
from bs4 import BeautifulSoup
from pydantic import ValidationError

from ..common.config import TariffSettings, settings
from ..common.models import Region
from .cache_store import CacheStore, build_cache_store
from .common.config import Config
from .common.http_client import HTTPClient
from .models import FetchStatus, RegionFetchResult, RegionTariffPayload


class TariffTrackerError(Exception):
    """Base error for the tariff tracker."""


class RegionListError(TariffTrackerError):
    """The region list could not be retrieved; nothing can be processed."""


class TariffPageError(TariffTrackerError):
    """A regional page could not be turned into a tariff payload."""


def build_tariffs_pattern(variable: str) -> re.Pattern[str]:
    """Regex for ``<variable> = <json>;`` closing its script element."""
    return re.compile(rf"{re.escape(variable)}\s*=\s*(.*);\s*$")


TARIFFS_PATTERN = build_tariffs_pattern(settings.tariffs.tariffs_variable)


def extract_tariffs_block(
    html: str, pattern: re.Pattern[str] = TARIFFS_PATTERN
) -> str | None:
    """Return the raw JSON text assigned to the tariffs variable, if any."""
    soup = BeautifulSoup(html, "lxml")
    for script in soup.find_all("script"):
        match = pattern.search(script.string or "")
        if match:
            return match.group(1).strip()
    return None


class RegionFetcher:
    """Cache-first fetcher for regional tariff payloads.

    Usage:
        with RegionFetcher(config, cache_store) as fetcher:
            for region in fetcher.fetch_regions():
                result = fetcher.fetch(region)
    """

    def __init__(
        self,
        config: Config | None = None,
        cache_store: CacheStore | None = None,
        client: HTTPClient | None = None,
        tariff_settings: TariffSettings | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config or Config()
        self.logger = logger or logging.getLogger(__name__)
        self.cache_store = cache_store or build_cache_store(self.config, self.logger)
        self._owns_client = client is None
        self._client = client or HTTPClient(self.config)
        self.tariff_settings = tariff_settings or settings.tariffs
        self._pattern = build_tariffs_pattern(self.tariff_settings.tariffs_variable)

    def fetch_regions(self) -> list[Region]:
        """Fetch the ordered list of regional storefronts.

        Raises:
            RegionListError: On transport failure or an unexpected body.
        """
        self.logger.info("Fetching list of regions")
        try:
            resp = self._client.get(self.config.regions_url)
            data = resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise RegionListError(f"Failed to fetch regions list: {exc}") from exc

        if not isinstance(data, list):
            raise RegionListError(
                f"Unexpected regions list payload: {type(data).__name__}"
            )

        regions: list[Region] = []
        for entry in data:
            try:
                regions.append(Region.model_validate(entry))
            except ValidationError as exc:
                self.logger.warning("Skipping malformed region entry %r: %s", entry, exc)

        self.logger.info("Found %d regions", len(regions))
        return regions

    def fetch(self, region: Region, refresh: bool = False) -> RegionFetchResult:
        """Return the region's payload from cache or from its tariff page."""
        alias = region.alias

        if not refresh:
            cached = self.cache_store.get(alias)
            if isinstance(cached, dict):
                self.logger.info("Using cached data for region: %s", alias)
                return RegionFetchResult(
                    region=region,
                    status=FetchStatus.CACHED,
                    payload=RegionTariffPayload(region_alias=alias, data=cached),
                )
            if cached is not None:
                self.logger.warning(
                    "Ignoring cached data for region %s: not a JSON object", alias
                )
        else:
            self.logger.info("Cache refresh requested for region: %s", alias)

        self.logger.info("Fetching data from website for region: %s", alias)
        try:
            data = self._download_payload(alias)
        except TariffPageError as exc:
            self.logger.error("%s", exc)
            return RegionFetchResult(
                region=region, status=FetchStatus.FAILED, error=str(exc)
            )

        if not self.cache_store.put(alias, data):
            self.logger.warning(
                "Continuing without cache for region %s", alias
            )
        return RegionFetchResult(
            region=region,
            status=FetchStatus.FETCHED,
            payload=RegionTariffPayload(region_alias=alias, data=data),
        )

    def _download_payload(self, alias: str) -> dict:
        try:
            resp = self._client.get(self.config.region_url(alias))
        except requests.RequestException as exc:
            raise TariffPageError(
                f"Error fetching data for region {alias}: {exc}"
            ) from exc

        block = extract_tariffs_block(resp.text, self._pattern)
        if block is None:
            raise TariffPageError(
                f"Failed to extract tariff data from HTML for region {alias}"
            )

        try:
            data = json.loads(block)
        except json.JSONDecodeError as exc:
            raise TariffPageError(
                f"Failed to decode JSON for region {alias}: {exc}"
            ) from exc

        if not isinstance(data, dict):
            raise TariffPageError(
                f"Unexpected tariff data for region {alias}: {type(data).__name__}"
            )
        return data

    def close(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> RegionFetcher:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
