"""Shared test fixtures for the tariff tracker."""

import json
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

# Ensure src is importable
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.tariff_tracker.common.config import Config

REGIONS_URL = "https://mts.test/api/regions"
REGION_PAGE_URL = "https://{alias}.mts.test/tariffs"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the test fixtures directory."""
    return PROJECT_ROOT / "tests" / "fixtures"


@pytest.fixture
def temp_config(tmp_path) -> Config:
    """Provide a Config whose cache, database and output live in tmp_path."""
    config = Config(
        cache_backend="json",
        cache_dir=str(tmp_path / "cache"),
        database_path=str(tmp_path / "tariff_cache.db"),
        result_path=str(tmp_path / "result.json"),
    )
    config.regions_url = REGIONS_URL
    config.region_page_url = REGION_PAGE_URL
    config.rate_limit_rpm = 0
    return config


def make_tariff_page(payload: dict) -> str:
    """Render a minimal regional page embedding ``payload``."""
    return (
        "<html><head><title>МТС</title></head><body>"
        "<script>window.globalSettings = {};</script>"
        "<script>window.globalSettings.tariffs = "
        f"{json.dumps(payload, ensure_ascii=False)};</script>"
        "</body></html>"
    )


def make_response(text: str = "", json_data=None) -> MagicMock:
    resp = MagicMock()
    resp.text = text
    if json_data is None:
        resp.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        resp.json.return_value = json_data
    return resp


class FakeSite:
    """In-memory stand-in for the MTS region list and regional pages.

    ``pages`` maps a region alias to a payload dict, raw HTML string, or an
    exception instance raised on request.
    """

    def __init__(self, regions: list[dict], pages: dict) -> None:
        self.regions = regions
        self.pages = pages
        self.requested: list[str] = []
        self.client = MagicMock()
        self.client.get.side_effect = self._get

    def _get(self, url: str, params=None, headers=None):
        self.requested.append(url)
        if url == REGIONS_URL:
            if isinstance(self.regions, Exception):
                raise self.regions
            return make_response(json_data=self.regions)
        for alias, page in self.pages.items():
            if url == REGION_PAGE_URL.format(alias=alias):
                if isinstance(page, Exception):
                    raise page
                if isinstance(page, str):
                    return make_response(text=page)
                return make_response(text=make_tariff_page(page))
        raise requests.HTTPError(f"404 Client Error: Not Found for url: {url}")

    def page_requests(self) -> list[str]:
        return [url for url in self.requested if url != REGIONS_URL]


@pytest.fixture
def sample_regions() -> list[dict]:
    return [
        {"alias": "moskva", "title": "Москва", "id": 1},
        {"alias": "spb", "title": "Санкт-Петербург", "id": 2},
        {"alias": "kazan", "title": "Казань", "id": 3},
    ]


@pytest.fixture
def sample_payloads() -> dict[str, dict]:
    """Tariff payloads per region covering every price shape."""
    return {
        "moskva": {
            "actualTariffs": [
                {
                    "alias": "rebyata",
                    "tariffType": "Mobile",
                    "configurableTariffSettings": {
                        "packages": [
                            {"subscriptionFee": {"numValue": 650}},
                            {"subscriptionFee": {"numValue": 450}},
                        ]
                    },
                },
                {"alias": "mts-super", "tariffType": "Mobile", "subscriptionFee": {"numValue": 700}},
                {"alias": "home", "tariffType": "Fix", "subscriptionFee": {"numValue": 500}},
            ],
            "regionAlias": "moskva",
        },
        "spb": {
            "actualTariffs": [
                {
                    "alias": "rebyata",
                    "tariffType": "Mobile",
                    "configurableTariffSettings": {
                        "packages": [{"subscriptionFee": {"numValue": 400}}]
                    },
                },
                {"alias": "mts-super", "tariffType": "Mobile", "subscriptionFee": {"numValue": 650}},
                {
                    "alias": "konstruktor",
                    "tariffType": "Mobile",
                    "parametrizedTariffSettings": {"defaultPackagePrice": 300},
                },
            ],
        },
        "kazan": {
            "actualTariffs": [
                {"alias": "mts-super", "tariffType": "Mobile", "subscriptionFee": {"numValue": 650}},
                {"alias": "archived", "tariffType": "Mobile"},
            ],
        },
    }


@pytest.fixture
def fake_site(sample_regions, sample_payloads) -> FakeSite:
    return FakeSite(sample_regions, dict(sample_payloads))


@pytest.fixture
def site_factory():
    """Build a FakeSite with custom regions/pages."""
    return FakeSite


@pytest.fixture
def render_page():
    """Render a regional page around a payload dict."""
    return make_tariff_page


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT
