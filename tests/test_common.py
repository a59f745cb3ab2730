"""Tests for shared modules: settings, models, config, HTTP client."""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests
from pydantic import ValidationError

from src.common.config import Settings
from src.common.logging import resolve_level, setup_logging
from src.common.models import CheapestRegion, Region
from src.tariff_tracker.common.config import Config
from src.tariff_tracker.common.http_client import HTTPClient
from src.tariff_tracker.common.rate_limiter import RateLimiter


class TestSettings:

    def test_defaults(self, tmp_path):
        loaded = Settings.load(tmp_path / "missing.yaml")
        assert loaded.tariffs.mobile_tariff_type == "Mobile"
        assert loaded.tariffs.currency == "RUB"
        assert loaded.scraper.max_retries == 3

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text(
            "scraper:\n  max_retries: 5\ntariffs:\n  currency: руб.\n",
            encoding="utf-8",
        )
        loaded = Settings.load(path)
        assert loaded.scraper.max_retries == 5
        assert loaded.tariffs.currency == "руб."
        assert loaded.tariffs.mobile_tariff_type == "Mobile"

    def test_project_settings_file(self, project_root):
        loaded = Settings.load(project_root / "config" / "settings.yaml")
        assert loaded.tariffs.tariffs_variable == "window.globalSettings.tariffs"


class TestRegion:

    def test_extra_fields_ignored(self):
        region = Region.model_validate({"alias": "spb", "title": "Санкт-Петербург", "id": 78})
        assert region.alias == "spb"
        assert not hasattr(region, "id")

    def test_alias_required(self):
        with pytest.raises(ValidationError):
            Region.model_validate({"title": "Москва"})
        with pytest.raises(ValidationError):
            Region(alias="")


class TestCheapestRegion:

    def test_price_must_be_non_negative(self):
        with pytest.raises(ValidationError):
            CheapestRegion(tariff_alias="t", min_price=-1, regions=["r1"])

    def test_price_must_be_finite(self):
        with pytest.raises(ValidationError):
            CheapestRegion(tariff_alias="t", min_price=float("inf"), regions=["r1"])


class TestConfig:

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("REQUEST_TIMEOUT", "5")
        monkeypatch.setenv("TARIFF_CACHE_BACKEND", "sqlite")
        monkeypatch.setenv("MTS_REGION_PAGE_URL", "https://{alias}.example.test/p")
        config = Config()
        assert config.request_timeout == 5
        assert config.cache_backend == "sqlite"
        assert config.region_url("omsk") == "https://omsk.example.test/p"

    def test_default_region_url(self, monkeypatch):
        monkeypatch.delenv("MTS_REGION_PAGE_URL", raising=False)
        assert Config().region_url("moskva") == (
            "https://moskva.mts.ru/personal/export/dla-smartfona"
        )

    def test_relative_paths_resolve_to_project_root(self, project_root):
        config = Config(cache_dir="data/cache", result_path="data/result.json")
        assert config.cache_abs_dir == project_root.resolve() / "data" / "cache"
        assert config.result_abs_path.name == "result.json"

    def test_absolute_paths_kept(self, tmp_path):
        config = Config(result_path=str(tmp_path / "r.json"))
        assert config.result_abs_path == tmp_path / "r.json"


class TestLogging:

    def test_resolve_level(self):
        assert resolve_level("debug") == logging.DEBUG
        assert resolve_level(logging.WARNING) == logging.WARNING
        assert resolve_level("verbose") == logging.INFO

    def test_unknown_level_name(self):
        logger = setup_logging("verbose", module_name="test.tariff.badlevel")
        assert logger.level == logging.INFO

    def test_single_handler(self):
        first = setup_logging(logging.INFO, module_name="test.tariff.logging")
        second = setup_logging(logging.DEBUG, module_name="test.tariff.logging")
        assert first is second
        assert len(first.handlers) == 1


class TestRateLimiter:

    def test_first_request_does_not_wait(self):
        limiter = RateLimiter(requests_per_minute=1)
        with patch("src.tariff_tracker.common.rate_limiter.time.sleep") as sleep:
            limiter.wait()
        sleep.assert_not_called()

    def test_second_request_waits(self):
        limiter = RateLimiter(requests_per_minute=60)
        with patch("src.tariff_tracker.common.rate_limiter.time.sleep") as sleep:
            limiter.wait()
            limiter.wait()
        sleep.assert_called_once()
        assert 0 < sleep.call_args.args[0] <= 1.0

    def test_disabled(self):
        limiter = RateLimiter(requests_per_minute=0)
        with patch("src.tariff_tracker.common.rate_limiter.time.sleep") as sleep:
            limiter.wait()
            limiter.wait()
        sleep.assert_not_called()


def _http_error(status: int) -> requests.HTTPError:
    response = MagicMock()
    response.status_code = status
    return requests.HTTPError(f"{status} error", response=response)


class TestHTTPClient:

    @pytest.fixture
    def client(self):
        config = Config(rate_limit_rpm=0)
        client = HTTPClient(config)
        client._session = MagicMock()
        return client

    def test_success(self, client):
        resp = MagicMock()
        client._session.get.return_value = resp
        assert client.get("https://moskva.mts.ru/") is resp
        kwargs = client._session.get.call_args.kwargs
        assert kwargs["timeout"] == client.config.request_timeout
        assert "User-Agent" in kwargs["headers"]

    def test_retries_transient_errors(self, client):
        ok = MagicMock()
        client._session.get.side_effect = [requests.ConnectionError("reset"), ok]
        with patch("src.tariff_tracker.common.http_client.time.sleep") as sleep:
            assert client.get("https://moskva.mts.ru/") is ok
        assert client._session.get.call_count == 2
        sleep.assert_called_once()

    def test_gives_up_after_max_retries(self, client):
        client._session.get.side_effect = requests.Timeout("timed out")
        with patch("src.tariff_tracker.common.http_client.time.sleep"):
            with pytest.raises(requests.Timeout):
                client.get("https://moskva.mts.ru/")
        assert client._session.get.call_count == client.scraper_settings.max_retries

    def test_no_retry_on_404(self, client):
        resp = MagicMock()
        resp.raise_for_status.side_effect = _http_error(404)
        client._session.get.return_value = resp
        with pytest.raises(requests.HTTPError):
            client.get("https://nowhere.mts.ru/")
        assert client._session.get.call_count == 1

    def test_retries_429(self, client):
        limited = MagicMock()
        limited.raise_for_status.side_effect = _http_error(429)
        ok = MagicMock()
        client._session.get.side_effect = [limited, ok]
        with patch("src.tariff_tracker.common.http_client.time.sleep"):
            assert client.get("https://moskva.mts.ru/") is ok

    def test_context_manager_closes_session(self, client):
        session = client._session
        with client:
            pass
        session.close.assert_called_once()
