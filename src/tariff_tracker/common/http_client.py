"""HTTP client with rate limiting, retry and User-Agent rotation."""

from __future__ import annotations

import logging
import time
from typing import Any

import requests
from fake_useragent import UserAgent

from ...common.config import ScraperSettings, settings
from .config import Config
from .rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class HTTPClient:
    """HTTP client wrapping requests for the regional storefronts.

    Features:
    - Rate limiting between requests
    - Automatic retries with exponential backoff
    - Random User-Agent rotation
    - Per-request timeout
    """

    def __init__(
        self,
        config: Config | None = None,
        scraper_settings: ScraperSettings | None = None,
    ) -> None:
        self.config = config or Config()
        self.scraper_settings = scraper_settings or settings.scraper
        self._rate_limiter = RateLimiter(self.config.rate_limit_rpm)
        self._session = requests.Session()
        self._ua = UserAgent(fallback=self.scraper_settings.user_agent)

    def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> requests.Response:
        """Send a GET request with rate limiting and retries.

        Args:
            url: Target URL.
            params: Query parameters.
            headers: Extra headers (merged with defaults).

        Returns:
            requests.Response object.

        Raises:
            requests.RequestException: After all retries exhausted.
        """
        merged_headers = {"User-Agent": self._ua.random}
        if headers:
            merged_headers.update(headers)

        max_retries = max(self.scraper_settings.max_retries, 1)
        last_exc: Exception | None = None
        for attempt in range(max_retries):
            self._rate_limiter.wait()
            try:
                resp = self._session.get(
                    url,
                    params=params,
                    headers=merged_headers,
                    timeout=self.config.request_timeout,
                )
                resp.raise_for_status()
                return resp

            except requests.RequestException as exc:
                last_exc = exc

                # 4xx other than 429 is permanent
                if (
                    isinstance(exc, requests.HTTPError)
                    and exc.response is not None
                    and 400 <= exc.response.status_code < 500
                    and exc.response.status_code != 429
                ):
                    logger.warning("Request failed (4xx, no retry): %s", exc)
                    raise

                if attempt + 1 == max_retries:
                    break

                wait_time = self.scraper_settings.backoff_base ** attempt
                logger.warning(
                    "Request failed (attempt %d/%d): %s, retrying in %.1fs",
                    attempt + 1,
                    max_retries,
                    exc,
                    wait_time,
                )
                time.sleep(wait_time)

        raise last_exc  # type: ignore[misc]

    def close(self) -> None:
        """Close the underlying session."""
        self._session.close()

    def __enter__(self) -> HTTPClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
