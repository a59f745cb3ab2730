"""
Regional tariff tracker

Modules:
- region_fetcher: Cache-first download of MTS regional tariff pages
- cache_store: Per-region payload cache (JSON files or SQLite)
- price_extractor: Comparable price from a tariff's price shape
- aggregator: Cross-region price table and cheapest-region report
- main: CLI orchestration
- common: HTTP client, rate limiter, runtime config
- database: SQLite storage for the cache
"""

__version__ = "0.1.0"
