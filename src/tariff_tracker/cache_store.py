"""Per-region cache of parsed tariff payloads.

The cache is an optimization: a miss means "fetch from the network", and a
failed write is logged and otherwise ignored so the run keeps using the
in-memory payload.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from .common.config import Config
from .database.connection import get_connection, init_db



class CacheStore(ABC):
    """Key-addressed store of region payloads."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger(__name__)

    @abstractmethod
    def get(self, region_alias: str) -> dict[str, Any] | None:
        """Return the cached payload for a region, or None on a miss."""
        ...

    @abstractmethod
    def put(self, region_alias: str, payload: dict[str, Any]) -> bool:
        """Store a payload. Returns False (and logs) on failure."""
        ...


class JsonFileCacheStore(CacheStore):
    """One pretty-printed ``<alias>.json`` file per region."""

    def __init__(
        self, cache_dir: str | Path, logger: logging.Logger | None = None
    ) -> None:
        super().__init__(logger)
        self.cache_dir = Path(cache_dir)

    def path_for(self, region_alias: str) -> Path:
        safe_key = "".join(
            c if c.isalnum() or c in "-_." else "_" for c in region_alias
        )
        return self.cache_dir / f"{safe_key}.json"

    def get(self, region_alias: str) -> dict[str, Any] | None:
        path = self.path_for(region_alias)
        if not path.exists():
            return None

        self.logger.info("Loading data from file: %s", path)
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as exc:
            self.logger.error("Failed to read cache file %s: %s", path, exc)
        except json.JSONDecodeError as exc:
            self.logger.error("JSON decode error in %s: %s", path, exc)
        return None

    def put(self, region_alias: str, payload: dict[str, Any]) -> bool:
        path = self.path_for(region_alias)
        self.logger.info("Saving data to file: %s", path)
        try:
            text = json.dumps(payload, ensure_ascii=False, indent=2)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except (OSError, TypeError, ValueError) as exc:
            self.logger.error("Failed to save file %s: %s", path, exc)
            return False
        return True


class SqliteCacheStore(CacheStore):
    """Region payloads stored as JSON text in the ``region_cache`` table."""

    def __init__(
        self, config: Config | None = None, logger: logging.Logger | None = None
    ) -> None:
        super().__init__(logger)
        self.config = config or Config()
        self.available = True
        try:
            init_db(self.config)
        except (sqlite3.Error, OSError) as exc:
            self.available = False
            self.logger.error(
                "SQLite cache unavailable at %s: %s", self.config.database_abs_path, exc
            )

    def get(self, region_alias: str) -> dict[str, Any] | None:
        if not self.available:
            return None
        try:
            conn = get_connection(self.config)
            try:
                row = conn.execute(
                    "SELECT payload FROM region_cache WHERE region_alias = ?",
                    (region_alias,),
                ).fetchone()
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as exc:
            self.logger.error("Cache lookup failed for %s: %s", region_alias, exc)
            return None

        if row is None:
            return None
        try:
            return json.loads(row["payload"])
        except json.JSONDecodeError as exc:
            self.logger.error("JSON decode error in cache row %s: %s", region_alias, exc)
            return None

    def put(self, region_alias: str, payload: dict[str, Any]) -> bool:
        if not self.available:
            return False
        try:
            text = json.dumps(payload, ensure_ascii=False)
            conn = get_connection(self.config)
            try:
                conn.execute(
                    """
                    INSERT INTO region_cache (region_alias, payload, fetched_at)
                    VALUES (?, ?, datetime('now'))
                    ON CONFLICT(region_alias) DO UPDATE SET
                        payload = excluded.payload,
                        fetched_at = excluded.fetched_at
                    """,
                    (region_alias, text),
                )
                conn.commit()
            finally:
                conn.close()
        except (sqlite3.Error, OSError, TypeError, ValueError) as exc:
            self.logger.error("Failed to cache payload for %s: %s", region_alias, exc)
            return False
        return True


def build_cache_store(
    config: Config | None = None, logger: logging.Logger | None = None
) -> CacheStore:
    """Cache backend selected by ``Config.cache_backend`` (json | sqlite)."""
    config = config or Config()
    backend = config.cache_backend.lower()
    if backend == "json":
        return JsonFileCacheStore(config.cache_abs_dir, logger)
    if backend == "sqlite":
        return SqliteCacheStore(config, logger)
    raise ValueError(f"Unknown cache backend: {config.cache_backend!r}")
