# =============================================================================
# trade_core/schema_cache.py  —  Introspection result cache
# =============================================================================
#
# The introspection result is ~110KB and almost never changes, so it is
# cached at two levels:
#
#   1. memory  (per process, fastest)
#   2. a JSON file on disk (survives restarts; shared by processes)
#
# Both expire after ttl_seconds (default 24h).  A missing, unreadable or
# corrupt cache file is a cache miss, never an error.  A failed write is
# logged and otherwise ignored: the caller already has the schema.
#
# File format:   {"_cached_at": <unix seconds>, "schema": {...}}
# The default path is relative to the working directory; SCHEMA_CACHE_FILE
# overrides it.
# =============================================================================

import json
import logging
import threading
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 24 * 60 * 60
DEFAULT_CACHE_FILE = Path("cache") / "schema_cache.json"


class SchemaCache:
    """Memory + file cache for one GraphQL schema."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        cache_file: Union[str, Path] = DEFAULT_CACHE_FILE,
        clock=time.time,
    ):
        self.ttl_seconds = ttl_seconds
        self.cache_file = Path(cache_file)
        self._clock = clock
        self._lock = threading.Lock()
        self._schema: Optional[dict] = None
        self._cached_at: Optional[float] = None

    def _fresh(self, cached_at: Optional[float]) -> bool:
        return cached_at is not None and self._clock() - cached_at < self.ttl_seconds

    def get(self) -> Optional[dict]:
        """Return the cached schema, or None if absent or expired."""
        with self._lock:
            if self._schema is not None:
                if self._fresh(self._cached_at):
                    return self._schema
                self._schema = None
                self._cached_at = None

            try:
                cached = json.loads(self.cache_file.read_text(encoding="utf-8"))
            except (OSError, ValueError):
                return None

            if not isinstance(cached, dict):
                return None
            cached_at = cached.get("_cached_at")
            if not isinstance(cached_at, (int, float)) or not self._fresh(cached_at):
                return None

            self._schema = cached.get("schema")
            self._cached_at = cached_at
            return self._schema

    def set(self, schema: dict) -> None:
        """Store `schema` in memory and on disk."""
        now = self._clock()
        with self._lock:
            self._schema = schema
            self._cached_at = now
            try:
                self.cache_file.parent.mkdir(parents=True, exist_ok=True)
                self.cache_file.write_text(
                    json.dumps({"_cached_at": now, "schema": schema}, ensure_ascii=False, indent=2),
                    encoding="utf-8",
                )
            except OSError as e:
                logger.warning("Failed to write schema cache file %s: %s", self.cache_file, e)

    def clear(self) -> None:
        """Drop the in-memory copy (the file is left alone)."""
        with self._lock:
            self._schema = None
            self._cached_at = None

    def status(self) -> dict:
        """Cache state, safe to return from a tool or health endpoint."""
        with self._lock:
            cached_at = self._cached_at
            has_schema = self._schema is not None
        return {
            "has_memory_cache": has_schema,
            "memory_cache_age": round(self._clock() - cached_at, 3) if cached_at is not None else None,
            "memory_cache_timestamp": (
                datetime.fromtimestamp(cached_at, tz=timezone.utc).isoformat()
                if cached_at is not None else None
            ),
        }
