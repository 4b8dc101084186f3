"""
Store Facade — Write-through key-value cache over a durable document.

The facade keeps an in-memory mirror of the backend's whole document and
answers reads from it. Every mutation saves the full document before
returning, and the mirror only changes once that save has succeeded, so
the mirror and the backend never disagree after a call completes.

## Usage

    from blobcache import JsonFileBackend, StoreFacade

    store = StoreFacade(JsonFileBackend(Path("state/cache.json")))
    store.set("token", {"value": "abc"})
    store.get("token").unwrap()      # {"value": "abc"}
    store.remove("missing")          # no-op, no backend traffic

## Concurrency

Each facade serializes its own operations with a lock. Two facades (or two
processes) writing the same backend are last-writer-wins: a save replaces
whatever the other wrote since this facade's last load. Call refresh() to
pick up out-of-band writes.
"""

from __future__ import annotations

import copy
import logging
import time
from threading import RLock
from typing import Any, Dict, List, Optional

from .backends.base import DurableBackend
from .errors import BackendUnavailable
from .logging_config import store_context
from .models.lookup import Lookup
from .observability.metrics import MetricsRegistry, metrics as default_metrics

logger = logging.getLogger(__name__)


class StoreFacade:
    """
    Write-through cache facade over a DurableBackend.

    The mirror is loaded once at construction and stays valid for the
    lifetime of the instance. Values cross the facade boundary as deep
    copies in both directions.
    """

    def __init__(self, backend: DurableBackend, metrics: Optional[MetricsRegistry] = None):
        self.backend = backend
        self._metrics = metrics or default_metrics
        self._labels = {"backend": backend.name}
        self._lock = RLock()
        self._stats = {"loads": 0, "saves": 0, "skipped_saves": 0, "errors": 0}
        self._mirror: Dict[str, Any] = self._load()

    # -- Reads -----------------------------------------------------------------

    def has_key(self, key: str) -> bool:
        """True iff key is present."""
        _check_key(key)
        with self._lock:
            return key in self._mirror

    def get(self, key: str) -> Lookup:
        """
        Read a key.

        Returns:
            Lookup.hit with a copy of the stored value, or Lookup.miss
        """
        _check_key(key)
        with self._lock:
            if key not in self._mirror:
                return Lookup.miss(key)
            return Lookup.hit(key, copy.deepcopy(self._mirror[key]))

    def get_value(self, key: str, default: Any = None) -> Any:
        """Stored value for key, or default when absent."""
        return self.get(key).unwrap(default)

    def keys(self) -> List[str]:
        with self._lock:
            return sorted(self._mirror)

    def snapshot(self) -> Dict[str, Any]:
        """Deep copy of the whole mirror."""
        with self._lock:
            return copy.deepcopy(self._mirror)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has_key(key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._mirror)

    # -- Mutations ---------------------------------------------------------------

    def set(self, key: str, value: Any) -> None:
        """
        Insert or overwrite key, then persist the full document.

        Raises:
            BackendUnavailable: If the save fails; the mirror is unchanged
        """
        _check_key(key)
        with self._lock:
            candidate = dict(self._mirror)
            candidate[key] = copy.deepcopy(value)
            self._save(candidate)
            self._mirror = candidate
            logger.debug(f"Set {key!r}", extra=store_context(self.backend.name, "set", key))

    def remove(self, key: str) -> None:
        """
        Delete key and persist the full document.

        Removing an absent key does nothing and makes no backend call.
        """
        _check_key(key)
        with self._lock:
            if key not in self._mirror:
                self._stats["skipped_saves"] += 1
                self._metrics.increment("saves_skipped_total", labels=self._labels)
                logger.debug(
                    f"Remove {key!r}: not present, skipping save",
                    extra=store_context(self.backend.name, "remove", key),
                )
                return

            candidate = {k: v for k, v in self._mirror.items() if k != key}
            self._save(candidate)
            self._mirror = candidate
            logger.debug(f"Removed {key!r}", extra=store_context(self.backend.name, "remove", key))

    def refresh(self) -> None:
        """
        Replace the mirror with the backend's current document.

        On failure the previous mirror is kept and the error propagates.
        """
        with self._lock:
            self._mirror = self._load()

    def clear(self) -> None:
        """Persist an empty document, then reload from the backend."""
        with self._lock:
            self._save({})
            self._mirror = {}
            logger.info(f"Cleared {self.backend.name} store")
            self.refresh()

    # -- Introspection -----------------------------------------------------------

    def stats(self) -> Dict[str, Any]:
        """Backend traffic counters for this instance."""
        with self._lock:
            return {
                "backend": self.backend.name,
                "keys": len(self._mirror),
                **self._stats,
            }

    # -- Backend round trips -------------------------------------------------------

    def _load(self) -> Dict[str, Any]:
        try:
            doc = self.backend.load()
        except BackendUnavailable:
            self._record_error("load")
            raise

        self._stats["loads"] += 1
        self._metrics.increment("backend_loads_total", labels=self._labels)
        logger.debug(
            f"Mirror loaded: {len(doc)} keys",
            extra=store_context(self.backend.name, "load"),
        )
        return copy.deepcopy(dict(doc))

    def _save(self, doc: Dict[str, Any]) -> None:
        started = time.monotonic()
        try:
            self.backend.save(doc)
        except BackendUnavailable:
            self._record_error("save")
            raise

        self._stats["saves"] += 1
        self._metrics.increment("backend_saves_total", labels=self._labels)
        self._metrics.timing("backend_save_seconds", time.monotonic() - started, labels=self._labels)
        logger.debug(
            f"Mirror saved: {len(doc)} keys",
            extra=store_context(self.backend.name, "save"),
        )

    def _record_error(self, operation: str) -> None:
        self._stats["errors"] += 1
        self._metrics.increment(
            "backend_errors_total", labels={**self._labels, "operation": operation}
        )
        logger.warning(
            f"Backend {operation} failed on {self.backend.name}",
            extra=store_context(self.backend.name, operation),
        )


def _check_key(key: Any) -> None:
    if not isinstance(key, str):
        raise TypeError(f"keys must be str, not {type(key).__name__}")
