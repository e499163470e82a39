"""Record Caches - Thread-safe TTL-windowed stores for location and purity results

Entries are never evicted in the background. Staleness is checked lazily at
read time against a fixed validity window; stale entries stay in place until
they are overwritten or the cache is cleared.
"""

import logging
import threading
import time
from concurrent.futures import Future
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

RecordT = TypeVar('RecordT')
ResultT = TypeVar('ResultT')


class RecordCache(Generic[RecordT]):
    """Thread-safe in-memory cache keyed by address (or ``address:port``)"""

    def __init__(self, name: str, validity_hours: float, timestamp_field: str,
                 clock: Callable[[], float] = time.time):
        self.name = name
        self.validity_seconds = validity_hours * 3600
        self.timestamp_field = timestamp_field
        self.clock = clock
        self._records: Dict[str, RecordT] = {}
        self.lock = threading.RLock()
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> Optional[RecordT]:
        """Return the stored record regardless of age"""
        with self.lock:
            return self._records.get(key)

    def put(self, key: str, record: RecordT):
        """Replace the record stored under key"""
        with self.lock:
            self._records[key] = record

    def is_stale(self, record: RecordT) -> bool:
        """True once the record is older than the validity window"""
        age = self.clock() - getattr(record, self.timestamp_field)
        return age > self.validity_seconds

    def get_fresh(self, key: str) -> Optional[RecordT]:
        """Return the record only if present and within the validity window"""
        with self.lock:
            record = self._records.get(key)
            if record is None or self.is_stale(record):
                self.misses += 1
                return None
            self.hits += 1
            return record

    def clear(self):
        """Clear all cached records"""
        with self.lock:
            self._records.clear()
            self.hits = 0
            self.misses = 0
        logger.debug(f"{self.name} cache cleared")

    def __len__(self) -> int:
        with self.lock:
            return len(self._records)

    def __contains__(self, key: str) -> bool:
        with self.lock:
            return key in self._records

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics"""
        with self.lock:
            total_requests = self.hits + self.misses
            hit_rate = (self.hits / total_requests * 100) if total_requests > 0 else 0
            stale = sum(1 for record in self._records.values() if self.is_stale(record))

            return {
                'name': self.name,
                'cache_size': len(self._records),
                'stale_entries': stale,
                'hits': self.hits,
                'misses': self.misses,
                'hit_rate': hit_rate,
                'validity_hours': self.validity_seconds / 3600
            }


class SingleFlight(Generic[ResultT]):
    """Coalesce concurrent computations for the same key.

    The first caller for a key runs the computation; callers arriving while
    it is in flight wait for and share its result (or its exception).
    """

    def __init__(self):
        self._pending: Dict[str, Future] = {}
        self._lock = threading.Lock()

    def do(self, key: str, fn: Callable[[], ResultT]) -> ResultT:
        with self._lock:
            future = self._pending.get(key)
            leader = future is None
            if leader:
                future = Future()
                self._pending[key] = future

        if not leader:
            logger.debug(f"Joining in-flight computation for {key}")
            return future.result()

        try:
            result = fn()
        except BaseException as e:
            future.set_exception(e)
            raise
        else:
            future.set_result(result)
            return result
        finally:
            with self._lock:
                self._pending.pop(key, None)

    def in_flight(self) -> int:
        with self._lock:
            return len(self._pending)
