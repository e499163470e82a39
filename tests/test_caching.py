#!/usr/bin/env python3
"""
Unit tests for the TTL record cache and request coalescing
"""

import sys
import threading
import time
import unittest
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from nodeprobe.proxy_core.caching import RecordCache, SingleFlight
from nodeprobe.proxy_core.models import LocationRecord

from network_fakes import FakeClock

HOUR = 3600


class TestRecordCache(unittest.TestCase):
    """Lazy staleness against a fixed validity window"""

    def setUp(self):
        self.clock = FakeClock()
        self.cache = RecordCache('location', validity_hours=168,
                                 timestamp_field='resolved_at', clock=self.clock)

    def _record(self, address="203.0.113.5", age_seconds=0):
        return LocationRecord(address=address, country_code="US",
                              resolved_at=self.clock() - age_seconds)

    def test_fresh_record_returned(self):
        record = self._record()
        self.cache.put(record.address, record)
        self.assertIs(self.cache.get_fresh(record.address), record)

    def test_record_at_window_boundary_is_fresh(self):
        record = self._record(age_seconds=168 * HOUR)
        self.cache.put(record.address, record)
        self.assertFalse(self.cache.is_stale(record))
        self.assertIs(self.cache.get_fresh(record.address), record)

    def test_stale_record_is_kept_but_not_served(self):
        record = self._record()
        self.cache.put(record.address, record)
        self.clock.advance(168 * HOUR + 1)

        self.assertIsNone(self.cache.get_fresh(record.address))
        self.assertIs(self.cache.get(record.address), record)
        self.assertIn(record.address, self.cache)

    def test_put_replaces_whole_record(self):
        old = self._record(age_seconds=200 * HOUR)
        new = self._record()
        self.cache.put(old.address, old)
        self.cache.put(new.address, new)

        self.assertEqual(len(self.cache), 1)
        self.assertIs(self.cache.get_fresh(new.address), new)

    def test_stats(self):
        self.cache.put("a", self._record("a"))
        self.cache.put("b", self._record("b", age_seconds=169 * HOUR))
        self.cache.get_fresh("a")
        self.cache.get_fresh("b")
        self.cache.get_fresh("missing")

        stats = self.cache.get_stats()
        self.assertEqual(stats['cache_size'], 2)
        self.assertEqual(stats['stale_entries'], 1)
        self.assertEqual(stats['hits'], 1)
        self.assertEqual(stats['misses'], 2)
        self.assertEqual(stats['validity_hours'], 168)

    def test_clear(self):
        self.cache.put("a", self._record("a"))
        self.cache.get_fresh("a")
        self.cache.clear()

        self.assertEqual(len(self.cache), 0)
        self.assertEqual(self.cache.get_stats()['hits'], 0)


class TestSingleFlight(unittest.TestCase):
    """Concurrent callers for one key share a single computation"""

    def test_concurrent_callers_share_result(self):
        flight = SingleFlight()
        calls = []
        started = threading.Event()
        release = threading.Event()

        def compute():
            calls.append(1)
            started.set()
            release.wait(5)
            return "result"

        with ThreadPoolExecutor(max_workers=4) as executor:
            leader = executor.submit(flight.do, "key", compute)
            self.assertTrue(started.wait(5))
            followers = [executor.submit(flight.do, "key", compute) for _ in range(3)]
            # Followers must be parked on the in-flight future before release
            time.sleep(0.2)
            release.set()
            results = [leader.result(5)] + [f.result(5) for f in followers]

        self.assertEqual(results, ["result"] * 4)
        self.assertEqual(len(calls), 1)
        self.assertEqual(flight.in_flight(), 0)

    def test_exception_propagates_and_clears(self):
        flight = SingleFlight()

        def boom():
            raise RuntimeError("probe exploded")

        with self.assertRaises(RuntimeError):
            flight.do("key", boom)
        self.assertEqual(flight.in_flight(), 0)
        self.assertEqual(flight.do("key", lambda: 42), 42)

    def test_distinct_keys_are_independent(self):
        flight = SingleFlight()
        self.assertEqual(flight.do("a", lambda: 1), 1)
        self.assertEqual(flight.do("b", lambda: 2), 2)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
