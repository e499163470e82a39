"""Purity Manager - cached purity assessments keyed by ``address:port``"""

import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional

from ..proxy_core.caching import RecordCache, SingleFlight
from ..proxy_core.config import ProbeConfig
from ..proxy_core.models import PurityRecord, make_purity_key
from ..proxy_core.network import NetworkClient
from .purity_tests import PuritySuite, PurityTest, Sleeper, build_default_tests
from .quality_scoring import ScoreAggregator

logger = logging.getLogger(__name__)


class PurityManager:
    """Tests server purity and caches the result for a day.

    Unlike location misses, a default-score fallback result is cached like
    any other result.
    """

    def __init__(self, config: Optional[ProbeConfig] = None,
                 network: Optional[NetworkClient] = None,
                 tests: Optional[List[PurityTest]] = None,
                 aggregator: Optional[ScoreAggregator] = None,
                 clock: Callable[[], float] = time.time,
                 sleep: Sleeper = time.sleep):
        self.config = config or ProbeConfig()
        self.network = network or NetworkClient(user_agent=self.config.user_agent)
        if tests is None:
            tests = build_default_tests(self.network, self.config, sleep=sleep)
        self.suite = PuritySuite(tests, aggregator=aggregator, clock=clock)
        self.cache: RecordCache[PurityRecord] = RecordCache(
            name='purity',
            validity_hours=self.config.purity_cache_hours,
            timestamp_field='tested_at',
            clock=clock
        )
        self._flights: Optional[SingleFlight] = SingleFlight() if self.config.coalesce_requests else None

    def get_purity(self, address: str, port: int) -> PurityRecord:
        """Get the purity record for a server endpoint"""
        if not address or not address.strip():
            return self.suite.assess(address, port)

        cache_key = make_purity_key(address, port)
        cached = self.cache.get_fresh(cache_key)
        if cached is not None:
            logger.debug(f"Purity cache hit for {cache_key}")
            return cached

        if self._flights is not None:
            return self._flights.do(cache_key, lambda: self._assess(cache_key, address, port))
        return self._assess(cache_key, address, port)

    def _assess(self, cache_key: str, address: str, port: int) -> PurityRecord:
        record = self.suite.assess(address, port)
        self.cache.put(cache_key, record)
        logger.info(f"Purity for {cache_key}: {record.score} ({record.purity_level().value})")
        return record

    def clear_cache(self):
        """Clear the purity cache"""
        self.cache.clear()
        logger.info("Purity cache cleared")

    def get_cache_stats(self) -> Dict[str, Any]:
        return {
            'purity_cache': self.cache.get_stats(),
            'tests': [test.name for test in self.suite.tests]
        }

    def close(self):
        self.network.close()


def create_purity_manager(config: Optional[ProbeConfig] = None, **kwargs) -> PurityManager:
    """Factory function to create a purity manager"""
    return PurityManager(config, **kwargs)


# Global manager instance (singleton pattern)
_global_purity_manager: Optional[PurityManager] = None
_manager_lock = threading.Lock()


def get_global_purity_manager(config: Optional[ProbeConfig] = None) -> PurityManager:
    """Get or create the process-wide purity manager"""
    global _global_purity_manager

    with _manager_lock:
        if _global_purity_manager is None:
            _global_purity_manager = create_purity_manager(config)
        return _global_purity_manager


def set_global_purity_manager(manager: Optional[PurityManager]):
    """Replace the process-wide purity manager (None resets it)"""
    global _global_purity_manager

    with _manager_lock:
        _global_purity_manager = manager
