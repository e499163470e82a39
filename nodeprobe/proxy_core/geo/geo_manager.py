"""Geographic Information Manager

Resolves server addresses to a location record through the provider fallback
chain, fronted by a process-wide cache with a seven day validity window.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..caching import RecordCache, SingleFlight
from ..config import ProbeConfig
from ..models import LocationRecord, ResolutionFailure
from ..network import NetworkClient
from ..utils import resolve_address
from .providers import GeoProvider, GeoProviderChain

logger = logging.getLogger(__name__)


class LocationManager:
    """Cached location lookups for server addresses"""

    def __init__(self, config: Optional[ProbeConfig] = None,
                 network: Optional[NetworkClient] = None,
                 providers: Optional[List[GeoProvider]] = None,
                 clock: Callable[[], float] = time.time):
        self.config = config or ProbeConfig()
        self.network = network or NetworkClient(user_agent=self.config.user_agent)
        self.clock = clock
        self.chain = GeoProviderChain(
            self.network,
            providers=providers,
            timeout=self.config.provider_timeout
        )
        self.cache: RecordCache[LocationRecord] = RecordCache(
            name='location',
            validity_hours=self.config.location_cache_hours,
            timestamp_field='resolved_at',
            clock=clock
        )
        self._flights: Optional[SingleFlight] = SingleFlight() if self.config.coalesce_requests else None

    def get_location(self, address: str) -> Optional[LocationRecord]:
        """Get the location for a server IP or hostname.

        Returns the cached record while it is fresh. A failed lookup returns
        None and is not cached, so the next call tries again.
        """
        if not address or not address.strip():
            return None

        cached = self.cache.get_fresh(address)
        if cached is not None:
            logger.debug(f"Location cache hit for {address}")
            return cached

        if self._flights is not None:
            return self._flights.do(address, lambda: self._lookup(address))
        return self._lookup(address)

    def _lookup(self, address: str) -> Optional[LocationRecord]:
        ip_address = resolve_address(address, self.network)
        if isinstance(ip_address, ResolutionFailure):
            logger.warning(f"Could not resolve hostname: {address}")
            return None

        record = self.chain.locate(ip_address, address=address)
        if record is None:
            return None

        record.resolved_at = self.clock()
        self.cache.put(address, record)
        return record

    def preload(self, addresses: Iterable[str]):
        """Warm the cache for several addresses, ignoring per-address failures"""
        for address in addresses:
            try:
                self.get_location(address)
            except Exception as e:
                logger.warning(f"Failed to preload location for {address}: {e}")

    def clear_cache(self):
        """Clear the location cache"""
        self.cache.clear()
        logger.info("Location cache cleared")

    def get_cache_stats(self) -> Dict[str, Any]:
        """Get cache and provider statistics"""
        return {
            'location_cache': self.cache.get_stats(),
            'provider_failures': self.chain.failure_counts(),
            'providers_count': len(self.chain.providers)
        }

    def close(self):
        """Close network resources"""
        self.network.close()


def create_location_manager(config: Optional[ProbeConfig] = None, **kwargs) -> LocationManager:
    """Factory function to create a location manager"""
    return LocationManager(config, **kwargs)


# Global manager instance (singleton pattern)
_global_location_manager: Optional[LocationManager] = None
_manager_lock = threading.Lock()


def get_global_location_manager(config: Optional[ProbeConfig] = None) -> LocationManager:
    """Get or create the process-wide location manager"""
    global _global_location_manager

    with _manager_lock:
        if _global_location_manager is None:
            _global_location_manager = create_location_manager(config)
        return _global_location_manager


def set_global_location_manager(manager: Optional[LocationManager]):
    """Replace the process-wide location manager (None resets it)"""
    global _global_location_manager

    with _manager_lock:
        _global_location_manager = manager
