"""Process-wide entry points for location and purity lookups

These functions delegate to shared ``LocationManager`` / ``PurityManager``
instances so that every caller in the process sees the same caches.
"""

import logging
from typing import Iterable, Optional

from .proxy_core.config import ProbeConfig
from .proxy_core.geo.geo_manager import (
    LocationManager, get_global_location_manager, set_global_location_manager
)
from .proxy_core.models import LocationRecord, PurityRecord
from .proxy_core.network import NetworkClient
from .proxy_engine.purity_manager import (
    PurityManager, get_global_purity_manager, set_global_purity_manager
)

logger = logging.getLogger(__name__)


def configure(config: Optional[ProbeConfig] = None,
              network: Optional[NetworkClient] = None):
    """(Re)create the shared managers from a configuration.

    Existing caches are discarded.
    """
    config = config or ProbeConfig()
    network = network or NetworkClient(user_agent=config.user_agent)
    set_global_location_manager(LocationManager(config, network=network))
    set_global_purity_manager(PurityManager(config, network=network))
    logger.debug("Shared location and purity managers configured")


def get_location(address: str) -> Optional[LocationRecord]:
    return get_global_location_manager().get_location(address)


def get_purity(address: str, port: int) -> PurityRecord:
    return get_global_purity_manager().get_purity(address, port)


def preload_locations(addresses: Iterable[str]):
    get_global_location_manager().preload(addresses)


def clear_location_cache():
    get_global_location_manager().clear_cache()


def clear_purity_cache():
    get_global_purity_manager().clear_cache()
