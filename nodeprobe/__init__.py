__version__ = "1.0.0"

from .proxy_core.models import LocationRecord, PurityRecord, PurityLevel, LatencyLevel
from .proxy_core.config import ConfigManager, ProbeConfig
from .proxy_core.geo import LocationManager
from .proxy_engine import PurityManager
from .service import (
    configure,
    get_location,
    get_purity,
    preload_locations,
    clear_location_cache,
    clear_purity_cache
)

__all__ = [
    "LocationRecord", "PurityRecord", "PurityLevel", "LatencyLevel",
    "ConfigManager", "ProbeConfig", "LocationManager", "PurityManager",
    "configure", "get_location", "get_purity", "preload_locations",
    "clear_location_cache", "clear_purity_cache"
]
