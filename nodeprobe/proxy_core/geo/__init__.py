"""Geographical Data Management Package

Location lookups for server addresses:
- Ordered fallback chain over HTTP geolocation providers
- Per-provider response field normalisation
- Process-wide location cache with a seven day validity window
"""

from .providers import GeoProvider, GeoProviderChain, DEFAULT_PROVIDERS, DEFAULT_FIELD_MAP
from .geo_manager import (
    LocationManager,
    create_location_manager,
    get_global_location_manager,
    set_global_location_manager
)

__all__ = [
    'GeoProvider',
    'GeoProviderChain',
    'DEFAULT_PROVIDERS',
    'DEFAULT_FIELD_MAP',
    'LocationManager',
    'create_location_manager',
    'get_global_location_manager',
    'set_global_location_manager'
]
