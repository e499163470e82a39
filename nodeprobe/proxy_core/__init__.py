from .models import (
    LocationRecord, PurityRecord, PurityLevel, LatencyLevel,
    ResolutionFailure, make_purity_key
)
from .exceptions import (
    NodeProbeError, ConfigurationError, ResolutionError,
    ProbeTimeoutError, ProviderError, ScoringError
)
from .config import ConfigManager, ProbeConfig
from .caching import RecordCache, SingleFlight
from .network import NetworkClient, HttpResponse
from .utils import (
    is_literal_ipv4, is_literal_ipv6, is_literal_address,
    resolve_address, validate_port, parse_server_address
)

__all__ = [
    "LocationRecord", "PurityRecord", "PurityLevel", "LatencyLevel",
    "ResolutionFailure", "make_purity_key",
    "NodeProbeError", "ConfigurationError", "ResolutionError",
    "ProbeTimeoutError", "ProviderError", "ScoringError",
    "ConfigManager", "ProbeConfig", "RecordCache", "SingleFlight",
    "NetworkClient", "HttpResponse",
    "is_literal_ipv4", "is_literal_ipv6", "is_literal_address",
    "resolve_address", "validate_port", "parse_server_address"
]
