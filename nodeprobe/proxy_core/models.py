"""Proxy Core Models - Location and purity records for probed servers"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any


# ===============================================================================
# ENUMERATIONS
# ===============================================================================

class PurityLevel(Enum):
    """Human-readable purity bands"""
    EXCELLENT = "Excellent"   # 90-100
    GOOD = "Good"             # 75-89
    FAIR = "Fair"             # 60-74
    POOR = "Poor"             # 40-59
    BAD = "Bad"               # 0-39


class LatencyLevel(Enum):
    """Latency bands used by the lightweight latency check"""
    UNKNOWN = -1
    EXCELLENT = 1
    GOOD = 2
    FAIR = 3
    POOR = 4


# ===============================================================================
# RESULT RECORDS
# ===============================================================================

@dataclass
class LocationRecord:
    """Geographic location resolved for a server address"""
    address: str
    country: Optional[str] = None
    country_code: Optional[str] = None
    region: Optional[str] = None
    city: Optional[str] = None
    ip_address: Optional[str] = None
    source: Optional[str] = None
    resolved_at: float = field(default_factory=time.time)

    def location_string(self) -> str:
        """Display form: "City, CC", "CC" or "Unknown"."""
        country = self.country_code or self.country
        if self.city and country:
            return f"{self.city}, {country}"
        if country:
            return country
        return "Unknown"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'address': self.address,
            'ip_address': self.ip_address,
            'country': self.country,
            'country_code': self.country_code,
            'region': self.region,
            'city': self.city,
            'source': self.source,
            'resolved_at': self.resolved_at,
            'location': self.location_string()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LocationRecord':
        """Create from dictionary"""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


@dataclass
class PurityRecord:
    """Purity assessment for an ``address:port`` endpoint.

    A score of 0 means the endpoint has not been tested (blank input) and is
    rendered as an empty string rather than "0%".
    """
    address: str
    port: int
    score: int = 0
    tested_at: float = field(default_factory=time.time)
    test_results: Dict[str, bool] = field(default_factory=dict)
    fallback: bool = False

    @property
    def cache_key(self) -> str:
        return make_purity_key(self.address, self.port)

    def purity_level(self) -> PurityLevel:
        if self.score >= 90:
            return PurityLevel.EXCELLENT
        if self.score >= 75:
            return PurityLevel.GOOD
        if self.score >= 60:
            return PurityLevel.FAIR
        if self.score >= 40:
            return PurityLevel.POOR
        return PurityLevel.BAD

    def display_string(self) -> str:
        if self.score == 0:
            return ""
        return f"{self.score}%"

    def indicator(self) -> str:
        """Colour name for the score band"""
        if self.score >= 90:
            return "green"
        if self.score >= 75:
            return "yellow"
        if self.score >= 60:
            return "orange"
        return "red"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'address': self.address,
            'port': self.port,
            'score': self.score,
            'level': self.purity_level().value,
            'tested_at': self.tested_at,
            'test_results': dict(self.test_results),
            'fallback': self.fallback
        }


@dataclass(frozen=True)
class ResolutionFailure:
    """Typed result for a hostname that could not be resolved"""
    address: str
    reason: str = ""

    def __bool__(self) -> bool:
        return False


def make_purity_key(address: str, port: int) -> str:
    """Composite cache key for purity records"""
    return f"{address}:{port}"
