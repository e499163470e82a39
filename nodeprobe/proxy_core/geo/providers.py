"""Geolocation Providers - Interchangeable HTTP sources for IP location data

Each provider is a small descriptor: how to build its request URL for an IP
and which response fields feed each canonical location field. Providers are
tried in list order by ``GeoProviderChain``.
"""

import json
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import requests

from ..constants import PROVIDER_TIMEOUT
from ..exceptions import ProviderError, ProbeTimeoutError
from ..models import LocationRecord

logger = logging.getLogger(__name__)

# Canonical field -> response keys, first non-empty wins
DEFAULT_FIELD_MAP: Dict[str, Tuple[str, ...]] = {
    'country': ('country', 'country_name'),
    'country_code': ('country_code', 'countryCode'),
    'region': ('region', 'regionName'),
    'city': ('city',),
}


def _first_non_empty(data: Dict[str, Any], keys: Tuple[str, ...]) -> Optional[str]:
    for key in keys:
        value = data.get(key)
        if value not in (None, ""):
            return str(value)
    return None


@dataclass(frozen=True)
class GeoProvider:
    """A single geolocation endpoint"""
    name: str
    url_template: str
    field_map: Dict[str, Tuple[str, ...]] = field(default_factory=lambda: dict(DEFAULT_FIELD_MAP))

    def build_url(self, ip_address: str) -> str:
        return self.url_template.format(ip=ip_address)

    def parse(self, body: str, address: str, ip_address: str) -> LocationRecord:
        """Normalize a response body into a ``LocationRecord``.

        Raises:
            ProviderError: body is not a JSON object or reports an error
        """
        try:
            data = json.loads(body)
        except (TypeError, ValueError) as e:
            raise ProviderError(self.name, f"malformed JSON body: {e}") from e

        if not isinstance(data, dict):
            raise ProviderError(self.name, f"expected JSON object, got {type(data).__name__}")

        if data.get('status') == 'fail' or data.get('error'):
            reason = data.get('message') or data.get('reason') or data.get('error')
            raise ProviderError(self.name, f"provider reported error: {reason}")

        values = {
            canonical: _first_non_empty(data, keys)
            for canonical, keys in self.field_map.items()
        }
        return LocationRecord(
            address=address,
            ip_address=ip_address,
            source=self.name,
            **values
        )


def _field_map(**overrides: Tuple[str, ...]) -> Dict[str, Tuple[str, ...]]:
    mapping = dict(DEFAULT_FIELD_MAP)
    mapping.update(overrides)
    return mapping


DEFAULT_PROVIDERS: List[GeoProvider] = [
    # ipapi.co reports the ISO code under "country"
    GeoProvider(
        name='ipapi.co',
        url_template='https://ipapi.co/{ip}/json/',
        field_map=_field_map(country=('country_name', 'country')),
    ),
    # ip-api.com reports the region code under "region"
    GeoProvider(
        name='ip-api.com',
        url_template='http://ip-api.com/json/{ip}',
        field_map=_field_map(region=('regionName', 'region')),
    ),
    # ipinfo.io only carries the ISO code
    GeoProvider(
        name='ipinfo.io',
        url_template='https://ipinfo.io/{ip}/json',
        field_map=_field_map(country=('country_name',), country_code=('country_code', 'country')),
    ),
    GeoProvider(
        name='ipgeolocation.io',
        url_template='https://api.ipgeolocation.io/ipgeo?ip={ip}',
        field_map=_field_map(country_code=('country_code', 'country_code2', 'countryCode'),
                             region=('region', 'state_prov', 'regionName')),
    ),
]


class GeoProviderChain:
    """Ordered fallback chain over geolocation providers.

    Providers are tried in order; the first one returning a record wins and
    the remaining providers are not contacted. Every per-provider failure is
    logged and treated as "try the next one".
    """

    def __init__(self, network, providers: Optional[List[GeoProvider]] = None,
                 timeout: float = PROVIDER_TIMEOUT):
        self.network = network
        self.providers = list(providers) if providers is not None else list(DEFAULT_PROVIDERS)
        self.timeout = timeout
        self.provider_failures: Dict[str, int] = {}
        self._failures_lock = threading.Lock()

    def locate(self, ip_address: str, address: Optional[str] = None) -> Optional[LocationRecord]:
        """Fetch a location for an IP address, or None when every provider fails"""
        record_address = address or ip_address

        for provider in self.providers:
            record = self._query_provider(provider, ip_address, record_address)
            if record is not None:
                logger.debug(f"Location for {ip_address} from {provider.name}: {record.location_string()}")
                return record

        logger.warning(f"All {len(self.providers)} geolocation providers failed for {ip_address}")
        return None

    def _query_provider(self, provider: GeoProvider, ip_address: str,
                        address: str) -> Optional[LocationRecord]:
        url = provider.build_url(ip_address)
        try:
            response = self.network.http_get(url, timeout=self.timeout)
            if not response.ok:
                raise ProviderError(provider.name, f"HTTP {response.status_code}")
            return provider.parse(response.body, address, ip_address)

        except ProbeTimeoutError as e:
            logger.debug(f"Timeout for {ip_address} using {provider.name}: {e}")
        except requests.exceptions.RequestException as e:
            logger.debug(f"Request failed for {ip_address} using {provider.name}: {e}")
        except ProviderError as e:
            logger.debug(f"Invalid response for {ip_address}: {e}")
        except Exception as e:
            logger.debug(f"Unexpected error for {ip_address} using {provider.name}: {e}")

        self._record_failure(provider.name)
        return None

    def _record_failure(self, provider_name: str):
        with self._failures_lock:
            self.provider_failures[provider_name] = self.provider_failures.get(provider_name, 0) + 1

    def failure_counts(self) -> Dict[str, int]:
        """Snapshot of failures per provider name"""
        with self._failures_lock:
            return dict(self.provider_failures)

    def reset_failures(self):
        with self._failures_lock:
            self.provider_failures.clear()
