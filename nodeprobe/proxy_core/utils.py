"""Proxy Core Utils - Address classification, resolution and parsing helpers"""

import ipaddress
import logging
import re
from typing import Optional, Tuple, Union

from .exceptions import ResolutionError
from .models import ResolutionFailure

logger = logging.getLogger(__name__)

# Four dot-separated groups of 1-3 digits; octet ranges are not checked
_LITERAL_IPV4_PATTERN = re.compile(r'[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}')


def is_literal_ipv4(address: str) -> bool:
    """Return True if the string looks like a dotted-quad IPv4 literal"""
    if not address:
        return False
    return _LITERAL_IPV4_PATTERN.fullmatch(address) is not None


def is_literal_ipv6(address: str) -> bool:
    """Return True if the string is an IPv6 address literal (no brackets)"""
    if not address or ":" not in address:
        return False
    try:
        return ipaddress.ip_address(address).version == 6
    except ValueError:
        return False


def is_literal_address(address: str) -> bool:
    """Literal IPv4 or IPv6 address that needs no resolution"""
    return is_literal_ipv4(address) or is_literal_ipv6(address)


def resolve_address(address: str, network) -> Union[str, ResolutionFailure]:
    """Resolve a hostname to an IP address.

    Literal IPv4 and IPv6 addresses are returned unchanged without consulting the
    resolver. Hostnames get a single lookup with no retry; any lookup error
    is returned as a ``ResolutionFailure`` value rather than raised.

    Args:
        address: Hostname or literal IP address
        network: ``NetworkClient`` providing ``resolve(host)``

    Returns:
        The IP address string, or a ``ResolutionFailure``
    """
    if is_literal_address(address):
        return address

    try:
        return network.resolve(address)
    except (ResolutionError, OSError, UnicodeError) as e:
        logger.warning(f"Could not resolve hostname {address}: {e}")
        return ResolutionFailure(address=address, reason=str(e))


def validate_port(port: Union[int, str]) -> bool:
    """Validate if port number is valid"""
    try:
        port_int = int(port)
        return 1 <= port_int <= 65535
    except (ValueError, TypeError):
        return False


def parse_server_address(value: str) -> Optional[Tuple[str, int]]:
    """Parse ``host:port`` into a tuple.

    Returns None for blank input, a missing port or an out-of-range port.
    """
    raw_value = (value or "").strip()
    if not raw_value or ":" not in raw_value:
        return None
    host, port_text = raw_value.rsplit(":", 1)
    host = host.strip().strip("[]")
    if not host or not validate_port(port_text.strip()):
        return None
    return host, int(port_text)