"""Network Client - TCP connect, DNS resolution and HTTP GET with explicit timeouts

All probes and geolocation lookups go through a ``NetworkClient`` so that the
I/O surface is a single seam. Every call takes an explicit timeout; none of
them can hang indefinitely.
"""

import logging
import socket
import time
from dataclasses import dataclass
from typing import Dict, Optional

import requests

from .constants import DEFAULT_USER_AGENT, PROVIDER_TIMEOUT
from .exceptions import ProbeTimeoutError, ResolutionError

logger = logging.getLogger(__name__)


@dataclass
class HttpResponse:
    """Minimal HTTP response view: status code and body text"""
    status_code: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class NetworkClient:
    """Blocking network stack used by the resolver, the provider chain and the probes"""

    def __init__(self, user_agent: str = DEFAULT_USER_AGENT,
                 session: Optional[requests.Session] = None):
        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': user_agent})

    def connect(self, host: str, port: int, timeout: float) -> Optional[float]:
        """Open and close one TCP connection.

        Returns the connect time in milliseconds, or None when the connection
        failed or timed out.
        """
        start_time = time.perf_counter()
        try:
            with socket.create_connection((host, port), timeout=timeout):
                pass
        except socket.timeout:
            logger.debug(f"TCP connect to {host}:{port} timed out after {timeout}s")
            return None
        except OSError as e:
            logger.debug(f"TCP connect to {host}:{port} failed: {e}")
            return None
        return (time.perf_counter() - start_time) * 1000

    def resolve(self, host: str) -> str:
        """Forward lookup through the system resolver.

        Both address families are accepted; an IPv4 answer is preferred when
        the host has one, otherwise the first IPv6 answer is returned.

        Raises ``ResolutionError`` when the name cannot be resolved.
        """
        try:
            infos = socket.getaddrinfo(host, None, proto=socket.IPPROTO_TCP)
        except (OSError, UnicodeError) as e:
            raise ResolutionError(host, str(e)) from e
        if not infos:
            raise ResolutionError(host, "no addresses returned")

        for family, _, _, _, sockaddr in infos:
            if family == socket.AF_INET:
                return sockaddr[0]
        return infos[0][4][0]

    def http_get(self, url: str, timeout: float = PROVIDER_TIMEOUT,
                 proxies: Optional[Dict[str, str]] = None) -> HttpResponse:
        """Issue a GET request.

        Raises ``ProbeTimeoutError`` on timeout and ``requests.RequestException``
        on any other transport failure.
        """
        try:
            response = self.session.get(url, timeout=timeout, proxies=proxies)
        except requests.exceptions.Timeout as e:
            raise ProbeTimeoutError(f"GET {url} timed out after {timeout}s") from e
        return HttpResponse(status_code=response.status_code, body=response.text)

    def close(self):
        self.session.close()
