"""Lightweight latency checks for the active connection or a single server

Latencies are whole milliseconds; -1 means the check failed.
"""

import logging
import time
from typing import Optional

import requests

from ..proxy_core import constants
from ..proxy_core.config import ProbeConfig
from ..proxy_core.exceptions import ProbeTimeoutError
from ..proxy_core.models import LatencyLevel

logger = logging.getLogger(__name__)

LATENCY_FAILED = -1


def measure_tcp_latency(host: str, port: int, network,
                        timeout: float = constants.LATENCY_TEST_TIMEOUT) -> int:
    """TCP connect time to a server"""
    latency = network.connect(host, port, timeout)
    if latency is None:
        return LATENCY_FAILED
    return max(1, int(round(latency)))


def measure_http_latency(url: str, network, timeout: float = constants.LATENCY_TEST_TIMEOUT,
                         proxy_port: Optional[int] = None) -> int:
    """Time a GET of the delay-test URL, optionally through the local HTTP proxy port"""
    proxies = None
    if proxy_port:
        proxy_url = f"http://127.0.0.1:{proxy_port}"
        proxies = {'http': proxy_url, 'https': proxy_url}

    start_time = time.perf_counter()
    try:
        response = network.http_get(url, timeout=timeout, proxies=proxies)
    except (ProbeTimeoutError, requests.exceptions.RequestException) as e:
        logger.debug(f"HTTP latency test against {url} failed: {e}")
        return LATENCY_FAILED
    # Sub-millisecond successes report 1 ms; 0 and below mean no measurement
    elapsed = max(1, int(round((time.perf_counter() - start_time) * 1000)))

    if not response.ok:
        logger.debug(f"HTTP latency test against {url} returned {response.status_code}")
        return LATENCY_FAILED
    return elapsed


def measure_current_latency(network, config: Optional[ProbeConfig] = None) -> int:
    """Latency of the current connection.

    Uses the configured local proxy port first, then falls back to a direct
    request to the delay-test URL.
    """
    config = config or ProbeConfig()

    if config.proxy_http_port > 0:
        latency = measure_http_latency(config.delay_test_url, network,
                                       proxy_port=config.proxy_http_port)
        if latency > 0:
            return latency
        logger.debug(f"Proxy port {config.proxy_http_port} latency test failed, trying direct")

    return measure_http_latency(config.delay_test_url, network)


def format_latency(latency_ms: int) -> str:
    """Format latency for display"""
    if latency_ms > 0:
        return f"{latency_ms} ms"
    return "-- ms"


def get_latency_level(latency_ms: int) -> LatencyLevel:
    if latency_ms <= 0:
        return LatencyLevel.UNKNOWN
    if latency_ms < constants.LATENCY_EXCELLENT_MS:
        return LatencyLevel.EXCELLENT
    if latency_ms < constants.LATENCY_GOOD_MS:
        return LatencyLevel.GOOD
    if latency_ms < constants.LATENCY_FAIR_MS:
        return LatencyLevel.FAIR
    return LatencyLevel.POOR
