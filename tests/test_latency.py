#!/usr/bin/env python3
"""
Unit tests for the lightweight latency checks
"""

import sys
import unittest
from pathlib import Path

import pytest
import requests

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from nodeprobe.proxy_core.config import ProbeConfig
from nodeprobe.proxy_core.exceptions import ProbeTimeoutError
from nodeprobe.proxy_core.models import LatencyLevel
from nodeprobe.proxy_core.network import HttpResponse
from nodeprobe.proxy_engine.latency import (
    LATENCY_FAILED, format_latency, get_latency_level,
    measure_current_latency, measure_http_latency, measure_tcp_latency
)

from network_fakes import FakeNetwork

DELAY_URL = "https://www.gstatic.com/generate_204"


class ProxyRecordingNetwork(FakeNetwork):
    """Records the proxies mapping of each GET"""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.proxies_seen = []

    def http_get(self, url, timeout=5.0, proxies=None):
        self.proxies_seen.append(proxies)
        return super().http_get(url, timeout, proxies)


class TestTcpLatency(unittest.TestCase):

    def test_connect_time_rounded(self):
        network = FakeNetwork(connect_results=[42.6])
        self.assertEqual(measure_tcp_latency("203.0.113.5", 443, network), 43)

    def test_sub_millisecond_connect_reports_one(self):
        network = FakeNetwork(connect_results=[0.2])
        latency = measure_tcp_latency("127.0.0.1", 443, network)

        self.assertEqual(latency, 1)
        self.assertEqual(format_latency(latency), "1 ms")
        self.assertEqual(get_latency_level(latency), LatencyLevel.EXCELLENT)

    def test_failed_connect(self):
        network = FakeNetwork(default_latency=None)
        self.assertEqual(measure_tcp_latency("203.0.113.5", 443, network), LATENCY_FAILED)


class TestHttpLatency(unittest.TestCase):

    def test_success(self):
        network = FakeNetwork(http_responses={"gstatic": HttpResponse(204, "")})
        self.assertGreaterEqual(measure_http_latency(DELAY_URL, network), 1)

    def test_failures(self):
        for response in [HttpResponse(503, ""), ProbeTimeoutError("slow"),
                         requests.exceptions.ConnectionError("refused")]:
            with self.subTest(response=response):
                network = FakeNetwork(http_responses={"gstatic": response})
                self.assertEqual(measure_http_latency(DELAY_URL, network), LATENCY_FAILED)

    def test_proxy_port(self):
        network = ProxyRecordingNetwork(http_responses={"gstatic": HttpResponse(204, "")})
        measure_http_latency(DELAY_URL, network, proxy_port=7890)
        self.assertEqual(network.proxies_seen, [{'http': 'http://127.0.0.1:7890',
                                                 'https': 'http://127.0.0.1:7890'}])


class TestCurrentLatency(unittest.TestCase):

    def test_direct_without_proxy_port(self):
        network = ProxyRecordingNetwork(http_responses={"gstatic": HttpResponse(204, "")})
        measure_current_latency(network, ProbeConfig())
        self.assertEqual(network.proxies_seen, [None])

    def test_falls_back_to_direct(self):
        network = ProxyRecordingNetwork(http_responses={"gstatic": HttpResponse(502, "")})
        result = measure_current_latency(network, ProbeConfig(proxy_http_port=7890))

        self.assertEqual(result, LATENCY_FAILED)
        self.assertEqual(len(network.proxies_seen), 2)
        self.assertIsNotNone(network.proxies_seen[0])
        self.assertIsNone(network.proxies_seen[1])


class TestLatencyFormatting(unittest.TestCase):

    def test_format_latency(self):
        self.assertEqual(format_latency(87), "87 ms")
        self.assertEqual(format_latency(0), "-- ms")
        self.assertEqual(format_latency(LATENCY_FAILED), "-- ms")

    def test_format_and_level_agree(self):
        for latency_ms in [-1, 0, 1, 150, 800]:
            with self.subTest(latency_ms=latency_ms):
                unknown = get_latency_level(latency_ms) == LatencyLevel.UNKNOWN
                self.assertEqual(format_latency(latency_ms) == "-- ms", unknown)

    def test_latency_levels(self):
        test_cases = [
            (-1, LatencyLevel.UNKNOWN),
            (0, LatencyLevel.UNKNOWN),
            (1, LatencyLevel.EXCELLENT),
            (99, LatencyLevel.EXCELLENT),
            (100, LatencyLevel.GOOD),
            (199, LatencyLevel.GOOD),
            (200, LatencyLevel.FAIR),
            (500, LatencyLevel.POOR),
        ]
        for latency_ms, level in test_cases:
            with self.subTest(latency_ms=latency_ms):
                self.assertEqual(get_latency_level(latency_ms), level)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
