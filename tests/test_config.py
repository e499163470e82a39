#!/usr/bin/env python3
"""
Unit tests for configuration loading, overrides and validation
"""

import json
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from nodeprobe.proxy_core.config import (
    ConfigManager, ProbeConfig, create_cli_overrides, create_config_from_dict
)
from nodeprobe.proxy_core.exceptions import ConfigurationError


class TestConfigManager(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)

    def _path(self, name):
        return os.path.join(self.temp_dir.name, name)

    def test_missing_file_uses_defaults(self):
        path = self._path("absent.yaml")
        manager = ConfigManager(path)

        self.assertEqual(manager.config, ProbeConfig())
        self.assertEqual(manager.config.location_cache_hours, 168)
        self.assertEqual(manager.config.purity_cache_hours, 24)
        self.assertFalse(os.path.exists(path))

    def test_yaml_file_loaded(self):
        path = self._path("config.yaml")
        with open(path, 'w', encoding='utf-8') as f:
            yaml.safe_dump({'purity_cache_hours': 6, 'coalesce_requests': False}, f)

        config = ConfigManager(path).config
        self.assertEqual(config.purity_cache_hours, 6)
        self.assertFalse(config.coalesce_requests)

    def test_json_file_loaded(self):
        path = self._path("config.json")
        with open(path, 'w', encoding='utf-8') as f:
            json.dump({'provider_timeout': 2.5}, f)

        self.assertEqual(ConfigManager(path).config.provider_timeout, 2.5)

    def test_unknown_keys_ignored(self):
        path = self._path("config.yaml")
        with open(path, 'w', encoding='utf-8') as f:
            f.write("not_a_setting: 1\ndns_attempts: 4\n")

        with self.assertLogs('nodeprobe.proxy_core.config', level='WARNING'):
            config = ConfigManager(path).config
        self.assertEqual(config.dns_attempts, 4)
        self.assertFalse(hasattr(config, 'not_a_setting'))

    def test_malformed_file_raises(self):
        path = self._path("config.yaml")
        with open(path, 'w', encoding='utf-8') as f:
            f.write("key: [unclosed\n")

        with self.assertRaises(ConfigurationError):
            ConfigManager(path)

    def test_non_mapping_file_raises(self):
        path = self._path("config.yaml")
        with open(path, 'w', encoding='utf-8') as f:
            f.write("- just\n- a list\n")

        with self.assertRaises(ConfigurationError):
            ConfigManager(path)

    def test_environment_path(self):
        path = self._path("from_env.yaml")
        with open(path, 'w', encoding='utf-8') as f:
            f.write("port_timeout: 1.5\n")

        with patch.dict(os.environ, {'NODEPROBE_CONFIG': path}):
            manager = ConfigManager()
        self.assertEqual(manager.config_path, path)
        self.assertEqual(manager.config.port_timeout, 1.5)

    def test_cli_overrides_win(self):
        path = self._path("config.yaml")
        with open(path, 'w', encoding='utf-8') as f:
            f.write("log_level: INFO\nprovider_timeout: 9\n")

        overrides = create_cli_overrides(verbose=True, timeout=2)
        config = ConfigManager(path, cli_overrides=overrides).config
        self.assertEqual(config.log_level, 'DEBUG')
        self.assertEqual(config.provider_timeout, 2.0)
        self.assertEqual(config.port_timeout, 2.0)

    def test_set_unknown_key_raises(self):
        manager = ConfigManager(self._path("absent.yaml"))
        manager.update(dns_attempts=5)
        self.assertEqual(manager.get('dns_attempts'), 5)
        with self.assertRaises(ConfigurationError):
            manager.set('no_such_key', 1)

    def test_save_and_reload(self):
        path = self._path(os.path.join("nested", "config.yaml"))
        manager = ConfigManager(path)
        manager.set('success_rate_attempts', 7)
        manager.save_config()

        self.assertEqual(ConfigManager(path).config.success_rate_attempts, 7)

    def test_validate(self):
        manager = ConfigManager(self._path("absent.yaml"))
        self.assertEqual(manager.validate(), [])

        manager.update(purity_cache_hours=0, dns_attempts=0, proxy_http_port=70000,
                       delay_test_url="ftp://example.com", log_level="LOUD")
        errors = manager.validate()
        self.assertEqual(len(errors), 5)
        self.assertTrue(any('purity_cache_hours' in e for e in errors))


    def test_quoted_numbers_reported_not_raised(self):
        path = self._path("config.yaml")
        with open(path, 'w', encoding='utf-8') as f:
            f.write('port_timeout: "5"\ndns_attempts: 2.5\nproxy_http_port: "7890"\ncoalesce_requests: "yes"\n')

        errors = ConfigManager(path).validate()
        self.assertEqual(len(errors), 4)
        self.assertIn("port_timeout must be a number, got '5'", errors)
        self.assertTrue(any(e.startswith("dns_attempts must be an integer") for e in errors))

    def test_boolean_is_not_a_number(self):
        manager = ConfigManager(self._path("absent.yaml"))
        manager.set('stability_timeout', True)
        self.assertEqual(manager.validate(), ["stability_timeout must be a number, got True"])


class TestConfigHelpers(unittest.TestCase):

    def test_create_cli_overrides(self):
        self.assertEqual(create_cli_overrides(), {})
        self.assertEqual(create_cli_overrides(quiet=True), {'log_level': 'WARNING'})
        self.assertEqual(create_cli_overrides(silent=True)['log_level'], 'ERROR')

    def test_create_config_from_dict(self):
        config = create_config_from_dict({'stability_attempts': 5, 'bogus': True})
        self.assertEqual(config.stability_attempts, 5)
        self.assertEqual(config.success_rate_attempts, 5)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
