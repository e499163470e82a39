"""Proxy Core Configuration - Probe and cache settings"""

import json
import logging
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, Any, Optional, List

import yaml

from . import constants
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


# ===============================================================================
# CONFIGURATION DATA CLASS
# ===============================================================================

@dataclass
class ProbeConfig:
    """Main configuration settings"""

    # Cache settings
    location_cache_hours: float = constants.LOCATION_CACHE_HOURS
    purity_cache_hours: float = constants.PURITY_CACHE_HOURS
    coalesce_requests: bool = True

    # Geolocation settings
    provider_timeout: float = constants.PROVIDER_TIMEOUT

    # Purity probe timeouts (seconds)
    port_timeout: float = constants.PORT_REACHABILITY_TIMEOUT
    stability_timeout: float = constants.RESPONSE_STABILITY_TIMEOUT
    success_rate_timeout: float = constants.SUCCESS_RATE_TIMEOUT

    # Purity probe attempts and pauses (milliseconds)
    dns_attempts: int = constants.DNS_CONSISTENCY_ATTEMPTS
    dns_interval_ms: int = constants.DNS_CONSISTENCY_INTERVAL_MS
    stability_attempts: int = constants.RESPONSE_STABILITY_ATTEMPTS
    stability_interval_ms: int = constants.RESPONSE_STABILITY_INTERVAL_MS
    success_rate_attempts: int = constants.SUCCESS_RATE_ATTEMPTS
    success_rate_interval_ms: int = constants.SUCCESS_RATE_INTERVAL_MS

    # Latency check settings
    delay_test_url: str = constants.DEFAULT_DELAY_TEST_URL
    proxy_http_port: int = 0

    # HTTP client
    user_agent: str = constants.DEFAULT_USER_AGENT

    # Logging settings
    log_level: str = constants.DEFAULT_LOG_LEVEL
    log_file: Optional[str] = None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# ===============================================================================
# CONFIGURATION MANAGER
# ===============================================================================

class ConfigManager:
    """Loads ``ProbeConfig`` from YAML/JSON and applies CLI overrides"""

    def __init__(self, config_path: Optional[str] = None, cli_overrides: Optional[Dict[str, Any]] = None):
        self.config_path = config_path or self._get_default_config_path()
        self.config = ProbeConfig()
        self.cli_overrides = cli_overrides or {}
        self._load_config()

    def _get_default_config_path(self) -> str:
        """Default location, overridable through NODEPROBE_CONFIG"""
        env_path = os.environ.get('NODEPROBE_CONFIG')
        if env_path:
            return env_path
        return str(Path.home() / ".nodeprobe" / "config.yaml")

    def _load_config(self):
        """Load configuration from file and apply CLI overrides"""
        if os.path.exists(self.config_path):
            try:
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    if self.config_path.endswith('.json'):
                        data = json.load(f)
                    else:
                        data = yaml.safe_load(f) or {}
            except (OSError, ValueError, yaml.YAMLError) as e:
                raise ConfigurationError(f"Failed to load config from {self.config_path}: {e}") from e

            if not isinstance(data, dict):
                raise ConfigurationError(f"Config file {self.config_path} must contain a mapping")

            for key, value in data.items():
                if hasattr(self.config, key):
                    setattr(self.config, key, value)
                else:
                    logger.warning(f"Ignoring unknown configuration key: {key}")
        else:
            logger.debug(f"No config file at {self.config_path}, using defaults")

        self._apply_cli_overrides()

    def _apply_cli_overrides(self):
        """Apply CLI parameter overrides to configuration"""
        for key, value in self.cli_overrides.items():
            if hasattr(self.config, key) and value is not None:
                setattr(self.config, key, value)

    def save_config(self):
        """Save current configuration to file"""
        config_data = asdict(self.config)
        try:
            Path(self.config_path).parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w', encoding='utf-8') as f:
                if self.config_path.endswith('.json'):
                    json.dump(config_data, f, indent=2)
                else:
                    yaml.dump(config_data, f, default_flow_style=False, indent=2)
        except OSError as e:
            raise ConfigurationError(f"Failed to save config: {e}") from e
        logger.info(f"Configuration saved to: {self.config_path}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value"""
        return getattr(self.config, key, default)

    def set(self, key: str, value: Any):
        """Set configuration value"""
        if not hasattr(self.config, key):
            raise ConfigurationError(f"Unknown configuration key: {key}")
        setattr(self.config, key, value)

    def update(self, **kwargs):
        """Update multiple configuration values"""
        for key, value in kwargs.items():
            self.set(key, value)

    def validate(self) -> List[str]:
        """Validate configuration settings"""
        errors = []

        for key in ('location_cache_hours', 'purity_cache_hours', 'provider_timeout',
                    'port_timeout', 'stability_timeout', 'success_rate_timeout'):
            value = getattr(self.config, key)
            if not _is_number(value):
                errors.append(f"{key} must be a number, got {value!r}")
            elif value <= 0:
                errors.append(f"{key} must be positive")

        for key in ('dns_attempts', 'stability_attempts', 'success_rate_attempts'):
            value = getattr(self.config, key)
            if not _is_integer(value):
                errors.append(f"{key} must be an integer, got {value!r}")
            elif value < 1:
                errors.append(f"{key} must be at least 1")

        for key in ('dns_interval_ms', 'stability_interval_ms', 'success_rate_interval_ms'):
            value = getattr(self.config, key)
            if not _is_integer(value):
                errors.append(f"{key} must be an integer, got {value!r}")
            elif value < 0:
                errors.append(f"{key} cannot be negative")

        if not _is_integer(self.config.proxy_http_port) or not 0 <= self.config.proxy_http_port <= 65535:
            errors.append("proxy_http_port must be between 0 and 65535")

        if not isinstance(self.config.coalesce_requests, bool):
            errors.append("coalesce_requests must be true or false")

        if (not isinstance(self.config.delay_test_url, str)
                or not self.config.delay_test_url.startswith(('http://', 'https://'))):
            errors.append("delay_test_url must be an http(s) URL")

        if not isinstance(self.config.user_agent, str):
            errors.append("user_agent must be a string")

        valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.config.log_level not in valid_log_levels:
            errors.append(f"log_level must be one of: {valid_log_levels}")

        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        return asdict(self.config)

    def __repr__(self) -> str:
        return f"ConfigManager(config_path='{self.config_path}')"


# ===============================================================================
# CONFIGURATION UTILITIES
# ===============================================================================

def load_config(config_path: Optional[str] = None) -> ConfigManager:
    """Load configuration manager"""
    return ConfigManager(config_path)


def create_config_from_dict(data: Dict[str, Any]) -> ProbeConfig:
    """Create ProbeConfig from dictionary"""
    config = ProbeConfig()
    for key, value in data.items():
        if hasattr(config, key):
            setattr(config, key, value)
    return config


def create_cli_overrides(verbose=None, quiet=None, silent=None, timeout=None) -> Dict[str, Any]:
    """Create CLI overrides dictionary from common parameters"""
    overrides = {}

    if verbose:
        overrides['log_level'] = 'DEBUG'
    if quiet:
        overrides['log_level'] = 'WARNING'
    if silent:
        overrides['log_level'] = 'ERROR'

    if timeout is not None:
        overrides['provider_timeout'] = float(timeout)
        overrides['port_timeout'] = float(timeout)

    return overrides
