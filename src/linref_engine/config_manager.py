"""
Configuration manager for engine settings.

Loads engine configuration from YAML files, validates settings,
and provides environment variable substitution.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .geofence.models import ValidationMode
from .jurisdiction.resolver import DEFAULT_CACHE_KEY, DEFAULT_CACHE_TTL

logger = logging.getLogger(__name__)

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

_ENV_VAR_RE = re.compile(r'\$\{([^}:]+)(?::([^}]*))?\}')


@dataclass
class EngineConfig:
    """Validated engine configuration."""
    name: str
    log_level: str = "INFO"
    jurisdiction_cache_ttl: float = DEFAULT_CACHE_TTL
    jurisdiction_cache_key: str = DEFAULT_CACHE_KEY
    jurisdictions_path: Optional[Path] = None
    geofence: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "log_level": self.log_level,
            "jurisdiction_cache_ttl": self.jurisdiction_cache_ttl,
            "jurisdiction_cache_key": self.jurisdiction_cache_key,
            "jurisdictions_path": str(self.jurisdictions_path) if self.jurisdictions_path else None,
            "geofence": self.geofence,
        }


class ConfigManager:
    """Manages engine configuration."""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize configuration manager.

        Args:
            config_path: Path to configuration YAML file (optional)
        """
        self.config_path = config_path
        self._config: Optional[Dict[str, Any]] = None

    def load(self, config_path: Optional[Path] = None) -> EngineConfig:
        """Load and validate configuration from YAML file.

        Args:
            config_path: Path to configuration file (overrides init path)

        Returns:
            EngineConfig with validated settings

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If configuration is invalid
        """
        path = config_path or self.config_path
        if path is None:
            raise ValueError("No configuration path provided")

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, 'r') as f:
            config = yaml.safe_load(f) or {}

        return self.load_dict(config)

    def load_dict(self, config: Dict[str, Any]) -> EngineConfig:
        """Validate an already-parsed configuration dictionary.

        Raises:
            ValueError: If configuration is invalid
        """
        if not isinstance(config, dict):
            raise ValueError("Configuration must be a mapping")

        config = self._substitute_env_vars(config)
        self._validate_config(config)
        self._config = config

        return self._create_engine_config(config)

    def _substitute_env_vars(self, config: Any) -> Any:
        """Recursively substitute environment variables in configuration.

        Supports syntax: ${VAR_NAME} or ${VAR_NAME:default_value}
        """
        if isinstance(config, dict):
            return {
                key: self._substitute_env_vars(value)
                for key, value in config.items()
            }
        elif isinstance(config, list):
            return [self._substitute_env_vars(item) for item in config]
        elif isinstance(config, str):
            return self._substitute_env_var_string(config)
        else:
            return config

    def _substitute_env_var_string(self, value: str) -> str:
        def replacer(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default_value)

        return _ENV_VAR_RE.sub(replacer, value)

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """Validate configuration structure and required fields.

        Raises:
            ValueError: If configuration is invalid
        """
        if "name" not in config:
            raise ValueError("Configuration missing required field: name")

        log_level = str(config.get("log_level", "INFO")).upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {log_level}")

        jurisdictions = config.get("jurisdictions", {})
        if not isinstance(jurisdictions, dict):
            raise ValueError("jurisdictions must be a dictionary")

        cache_config = jurisdictions.get("cache", {})
        if not isinstance(cache_config, dict):
            raise ValueError("jurisdictions.cache must be a dictionary")

        try:
            ttl = float(cache_config.get("ttl_seconds", DEFAULT_CACHE_TTL))
        except (TypeError, ValueError):
            raise ValueError("jurisdictions.cache.ttl_seconds must be a number")
        if ttl <= 0:
            raise ValueError("jurisdictions.cache.ttl_seconds must be positive")

        geofence = config.get("geofence", {})
        if not isinstance(geofence, dict):
            raise ValueError("geofence must be a dictionary")

        mode = geofence.get("validation_mode", ValidationMode.ANY.value)
        if mode not in {m.value for m in ValidationMode}:
            raise ValueError(f"Invalid geofence validation_mode: {mode}")

    def _create_engine_config(self, config: Dict[str, Any]) -> EngineConfig:
        jurisdictions = config.get("jurisdictions", {})
        cache_config = jurisdictions.get("cache", {})

        jurisdictions_path = jurisdictions.get("path")
        if jurisdictions_path:
            jurisdictions_path = Path(jurisdictions_path).expanduser()

        geofence = {
            "validation_mode": ValidationMode.ANY.value,
            "allow_without_location": False,
        }
        geofence.update(config.get("geofence", {}))

        return EngineConfig(
            name=config["name"],
            log_level=str(config.get("log_level", "INFO")).upper(),
            jurisdiction_cache_ttl=float(cache_config.get("ttl_seconds", DEFAULT_CACHE_TTL)),
            jurisdiction_cache_key=cache_config.get("key", DEFAULT_CACHE_KEY),
            jurisdictions_path=jurisdictions_path or None,
            geofence=geofence,
        )

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get a raw configuration section.

        Raises:
            ValueError: If configuration not loaded or section missing
        """
        if self._config is None:
            raise ValueError("Configuration not loaded - call load() first")

        if section not in self._config:
            raise ValueError(f"Section {section} not found in configuration")

        return self._config[section]

    def save_example_config(self, output_path: Path) -> None:
        """Save an example configuration file.

        Args:
            output_path: Path where to save example config
        """
        example_config = {
            "name": "linref_engine",
            "log_level": "INFO",
            "jurisdictions": {
                "path": "${LINREF_DATA:data}/jurisdictions.csv",
                "cache": {
                    "ttl_seconds": DEFAULT_CACHE_TTL,
                    "key": DEFAULT_CACHE_KEY,
                },
            },
            "geofence": {
                "validation_mode": "any",
                "allow_without_location": False,
                "polygons": [
                    {
                        "id": "site_office",
                        "name": "Site Office",
                        "points": [
                            {"lat": 23.0, "lng": 90.0},
                            {"lat": 23.0, "lng": 90.1},
                            {"lat": 23.1, "lng": 90.1},
                            {"lat": 23.1, "lng": 90.0},
                        ],
                        "is_active": True,
                    }
                ],
            },
        }

        with open(output_path, 'w') as f:
            yaml.dump(example_config, f, default_flow_style=False, sort_keys=False)

        logger.info(f"Saved example configuration to {output_path}")
