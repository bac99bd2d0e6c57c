"""Configuration management for todotxt-cli."""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "TODOTXT_CONFIG"
DEFAULT_CONFIG_PATH = "~/.todotxt/config.yaml"


@dataclass
class ConfigModel:
    """Global configuration model for todotxt-cli."""

    # Validation and behavior
    strict_validation: bool = True  # enforce field patterns on create/update
    recur_on_complete: bool = True  # completing a recurring task adds the next one
    keep_creation_date: bool = True

    # Listing defaults
    hide_completed: bool = False
    default_project: str = ""

    # Logging
    log_level: str = "WARNING"

    def to_yaml(self) -> str:
        """Serialize config to YAML."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        return yaml.dump(data, default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ConfigModel":
        """Deserialize config from YAML.

        Unknown keys and values of the wrong type are ignored with a warning;
        the affected settings keep their defaults.
        """
        data = yaml.safe_load(yaml_str) or {}
        if not isinstance(data, dict):
            raise ValueError("Configuration must be a YAML mapping")

        types = {f.name: f.type for f in fields(cls)}
        for key in sorted(set(data) - set(types), key=str):
            logger.warning("Ignoring unknown configuration key %r", key)

        values = {}
        for key, expected in types.items():
            if key not in data:
                continue
            value = data[key]
            # bool is checked exactly; YAML strings like "no" are not booleans
            if type(value) is not expected:
                logger.warning("Ignoring %s=%r: expected %s, using default",
                               key, value, expected.__name__)
                continue
            values[key] = value

        return cls(**values)


def get_config_path() -> Path:
    """Config file path, honouring the ``TODOTXT_CONFIG`` environment variable."""
    return Path(os.path.expanduser(os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH)))


class Config:
    """Configuration manager for todotxt-cli."""

    _instance: Optional[ConfigModel] = None

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> ConfigModel:
        """Load configuration from file, falling back to defaults."""
        if config_path is None:
            config_path = get_config_path()

        config = ConfigModel()
        if config_path.exists():
            try:
                config = ConfigModel.from_yaml(config_path.read_text())
                logger.debug("Loaded configuration from %s", config_path)
            except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
                logger.warning("Failed to load config from %s: %s; using defaults", config_path, e)

        cls._instance = config
        return config

    @classmethod
    def save(cls, config: ConfigModel, config_path: Optional[Path] = None) -> None:
        """Save configuration to file."""
        if config_path is None:
            config_path = get_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(config.to_yaml())
        logger.debug("Configuration saved to %s", config_path)

    @classmethod
    def get(cls) -> ConfigModel:
        """Get the current configuration instance."""
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    @classmethod
    def reload(cls) -> ConfigModel:
        """Reload configuration from file."""
        cls._instance = None
        return cls.load()


def get_config() -> ConfigModel:
    """Get the current configuration."""
    return Config.get()


def load_config(config_path: Optional[Path] = None) -> ConfigModel:
    """Load configuration from file."""
    return Config.load(config_path)


def save_config(config: ConfigModel, config_path: Optional[Path] = None) -> None:
    """Save configuration to file."""
    Config.save(config, config_path)
