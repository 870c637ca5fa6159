"""
Configuration Manager for portowner

Provides centralized configuration management with:
- YAML file loading from ~/.portowner/config.yaml
- Sensible fallback defaults
- Singleton pattern for global access
"""

import yaml
import logging
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass, field, fields

from portowner.utils import get_portowner_dir

logger = logging.getLogger(__name__)


@dataclass
class InspectorConfig:
    """System inspector settings."""
    connection_kind: str = "all"
    workdir_fallback: str = "~"
    shorten_home: bool = True


@dataclass
class ReportConfig:
    """Report ordering settings."""
    sort_processes: bool = True
    sort_labels: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "WARNING"
    log_to_file: bool = False
    max_file_size_mb: int = 10
    backup_count: int = 5


SECTIONS = {
    'inspector': InspectorConfig,
    'report': ReportConfig,
    'logging': LoggingConfig,
}


@dataclass
class Config:
    """Main configuration container."""
    inspector: InspectorConfig = field(default_factory=InspectorConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    _config_source: Dict[str, str] = field(default_factory=dict)

    def get_config_source(self, key: str) -> str:
        """Get the source of a configuration value (file/default)."""
        return self._config_source.get(key, "default")

    def set_config_source(self, key: str, source: str):
        """Set the source of a configuration value."""
        self._config_source[key] = source


class ConfigManager:
    """
    Singleton configuration manager.

    Loads configuration from:
    1. Default values (defined in dataclasses)
    2. YAML file (~/.portowner/config.yaml)

    Priority: File > Defaults
    """

    _instance: Optional['ConfigManager'] = None
    _config: Optional[Config] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if self._config is None:
            self._config = self._load_config()

    @property
    def config(self) -> Config:
        """Get the current configuration."""
        if self._config is None:
            self._config = self._load_config()
        return self._config

    def reload(self):
        """Reload configuration from file."""
        self._config = self._load_config()
        logger.info("Configuration reloaded")

    def _get_config_path(self) -> Path:
        """Get the path to the user configuration file."""
        return get_portowner_dir() / "config.yaml"

    def _load_config(self) -> Config:
        """Load configuration from YAML file with fallback to defaults."""
        config = Config()
        config_path = self._get_config_path()

        if not config_path.exists():
            logger.debug(f"Config file not found at {config_path}, using defaults")
            return config

        try:
            with open(config_path, 'r') as f:
                yaml_data = yaml.safe_load(f)

            if not yaml_data:
                logger.warning("Config file is empty, using defaults")
                return config

            if not isinstance(yaml_data, dict):
                logger.error(f"Config file {config_path} must contain a mapping, using defaults")
                return config

            for section, section_cls in SECTIONS.items():
                if section not in yaml_data:
                    continue
                values = yaml_data[section] or {}
                known = {f.name for f in fields(section_cls)}
                unknown = set(values) - known
                if unknown:
                    logger.warning(f"Ignoring unknown {section} settings: {sorted(unknown)}")
                values = {k: v for k, v in values.items() if k in known}
                setattr(config, section, section_cls(**values))
                for key in values:
                    config.set_config_source(f"{section}.{key}", "file")

            logger.info(f"Configuration loaded from {config_path}")

        except yaml.YAMLError as e:
            logger.error(f"Error parsing config file: {e}, using defaults")
            return Config()
        except Exception as e:
            logger.error(f"Error loading config file: {e}, using defaults")
            return Config()

        return config

    def get_all_config_values(self) -> Dict[str, Any]:
        """
        Get all configuration values as a flat dictionary.

        Returns:
            Dictionary with keys in "section.key" format
        """
        config = self.config
        result = {}

        for section, section_cls in SECTIONS.items():
            section_obj = getattr(config, section)
            for f in fields(section_cls):
                result[f"{section}.{f.name}"] = getattr(section_obj, f.name)

        return result


# Singleton instance getter
def get_config() -> Config:
    """Get the global configuration instance."""
    return ConfigManager().config


def get_config_manager() -> ConfigManager:
    """Get the global ConfigManager instance."""
    return ConfigManager()
