"""
Configuration models and data structures.

This module defines typed settings for the bootstrap itself. They are read
from ``botmill.*`` keys of the configuration store, with ``BOTMILL_*``
environment variables taking precedence.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .properties import Properties

ENV_PREFIX = "BOTMILL_"
DEFAULT_ENTRY_POINT_GROUP = "botmill.bot_definitions"

_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def parse_bool(value: str) -> bool:
    """Parse boolean value from string."""
    lowered = value.strip().lower()
    if lowered in ('true', '1', 'yes', 'on', 'enabled'):
        return True
    if lowered in ('false', '0', 'no', 'off', 'disabled', ''):
        return False
    raise ValueError(f"Not a boolean: {value!r}")


def parse_list(value: str) -> List[str]:
    """Parse a comma-separated list, dropping blank items."""
    return [item.strip() for item in value.split(',') if item.strip()]


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    console_enabled: bool = True
    file_enabled: bool = False
    log_directory: str = "logs"
    max_file_size: str = "10 MB"
    backup_count: int = 5

    def __post_init__(self) -> None:
        self.level = self.level.upper()
        if self.level not in _LOG_LEVELS:
            raise ValueError(
                f"Invalid log level {self.level}, expected one of {', '.join(_LOG_LEVELS)}")
        if self.backup_count < 0:
            raise ValueError(f"Backup count must not be negative, got {self.backup_count}")


@dataclass
class DiscoveryConfig:
    """Bot definition discovery configuration."""
    entry_point_group: str = DEFAULT_ENTRY_POINT_GROUP
    packages: List[str] = field(default_factory=list)
    plugin_directories: List[str] = field(default_factory=list)
    fail_fast: bool = True


# (property key, environment variable, section, field, converter)
_SETTINGS: Tuple[Tuple[str, str, str, str, Callable[[str], Any]], ...] = (
    ("botmill.logging.level", "LOG_LEVEL", "logging", "level", str),
    ("botmill.logging.console", "LOG_CONSOLE", "logging", "console_enabled", parse_bool),
    ("botmill.logging.file", "LOG_FILE", "logging", "file_enabled", parse_bool),
    ("botmill.logging.directory", "LOG_DIR", "logging", "log_directory", str),
    ("botmill.logging.max_file_size", "LOG_MAX_FILE_SIZE", "logging", "max_file_size", str),
    ("botmill.logging.backup_count", "LOG_BACKUP_COUNT", "logging", "backup_count", int),
    ("botmill.discovery.entry_point_group", "ENTRY_POINT_GROUP", "discovery", "entry_point_group", str),
    ("botmill.discovery.packages", "DISCOVERY_PACKAGES", "discovery", "packages", parse_list),
    ("botmill.discovery.plugin_directories", "PLUGIN_DIRS", "discovery", "plugin_directories", parse_list),
    ("botmill.discovery.fail_fast", "FAIL_FAST", "discovery", "fail_fast", parse_bool),
)


@dataclass
class ApplicationConfig:
    """Main application configuration."""
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)

    @classmethod
    def from_properties(
        cls,
        properties: Mapping[str, str],
        environ: Optional[Mapping[str, str]] = None
    ) -> 'ApplicationConfig':
        """
        Create configuration from a store and environment overrides.

        Args:
            properties: Configuration store
            environ: Environment variables (defaults to ``os.environ``)

        Returns:
            Validated configuration

        Raises:
            ValueError: If a value cannot be converted or is out of range
        """
        if environ is None:
            environ = os.environ

        sections: Dict[str, Dict[str, Any]] = {"logging": {}, "discovery": {}}
        for key, env_name, section, field_name, converter in _SETTINGS:
            env_var = f"{ENV_PREFIX}{env_name}"
            if env_var in environ:
                source, raw = env_var, environ[env_var]
            elif key in properties:
                source, raw = key, properties[key]
            else:
                continue

            try:
                sections[section][field_name] = converter(raw)
            except (ValueError, TypeError) as e:
                raise ValueError(f"Invalid value for {source}: {raw} ({e})")

        return cls(
            logging=LoggingConfig(**sections["logging"]),
            discovery=DiscoveryConfig(**sections["discovery"])
        )

    def to_properties(self) -> Properties:
        """Convert configuration to a store using the ``botmill.*`` keys."""
        properties = Properties()
        for key, _, section, field_name, _ in _SETTINGS:
            value = getattr(getattr(self, section), field_name)
            if isinstance(value, bool):
                properties[key] = "true" if value else "false"
            elif isinstance(value, list):
                properties[key] = ",".join(value)
            else:
                properties[key] = str(value)
        return properties
