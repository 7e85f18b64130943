"""
Configuration management infrastructure.

This module provides the configuration store, resource loading, and the
typed bootstrap settings read from the store.
"""

from .properties import Properties, loads_properties, load_properties, dumps_properties, dump_properties
from .loader import CONFIG_PATH, ConfigLoader
from .manager import ConfigManager
from .models import ApplicationConfig, DiscoveryConfig, LoggingConfig

__all__ = [
    "Properties",
    "loads_properties",
    "load_properties",
    "dumps_properties",
    "dump_properties",
    "CONFIG_PATH",
    "ConfigLoader",
    "ConfigManager",
    "ApplicationConfig",
    "DiscoveryConfig",
    "LoggingConfig",
]
