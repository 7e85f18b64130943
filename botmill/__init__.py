"""
BotMill - configuration loading and bot definition discovery for chatbots.

This package loads ``botmill.properties`` from the resource search path and
activates every BotDefinition implementation at startup.
"""

__version__ = "0.1.0"

# Public API exports
from .core.exceptions import (
    BotMillError,
    BotMillConfigurationError,
    PropertiesParseError,
    ResourceNotFoundError,
)
from .core.interfaces.bots import BotDefinition
from .infrastructure.config.properties import Properties
from .infrastructure.config.manager import ConfigManager
from .plugins.registry import BotDefinitionRegistry, default_registry
from .plugins.manager import BotDefinitionLoader, LoadReport
from .bootstrap import (
    load_configuration_file,
    get_configuration,
    set_configuration,
    get_config_manager,
    set_config_manager,
    load_bot_definitions,
)

__all__ = [
    "BotMillError",
    "BotMillConfigurationError",
    "PropertiesParseError",
    "ResourceNotFoundError",
    "BotDefinition",
    "Properties",
    "ConfigManager",
    "BotDefinitionRegistry",
    "default_registry",
    "BotDefinitionLoader",
    "LoadReport",
    "load_configuration_file",
    "get_configuration",
    "set_configuration",
    "get_config_manager",
    "set_config_manager",
    "load_bot_definitions",
]
