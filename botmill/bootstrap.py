"""
Process-wide bootstrap functions.

Thin module-level facade over one ConfigManager and the default bot
definition registry, for applications that do not wire these explicitly.
No locking is done: call these during startup, before serving traffic.
"""

from typing import Optional

from .infrastructure.config.manager import ConfigManager
from .infrastructure.config.models import DEFAULT_ENTRY_POINT_GROUP
from .infrastructure.config.properties import Properties
from .plugins.manager import BotDefinitionLoader, LoadReport
from .plugins.registry import default_registry

_config_manager = ConfigManager()


def get_config_manager() -> ConfigManager:
    """Get the process-wide configuration manager."""
    return _config_manager


def set_config_manager(config_manager: ConfigManager) -> None:
    """
    Replace the process-wide configuration manager.

    Lets a launcher that searches a custom path publish its store, so bot
    definitions reading ``get_configuration()`` see what it loaded.
    """
    global _config_manager
    _config_manager = config_manager


def load_configuration_file() -> None:
    """
    Load ``botmill.properties`` from the resource search path.

    Failures are logged and the current configuration is kept.
    """
    _config_manager.load_configuration_file()


def get_configuration() -> Properties:
    """Get the process-wide configuration store."""
    return _config_manager.get_configuration()


def set_configuration(configuration: Properties) -> None:
    """Replace the process-wide configuration store."""
    _config_manager.set_configuration(configuration)


def load_bot_definitions(fail_fast: bool = True,
                         entry_point_group: Optional[str] = DEFAULT_ENTRY_POINT_GROUP) -> LoadReport:
    """
    Activate every bot definition known to the default registry.

    Entry points of ``entry_point_group`` are registered first; pass None
    to use self-registered subclasses only.

    Raises:
        BotMillConfigurationError: If a definition fails to load
    """
    if entry_point_group:
        default_registry.load_entry_points(entry_point_group)
    return BotDefinitionLoader(default_registry).load(fail_fast=fail_fast)
