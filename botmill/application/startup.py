"""
Application startup logic.

This module runs the BotMill bootstrap in order: load the configuration
resource, derive the bootstrap settings, configure logging, gather bot
definitions from every discovery source and activate them.
"""

import logging
from dataclasses import replace
from typing import Iterable, List, Mapping, Optional

from ..bootstrap import get_config_manager
from ..infrastructure.config.manager import ConfigManager
from ..infrastructure.config.models import ApplicationConfig
from ..infrastructure.logging.setup import setup_logging
from ..plugins.manager import BotDefinitionLoader, LoadReport
from ..plugins.registry import BotDefinitionRegistry, default_registry

logger = logging.getLogger(__name__)


class ApplicationStartup:
    """
    Manages the BotMill startup sequence.

    Without an explicit configuration manager the process-wide one from
    ``botmill.bootstrap`` is used, so bot definitions calling
    ``get_configuration()`` read the store loaded here. Pass a private
    manager only when no definition reads the process-wide store.

    A private registry only isolates discovery. Subclasses still register
    themselves with the default registry when their module is imported, so
    a later ``load_bot_definitions()`` in the same process activates them
    again.
    """

    def __init__(
        self,
        config_manager: Optional[ConfigManager] = None,
        registry: Optional[BotDefinitionRegistry] = None,
        environ: Optional[Mapping[str, str]] = None
    ) -> None:
        self._config_manager = config_manager if config_manager is not None else get_config_manager()
        self._registry = registry if registry is not None else default_registry
        self._environ = environ
        self._config: Optional[ApplicationConfig] = None

    @property
    def config(self) -> Optional[ApplicationConfig]:
        """Get the settings derived by the last ``configure()`` call."""
        return self._config

    def configure(self, log_level: Optional[str] = None, configure_logging: bool = True) -> ApplicationConfig:
        """
        Load the configuration resource and derive bootstrap settings.

        A missing or malformed resource is logged and leaves the current
        store in place.

        Args:
            log_level: Log level overriding the configured one
            configure_logging: Install the logging sinks

        Returns:
            Derived application configuration

        Raises:
            ValueError: If a ``botmill.*`` setting is invalid
        """
        self._config_manager.load_configuration_file()

        config = ApplicationConfig.from_properties(
            self._config_manager.get_configuration(), self._environ)
        if log_level:
            config.logging = replace(config.logging, level=log_level)

        if configure_logging:
            setup_logging(config.logging)

        self._config = config
        return config

    def discover(
        self,
        packages: Iterable[str] = (),
        plugin_directories: Iterable[str] = ()
    ) -> List[str]:
        """
        Feed the registry from every configured discovery source.

        Entry points are loaded first, then packages, then plugin
        directories. Extra packages and directories are scanned after the
        configured ones.

        Returns:
            Names of the modules, files and entry points that were loaded

        Raises:
            BotMillConfigurationError: If any source fails to load
        """
        discovery = (self._config or ApplicationConfig()).discovery
        sources: List[str] = []

        sources.extend(self._registry.load_entry_points(discovery.entry_point_group))

        for package_name in [*discovery.packages, *packages]:
            sources.extend(self._registry.scan_package(package_name))

        for directory in [*discovery.plugin_directories, *plugin_directories]:
            sources.extend(self._registry.scan_directory(directory))

        return sources

    def start(
        self,
        packages: Iterable[str] = (),
        plugin_directories: Iterable[str] = (),
        fail_fast: Optional[bool] = None,
        log_level: Optional[str] = None,
        configure_logging: bool = True
    ) -> LoadReport:
        """
        Run the whole bootstrap.

        Args:
            packages: Extra packages to scan
            plugin_directories: Extra plugin directories to scan
            fail_fast: Override the configured failure policy
            log_level: Log level overriding the configured one
            configure_logging: Install the logging sinks

        Returns:
            Report of activated bot definitions

        Raises:
            BotMillConfigurationError: If discovery or activation fails
        """
        config = self.configure(log_level=log_level, configure_logging=configure_logging)
        logger.info(f"Starting BotMill with configuration {self._config_manager.config_path}")

        self.discover(packages, plugin_directories)

        if fail_fast is None:
            fail_fast = config.discovery.fail_fast

        report = BotDefinitionLoader(self._registry).load(fail_fast=fail_fast)
        logger.info("BotMill startup completed successfully")
        return report
