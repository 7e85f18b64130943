"""
Configuration store management.

The ConfigManager owns one configuration store and reloads it from the
configuration resource. Load failures are logged and never propagated.
"""

import logging
from typing import Optional

from .loader import CONFIG_PATH, ConfigLoader
from .properties import Properties

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Holder of the BotMill configuration store.

    A manager is constructed once at startup and handed to the components
    that need configuration.
    """

    def __init__(
        self,
        loader: Optional[ConfigLoader] = None,
        config_path: str = CONFIG_PATH,
        configuration: Optional[Properties] = None
    ) -> None:
        self._loader = loader or ConfigLoader()
        self._config_path = config_path
        self._configuration = configuration if configuration is not None else Properties()

    @property
    def config_path(self) -> str:
        """Get the name of the configuration resource."""
        return self._config_path

    @property
    def loader(self) -> ConfigLoader:
        """Get the resource loader."""
        return self._loader

    @property
    def configuration(self) -> Properties:
        """Get the current configuration store."""
        return self._configuration

    def get_configuration(self) -> Properties:
        """Get the current configuration store."""
        return self._configuration

    def set_configuration(self, configuration: Properties) -> None:
        """Replace the current configuration store."""
        self._configuration = configuration

    def load_configuration_file(self) -> bool:
        """
        Load the configuration resource, replacing the current store.

        On any failure the error is logged and the current store is left
        untouched.

        Returns:
            True if the store was replaced
        """
        try:
            configuration = self._loader.load(self._config_path)
        except Exception:
            logger.exception(
                f"Error while loading BotMill properties file ({self._config_path})")
            return False

        self._configuration = configuration
        logger.info(f"Loaded {len(configuration)} properties from {self._config_path}")
        return True

    def get_value(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get a configuration value."""
        return self._configuration.get(key, default)
