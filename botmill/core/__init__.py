"""
Core layer containing the bot definition contract and the exception hierarchy.

Nothing in this layer depends on the infrastructure or plugin layers.
"""

from .exceptions import (
    BotMillError,
    BotMillConfigurationError,
    PropertiesParseError,
    ResourceNotFoundError,
)
from .interfaces.bots import BotDefinition

__all__ = [
    "BotMillError",
    "BotMillConfigurationError",
    "PropertiesParseError",
    "ResourceNotFoundError",
    "BotDefinition",
]
