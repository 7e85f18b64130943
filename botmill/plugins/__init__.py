"""
Bot definition discovery and activation.

This module provides the registry that collects bot definitions and the
loader that activates them at startup.
"""

from .registry import BotDefinitionRegistry, default_registry
from .manager import BotDefinitionLoader, LoadReport

__all__ = [
    "BotDefinitionRegistry",
    "default_registry",
    "BotDefinitionLoader",
    "LoadReport",
]
