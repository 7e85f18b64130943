"""
Extension point interfaces.

Bot modules implement these contracts to be discovered and activated
at application startup.
"""

from .bots import BotDefinition

__all__ = [
    "BotDefinition",
]
