"""
Logging infrastructure for the application.

This module provides centralized logging configuration for BotMill
and the bot definitions it activates.
"""

from .setup import setup_logging, InterceptHandler

__all__ = [
    "setup_logging",
    "InterceptHandler",
]
