"""
Application layer.

This module wires configuration, logging, and bot definition discovery
into a single startup sequence.
"""

from .startup import ApplicationStartup

__all__ = [
    "ApplicationStartup",
]
