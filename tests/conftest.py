"""Shared test fixtures."""

import sys

import pytest

from botmill.plugins.registry import PLUGIN_MODULE_PREFIX


@pytest.fixture(autouse=True)
def _isolate_plugin_modules():
    """Drop plugin modules a test loaded so they do not leak into later tests."""
    before = set(sys.modules)
    yield
    for name in set(sys.modules) - before:
        if name == PLUGIN_MODULE_PREFIX or name.startswith(PLUGIN_MODULE_PREFIX + "."):
            sys.modules.pop(name, None)
