"""
Shared test fixtures for the uriroute test suite.
"""

import pytest

from uriroute import PatternRegistry, RouterConfig
from uriroute.cache import set_global_cache


@pytest.fixture(autouse=True)
def _fresh_global_cache():
    """Every test starts without a global pattern cache."""
    set_global_cache(None)
    yield
    set_global_cache(None)


@pytest.fixture
def registry():
    """An empty registry with default settings."""
    return PatternRegistry(RouterConfig())
