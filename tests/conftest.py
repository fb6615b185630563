"""
Pytest configuration and shared fixtures for helper-cache tests.
"""

import io
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from helper_cache import HelperCache  # noqa: E402
from helper_cache.logging import HelperLogger, LogConfig  # noqa: E402
from helper_cache.registry import HelperRegistry  # noqa: E402
from helper_cache.resolver import ResolutionEngine  # noqa: E402
from helper_cache.types import LogLevel  # noqa: E402

# =============================================================================
# Component Fixtures
# =============================================================================


@pytest.fixture
def log_output() -> io.StringIO:
    """Capture log lines."""
    return io.StringIO()


@pytest.fixture
def logger(log_output: io.StringIO) -> HelperLogger:
    """Debug-level logger writing to log_output."""
    return HelperLogger(LogConfig(level=LogLevel.DEBUG, output=log_output))


@pytest.fixture
def resolver() -> ResolutionEngine:
    return ResolutionEngine()


@pytest.fixture
def registry(resolver: ResolutionEngine) -> HelperRegistry:
    return HelperRegistry(resolver)


@pytest.fixture
def cache() -> HelperCache:
    return HelperCache()


# =============================================================================
# Markers Configuration
# =============================================================================


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "property: Property-based tests")
    config.addinivalue_line("markers", "registry: Registry tests")
    config.addinivalue_line("markers", "resolver: Resolution engine tests")
    config.addinivalue_line("markers", "template: Template engine tests")
    config.addinivalue_line("markers", "config: Configuration tests")
