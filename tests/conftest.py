"""Test configuration and fixtures."""

import pytest

from tether.config import Settings


@pytest.fixture
def settings() -> Settings:
    """Settings for tests that build services by hand."""
    return Settings(environment="test")
