"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from searcharr.core.indexers.models import IndexerConfig
from searcharr.core.indexers.profiles import (
    NEWZNAB_FAMILY,
    TORZNAB_FAMILY,
    CapabilityProfile,
    CapabilityRegistry,
    register_builtin_profiles,
)


@pytest.fixture(scope="session", autouse=True)
def builtin_families() -> None:
    """Register the built-in families in the process-wide registry once."""
    register_builtin_profiles()


@pytest.fixture
def registry() -> CapabilityRegistry:
    """A fresh registry with the built-in families, isolated from other tests."""
    return register_builtin_profiles(CapabilityRegistry())


@pytest.fixture
def newznab(registry: CapabilityRegistry) -> CapabilityProfile:
    return registry.lookup(NEWZNAB_FAMILY)


@pytest.fixture
def torznab(registry: CapabilityRegistry) -> CapabilityProfile:
    return registry.lookup(TORZNAB_FAMILY)


@pytest.fixture
def valid_config() -> IndexerConfig:
    """A Newznab config that passes every constraint."""
    return IndexerConfig(
        base_url="https://indexer.example.com",
        api_path="/api",
        api_key="abc123",
        categories=[5030, 5040],
        additional_parameters="&maxage=30",
    )
