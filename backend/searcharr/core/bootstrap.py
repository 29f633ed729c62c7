"""Process start-up: logging and indexer family registration."""

from __future__ import annotations

import structlog

from searcharr.core.config import Settings, get_settings
from searcharr.core.indexers.profiles import CapabilityRegistry, register_builtin_profiles
from searcharr.core.logging import setup_logging

logger = structlog.get_logger("searcharr.bootstrap")


def bootstrap(
    settings: Settings | None = None,
    registry: CapabilityRegistry | None = None,
) -> CapabilityRegistry:
    """Configure logging and register the built-in indexer families.

    Call once at process start, before any validation or search runs.

    Args:
        settings: Settings to use (defaults to the cached settings)
        registry: Registry to populate (defaults to the process-wide one)

    Returns:
        The populated registry
    """
    if settings is None:
        settings = get_settings()

    setup_logging(debug=settings.is_debug, logs_dir=settings.logs_dir)
    registry = register_builtin_profiles(registry, extra_api_key_hosts=settings.extra_api_key_hosts)
    logger.info(
        "Indexer families registered",
        families=list(registry.families()),
        extra_api_key_hosts=settings.extra_api_key_hosts,
    )
    return registry
