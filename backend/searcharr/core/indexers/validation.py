"""Indexer config validation."""

from __future__ import annotations

import structlog

from searcharr.core.indexers.models import IndexerConfig
from searcharr.core.indexers.profiles import (
    CapabilityProfile,
    CapabilityRegistry,
    lookup_capability_profile,
)
from searcharr.core.indexers.results import ValidationResult
from searcharr.core.metrics import indexer_validation_failures_total, indexer_validation_runs_total

logger = structlog.get_logger("searcharr.indexers.validation")


class ConfigValidator:
    """Validate indexer configs against the constraint set of their family."""

    def __init__(self, profile: CapabilityProfile) -> None:
        self.profile = profile

    @classmethod
    def for_family(
        cls,
        family_id: str,
        registry: CapabilityRegistry | None = None,
    ) -> ConfigValidator:
        """Create a validator for a registered family.

        Raises:
            UnknownFamilyError: The family is not registered
        """
        if registry is not None:
            return cls(registry.lookup(family_id))
        return cls(lookup_capability_profile(family_id))

    def validate(self, config: IndexerConfig) -> ValidationResult:
        """Validate a config and report every failed constraint.

        Malformed values (None, blank strings, empty categories) are reported
        as failures, never raised. Errors in the constraint definitions
        themselves (ProgrammerError) propagate.

        Args:
            config: Config to validate

        Returns:
            ValidationResult with failures in declaration order
        """
        family = self.profile.family_id
        result = ValidationResult.from_failures(self.profile.constraints.evaluate(config))

        indexer_validation_runs_total.labels(
            family=family, outcome="valid" if result.is_valid else "invalid"
        ).inc()
        for failure in result.failures:
            indexer_validation_failures_total.labels(family=family, field=failure.field).inc()

        if not result.is_valid:
            logger.debug(
                "Indexer config failed validation",
                family=family,
                fields=list(result.fields),
                failure_count=len(result.failures),
            )
        return result
