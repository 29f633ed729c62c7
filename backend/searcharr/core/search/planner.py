"""Plan a search across several indexers.

The planner validates every enabled indexer and builds its outbound request.
Indexers that fail validation or cannot produce a usable request are skipped
and reported, so one broken indexer never aborts the whole search.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Literal

import structlog
from pydantic import BaseModel, ConfigDict, Field

from searcharr.core.indexers.errors import ConfigurationError
from searcharr.core.indexers.models import IndexerConfig, RequestDescriptor, SearchRequest
from searcharr.core.indexers.profiles import CapabilityRegistry, get_registry
from searcharr.core.indexers.query import QueryBuilder
from searcharr.core.indexers.validation import ConfigValidator
from searcharr.core.tracing import trace_context

logger = structlog.get_logger("searcharr.search.planner")


class IndexerDefinition(BaseModel):
    """A configured indexer as handed over by the persistence layer."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Display name of the indexer")
    family_id: str = Field(..., description="Indexer family (e.g. 'newznab', 'torznab')")
    config: IndexerConfig = Field(..., description="Family-specific configuration")
    enabled: bool = Field(default=True, description="Whether this indexer is searched")
    priority: int = Field(default=0, description="Priority (lower = searched first)")


class PlannedRequest(BaseModel):
    indexer_name: str
    descriptor: RequestDescriptor


class SkippedIndexer(BaseModel):
    """An indexer left out of the search, and why."""

    indexer_name: str
    reason: Literal["invalid", "configuration_error"]
    message: str
    failures: dict[str, list[str]] = Field(default_factory=dict)


class SearchPlan(BaseModel):
    trace_id: str
    requests: list[PlannedRequest] = Field(default_factory=list)
    skipped: list[SkippedIndexer] = Field(default_factory=list)


class SearchPlanner:
    """Validate indexers and build one request per usable indexer."""

    def __init__(
        self,
        registry: CapabilityRegistry | None = None,
        builder: QueryBuilder | None = None,
    ) -> None:
        """Initialize the planner.

        Args:
            registry: Capability registry (defaults to the process-wide one)
            builder: Query builder (defaults to one with the default page size)
        """
        self.registry = registry if registry is not None else get_registry()
        self.builder = builder or QueryBuilder()

    def plan(
        self,
        indexers: Iterable[IndexerDefinition],
        request: SearchRequest,
        trace_id: str | None = None,
    ) -> SearchPlan:
        """Build requests for every enabled, usable indexer.

        Indexers are processed by priority, then name. An unknown family is a
        deployment bug and raises UnknownFamilyError instead of being skipped.

        Args:
            indexers: Configured indexers
            request: Search to perform
            trace_id: Trace ID for the run (generated when None)

        Returns:
            SearchPlan with the built requests and the skipped indexers
        """
        with trace_context(trace_id) as run_trace_id:
            plan = SearchPlan(trace_id=run_trace_id)
            enabled = sorted(
                (indexer for indexer in indexers if indexer.enabled),
                key=lambda indexer: (indexer.priority, indexer.name),
            )
            if not enabled:
                logger.warning("No enabled indexers found")
                return plan

            for indexer in enabled:
                profile = self.registry.lookup(indexer.family_id)
                result = ConfigValidator(profile).validate(indexer.config)
                if not result.is_valid:
                    logger.warning(
                        "Skipping indexer with invalid configuration",
                        indexer=indexer.name,
                        family=indexer.family_id,
                        fields=list(result.fields),
                    )
                    plan.skipped.append(
                        SkippedIndexer(
                            indexer_name=indexer.name,
                            reason="invalid",
                            message="Indexer configuration is invalid",
                            failures=result.as_dict(),
                        )
                    )
                    continue

                try:
                    descriptor = self.builder.build(indexer.config, profile, request)
                except ConfigurationError as e:
                    logger.warning(
                        "Skipping unusable indexer",
                        indexer=indexer.name,
                        family=indexer.family_id,
                        error=str(e),
                    )
                    plan.skipped.append(
                        SkippedIndexer(
                            indexer_name=indexer.name,
                            reason="configuration_error",
                            message=str(e),
                        )
                    )
                    continue

                plan.requests.append(PlannedRequest(indexer_name=indexer.name, descriptor=descriptor))

            logger.info(
                "Search planned",
                search_type=request.search_type,
                requests=len(plan.requests),
                skipped=len(plan.skipped),
            )
            return plan
