"""Search planning across multiple indexers."""

from searcharr.core.search.planner import (
    IndexerDefinition,
    PlannedRequest,
    SearchPlan,
    SearchPlanner,
    SkippedIndexer,
)

__all__ = [
    "IndexerDefinition",
    "PlannedRequest",
    "SearchPlan",
    "SearchPlanner",
    "SkippedIndexer",
]
