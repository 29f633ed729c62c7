"""Tests for search planning across indexers."""

from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from searcharr.core.indexers.errors import UnknownFamilyError
from searcharr.core.indexers.models import IndexerConfig, SearchRequest
from searcharr.core.indexers.profiles import (
    NEWZNAB_FAMILY,
    TORZNAB_FAMILY,
    CapabilityProfile,
    CapabilityRegistry,
)
from searcharr.core.indexers.query import QueryBuilder
from searcharr.core.search.planner import IndexerDefinition, SearchPlanner


@pytest.fixture
def planner(registry: CapabilityRegistry) -> SearchPlanner:
    return SearchPlanner(registry=registry)


def _indexer(name: str, family_id: str = NEWZNAB_FAMILY, **config) -> IndexerDefinition:
    fields = {"base_url": f"https://{name}.example.com", "categories": [5030], **config}
    return IndexerDefinition(name=name, family_id=family_id, config=IndexerConfig(**fields))


def test_plans_valid_indexers(planner) -> None:
    """Test that every valid indexer gets a request."""
    plan = planner.plan(
        [_indexer("alpha"), _indexer("beta", TORZNAB_FAMILY)],
        SearchRequest(query_text="show"),
    )

    assert [planned.indexer_name for planned in plan.requests] == ["alpha", "beta"]
    assert plan.skipped == []
    assert plan.requests[1].descriptor.family_id == TORZNAB_FAMILY
    assert len(plan.trace_id) == 32


def test_skips_invalid_indexer_and_keeps_the_rest(planner) -> None:
    """Test that an invalid config does not abort the run."""
    broken = _indexer("broken", base_url="https://nzb.su", api_key="")

    plan = planner.plan([broken, _indexer("good")], SearchRequest(query_text="show"))

    assert [planned.indexer_name for planned in plan.requests] == ["good"]
    assert len(plan.skipped) == 1
    skipped = plan.skipped[0]
    assert skipped.indexer_name == "broken"
    assert skipped.reason == "invalid"
    assert list(skipped.failures) == ["api_key"]


def test_skips_indexer_that_cannot_build_request(registry, newznab) -> None:
    """Test that a ConfigurationError while building skips the indexer."""
    registry.register(
        "search-only",
        CapabilityProfile(
            family_id="search-only",
            name="Search only",
            protocol="usenet",
            constraints=newznab.constraints,
            search_types=frozenset({"search"}),
        ),
    )
    planner = SearchPlanner(registry=registry)

    with capture_logs() as logs:
        plan = planner.plan(
            [_indexer("limited", "search-only"), _indexer("full")],
            SearchRequest(search_type="tvsearch", season=1),
        )

    assert [planned.indexer_name for planned in plan.requests] == ["full"]
    assert plan.skipped[0].reason == "configuration_error"
    assert "tvsearch" in plan.skipped[0].message
    assert any(log["event"] == "Skipping unusable indexer" for log in logs)
    warnings = [log for log in logs if log["log_level"] == "warning"]
    assert [log["event"] for log in warnings] == ["Skipping unusable indexer"]


def test_disabled_indexers_and_priority_order(planner) -> None:
    """Test that disabled indexers are ignored and the rest ordered by priority."""
    indexers = [
        _indexer("zulu").model_copy(update={"priority": 0}),
        _indexer("alpha").model_copy(update={"priority": 5}),
        _indexer("off").model_copy(update={"enabled": False}),
        _indexer("mike").model_copy(update={"priority": 0}),
    ]

    plan = planner.plan(indexers, SearchRequest())

    assert [planned.indexer_name for planned in plan.requests] == ["mike", "zulu", "alpha"]


def test_no_enabled_indexers(planner) -> None:
    """Test planning with nothing to search."""
    with capture_logs() as logs:
        plan = planner.plan([], SearchRequest())

    assert plan.requests == []
    assert plan.skipped == []
    assert logs[0]["event"] == "No enabled indexers found"


def test_unknown_family_is_fatal(planner) -> None:
    """Test that an unregistered family fails loudly instead of being skipped."""
    with pytest.raises(UnknownFamilyError):
        planner.plan([_indexer("mystery", "gopher")], SearchRequest())


def test_uses_given_trace_id_and_builder(registry) -> None:
    """Test that the trace ID and builder page size are used."""
    planner = SearchPlanner(registry=registry, builder=QueryBuilder(page_size=10))

    plan = planner.plan([_indexer("alpha")], SearchRequest(), trace_id="run-1")

    assert plan.trace_id == "run-1"
    assert plan.requests[0].descriptor.query_parameters["limit"] == "10"
