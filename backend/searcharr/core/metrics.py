"""Prometheus metrics for the indexer core."""

from __future__ import annotations

from prometheus_client import Counter

# Validation metrics
indexer_validation_runs_total = Counter(
    "indexer_validation_runs_total",
    "Total number of indexer config validations",
    ["family", "outcome"],  # outcome: valid, invalid
)
indexer_validation_failures_total = Counter(
    "indexer_validation_failures_total",
    "Total number of failed indexer config constraints",
    ["family", "field"],
)

# Query building metrics
indexer_requests_built_total = Counter(
    "indexer_requests_built_total",
    "Total number of outbound indexer requests built",
    ["family", "search_type"],  # search_type includes "caps" for capability probes
)
indexer_configuration_errors_total = Counter(
    "indexer_configuration_errors_total",
    "Total number of requests that could not be built from a validated config",
    ["family"],
)
