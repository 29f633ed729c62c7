"""Validation result types."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class ValidationFailure:
    """A single violated constraint."""

    field: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one indexer config.

    Created fresh per validation call. ``failures`` keeps the order in which
    the constraints were declared.
    """

    is_valid: bool
    failures: tuple[ValidationFailure, ...] = ()

    @classmethod
    def from_failures(cls, failures: Iterable[ValidationFailure]) -> ValidationResult:
        failures = tuple(failures)
        return cls(is_valid=not failures, failures=failures)

    @property
    def fields(self) -> tuple[str, ...]:
        """Names of the fields that failed, in order, without duplicates."""
        return tuple(dict.fromkeys(failure.field for failure in self.failures))

    def failures_for(self, field: str) -> tuple[ValidationFailure, ...]:
        return tuple(failure for failure in self.failures if failure.field == field)

    def as_dict(self) -> dict[str, list[str]]:
        """Group failure messages by field (for API error payloads).

        Returns:
            Dict mapping field name to the list of its messages
        """
        grouped: dict[str, list[str]] = {}
        for failure in self.failures:
            grouped.setdefault(failure.field, []).append(failure.message)
        return grouped
