"""Exceptions raised by the indexer core.

Validation failures are never raised; they are returned as data in a
``ValidationResult``. The exceptions below signal that a call did not complete.
"""

from __future__ import annotations


class IndexerCoreError(Exception):
    """Base class for indexer core errors."""


class ConfigurationError(IndexerCoreError, ValueError):
    """A validated configuration cannot produce a usable request.

    The indexer should be skipped for the current search, not the whole run.
    """

    def __init__(self, message: str, family_id: str | None = None) -> None:
        super().__init__(message)
        self.family_id = family_id


class ProgrammerError(IndexerCoreError, RuntimeError):
    """A bug in constraint or family definitions."""


class UnknownFieldError(ProgrammerError):
    """A constraint references a field that does not exist in the config schema."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Unknown indexer config field: {field!r}")
        self.field = field


class UnknownFamilyError(ProgrammerError, LookupError):
    """No capability profile is registered for the requested family."""

    def __init__(self, family_id: str) -> None:
        super().__init__(f"No capability profile registered for indexer family {family_id!r}")
        self.family_id = family_id


class DuplicateFamilyError(ProgrammerError):
    """A capability profile was registered twice for the same family."""

    def __init__(self, family_id: str) -> None:
        super().__init__(f"Capability profile already registered for indexer family {family_id!r}")
        self.family_id = family_id
