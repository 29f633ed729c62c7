"""Declarative field constraints for indexer configs.

Each constraint checks a single field and carries the message shown to the user
when it fails. A ``FieldConstraintSet`` evaluates every constraint of a family
against a config and collects all failures, so a settings form can show every
problem at once.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

from pydantic import BaseModel

from searcharr.core.indexers.errors import UnknownFieldError
from searcharr.core.indexers.models import IndexerConfig
from searcharr.core.indexers.results import ValidationFailure

ConfigPredicate = Callable[[IndexerConfig], bool]

_URL_PATH_RE = re.compile(r"^/[^\s?#]*$")
_URL_PATH_SCHEME_RE = re.compile(r"^/?[a-z][a-z0-9+.-]*://", re.IGNORECASE)


def is_blank(value: Any) -> bool:
    """True for None and for strings that are empty or whitespace only."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def is_valid_root_url(value: str | None) -> bool:
    """Check that value is an absolute http(s) URL with a host.

    A path is allowed (reverse proxies, e.g. https://host/prowlarr/1), a
    query string or fragment is not.
    """
    if is_blank(value) or any(ch.isspace() for ch in value):
        return False
    try:
        parts = urlsplit(value)
        parts.port  # raises ValueError for a malformed port
    except ValueError:
        return False
    return (
        parts.scheme.lower() in ("http", "https")
        and bool(parts.hostname)
        and not parts.query
        and not parts.fragment
    )


def is_valid_url_path(value: str | None) -> bool:
    """Check that value looks like '/api': rooted, no scheme, no query or fragment."""
    if is_blank(value):
        return False
    if value.startswith("//") or _URL_PATH_SCHEME_RE.match(value):
        return False
    return bool(_URL_PATH_RE.match(value))


@dataclass(frozen=True)
class FieldConstraint(ABC):
    """Base constraint: a field name and the message reported on failure."""

    field: str
    message: str

    @abstractmethod
    def is_satisfied(self, value: Any, config: IndexerConfig) -> bool:
        """Return True when value (read from config) passes this constraint."""


@dataclass(frozen=True)
class Required(FieldConstraint):
    def is_satisfied(self, value: Any, config: IndexerConfig) -> bool:
        return not is_blank(value)


@dataclass(frozen=True)
class ConditionalRequired(FieldConstraint):
    """Required only when the predicate over the whole config holds."""

    predicate: ConfigPredicate

    def is_satisfied(self, value: Any, config: IndexerConfig) -> bool:
        if not self.predicate(config):
            return True
        return not is_blank(value)


@dataclass(frozen=True)
class Pattern(FieldConstraint):
    """The whole value, surrounding whitespace ignored, must match the regex.

    Blank values are not checked.
    """

    pattern: re.Pattern[str]

    def is_satisfied(self, value: Any, config: IndexerConfig) -> bool:
        if is_blank(value):
            return True
        return self.pattern.fullmatch(str(value).strip()) is not None


@dataclass(frozen=True)
class NonEmptyCollection(FieldConstraint):
    def is_satisfied(self, value: Any, config: IndexerConfig) -> bool:
        return value is not None and len(value) > 0


@dataclass(frozen=True)
class RootUrl(FieldConstraint):
    def is_satisfied(self, value: Any, config: IndexerConfig) -> bool:
        return is_blank(value) or is_valid_root_url(value)


@dataclass(frozen=True)
class UrlPath(FieldConstraint):
    def is_satisfied(self, value: Any, config: IndexerConfig) -> bool:
        return is_blank(value) or is_valid_url_path(value)


@dataclass(frozen=True)
class Check(FieldConstraint):
    """Arbitrary check of a field value. Missing (None) values are skipped."""

    predicate: Callable[[Any], bool]

    def is_satisfied(self, value: Any, config: IndexerConfig) -> bool:
        return value is None or self.predicate(value)


class FieldConstraintSet:
    """Ordered, immutable collection of constraints for one indexer family."""

    def __init__(
        self,
        constraints: Iterable[FieldConstraint],
        extension_type: type[BaseModel] | None = None,
    ) -> None:
        """Create the set and check every referenced field exists.

        Args:
            constraints: Constraints in evaluation (and reporting) order
            extension_type: Extension record whose fields constraints may also reference

        Raises:
            UnknownFieldError: A constraint names a field the config schema lacks
        """
        self._constraints = tuple(constraints)
        self._extension_type = extension_type
        for constraint in self._constraints:
            self._check_field(constraint.field)

    def __iter__(self) -> Iterator[FieldConstraint]:
        return iter(self._constraints)

    def __len__(self) -> int:
        return len(self._constraints)

    @property
    def extension_type(self) -> type[BaseModel] | None:
        return self._extension_type

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(dict.fromkeys(constraint.field for constraint in self._constraints))

    def _check_field(self, field: str) -> None:
        if field in IndexerConfig.model_fields:
            return
        if self._extension_type is not None and field in self._extension_type.model_fields:
            return
        raise UnknownFieldError(field)

    def resolve(self, config: IndexerConfig, field: str) -> Any:
        """Read a field from the config or from its extension record."""
        self._check_field(field)
        if field in IndexerConfig.model_fields:
            return getattr(config, field)
        if isinstance(config.extension, self._extension_type):
            return getattr(config.extension, field)
        return None

    def evaluate(self, config: IndexerConfig) -> list[ValidationFailure]:
        # No early exit: every constraint is checked independently.
        failures: list[ValidationFailure] = []
        for constraint in self._constraints:
            value = self.resolve(config, constraint.field)
            if not constraint.is_satisfied(value, config):
                failures.append(ValidationFailure(field=constraint.field, message=constraint.message))
        return failures
