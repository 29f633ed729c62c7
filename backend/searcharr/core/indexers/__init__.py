"""Indexer configuration validation, capability profiles and request building."""

from searcharr.core.indexers.constraints import (
    Check,
    ConditionalRequired,
    FieldConstraint,
    FieldConstraintSet,
    NonEmptyCollection,
    Pattern,
    Required,
    RootUrl,
    UrlPath,
)
from searcharr.core.indexers.errors import (
    ConfigurationError,
    DuplicateFamilyError,
    IndexerCoreError,
    ProgrammerError,
    UnknownFamilyError,
    UnknownFieldError,
)
from searcharr.core.indexers.models import (
    IndexerConfig,
    RequestDescriptor,
    SearchRequest,
    TorznabExtension,
)
from searcharr.core.indexers.profiles import (
    NEWZNAB_FAMILY,
    TORZNAB_FAMILY,
    CapabilityProfile,
    CapabilityRegistry,
    lookup_capability_profile,
    register_builtin_profiles,
    register_capability_profile,
)
from searcharr.core.indexers.query import QueryBuilder, parse_additional_parameters
from searcharr.core.indexers.results import ValidationFailure, ValidationResult
from searcharr.core.indexers.validation import ConfigValidator

__all__ = [
    "CapabilityProfile",
    "CapabilityRegistry",
    "Check",
    "ConditionalRequired",
    "ConfigValidator",
    "ConfigurationError",
    "DuplicateFamilyError",
    "FieldConstraint",
    "FieldConstraintSet",
    "IndexerConfig",
    "IndexerCoreError",
    "NEWZNAB_FAMILY",
    "NonEmptyCollection",
    "Pattern",
    "ProgrammerError",
    "QueryBuilder",
    "RequestDescriptor",
    "Required",
    "RootUrl",
    "SearchRequest",
    "TORZNAB_FAMILY",
    "TorznabExtension",
    "UnknownFamilyError",
    "UnknownFieldError",
    "UrlPath",
    "ValidationFailure",
    "ValidationResult",
    "lookup_capability_profile",
    "parse_additional_parameters",
    "register_builtin_profiles",
    "register_capability_profile",
]
