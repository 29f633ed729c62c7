"""Capability profiles for indexer families and the process-wide registry.

A profile holds the static knowledge about one family of indexers (Newznab,
Torznab, ...): default categories, default API path, which hosts require an
API key, and the constraint set used to validate its configs. Profiles are
registered once at startup and only read afterwards.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Literal

import structlog
from pydantic import BaseModel

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
from searcharr.core.indexers.errors import DuplicateFamilyError, ProgrammerError, UnknownFamilyError
from searcharr.core.indexers.models import IndexerConfig, TorznabExtension

logger = structlog.get_logger("searcharr.indexers.profiles")

NEWZNAB_FAMILY = "newznab"
TORZNAB_FAMILY = "torznab"

# Hosts known to reject requests without an API key
NEWZNAB_API_KEY_HOSTS = (
    "nzbs.org",
    "nzb.su",
    "dognzb.cr",
    "nzbplanet.net",
    "nzbid.org",
    "nzbndx.com",
    "nzbindex.in",
)

DEFAULT_CATEGORIES = (6000, 6010, 6020, 6030, 6040, 6045, 6050, 6070, 6080, 6090)

ALL_SEARCH_TYPES = frozenset({"search", "tvsearch", "movie"})

# One or more "&key=value" groups
ADDITIONAL_PARAMETERS_RE = re.compile(r"(?:&[^&=]+=[^&]+)+")

# Standard Newznab category IDs (also used by Torznab/Prowlarr/Jackett)
NEWZNAB_CATEGORIES: dict[int, str] = {
    1000: "Console",
    1010: "Console/NDS",
    1020: "Console/PSP",
    1030: "Console/Wii",
    1040: "Console/XBox",
    1050: "Console/XBox 360",
    1060: "Console/Wiiware",
    1070: "Console/XBox 360 DLC",
    1080: "Console/PS3",
    1090: "Console/Other",
    2000: "Movies",
    2010: "Movies/Foreign",
    2020: "Movies/Other",
    2030: "Movies/SD",
    2040: "Movies/HD",
    2045: "Movies/UHD",
    2050: "Movies/BluRay",
    2060: "Movies/3D",
    2070: "Movies/DVD",
    2080: "Movies/WEB-DL",
    3000: "Audio",
    3010: "Audio/MP3",
    3020: "Audio/Video",
    3030: "Audio/Audiobook",
    3040: "Audio/Lossless",
    3050: "Audio/Other",
    3060: "Audio/Foreign",
    4000: "PC",
    4010: "PC/0day",
    4020: "PC/ISO",
    4030: "PC/Mac",
    4040: "PC/Mobile-Other",
    4050: "PC/Games",
    4060: "PC/Mobile-iOS",
    4070: "PC/Mobile-Android",
    5000: "TV",
    5010: "TV/WEB-DL",
    5020: "TV/Foreign",
    5030: "TV/SD",
    5040: "TV/HD",
    5045: "TV/UHD",
    5050: "TV/Other",
    5060: "TV/Sport",
    5070: "TV/Anime",
    5080: "TV/Documentary",
    6000: "XXX",
    6010: "XXX/DVD",
    6020: "XXX/WMV",
    6030: "XXX/XviD",
    6040: "XXX/x264",
    6045: "XXX/UHD",
    6050: "XXX/Pack",
    6060: "XXX/ImageSet",
    6070: "XXX/Other",
    6080: "XXX/SD",
    6090: "XXX/WEB-DL",
    7000: "Books",
    7010: "Books/Mags",
    7020: "Books/EBook",
    7030: "Books/Comics",
    7040: "Books/Technical",
    7050: "Books/Other",
    7060: "Books/Foreign",
    8000: "Other",
    8010: "Other/Misc",
    8020: "Other/Hashed",
}


def category_name(category_id: int) -> str | None:
    """Name of a standard category, falling back to its parent for custom sub-IDs."""
    name = NEWZNAB_CATEGORIES.get(category_id)
    if name is None and category_id % 1000:
        parent = NEWZNAB_CATEGORIES.get(category_id - category_id % 1000)
        if parent is not None:
            return f"{parent}/Other"
    return name


def normalize_hosts(hosts: Iterable[str]) -> frozenset[str]:
    """Lower-case whitelist tokens and drop blank ones.

    A blank token would be a substring of every URL.
    """
    return frozenset(host.strip().lower() for host in hosts if host and host.strip())


def should_have_api_key(base_url: str | None, api_key_hosts: Iterable[str]) -> bool:
    """Check whether the base URL belongs to a host that requires an API key.

    This is a case-insensitive substring test against the whole URL, not a
    host comparison: a token anywhere in the path or query also matches.
    """
    if not base_url:
        return False
    url = base_url.lower()
    return any(host in url for host in normalize_hosts(api_key_hosts))


@dataclass(frozen=True)
class CapabilityProfile:
    """Static capabilities of one indexer family."""

    family_id: str
    name: str
    protocol: Literal["usenet", "torrent"]
    constraints: FieldConstraintSet
    default_categories: tuple[int, ...] = ()
    default_api_path: str = "/api"
    api_key_hosts: frozenset[str] = field(default_factory=frozenset)
    requires_categories: bool = True
    search_types: frozenset[str] = ALL_SEARCH_TYPES
    extension_type: type[BaseModel] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "default_categories", tuple(self.default_categories))
        object.__setattr__(self, "api_key_hosts", normalize_hosts(self.api_key_hosts))
        object.__setattr__(self, "search_types", frozenset(self.search_types))

    def should_have_api_key(self, base_url: str | None) -> bool:
        return should_have_api_key(base_url, self.api_key_hosts)

    def create_config(self, **fields: Any) -> IndexerConfig:
        """Create a config for this family with the family defaults applied.

        Explicitly passed fields (including empty ones) are kept as given.
        """
        fields.setdefault("api_path", self.default_api_path)
        fields.setdefault("categories", self.default_categories)
        if self.extension_type is not None:
            fields.setdefault("extension", self.extension_type())
        return IndexerConfig(**fields)


def build_newznab_constraints(
    api_key_hosts: Iterable[str],
    extension_type: type[BaseModel] | None = None,
    extra: Iterable[FieldConstraint] = (),
    api_path_example: str = "/api",
) -> FieldConstraintSet:
    """Build the constraint set shared by all Newznab-style families.

    Args:
        api_key_hosts: Hosts for which an API key is mandatory
        extension_type: Extension record the family composes with the base config
        extra: Family-specific constraints appended after the shared ones
        api_path_example: Example path shown in the API path message

    Returns:
        FieldConstraintSet in reporting order
    """
    hosts = normalize_hosts(api_key_hosts)
    constraints: list[FieldConstraint] = [
        NonEmptyCollection("categories", "'Categories' must be provided"),
        Required("base_url", "'URL' must not be empty"),
        RootUrl("base_url", "'URL' must be a valid URL starting with http:// or https://"),
        Required("api_path", "'API Path' must not be empty"),
        UrlPath("api_path", f"'API Path' must be a valid URL path (ie: '{api_path_example}')"),
        ConditionalRequired(
            "api_key",
            "'API Key' is required by this indexer",
            predicate=lambda config: should_have_api_key(config.base_url, hosts),
        ),
        Pattern(
            "additional_parameters",
            "'Additional Parameters' must be one or more '&key=value' pairs",
            pattern=ADDITIONAL_PARAMETERS_RE,
        ),
    ]
    constraints.extend(extra)
    return FieldConstraintSet(constraints, extension_type=extension_type)


def newznab_profile(extra_api_key_hosts: Iterable[str] = ()) -> CapabilityProfile:
    """Profile for Newznab (usenet) indexers."""
    hosts = normalize_hosts(NEWZNAB_API_KEY_HOSTS) | normalize_hosts(extra_api_key_hosts)
    return CapabilityProfile(
        family_id=NEWZNAB_FAMILY,
        name="Newznab",
        protocol="usenet",
        constraints=build_newznab_constraints(hosts),
        default_categories=DEFAULT_CATEGORIES,
        api_key_hosts=hosts,
    )


def torznab_profile() -> CapabilityProfile:
    """Profile for Torznab (torrent) indexers, e.g. Jackett or Prowlarr feeds."""
    seeders = Check(
        "minimum_seeders",
        "'Minimum Seeders' must be greater than or equal to 0",
        predicate=lambda value: value >= 0,
    )
    return CapabilityProfile(
        family_id=TORZNAB_FAMILY,
        name="Torznab",
        protocol="torrent",
        constraints=build_newznab_constraints(
            (), extension_type=TorznabExtension, extra=[seeders]
        ),
        default_categories=DEFAULT_CATEGORIES,
        extension_type=TorznabExtension,
    )


class CapabilityRegistry:
    """Family ID -> CapabilityProfile lookup.

    Populated at startup, read-only afterwards; concurrent reads need no locking.
    """

    def __init__(self) -> None:
        self._profiles: dict[str, CapabilityProfile] = {}

    def __contains__(self, family_id: object) -> bool:
        return family_id in self._profiles

    def register(self, family_id: str, profile: CapabilityProfile) -> None:
        """Register a profile.

        Raises:
            ProgrammerError: family_id does not match the profile
            DuplicateFamilyError: The family is already registered
        """
        if family_id != profile.family_id:
            raise ProgrammerError(
                f"Family ID {family_id!r} does not match profile family {profile.family_id!r}"
            )
        if family_id in self._profiles:
            raise DuplicateFamilyError(family_id)
        self._profiles[family_id] = profile
        logger.debug(
            "Registered indexer family",
            family=family_id,
            protocol=profile.protocol,
            constraints=len(profile.constraints),
        )

    def lookup(self, family_id: str) -> CapabilityProfile:
        try:
            return self._profiles[family_id]
        except KeyError:
            raise UnknownFamilyError(family_id) from None

    def families(self) -> tuple[str, ...]:
        return tuple(self._profiles)


_registry = CapabilityRegistry()


def get_registry() -> CapabilityRegistry:
    """Get the process-wide registry."""
    return _registry


def register_capability_profile(family_id: str, profile: CapabilityProfile) -> None:
    _registry.register(family_id, profile)


def lookup_capability_profile(family_id: str) -> CapabilityProfile:
    return _registry.lookup(family_id)


def register_builtin_profiles(
    registry: CapabilityRegistry | None = None,
    extra_api_key_hosts: Iterable[str] = (),
) -> CapabilityRegistry:
    """Register the built-in families that are not registered yet.

    Args:
        registry: Registry to populate (defaults to the process-wide one)
        extra_api_key_hosts: Additional hosts requiring an API key (Newznab only)

    Returns:
        The populated registry
    """
    if registry is None:
        registry = _registry
    for profile in (newznab_profile(extra_api_key_hosts), torznab_profile()):
        if profile.family_id in registry:
            logger.debug("Indexer family already registered, skipping", family=profile.family_id)
            continue
        registry.register(profile.family_id, profile)
    return registry
