"""Pydantic models for indexer configuration, search requests and request descriptors."""

from __future__ import annotations

from typing import Literal

import httpx
from pydantic import BaseModel, ConfigDict, Field

SearchType = Literal["search", "tvsearch", "movie"]

API_KEY_PARAM = "apikey"
REDACTED = "***"


class TorznabExtension(BaseModel):
    """Torrent-family fields composed alongside the base indexer config."""

    model_config = ConfigDict(frozen=True)

    minimum_seeders: int = Field(
        default=1, description="Minimum number of seeders required before grabbing a release"
    )


# Extension records a family can compose with IndexerConfig. Only the torrent
# family has one; a new family record joins this alias as a union member.
IndexerExtension = TorznabExtension


class IndexerConfig(BaseModel):
    """User-supplied configuration of a single Newznab-style indexer.

    Instances are read-only; use ``model_copy(update=...)`` to edit one.
    Blank or missing values are legal here and are reported by the validator.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str | None = Field(default=None, description="Root URL of the indexer")
    api_path: str | None = Field(default="/api", description="Path to the API, usually /api")
    api_key: str | None = Field(default=None, description="API key for the indexer")
    categories: frozenset[int] = Field(
        default_factory=frozenset, description="Category IDs to search"
    )
    additional_parameters: str | None = Field(
        default=None, description="Extra query parameters, e.g. '&sort=date&maxage=30'"
    )
    extension: IndexerExtension | None = Field(
        default=None, description="Family-specific extension record"
    )


class SearchRequest(BaseModel):
    """A generic search, independent of any indexer."""

    model_config = ConfigDict(frozen=True)

    query_text: str | None = Field(default=None, description="Free text query")
    categories: frozenset[int] = Field(
        default_factory=frozenset, description="Categories to search (empty = indexer defaults)"
    )
    search_type: SearchType = Field(default="search", description="Newznab search function")
    season: int | None = Field(default=None, ge=0, description="Season number (tvsearch)")
    episode: str | None = Field(default=None, description="Episode number or daily date (tvsearch)")
    tvdb_id: int | None = Field(default=None, description="TheTVDB series ID")
    imdb_id: str | None = Field(default=None, description="IMDb ID, with or without 'tt' prefix")
    offset: int = Field(default=0, ge=0, description="Result offset for paging")
    limit: int | None = Field(default=None, ge=1, description="Page size (None = builder default)")
    parameters: dict[str, str] = Field(
        default_factory=dict, description="Explicit query parameters, override everything else"
    )


class RequestDescriptor(BaseModel):
    """Outbound request for the external HTTP transport (always issued as GET)."""

    model_config = ConfigDict(frozen=True)

    family_id: str
    url: str
    query_parameters: dict[str, str] = Field(default_factory=dict)

    @property
    def full_url(self) -> str:
        """URL with the query string appended."""
        return str(httpx.URL(self.url, params=self.query_parameters))

    def redacted_url(self) -> str:
        """Full URL with the API key masked, safe for logging."""
        params = dict(self.query_parameters)
        if API_KEY_PARAM in params:
            params[API_KEY_PARAM] = REDACTED
        return str(httpx.URL(self.url, params=params))

    def to_httpx_request(self) -> httpx.Request:
        """Build the GET request the transport will send."""
        return httpx.Request("GET", self.url, params=self.query_parameters)
