"""Build outbound Newznab/Torznab requests from generic search requests."""

from __future__ import annotations

from urllib.parse import parse_qsl

import structlog

from searcharr.core.indexers.constraints import is_blank
from searcharr.core.indexers.errors import ConfigurationError
from searcharr.core.indexers.models import (
    API_KEY_PARAM,
    IndexerConfig,
    RequestDescriptor,
    SearchRequest,
)
from searcharr.core.indexers.profiles import CapabilityProfile
from searcharr.core.metrics import indexer_configuration_errors_total, indexer_requests_built_total

logger = structlog.get_logger("searcharr.indexers.query")

DEFAULT_PAGE_SIZE = 100


def parse_additional_parameters(value: str | None) -> dict[str, str]:
    """Split an '&key=value&key2=value2' string into a dict.

    Values are URL-decoded. Blank input gives an empty dict; for repeated keys
    the last occurrence wins.
    """
    if is_blank(value):
        return {}
    return dict(parse_qsl(value.strip(), keep_blank_values=True))


class QueryBuilder:
    """Turn a SearchRequest into a RequestDescriptor for one indexer.

    The config is expected to have passed validation already; it is not
    validated again here.
    """

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        """Initialize the builder.

        Args:
            page_size: Default 'limit' when the request does not set one
        """
        self.page_size = page_size

    def build(
        self,
        config: IndexerConfig,
        profile: CapabilityProfile,
        request: SearchRequest,
    ) -> RequestDescriptor:
        """Build the request descriptor for a search.

        Query parameters are merged in three layers, later layers winning on
        key collision: the config's additional parameters, the parameters
        derived from the request, then ``request.parameters``.

        Args:
            config: Validated indexer config
            profile: Capability profile of the indexer's family
            request: Search to perform

        Returns:
            RequestDescriptor with URL and query parameters

        Raises:
            ConfigurationError: No usable categories, or the family does not
                support the requested search type
        """
        family = profile.family_id
        if request.search_type not in profile.search_types:
            raise self._fail(
                f"Indexer family '{family}' does not support '{request.search_type}' searches",
                family,
            )

        categories = self.resolve_categories(config, profile, request)
        if not categories and profile.requires_categories:
            raise self._fail("No categories configured for indexer", family)

        params = parse_additional_parameters(config.additional_parameters)
        params.update(self._search_parameters(config, request, categories))
        params.update(request.parameters)

        descriptor = RequestDescriptor(
            family_id=family,
            url=self.api_url(config, profile),
            query_parameters=params,
        )
        indexer_requests_built_total.labels(family=family, search_type=request.search_type).inc()
        logger.debug(
            "Built indexer request",
            family=family,
            search_type=request.search_type,
            url=descriptor.redacted_url(),
        )
        return descriptor

    def build_capabilities(
        self,
        config: IndexerConfig,
        profile: CapabilityProfile,
    ) -> RequestDescriptor:
        """Build a 't=caps' request, used to probe an indexer."""
        params = {"t": "caps"}
        if not is_blank(config.api_key):
            params[API_KEY_PARAM] = config.api_key.strip()
        descriptor = RequestDescriptor(
            family_id=profile.family_id,
            url=self.api_url(config, profile),
            query_parameters=params,
        )
        indexer_requests_built_total.labels(family=profile.family_id, search_type="caps").inc()
        return descriptor

    def resolve_categories(
        self,
        config: IndexerConfig,
        profile: CapabilityProfile,
        request: SearchRequest,
    ) -> tuple[int, ...]:
        """Pick the categories to search: request, then config, then family defaults."""
        if request.categories:
            return tuple(sorted(request.categories))
        if config.categories:
            return tuple(sorted(config.categories))
        return profile.default_categories

    def api_url(self, config: IndexerConfig, profile: CapabilityProfile) -> str:
        """Join the base URL and the API path (family default when blank).

        Raises:
            ConfigurationError: The config has no base URL
        """
        if is_blank(config.base_url):
            raise self._fail("Indexer base URL is not set", profile.family_id)
        base = config.base_url.strip().rstrip("/")
        api_path = config.api_path if not is_blank(config.api_path) else profile.default_api_path
        path = api_path.strip().rstrip("/")
        if path and not path.startswith("/"):
            path = f"/{path}"
        return f"{base}{path}"

    def _search_parameters(
        self,
        config: IndexerConfig,
        request: SearchRequest,
        categories: tuple[int, ...],
    ) -> dict[str, str]:
        params: dict[str, str] = {"t": request.search_type}
        if categories:
            params["cat"] = ",".join(str(cat) for cat in categories)
        params["extended"] = "1"
        if not is_blank(config.api_key):
            params[API_KEY_PARAM] = config.api_key.strip()
        params["offset"] = str(request.offset)
        params["limit"] = str(request.limit or self.page_size)

        if not is_blank(request.query_text):
            params["q"] = request.query_text.strip()
        if request.season is not None:
            params["season"] = str(request.season)
        if not is_blank(request.episode):
            params["ep"] = request.episode.strip()
        if request.tvdb_id is not None:
            params["tvdbid"] = str(request.tvdb_id)
        if not is_blank(request.imdb_id):
            imdb_id = request.imdb_id.strip()
            if imdb_id.lower().startswith("tt"):
                imdb_id = imdb_id[2:]
            params["imdbid"] = imdb_id
        return params

    def _fail(self, message: str, family: str) -> ConfigurationError:
        indexer_configuration_errors_total.labels(family=family).inc()
        logger.debug("Cannot build indexer request", family=family, reason=message)
        return ConfigurationError(message, family_id=family)
