"""
Source fetchers for the two upstream GraphQL services.

A fetcher is a pure I/O wrapper: one query, wall-clock latency, decoded
models. It raises NetworkError / UpstreamSchemaError to its caller and never
swallows them; deciding what a failure means is the orchestrator's job.
"""

import time
from typing import Any, ClassVar, Generic, TypeVar

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ...core.exceptions import ConfigurationError, UpstreamSchemaError
from ...core.utils import elapsed_ms
from ...models import EntitySettings, QuarterlyMetric
from ..graphql import QUARTERLY_METRICS, SMARTMENU_SETTINGS_BASIC, GraphQLClient
from .types import FetchOutcome

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class SourceFetcher(Generic[ModelT]):
    """
    Fetches one typed collection from one upstream.

    Subclasses declare the query, the top-level response field holding the
    collection, and the model each item decodes to.
    """

    service: ClassVar[str]
    label: ClassVar[str]
    query: ClassVar[str]
    response_field: ClassVar[str]
    model: ClassVar[type[BaseModel]]

    def __init__(self, client: GraphQLClient | None):
        self._client = client

    async def fetch(self) -> FetchOutcome[ModelT]:
        """
        Run the query and decode the collection.

        Raises:
            ConfigurationError: No client was provided
            NetworkError: Transport failure
            UpstreamSchemaError: GraphQL errors or undecodable data
        """
        if self._client is None:
            raise ConfigurationError(
                f"{self.label} client not initialized", service=self.service
            )

        start = time.perf_counter()
        data = await self._client.execute(self.query)
        items = self._decode(data)
        latency_ms = elapsed_ms(start)

        logger.debug(
            "source_fetch_completed",
            service=self.service,
            item_count=len(items),
            latency_ms=latency_ms,
        )
        return FetchOutcome.ok(items, latency_ms)

    def _decode(self, data: dict[str, Any]) -> list[ModelT]:
        raw = data.get(self.response_field)
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise UpstreamSchemaError(
                f"{self.label} field '{self.response_field}' is not a list",
                service=self.service,
            )

        try:
            return [self.model.model_validate(item) for item in raw]  # type: ignore[misc]
        except PydanticValidationError as e:
            raise UpstreamSchemaError(
                f"{self.label} returned malformed '{self.response_field}'",
                service=self.service,
                error_count=e.error_count(),
            ) from e


class PrimarySettingsFetcher(SourceFetcher[EntitySettings]):
    """SourceFetcher A: SmartMenu settings from the primary API."""

    service = "primary_api"
    label = "Main API"
    query = SMARTMENU_SETTINGS_BASIC
    response_field = "widgets"
    model = EntitySettings


class AnalyticsMetricsFetcher(SourceFetcher[QuarterlyMetric]):
    """SourceFetcher B: quarterly aggregates from the analytics warehouse."""

    service = "analytics_api"
    label = "Lambda"
    query = QUARTERLY_METRICS
    response_field = "quarterlyMetrics"
    model = QuarterlyMetric
