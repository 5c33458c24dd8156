"""
Minimal async GraphQL client over httpx.

Each upstream (primary API, analytics warehouse) gets its own client. The
client issues a single POST per query and translates failures into the
application error taxonomy:

- transport problems and non-2xx responses -> NetworkError
- GraphQL ``errors`` payloads or a body without ``data`` -> UpstreamSchemaError
"""

from typing import Any

import httpx
import structlog

from ...core.exceptions import NetworkError, UpstreamSchemaError

logger = structlog.get_logger(__name__)


class GraphQLClient:
    """
    GraphQL-over-HTTP client for one upstream service.

    Args:
        url: GraphQL endpoint
        service: Service identifier used in errors and logs
        label: Human label used in GraphQL error messages ("Main API", "Lambda")
        token: Optional bearer token sent as Authorization header
        timeout: Request timeout in seconds (the only timeout on the read path)
        client: Optional httpx AsyncClient for connection pooling
    """

    def __init__(
        self,
        url: str,
        service: str,
        label: str | None = None,
        token: str = "",
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.url = url
        self.service = service
        self.label = label or service
        self._token = token
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def close(self) -> None:
        """Close HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def execute(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        operation_name: str | None = None,
    ) -> dict[str, Any]:
        """
        Run a query and return its ``data`` object.

        Raises:
            NetworkError: Connection failure, timeout or non-2xx status
            UpstreamSchemaError: GraphQL errors, non-JSON body or missing data
        """
        client = await self._get_client()

        body: dict[str, Any] = {"query": query}
        if variables:
            body["variables"] = variables
        if operation_name:
            body["operationName"] = operation_name

        try:
            response = await client.post(self.url, json=body, headers=self._headers())
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NetworkError(
                f"{self.label} HTTP error: {e.response.status_code}",
                service=self.service,
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            raise NetworkError(
                f"{self.label} request failed: {e}", service=self.service
            ) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamSchemaError(
                f"{self.label} returned a non-JSON body", service=self.service
            ) from e

        if not isinstance(payload, dict):
            raise UpstreamSchemaError(
                f"{self.label} returned an unexpected body", service=self.service
            )

        errors = payload.get("errors")
        if errors:
            messages = ", ".join(
                str(err.get("message", err)) if isinstance(err, dict) else str(err)
                for err in errors
            )
            raise UpstreamSchemaError(
                f"{self.label} GraphQL errors: {messages}",
                service=self.service,
                error_count=len(errors),
            )

        data = payload.get("data")
        if not isinstance(data, dict):
            raise UpstreamSchemaError(
                f"{self.label} response has no data", service=self.service
            )

        logger.debug("graphql_query_completed", service=self.service)
        return data
