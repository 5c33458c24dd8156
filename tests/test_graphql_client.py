"""
Unit tests for the GraphQL client.

Tests request construction and translation of transport, HTTP and GraphQL
failures into NetworkError / UpstreamSchemaError.
"""

from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

from hybrid_dashboard.core.exceptions import NetworkError, UpstreamSchemaError
from hybrid_dashboard.services.graphql import GraphQLClient

URL = "https://primary.test/graphql"

# ===== Fixtures =====


@pytest.fixture
def client():
    """GraphQLClient for the primary API"""
    return GraphQLClient(URL, service="primary_api", label="Main API", token="secret")


def _response(payload):
    """Mock 200 response whose json() returns payload"""
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status = Mock()
    return response


# ===== Tests =====


class TestGraphQLClientInit:
    """Test client initialization"""

    def test_owns_client_by_default(self, client):
        assert client._client is None
        assert client._owns_client is True
        assert client.label == "Main API"

    def test_external_client(self):
        http_client = Mock()
        gql = GraphQLClient(URL, service="analytics_api", client=http_client)

        assert gql._client is http_client
        assert gql._owns_client is False
        assert gql.label == "analytics_api"

    @pytest.mark.asyncio
    async def test_close_owned_client(self, client):
        http_client = await client._get_client()

        await client.close()

        assert http_client.is_closed
        assert client._client is None


class TestExecute:
    """Test execute()"""

    @pytest.mark.asyncio
    async def test_success_returns_data(self, client):
        with patch.object(client, "_get_client") as mock_get_client:
            mock_http = AsyncMock()
            mock_http.post.return_value = _response({"data": {"widgets": []}})
            mock_get_client.return_value = mock_http

            data = await client.execute("query { widgets { id } }")

            assert data == {"widgets": []}
            args, kwargs = mock_http.post.call_args
            assert args == (URL,)
            assert kwargs["json"] == {"query": "query { widgets { id } }"}
            assert kwargs["headers"]["Authorization"] == "Bearer secret"

    @pytest.mark.asyncio
    async def test_variables_and_operation_name(self, client):
        with patch.object(client, "_get_client") as mock_get_client:
            mock_http = AsyncMock()
            mock_http.post.return_value = _response({"data": {}})
            mock_get_client.return_value = mock_http

            await client.execute("query Q($id: ID!) { x }", {"id": "1"}, "Q")

            body = mock_http.post.call_args.kwargs["json"]
            assert body["variables"] == {"id": "1"}
            assert body["operationName"] == "Q"

    @pytest.mark.asyncio
    async def test_no_token_no_auth_header(self):
        gql = GraphQLClient(URL, service="analytics_api", label="Lambda")
        with patch.object(gql, "_get_client") as mock_get_client:
            mock_http = AsyncMock()
            mock_http.post.return_value = _response({"data": {}})
            mock_get_client.return_value = mock_http

            await gql.execute("query { x }")

            assert "Authorization" not in mock_http.post.call_args.kwargs["headers"]

    @pytest.mark.asyncio
    async def test_graphql_errors(self, client):
        """Error messages are joined into one UpstreamSchemaError"""
        payload = {
            "errors": [
                {"message": "Cannot query field 'widgets'"},
                {"message": "Unauthorized"},
            ],
            "data": None,
        }
        with patch.object(client, "_get_client") as mock_get_client:
            mock_http = AsyncMock()
            mock_http.post.return_value = _response(payload)
            mock_get_client.return_value = mock_http

            with pytest.raises(UpstreamSchemaError) as exc_info:
                await client.execute("query { widgets { id } }")

            assert exc_info.value.message == (
                "Main API GraphQL errors: Cannot query field 'widgets', Unauthorized"
            )
            assert exc_info.value.service == "primary_api"
            assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_missing_data(self, client):
        with patch.object(client, "_get_client") as mock_get_client:
            mock_http = AsyncMock()
            mock_http.post.return_value = _response({"something": "else"})
            mock_get_client.return_value = mock_http

            with pytest.raises(UpstreamSchemaError, match="has no data"):
                await client.execute("query { x }")

    @pytest.mark.asyncio
    async def test_non_json_body(self, client):
        with patch.object(client, "_get_client") as mock_get_client:
            mock_http = AsyncMock()
            response = Mock()
            response.raise_for_status = Mock()
            response.json.side_effect = ValueError("Expecting value")
            mock_http.post.return_value = response
            mock_get_client.return_value = mock_http

            with pytest.raises(UpstreamSchemaError, match="non-JSON"):
                await client.execute("query { x }")

    @pytest.mark.asyncio
    async def test_http_error_status(self, client):
        request = httpx.Request("POST", URL)
        error = httpx.HTTPStatusError(
            "Server error", request=request, response=httpx.Response(500, request=request)
        )
        with patch.object(client, "_get_client") as mock_get_client:
            mock_http = AsyncMock()
            response = Mock()
            response.raise_for_status = Mock(side_effect=error)
            mock_http.post.return_value = response
            mock_get_client.return_value = mock_http

            with pytest.raises(NetworkError) as exc_info:
                await client.execute("query { x }")

            assert exc_info.value.context["status_code"] == 500
            assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_connection_error(self, client):
        with patch.object(client, "_get_client") as mock_get_client:
            mock_http = AsyncMock()
            mock_http.post.side_effect = httpx.ConnectError("Connection refused")
            mock_get_client.return_value = mock_http

            with pytest.raises(NetworkError, match="Main API request failed"):
                await client.execute("query { x }")

    @pytest.mark.asyncio
    async def test_timeout(self, client):
        with patch.object(client, "_get_client") as mock_get_client:
            mock_http = AsyncMock()
            mock_http.post.side_effect = httpx.ReadTimeout("timed out")
            mock_get_client.return_value = mock_http

            with pytest.raises(NetworkError):
                await client.execute("query { x }")
