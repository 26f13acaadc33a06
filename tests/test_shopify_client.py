"""Tests for ShopifyGraphQLClient using httpx.MockTransport."""

import json
from unittest.mock import patch

import httpx
import pytest

from shopify_app.infrastructure.shopify_client import ShopifyGraphQLClient, ShopifyGraphQLError


def _client(handler, requests: list[httpx.Request] | None = None) -> ShopifyGraphQLClient:
    def _record(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return handler(request)

    api = ShopifyGraphQLClient(client=httpx.Client(transport=httpx.MockTransport(_record)))
    api.set_session("foo.myshopify.com", "shpat_token")
    return api


def _ok(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"data": {"shop": {"name": "Foo"}}})


# ---------------------------------------------------------------------------
# Request shape
# ---------------------------------------------------------------------------


def test_graph_posts_query_to_versioned_endpoint() -> None:
    requests: list[httpx.Request] = []
    api = _client(_ok, requests)
    api.set_version("2025-01")

    api.graph("{ shop { name } }", {"first": 1})

    request = requests[0]
    assert str(request.url) == "https://foo.myshopify.com/admin/api/2025-01/graphql.json"
    assert request.headers["X-Shopify-Access-Token"] == "shpat_token"
    assert json.loads(request.content) == {
        "query": "{ shop { name } }",
        "variables": {"first": 1},
    }


def test_graph_without_version_uses_unversioned_endpoint() -> None:
    requests: list[httpx.Request] = []
    api = _client(_ok, requests)

    api.graph("{ shop { name } }")

    assert str(requests[0].url) == "https://foo.myshopify.com/admin/api/graphql.json"


def test_graph_without_session_raises() -> None:
    api = ShopifyGraphQLClient(client=httpx.Client(transport=httpx.MockTransport(_ok)))

    with pytest.raises(ShopifyGraphQLError):
        api.graph("{ shop { name } }")


# ---------------------------------------------------------------------------
# Response shape
# ---------------------------------------------------------------------------


def test_graph_errors_false_when_body_has_none() -> None:
    response = _client(_ok).graph("{ shop { name } }")

    assert response["status"] == 200
    assert response["data"] == {"shop": {"name": "Foo"}}
    assert response["errors"] is False


def test_graph_passes_through_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"errors": [{"message": "Throttled"}]})

    response = _client(handler).graph("{ shop { name } }")

    assert response["errors"] == [{"message": "Throttled"}]


def test_graph_raises_on_http_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"errors": "Invalid API key or access token"})

    with pytest.raises(httpx.HTTPStatusError):
        _client(handler).graph("{ shop { name } }")


# ---------------------------------------------------------------------------
# Rate limiting
# ---------------------------------------------------------------------------


def test_rate_limiting_disabled_by_default() -> None:
    api = _client(_ok)

    assert api.is_rate_limiting_enabled() is False

    with patch("shopify_app.infrastructure.shopify_client.time") as mock_time:
        mock_time.monotonic.return_value = 100.0
        api.graph("{ shop { name } }")
        api.graph("{ shop { name } }")

    mock_time.sleep.assert_not_called()


def test_rate_limiting_waits_out_the_cycle() -> None:
    """Second call 200ms after the first waits (500 - 200) + 100 = 400ms."""
    api = _client(_ok)
    api.enable_rate_limiting(cycle=500, buffer=100)

    with patch("shopify_app.infrastructure.shopify_client.time") as mock_time:
        mock_time.monotonic.side_effect = [100.0, 100.2, 100.6]
        api.graph("{ shop { name } }")
        api.graph("{ shop { name } }")

    mock_time.sleep.assert_called_once()
    assert mock_time.sleep.call_args[0][0] == pytest.approx(0.4)


def test_rate_limiting_skips_wait_after_long_gap() -> None:
    api = _client(_ok)
    api.enable_rate_limiting(cycle=500, buffer=100)

    with patch("shopify_app.infrastructure.shopify_client.time") as mock_time:
        mock_time.monotonic.side_effect = [100.0, 101.0, 101.0]
        api.graph("{ shop { name } }")
        api.graph("{ shop { name } }")

    mock_time.sleep.assert_not_called()


def test_disable_rate_limiting() -> None:
    api = _client(_ok)
    api.enable_rate_limiting()
    api.disable_rate_limiting()

    assert api.is_rate_limiting_enabled() is False


# ---------------------------------------------------------------------------
# Connection handling
# ---------------------------------------------------------------------------


def test_graph_without_injected_client_opens_no_pool() -> None:
    """A bare client sends a one-off ``httpx.post`` and keeps no open ``httpx.Client``."""
    url = "https://foo.myshopify.com/admin/api/graphql.json"
    reply = httpx.Response(
        200, json={"data": {"shop": {"name": "Foo"}}}, request=httpx.Request("POST", url)
    )

    with (
        patch("httpx.Client") as mock_client_cls,
        patch("shopify_app.infrastructure.shopify_client.httpx.post", return_value=reply) as mock_post,
    ):
        api = ShopifyGraphQLClient()
        api.set_session("foo.myshopify.com", "shpat_token")
        response = api.graph("{ shop { name } }")

    mock_client_cls.assert_not_called()
    mock_post.assert_called_once()
    assert mock_post.call_args[0][0] == url
    assert response["data"] == {"shop": {"name": "Foo"}}
