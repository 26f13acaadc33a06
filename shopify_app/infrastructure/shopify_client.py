import time
from typing import Any

import httpx
from loguru import logger

from shopify_app.shared.decorators import log_errors


class ShopifyGraphQLError(Exception):
    """Raised when the client is used before it knows which shop to call."""


class ShopifyGraphQLClient:
    """Thin httpx wrapper for the Shopify Admin GraphQL API.

    Configured through setters so a factory can build it in steps: credentials
    first, then the API version and rate limiting, then the shop session.
    """

    DEFAULT_RATE_LIMIT_CYCLE = 500  # ms between calls
    DEFAULT_RATE_LIMIT_BUFFER = 100  # ms
    TIMEOUT = 30.0  # s

    def __init__(self, client: httpx.Client | None = None) -> None:
        self._client = client
        self.api_key: str | None = None
        self.api_secret: str | None = None
        self.version: str | None = None
        self.shop: str | None = None
        self.access_token: str | None = None

        self._rate_limiting_enabled = False
        self._rate_limit_cycle = self.DEFAULT_RATE_LIMIT_CYCLE
        self._rate_limit_buffer = self.DEFAULT_RATE_LIMIT_BUFFER
        self._last_request_at: float | None = None

    def set_api_key(self, api_key: str) -> None:
        self.api_key = api_key

    def set_api_secret(self, api_secret: str) -> None:
        self.api_secret = api_secret

    def set_version(self, version: str) -> None:
        self.version = version

    def set_session(self, shop: str, access_token: str | None) -> None:
        self.shop = shop
        self.access_token = access_token

    def enable_rate_limiting(
        self,
        cycle: int = DEFAULT_RATE_LIMIT_CYCLE,
        buffer: int = DEFAULT_RATE_LIMIT_BUFFER,
    ) -> None:
        self._rate_limiting_enabled = True
        self._rate_limit_cycle = cycle
        self._rate_limit_buffer = buffer

    def disable_rate_limiting(self) -> None:
        self._rate_limiting_enabled = False

    def is_rate_limiting_enabled(self) -> bool:
        return self._rate_limiting_enabled

    @property
    def shop_domain(self) -> str | None:
        return self.shop

    @property
    def endpoint(self) -> str:
        if not self.shop:
            raise ShopifyGraphQLError("Shopify domain missing for API calls")
        version = f"/{self.version}" if self.version else ""
        return f"https://{self.shop}/admin/api{version}/graphql.json"

    def _wait_for_rate_limit(self) -> float:
        """Sleep until ``cycle + buffer`` ms have passed since the last call.

        Returns the number of seconds waited.
        """
        if not self._rate_limiting_enabled or self._last_request_at is None:
            return 0.0

        elapsed_ms = (time.monotonic() - self._last_request_at) * 1000
        wait_ms = (self._rate_limit_cycle - elapsed_ms) + self._rate_limit_buffer
        if wait_ms <= 0:
            return 0.0

        logger.debug(f"Rate limiting: waiting {wait_ms:.0f}ms before next call")
        time.sleep(wait_ms / 1000)
        return wait_ms / 1000

    @log_errors
    def graph(self, query: str, variables: dict | None = None) -> dict[str, Any]:
        """POST a GraphQL query and return the decoded response.

        The result carries ``data``, ``extensions`` and ``errors``; ``errors``
        is ``False`` when the body has none.

        Raises:
            ShopifyGraphQLError: if no shop session was set.
            httpx.HTTPStatusError: on non-2xx HTTP responses.
        """
        endpoint = self.endpoint
        headers = {"Content-Type": "application/json"}
        if self.access_token:
            headers["X-Shopify-Access-Token"] = self.access_token

        waited = self._wait_for_rate_limit()
        started_at = time.monotonic()
        self._last_request_at = started_at

        # One-off request unless a pooled client was injected
        post = self._client.post if self._client is not None else httpx.post
        response = post(
            endpoint,
            headers=headers,
            json={"query": query, "variables": variables or {}},
            timeout=self.TIMEOUT,
        )
        response.raise_for_status()

        body: dict = response.json()
        return {
            "status": response.status_code,
            "data": body.get("data"),
            "extensions": body.get("extensions"),
            "errors": body.get("errors") or False,
            "timestamps": [started_at, waited],
        }
