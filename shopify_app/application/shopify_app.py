from collections.abc import Callable, Mapping
from typing import Any

from loguru import logger
from pydantic_core import from_json, to_json

from shopify_app.application import hmac_signer
from shopify_app.application.domain_normalizer import sanitize_shop_domain
from shopify_app.application.hmac_signer import HmacOptions
from shopify_app.domain.interfaces import IApiClient, IShopSession, IShopStore
from shopify_app.domain.shop import Shop
from shopify_app.entrypoints.settings import Config
from shopify_app.infrastructure.shopify_client import ShopifyGraphQLClient
from shopify_app.shared.decorators import log_errors


class RequestError(Exception):
    """Raised when a GraphQL response carries errors."""


class ShopifyApp:
    """Request-scoped helper: current shop, API clients, GraphQL calls, HMACs.

    One instance per inbound request. The first shop resolved is cached for
    the lifetime of the instance; later ``shop()`` calls return it even when
    given a different domain.
    """

    def __init__(
        self,
        config: Config,
        store: IShopStore,
        session: IShopSession,
        api_class: Callable[[], IApiClient] = ShopifyGraphQLClient,
    ) -> None:
        self._config = config
        self._store = store
        self._session = session
        self._api_class = api_class
        self._shop: Shop | None = None

    def shop(self, shop_domain: str | None = None) -> Shop | None:
        """Return the current shop, resolving it on first use.

        The domain comes from ``shop_domain`` when given, otherwise from the
        session. Soft-deleted shops are reused rather than duplicated.
        """
        if shop_domain:
            shopify_domain = self.sanitize_shop_domain(shop_domain)
        else:
            shopify_domain = self._session.get_domain()

        if self._shop is None and shopify_domain:
            self._shop = self._store.get_or_create(shopify_domain, with_trashed=True)

        return self._shop

    @property
    def shop_domain(self) -> str | None:
        """Domain of the cached shop, without resolving one."""
        return self._shop.shopify_domain if self._shop else None

    def api(self) -> IApiClient:
        """Build a new API client from the configured credentials."""
        api = self._api_class()
        api.set_api_key(self._config.API_KEY)
        api.set_api_secret(self._config.API_SECRET)

        if self._config.API_VERSION is not None:
            api.set_version(self._config.API_VERSION)

        if self._config.API_RATE_LIMITING_ENABLED is True:
            api.enable_rate_limiting(
                self._config.API_RATE_LIMIT_CYCLE,
                self._config.API_RATE_LIMIT_CYCLE_BUFFER,
            )

        return api

    def api_for(self, shop: Shop) -> IApiClient:
        """Build an API client bound to ``shop``'s domain and access token."""
        api = self.api()
        api.set_session(shop.shopify_domain, shop.shopify_token)
        return api

    @log_errors
    def request_graphql(self, query: str, variables: dict | None = None) -> dict[str, Any]:
        """Run ``query`` against the current shop and return the full response.

        Raises:
            RequestError: if no shop is resolved, or the response's ``errors``
                field is anything other than ``False``.
        """
        shop = self.shop()
        if shop is None:
            raise RequestError("No shop resolved for the current request")

        # Round-trip to plain JSON data
        response = from_json(to_json(self.api_for(shop).graph(query, variables)))

        errors = response.get("errors", False)
        if errors is not False:
            if isinstance(errors, list):
                first = errors[0] if errors else None
                message = first.get("message") if isinstance(first, dict) else first
            else:
                message = errors
            raise RequestError(message)

        return response

    def sanitize_shop_domain(self, domain: str | None) -> str | None:
        return sanitize_shop_domain(domain, self._config.MYSHOPIFY_DOMAIN)

    def create_hmac(self, options: HmacOptions | Mapping[str, Any]) -> str | bytes:
        if not isinstance(options, HmacOptions):
            options = HmacOptions.model_validate(options)
        return hmac_signer.create_hmac(options, self._config.API_SECRET)

    def verify_request(self, params: Mapping[str, Any]) -> bool:
        return hmac_signer.verify_request(params, self._config.API_SECRET)

    def verify_proxy_signature(self, params: Mapping[str, Any]) -> bool:
        return hmac_signer.verify_proxy_signature(params, self._config.API_SECRET)

    def verify_webhook(self, body: bytes | str, hmac_header: str | None) -> bool:
        return hmac_signer.verify_webhook(body, hmac_header, self._config.API_SECRET)

    def debug(self, message: str) -> bool:
        """Log ``message`` at debug level; a no-op unless debug mode is on."""
        if not self._config.DEBUG:
            return False

        logger.debug(message)
        return True
