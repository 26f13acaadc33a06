import httpx
from loguru import logger

from shopify_app.application.shopify_app import ShopifyApp
from shopify_app.domain.shop import Shop
from shopify_app.entrypoints.settings import Config
from shopify_app.infrastructure.shop_session import ShopSession
from shopify_app.infrastructure.shop_store import InMemoryShopStore
from shopify_app.infrastructure.shopify_client import ShopifyGraphQLClient

SHOP_QUERY = """
  query ShopInfo {
    shop {
      name
      myshopifyDomain
    }
  }
"""


def build_app(
    config: Config, http_client: httpx.Client | None = None
) -> ShopifyApp:
    """Wire a ``ShopifyApp`` for the configured shop.

    The shop's access token comes from config since the demo has no OAuth
    flow; the session stands in for an authenticated request.
    """
    store = InMemoryShopStore()
    shopify_domain = config.SHOP_DOMAIN
    session = ShopSession({"shopify_domain": shopify_domain})

    app = ShopifyApp(
        config=config,
        store=store,
        session=session,
        api_class=lambda: ShopifyGraphQLClient(client=http_client),
    )

    if shop := app.shop(shopify_domain):
        shop.shopify_token = config.ACCESS_TOKEN or None
        store.save(shop)

    return app


def fetch_shop_name(app: ShopifyApp) -> str:
    response = app.request_graphql(SHOP_QUERY)
    return response["data"]["shop"]["name"]


def main(config: Config | None = None, http_client: httpx.Client | None = None) -> None:
    config = config or Config()
    app = build_app(config, http_client)

    shop: Shop | None = app.shop()
    if shop is None:
        logger.error("SHOPIFY_SHOP_DOMAIN is not set, nothing to query.")
        return

    app.debug(f"Resolved shop {shop.shopify_domain} (offline access: {shop.has_offline_access()})")
    logger.info(f"Shop name: {fetch_shop_name(app)}")


if __name__ == "__main__":
    main()
