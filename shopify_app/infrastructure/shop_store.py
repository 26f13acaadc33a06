from datetime import UTC, datetime

from loguru import logger

from shopify_app.domain.shop import Shop


class InMemoryShopStore:
    """Shop records held in a dict keyed by canonical domain.

    Enough for tests and the demo entrypoint; a real app plugs in its own
    ``IShopStore`` backed by a database with a unique domain column.
    """

    def __init__(self, shops: list[Shop] | None = None) -> None:
        self._shops: dict[str, Shop] = {}
        self._next_id = 1
        for shop in shops or []:
            self.save(shop)

    def find_by_domain(self, shopify_domain: str, with_trashed: bool = False) -> Shop | None:
        shop = self._shops.get(shopify_domain)
        if shop is None or (shop.trashed() and not with_trashed):
            return None
        return shop

    def get_or_create(self, shopify_domain: str, with_trashed: bool = True) -> Shop:
        if shop := self.find_by_domain(shopify_domain, with_trashed=with_trashed):
            return shop

        if shopify_domain in self._shops:
            # Only a trashed record exists and the caller excluded it
            raise ValueError(f"Shop {shopify_domain} exists but is soft-deleted")

        logger.info(f"Creating shop record for {shopify_domain}")
        return self.save(Shop(shopify_domain=shopify_domain))

    def save(self, shop: Shop) -> Shop:
        now = datetime.now(UTC)
        if shop.id is None:
            shop.id = self._next_id
            shop.created_at = shop.created_at or now
        self._next_id = max(self._next_id, shop.id + 1)
        shop.updated_at = now
        self._shops[shop.shopify_domain] = shop
        return shop

    def delete(self, shopify_domain: str) -> None:
        """Soft-delete: the record stays and can be found ``with_trashed``."""
        if shop := self._shops.get(shopify_domain):
            shop.deleted_at = datetime.now(UTC)

    def restore(self, shopify_domain: str) -> None:
        if shop := self._shops.get(shopify_domain):
            shop.deleted_at = None
