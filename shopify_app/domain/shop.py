from datetime import datetime

from pydantic import BaseModel


class Shop(BaseModel):
    """A merchant's store installation, keyed by its canonical domain."""

    id: int | None = None
    shopify_domain: str  # e.g. "example.myshopify.com"
    shopify_token: str | None = None  # offline access token
    grandfathered: bool = False
    freemium: bool = False
    namespace: str | None = None
    plan_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None  # set when soft-deleted

    def trashed(self) -> bool:
        return self.deleted_at is not None

    def has_offline_access(self) -> bool:
        return bool(self.shopify_token)

    def is_grandfathered(self) -> bool:
        return self.grandfathered

    def is_freemium(self) -> bool:
        return self.freemium
