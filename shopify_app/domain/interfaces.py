from typing import Any, Protocol

from .shop import Shop


class IShopStore(Protocol):
    def get_or_create(self, shopify_domain: str, with_trashed: bool = True) -> Shop:
        """Return the shop stored under ``shopify_domain``, creating it if absent."""
        ...


class IShopSession(Protocol):
    def get_domain(self) -> str | None: ...


class IApiClient(Protocol):
    def set_api_key(self, api_key: str) -> None: ...

    def set_api_secret(self, api_secret: str) -> None: ...

    def set_version(self, version: str) -> None: ...

    def set_session(self, shop: str, access_token: str | None) -> None: ...

    def enable_rate_limiting(self, cycle: int = 500, buffer: int = 100) -> None: ...

    def graph(self, query: str, variables: dict | None = None) -> dict[str, Any]: ...
