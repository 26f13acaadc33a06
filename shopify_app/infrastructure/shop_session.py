from collections.abc import MutableMapping
from typing import Any


class ShopSession:
    """Reads and writes the shop identity kept in a web session.

    ``session`` is any mutable mapping, e.g. a framework's request session.
    """

    DOMAIN_KEY = "shopify_domain"
    TOKEN_KEY = "shopify_token"

    def __init__(self, session: MutableMapping[str, Any]) -> None:
        self._session = session

    def get_domain(self) -> str | None:
        return self._session.get(self.DOMAIN_KEY)

    def set_domain(self, shopify_domain: str) -> None:
        self._session[self.DOMAIN_KEY] = shopify_domain

    def get_token(self) -> str | None:
        return self._session.get(self.TOKEN_KEY)

    def set_token(self, access_token: str) -> None:
        self._session[self.TOKEN_KEY] = access_token

    def is_valid(self) -> bool:
        return bool(self.get_domain())

    def forget(self) -> None:
        for key in (self.DOMAIN_KEY, self.TOKEN_KEY):
            self._session.pop(key, None)
