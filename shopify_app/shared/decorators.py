from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from loguru import logger

P = ParamSpec("P")
R = TypeVar("R")


def log_errors(func: Callable[P, R]) -> Callable[P, R]:
    """Log any exception raised by the decorated method, then re-raise it.

    The line names the method, the shop it was called for and the exception,
    e.g. ``[ShopifyApp.request_graphql] foo.myshopify.com RequestError: bad``.
    The shop is read from the instance's ``shop_domain`` attribute, ``-``
    when it has none.

    Usage::

        @log_errors
        def graph(self, query: str, variables: dict | None = None) -> dict: ...
    """

    @wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return func(*args, **kwargs)
        except Exception as exc:
            shop_domain = getattr(args[0], "shop_domain", None) if args else None
            logger.error(
                f"[{func.__qualname__}] {shop_domain or '-'} {type(exc).__name__}: {exc}"
            )
            raise

    return wrapper
