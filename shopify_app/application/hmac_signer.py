import base64
import hashlib
import hmac
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict


class HmacOptions(BaseModel):
    """Input for a single ``create_hmac`` call."""

    model_config = ConfigDict(extra="forbid")

    data: str | bytes | dict[str, Any]
    raw: bool = False  # binary digest instead of hex
    build_query: bool = False  # sort ``data`` by key and render ``key=value`` pairs
    build_query_with_join: bool = False  # join rendered pairs with "&"
    encode: bool = False  # base64 the result
    secret: str | None = None  # falls back to the configured API secret


def build_query(data: Mapping[str, Any], with_join: bool = False) -> str:
    """Render ``data`` as sorted ``key=value`` pairs.

    List values are joined with ``","``. Pairs are separated by ``"&"`` only
    when ``with_join`` is set; app-proxy signatures are computed over the
    pairs concatenated with no separator at all.
    """
    pairs = []
    for key in sorted(data):
        value = data[key]
        if isinstance(value, (list, tuple)):
            value = ",".join(str(v) for v in value)
        pairs.append(f"{key}={value}")
    return ("&" if with_join else "").join(pairs)


def create_hmac(options: HmacOptions, default_secret: str) -> str | bytes:
    """Compute the HMAC-SHA256 described by ``options``.

    Returns the hex digest, the raw digest bytes when ``raw`` is set, or the
    base64 text of either one when ``encode`` is set.
    """
    data = options.data
    if options.build_query:
        if not isinstance(data, Mapping):
            raise TypeError("build_query requires mapping data")
        data = build_query(data, with_join=options.build_query_with_join)

    message = data.encode("utf-8") if isinstance(data, str) else data
    secret = options.secret if options.secret is not None else default_secret
    digest = hmac.new(secret.encode("utf-8"), message, hashlib.sha256)

    result: str | bytes = digest.digest() if options.raw else digest.hexdigest()
    if options.encode:
        if isinstance(result, str):
            result = result.encode("ascii")
        return base64.b64encode(result).decode("ascii")
    return result


def _matches(expected: str | bytes, supplied: Any) -> bool:
    if isinstance(expected, str):
        expected = expected.encode("utf-8")
    return hmac.compare_digest(expected, str(supplied).encode("utf-8"))


def verify_request(params: Mapping[str, Any], secret: str) -> bool:
    """Check the ``hmac`` query parameter of an OAuth or admin request."""
    supplied = params.get("hmac")
    if not supplied:
        return False

    data = {k: v for k, v in params.items() if k not in ("hmac", "signature")}
    expected = create_hmac(
        HmacOptions(data=data, build_query=True, build_query_with_join=True),
        secret,
    )
    return _matches(expected, supplied)


def verify_proxy_signature(params: Mapping[str, Any], secret: str) -> bool:
    """Check the ``signature`` query parameter of an app-proxy request."""
    supplied = params.get("signature")
    if not supplied:
        return False

    data = {k: v for k, v in params.items() if k != "signature"}
    expected = create_hmac(HmacOptions(data=data, build_query=True), secret)
    return _matches(expected, supplied)


def verify_webhook(body: bytes | str, hmac_header: str | None, secret: str) -> bool:
    """Check the ``X-Shopify-Hmac-Sha256`` header against the raw webhook body."""
    if not hmac_header:
        return False

    expected = create_hmac(HmacOptions(data=body, raw=True, encode=True), secret)
    return _matches(expected, hmac_header)
