import re
from urllib.parse import urlsplit

_SCHEME_RE = re.compile(r"https?://", re.IGNORECASE)


def sanitize_shop_domain(domain: str | None, myshopify_domain: str) -> str | None:
    """Return the canonical host for a user-supplied shop domain.

    ``"HTTPS://Foo.MYSHOPIFY.COM"`` and ``"foo"`` both become
    ``"foo.myshopify.com"``; a dotted custom domain such as ``"foo.bar.com"``
    is kept as-is. Empty input returns ``None``.
    """
    if not domain:
        return None

    domain = _SCHEME_RE.sub("", domain.strip()).lower()

    if myshopify_domain not in domain and "." not in domain:
        # Bare shop name, qualify it with the platform suffix
        domain = f"{domain}.{myshopify_domain}"

    try:
        host = urlsplit(f"https://{domain}").hostname
    except ValueError:
        # unparseable host, e.g. an unbalanced "[" bracket
        return None

    return host or None
