"""Image-reference helpers: scheme detection, domain shape and URL parsing.

URL parsing goes through pydantic's ``AnyUrl`` (a WHATWG-style parser), so
hosts with spaces or other forbidden characters are rejected the same way
a browser would reject them.
"""

import re

from pydantic import AnyUrl, TypeAdapter, ValidationError

_HTTP_SCHEME = re.compile(r"^https?://", re.IGNORECASE)
# Dot-separated labels, each alphanumeric with internal hyphens. Anchored at
# the start only: a path may follow the host ("example.com/logo.png").
_DOMAIN_PREFIX = re.compile(
    r"^[a-z0-9]([a-z0-9-]*[a-z0-9])?(\.[a-z0-9]([a-z0-9-]*[a-z0-9])?)+",
    re.IGNORECASE,
)

_url_adapter: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)


def has_http_scheme(value: str) -> bool:
    return bool(_HTTP_SCHEME.match(value))


def looks_like_domain(value: str) -> bool:
    return bool(_DOMAIN_PREFIX.match(value))


def parse_url(value: str) -> AnyUrl | None:
    """Parse ``value`` as an absolute URL, returning None when it is malformed."""
    try:
        return _url_adapter.validate_python(value)
    except ValidationError:
        return None


def normalize_url(value: str) -> str:
    """Trim ``value`` and prefix ``https://`` when it has no http(s) scheme.

    Blank input is returned as an empty string.
    """
    trimmed = value.strip()
    if not trimmed or has_http_scheme(trimmed):
        return trimmed
    return f"https://{trimmed}"


def require_url(value: str) -> str:
    """Normalize ``value`` and require the result to parse as a URL.

    Raises:
        ValueError: If the value is blank or not a valid URL or domain.
    """
    normalized = normalize_url(value)
    if not normalized or parse_url(normalized) is None:
        msg = "Must be a valid URL or domain name"
        raise ValueError(msg)
    return normalized
