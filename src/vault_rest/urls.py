"""URL validation and query-string composition."""

from __future__ import annotations

from urllib.parse import urlsplit

from .exceptions import InvalidUrlError

_SUPPORTED_SCHEMES = frozenset({"http", "https"})


def validate_url(url: object) -> str:
    """Return ``url`` unchanged if it is an absolute http(s) URL."""

    if not isinstance(url, str) or not url.strip():
        raise InvalidUrlError("A request URL is required.")
    try:
        parsed = urlsplit(url)
        # Accessing the port validates it.
        parsed.port
    except ValueError as exc:
        raise InvalidUrlError(f"Malformed URL {url!r}: {exc}", cause=exc) from exc
    if parsed.scheme.lower() not in _SUPPORTED_SCHEMES:
        raise InvalidUrlError(f"Unsupported URL scheme in {url!r}; expected http or https.")
    if not parsed.hostname:
        raise InvalidUrlError(f"URL {url!r} does not name a host.")
    return url


def compose_url(base_url: str, encoded_parameters: str) -> str:
    """Append already-encoded parameters to the query string of ``base_url``.

    Existing query pairs are kept verbatim and ahead of the new ones.
    """

    if not encoded_parameters:
        return base_url
    base, hash_mark, fragment = base_url.partition("#")
    if "?" not in base:
        composed = f"{base}?{encoded_parameters}"
    elif base.endswith(("?", "&")):
        composed = f"{base}{encoded_parameters}"
    else:
        composed = f"{base}&{encoded_parameters}"
    return f"{composed}{hash_mark}{fragment}"


__all__ = ["compose_url", "validate_url"]
