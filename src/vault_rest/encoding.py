"""Form encoding helpers for request parameters."""

from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import parse_qsl, quote_plus

from .exceptions import EncodingError

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def encode_parameters(parameters: Mapping[str, str], charset: str = "utf-8") -> str:
    """Render ``parameters`` as an ``application/x-www-form-urlencoded`` string.

    Spaces become ``+``; reserved and non-ASCII characters are percent-encoded
    using ``charset``. Pairs keep the mapping's iteration order.
    """

    pairs: list[str] = []
    for name, value in parameters.items():
        try:
            pairs.append(
                f"{quote_plus(str(name), encoding=charset)}={quote_plus(str(value), encoding=charset)}"
            )
        except (UnicodeError, LookupError) as exc:
            raise EncodingError(
                f"Unable to encode parameter {name!r} as {charset}: {exc}", cause=exc
            ) from exc
    return "&".join(pairs)


def decode_parameters(encoded: str, charset: str = "utf-8") -> dict[str, str]:
    """Parse a form-encoded string back into a mapping (last value wins)."""

    try:
        return dict(parse_qsl(encoded, keep_blank_values=True, encoding=charset, errors="strict"))
    except (UnicodeError, LookupError) as exc:
        raise EncodingError(f"Unable to decode form data as {charset}: {exc}", cause=exc) from exc


__all__ = ["FORM_CONTENT_TYPE", "decode_parameters", "encode_parameters"]
