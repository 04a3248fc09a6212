"""HTTP transport call and response wrapper."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

import requests
from requests.structures import CaseInsensitiveDict

from .exceptions import InvalidUrlError, TransportError

if TYPE_CHECKING:  # pragma: no cover - import-time guard
    from .config import RestConfig
    from .rest import PreparedCall


logger = logging.getLogger(__name__)

_URL_ERRORS = (
    requests.exceptions.InvalidURL,
    requests.exceptions.MissingSchema,
    requests.exceptions.InvalidSchema,
)


def mime_type_of(content_type: str | None) -> str:
    """Return the media type of a ``Content-Type`` value without its parameters."""

    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip()


@dataclass(frozen=True, slots=True)
class RestResponse:
    """Status, mime type and raw body of a completed HTTP exchange."""

    status: int
    mime_type: str
    body: bytes
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_requests(cls, response: requests.Response) -> RestResponse:
        headers = CaseInsensitiveDict(response.headers)
        return cls(
            status=response.status_code,
            mime_type=mime_type_of(headers.get("Content-Type")),
            body=response.content or b"",
            headers=MappingProxyType(headers),
        )

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300

    def text(self, encoding: str = "utf-8") -> str:
        return self.body.decode(encoding)


def _wire_url(composed: str, prepared: str) -> str:
    # requests requotes URLs; keep the caller's escapes when the URL is already wire-safe.
    if all(33 <= ord(char) < 127 for char in composed):
        return composed
    return prepared


def send(session: requests.Session, call: PreparedCall, config: RestConfig) -> RestResponse:
    """Execute ``call`` on ``session`` and wrap whatever comes back.

    Any completed exchange becomes a `RestResponse`, regardless of status.
    """

    request = requests.Request(
        method=call.verb.value,
        url=call.url,
        headers=dict(call.headers),
        data=call.body,
    )
    try:
        prepared = session.prepare_request(request)
        prepared.url = _wire_url(call.url, prepared.url)
        settings = session.merge_environment_settings(
            prepared.url, {}, None, config.verify_ssl, None
        )
        response = session.send(prepared, timeout=config.timeout(), **settings)
    except _URL_ERRORS as exc:
        raise InvalidUrlError(f"Transport rejected URL {call.url!r}: {exc}", cause=exc) from exc
    except requests.RequestException as exc:
        reason = str(exc).strip() or exc.__class__.__name__
        logger.warning("REST request %s failed: %s", call.verb.value, reason)
        raise TransportError(f"Failed to communicate with remote service: {reason}", cause=exc) from exc
    return RestResponse.from_requests(response)


__all__ = ["RestResponse", "mime_type_of", "send"]
