"""Fluent request builder and verb-dependent parameter routing."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum

import requests
import urllib3
from urllib3.exceptions import InsecureRequestWarning

from .config import RestConfig
from .encoding import FORM_CONTENT_TYPE, encode_parameters
from .exceptions import BuilderConsumedError, EncodingError
from .http import RestResponse, send
from .urls import compose_url, validate_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RequestSpec:
    """Snapshot of everything a builder has accumulated."""

    url: str
    parameters: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | str | None = None


@dataclass(frozen=True, slots=True)
class PreparedCall:
    """A fully routed request, ready for the transport."""

    verb: Verb
    url: str
    headers: Mapping[str, str]
    body: bytes | None = None


class Verb(str, Enum):
    """Supported HTTP methods and where each puts its parameters."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @property
    def sends_body(self) -> bool:
        return self in (Verb.POST, Verb.PUT)

    def route(self, spec: RequestSpec, charset: str = "utf-8") -> PreparedCall:
        """Place ``spec.parameters`` in the query string or the body.

        Read verbs merge parameters into the URL and never send a body. Write
        verbs keep the URL verbatim and send either the raw body, when one was
        given, or the form-encoded parameters.
        """

        headers = dict(spec.headers)
        _check_header_values(headers)
        if not self.sends_body:
            encoded = encode_parameters(spec.parameters, charset)
            return PreparedCall(self, compose_url(spec.url, encoded), headers)

        if spec.body is not None:
            return PreparedCall(self, spec.url, headers, _encode_body(spec.body, charset) or None)

        encoded = encode_parameters(spec.parameters, charset)
        if not encoded:
            return PreparedCall(self, spec.url, headers)
        if not _has_header(headers, "Content-Type"):
            headers["Content-Type"] = FORM_CONTENT_TYPE
        # Form encoding leaves only ASCII behind.
        return PreparedCall(self, spec.url, headers, encoded.encode("ascii"))


def _encode_body(body: bytes | str, charset: str) -> bytes:
    if isinstance(body, bytes):
        return body
    try:
        return body.encode(charset)
    except (UnicodeError, LookupError) as exc:
        raise EncodingError(f"Unable to encode request body as {charset}: {exc}", cause=exc) from exc


def _check_header_values(headers: Mapping[str, str]) -> None:
    # http.client writes header values as latin-1.
    for name, value in headers.items():
        if not isinstance(value, str):
            continue
        try:
            value.encode("latin-1")
        except UnicodeError as exc:
            raise EncodingError(
                f"Header {name!r} has a value that cannot be sent as latin-1: {exc}", cause=exc
            ) from exc


def _has_header(headers: Mapping[str, str], name: str) -> bool:
    target = name.lower()
    return any(key.lower() == target for key in headers)


def _merge_headers(defaults: Mapping[str, str], overrides: Mapping[str, str]) -> dict[str, str]:
    merged = {
        key: value
        for key, value in defaults.items()
        if not _has_header(overrides, key)
    }
    merged.update(overrides)
    return merged


class Rest:
    """Single-use builder for one HTTP request.

    Configure it with chained calls, then invoke exactly one of `get`, `post`,
    `put` or `delete`::

        response = Rest().set_url(url).add_parameter("foo", "bar").put()
    """

    def __init__(
        self,
        config: RestConfig | None = None,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self.config = replace(config) if config else RestConfig()
        self._session = session
        self._url: str | None = None
        self._parameters: dict[str, str] = {}
        self._headers: dict[str, str] = {}
        self._body: bytes | str | None = None
        self._consumed = False

    # Configuration -----------------------------------------------------------
    def set_url(self, url: str) -> Rest:
        self._url = url
        return self

    def add_parameter(self, name: str, value: str) -> Rest:
        self._parameters[name] = value
        return self

    def add_header(self, name: str, value: str) -> Rest:
        """Set a header; a later name differing only in case replaces the earlier one."""
        for existing in [key for key in self._headers if key.lower() == name.lower()]:
            del self._headers[existing]
        self._headers[name] = value
        return self

    url = set_url
    parameter = add_parameter
    header = add_header

    def body(self, payload: bytes | str) -> Rest:
        """Send ``payload`` verbatim on POST/PUT instead of the encoded parameters."""
        self._body = payload
        return self

    def connect_timeout(self, seconds: float | None) -> Rest:
        self.config.connect_timeout = seconds
        return self

    def read_timeout(self, seconds: float | None) -> Rest:
        self.config.read_timeout = seconds
        return self

    def ssl_verification(self, enabled: bool) -> Rest:
        self.config.verify_ssl = enabled
        return self

    def ca_bundle(self, path: str) -> Rest:
        self.config.verify_ssl = path
        return self

    # Introspection -----------------------------------------------------------
    def freeze(self) -> RequestSpec:
        """Return the accumulated state, with config default headers merged in."""

        return RequestSpec(
            url=validate_url(self._url),
            parameters=dict(self._parameters),
            headers=_merge_headers(self.config.resolved_headers(), self._headers),
            body=self._body,
        )

    def prepare(self, verb: Verb | str) -> PreparedCall:
        return Verb(verb.upper()).route(self.freeze(), self.config.charset)

    # Terminal verbs ------------------------------------------------------------
    def get(self) -> RestResponse:
        return self._execute(Verb.GET)

    def post(self) -> RestResponse:
        return self._execute(Verb.POST)

    def put(self) -> RestResponse:
        return self._execute(Verb.PUT)

    def delete(self) -> RestResponse:
        return self._execute(Verb.DELETE)

    # Internal helpers -------------------------------------------------------
    def _execute(self, verb: Verb) -> RestResponse:
        if self._consumed:
            raise BuilderConsumedError(
                "This request builder has already been executed; create a new one."
            )
        self._consumed = True
        call = self.prepare(verb)
        self._suppress_insecure_warning_if_needed()
        logger.info(
            "REST request %s %s (parameters=%d, body=%d bytes)",
            verb.value,
            self._url,
            len(self._parameters),
            len(call.body or b""),
        )
        if self._session is not None:
            return send(self._session, call, self.config)
        with requests.Session() as session:
            return send(session, call, self.config)

    def _suppress_insecure_warning_if_needed(self) -> None:
        if isinstance(self.config.verify_ssl, bool) and not self.config.verify_ssl:
            urllib3.disable_warnings(InsecureRequestWarning)


__all__ = ["PreparedCall", "RequestSpec", "Rest", "Verb"]
