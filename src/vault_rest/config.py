"""Configuration helpers for the REST client."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_CONNECT_TIMEOUT = 5.0
DEFAULT_READ_TIMEOUT = 30.0


@dataclass(slots=True)
class RestConfig:
    """Transport options applied to every request a builder sends."""

    connect_timeout: float | None = DEFAULT_CONNECT_TIMEOUT
    read_timeout: float | None = DEFAULT_READ_TIMEOUT
    verify_ssl: bool | str = True
    default_headers: Mapping[str, str] | None = None
    charset: str = "utf-8"

    def timeout(self) -> tuple[float | None, float | None] | None:
        if self.connect_timeout is None and self.read_timeout is None:
            return None
        return (self.connect_timeout, self.read_timeout)

    def resolved_headers(self) -> dict[str, str]:
        return dict(self.default_headers or {})
