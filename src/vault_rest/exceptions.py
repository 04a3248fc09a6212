"""Custom exception hierarchy for the REST client."""
from __future__ import annotations


class RestError(RuntimeError):
    """Base error for request construction and transport failures."""

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class InvalidUrlError(RestError):
    """Raised when the target URL is missing or cannot be parsed."""


class TransportError(RestError):
    """Raised when the HTTP exchange cannot be completed."""


class EncodingError(RestError):
    """Raised when parameters or a request body cannot be encoded."""


class BuilderConsumedError(RestError):
    """Raised when a request builder is executed more than once."""
