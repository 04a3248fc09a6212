"""Minimal HTTP request builder and response wrapper."""
from .config import RestConfig
from .exceptions import RestError
from .http import RestResponse
from .rest import Rest, Verb

__all__ = ["Rest", "RestConfig", "RestError", "RestResponse", "Verb"]
