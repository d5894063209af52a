"""Errors raised by the translation client."""
from typing import Optional


class TranslateError(Exception):
    """Base class for every error raised by the client."""


class ConfigurationError(TranslateError):
    """Missing credential or language settings; raised before any request."""


class DetectionError(TranslateError):
    """The detect endpoint returned no usable language."""


class TransportError(TranslateError):
    """The HTTP request failed (connection, timeout or non-2xx status)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(TranslateError):
    """The response body was not the JSON shape the service documents."""
