# Translation Service Module
from .exceptions import (
    TranslateError,
    ConfigurationError,
    DetectionError,
    TransportError,
    DecodeError
)
from .transport import HttpTransport, RequestsTransport
from .translator import (
    ClientConfig,
    TranslationClient,
    build_request_url
)

__all__ = [
    "TranslateError",
    "ConfigurationError",
    "DetectionError",
    "TransportError",
    "DecodeError",
    "HttpTransport",
    "RequestsTransport",
    "ClientConfig",
    "TranslationClient",
    "build_request_url"
]
