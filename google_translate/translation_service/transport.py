"""
HTTP transport for the translation client

The client only needs one operation: GET a URL and hand back the decoded JSON
object. Anything implementing ``get_json`` can be injected, which is how the
tests run without network access.
"""
from __future__ import annotations
import re
import logging
from typing import Any, Dict, Optional, Protocol

import requests

from .exceptions import TransportError, DecodeError

logger = logging.getLogger(__name__)

KEY_PATTERN = re.compile(r"([?&]key=)[^&\s'\")]*")


def mask_key(text: str) -> str:
    """Hide the credential in a URL or in an error message quoting one."""
    return KEY_PATTERN.sub(r'\1***', text)


class HttpTransport(Protocol):
    """GET a URL and return the decoded JSON object."""

    def get_json(self, url: str) -> Dict[str, Any]:
        ...


class RequestsTransport:
    """HttpTransport backed by a ``requests.Session``."""

    def __init__(
        self,
        timeout: float = 10.0,
        headers: Optional[Dict[str, str]] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Args:
            timeout: per-request timeout in seconds
            headers: extra headers sent with every request
            session: pre-configured session (proxies, adapters, ...)
        """
        self.timeout = timeout
        self.session = session or requests.Session()
        if headers:
            self.session.headers.update(headers)

    def get_json(self, url: str) -> Dict[str, Any]:
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.error(f"Translate API returned HTTP {status}")
            raise TransportError(f"HTTP error {status} from translate API", status_code=status) from e
        except requests.exceptions.RequestException as e:
            message = mask_key(str(e))
            logger.error(f"Translate API request failed: {message}")
            raise TransportError(f"Request to translate API failed: {message}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise DecodeError("Response body is not valid JSON") from e

        if not isinstance(data, dict):
            raise DecodeError(f"Expected a JSON object, got {type(data).__name__}")
        return data

    def close(self):
        self.session.close()
