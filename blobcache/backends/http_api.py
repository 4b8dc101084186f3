"""
HTTP Document Backend — Whole document behind a single URL.

The remote service holds one JSON object per URL.

    GET  <url>  → 200 + JSON object, or 404 when nothing is stored yet
    PUT  <url>  ← JSON object, replaces the stored document

## Configuration

- BLOBCACHE_URL: document URL
- BLOBCACHE_API_KEY: optional bearer token
- BLOBCACHE_TIMEOUT: request timeout in seconds (default: 30)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from ..errors import BackendUnavailable
from .base import DurableBackend, encode_json_document

logger = logging.getLogger(__name__)


class HttpDocumentBackend(DurableBackend):
    """Durable backend reading and writing a document over HTTP."""

    def __init__(self, url: str, api_key: Optional[str] = None, timeout: float = 30):
        self.url = url
        self.api_key = api_key
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "http"

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": "blobcache/1.0",
        }
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def load(self) -> Dict[str, Any]:
        try:
            response = httpx.get(self.url, headers=self._headers(), timeout=self.timeout)
        except httpx.TimeoutException as e:
            raise BackendUnavailable(self.name, "load", f"timed out after {self.timeout}s") from e
        except httpx.RequestError as e:
            raise BackendUnavailable(self.name, "load", f"request failed: {e}") from e

        if response.status_code == 404:
            logger.debug(f"No document at {self.url}, starting empty")
            return {}

        if response.status_code >= 400:
            raise BackendUnavailable(
                self.name, "load", f"HTTP {response.status_code}: {response.text[:200]}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise BackendUnavailable(self.name, "load", f"response is not JSON: {e}") from e

        if not isinstance(data, dict):
            raise BackendUnavailable(
                self.name, "load", f"response holds {type(data).__name__}, expected an object"
            )

        logger.debug(f"Document loaded: {len(data)} keys from {self.url}")
        return data

    def save(self, doc: Mapping[str, Any]) -> None:
        body = encode_json_document(self.name, doc)

        headers = {**self._headers(), "Content-Type": "application/json"}

        try:
            response = httpx.put(self.url, content=body, headers=headers, timeout=self.timeout)
        except httpx.TimeoutException as e:
            raise BackendUnavailable(self.name, "save", f"timed out after {self.timeout}s") from e
        except httpx.RequestError as e:
            raise BackendUnavailable(self.name, "save", f"request failed: {e}") from e

        if response.status_code >= 400:
            raise BackendUnavailable(
                self.name, "save", f"HTTP {response.status_code}: {response.text[:200]}"
            )

        logger.debug(f"Document saved: {len(doc)} keys → {self.url}")

    def describe(self) -> Dict[str, Any]:
        return {
            "backend": self.name,
            "url": self.url,
            "authenticated": bool(self.api_key),
            "timeout": self.timeout,
        }
