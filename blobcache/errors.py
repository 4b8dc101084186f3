"""
Errors — Exception taxonomy for the cache facade and its backends.

A missing key is never an error: lookups return a miss, removes of absent
keys are no-ops. Only host-level backend failures and bad configuration
raise.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class BlobCacheError(Exception):
    """Base exception for blobcache."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class BackendUnavailable(BlobCacheError):
    """
    The durable backend failed to load or save the document.

    Raised by backends (chained to the host error) and propagated unchanged
    by the facade. Nothing retries it.
    """

    def __init__(self, backend: str, operation: str, message: str):
        super().__init__(
            "BACKEND_UNAVAILABLE",
            f"{backend} {operation} failed: {message}",
            {"backend": backend, "operation": operation},
        )
        self.backend = backend
        self.operation = operation


class ConfigError(BlobCacheError):
    """Invalid or incomplete store configuration."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIG_ERROR", message, details)
