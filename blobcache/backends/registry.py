"""
Backend Registry — Build a durable backend from configuration.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, Optional

from ..config.loader import StoreConfig
from ..errors import ConfigError
from .base import DurableBackend
from .http_api import HttpDocumentBackend
from .json_file import JsonFileBackend
from .memory import MemoryBackend

logger = logging.getLogger(__name__)


def _build_memory(config: StoreConfig, root: Optional[Path]) -> DurableBackend:
    return MemoryBackend()


def _build_json_file(config: StoreConfig, root: Optional[Path]) -> DurableBackend:
    path = Path(config.path)
    if root is not None and not path.is_absolute():
        path = root / path
    return JsonFileBackend(path)


def _build_http(config: StoreConfig, root: Optional[Path]) -> DurableBackend:
    if not config.url:
        raise ConfigError("http backend requires a url (BLOBCACHE_URL)")
    if not config.url.startswith(("http://", "https://")):
        raise ConfigError(f"Invalid backend URL: {config.url}")
    return HttpDocumentBackend(config.url, api_key=config.api_key, timeout=config.timeout)


BACKEND_BUILDERS: Dict[str, Callable[[StoreConfig, Optional[Path]], DurableBackend]] = {
    "memory": _build_memory,
    "json_file": _build_json_file,
    "http": _build_http,
}


def create_backend(config: StoreConfig, root: Optional[Path] = None) -> DurableBackend:
    """
    Create the durable backend named by config.backend.

    Args:
        config: Store configuration
        root: Base directory for relative file paths (default: cwd)

    Raises:
        ConfigError: If the backend kind is unknown or under-configured
    """
    builder = BACKEND_BUILDERS.get(config.backend)
    if builder is None:
        raise ConfigError(f"Unknown backend: {config.backend}")

    backend = builder(config, root)
    logger.info(f"Using {backend.name} backend")
    return backend
