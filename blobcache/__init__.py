"""
blobcache — Write-through key-value cache over a whole-document store.
"""

from .backends import DurableBackend, HttpDocumentBackend, JsonFileBackend, MemoryBackend, create_backend
from .config import StoreConfig, load_config, load_config_file
from .errors import BackendUnavailable, BlobCacheError, ConfigError
from .models import Lookup
from .store import StoreFacade

__version__ = "1.0.0"

__all__ = [
    "StoreFacade",
    "Lookup",
    "DurableBackend",
    "MemoryBackend",
    "JsonFileBackend",
    "HttpDocumentBackend",
    "create_backend",
    "StoreConfig",
    "load_config",
    "load_config_file",
    "BlobCacheError",
    "BackendUnavailable",
    "ConfigError",
]
