"""
Backends Module — Durable whole-document stores.
"""

from .base import DurableBackend
from .http_api import HttpDocumentBackend
from .json_file import JsonFileBackend
from .memory import MemoryBackend
from .registry import create_backend

__all__ = [
    "DurableBackend",
    "MemoryBackend",
    "JsonFileBackend",
    "HttpDocumentBackend",
    "create_backend",
]
