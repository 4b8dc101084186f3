"""
Shared fixtures for store, backend, and CLI tests.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from blobcache.backends.memory import MemoryBackend
from blobcache.config.loader import ENV_VARS, MASTER_ENV_VAR
from blobcache.observability.metrics import MetricsRegistry
from blobcache.store import StoreFacade


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's BLOBCACHE_* settings out of every test."""
    monkeypatch.delenv(MASTER_ENV_VAR, raising=False)
    for env_var in ENV_VARS.values():
        monkeypatch.delenv(env_var, raising=False)


@pytest.fixture
def backend() -> MemoryBackend:
    """Empty in-memory backend."""
    return MemoryBackend()


@pytest.fixture
def registry() -> MetricsRegistry:
    """Private metrics registry so counts don't leak between tests."""
    return MetricsRegistry()


@pytest.fixture
def store(backend, registry) -> StoreFacade:
    """Facade over the empty in-memory backend."""
    return StoreFacade(backend, metrics=registry)


@pytest.fixture
def doc_file(tmp_path: Path) -> Path:
    """Path for a JSON document inside the temp dir (not created)."""
    return tmp_path / "state" / "cache.json"


def write_doc(path: Path, doc: dict) -> None:
    """Helper to write a document file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(doc, indent=2), encoding="utf-8")


@pytest.fixture(name="write_doc")
def write_doc_fixture():
    """The write_doc helper, as a fixture."""
    return write_doc


@pytest.fixture(autouse=True)
def restore_root_logger():
    """CLI invocations call setup_logging(); put the root logger back."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
