"""
Memory Backend — Process-local document store.

Keeps deep copies on both sides of the boundary, so it behaves like an
out-of-process store: nothing the facade does to its mirror leaks into
the "persisted" document. Used for tests and for throwaway stores.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Mapping, Optional

from ..errors import BackendUnavailable
from .base import DurableBackend

logger = logging.getLogger(__name__)


class MemoryBackend(DurableBackend):
    """
    In-memory durable backend with call counters and failure switches.
    """

    def __init__(self, initial: Optional[Mapping[str, Any]] = None):
        self._doc: Dict[str, Any] = copy.deepcopy(dict(initial or {}))
        self.load_calls = 0
        self.save_calls = 0
        self.fail_next_load = False
        self.fail_next_save = False

    @property
    def name(self) -> str:
        return "memory"

    def load(self) -> Dict[str, Any]:
        self.load_calls += 1
        if self.fail_next_load:
            self.fail_next_load = False
            raise BackendUnavailable(self.name, "load", "simulated load failure")
        return copy.deepcopy(self._doc)

    def save(self, doc: Mapping[str, Any]) -> None:
        self.save_calls += 1
        if self.fail_next_save:
            self.fail_next_save = False
            raise BackendUnavailable(self.name, "save", "simulated save failure")
        self._doc = copy.deepcopy(dict(doc))

    def replace(self, doc: Mapping[str, Any]) -> None:
        """Overwrite the document out-of-band, as another writer would."""
        logger.debug(f"Memory document replaced externally ({len(doc)} keys)")
        self._doc = copy.deepcopy(dict(doc))

    @property
    def document(self) -> Dict[str, Any]:
        """Copy of the persisted document, without counting as a load."""
        return copy.deepcopy(self._doc)
