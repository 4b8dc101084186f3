"""
Backend Base Class — Interface for durable document stores.

A durable backend knows exactly two things: hand back the whole persisted
document, and atomically replace it. No partial updates.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping

from ..errors import BackendUnavailable


class DurableBackend(ABC):
    """
    Abstract base class for all durable backends.

    Implementations raise BackendUnavailable (chained to the host error)
    for any storage, transport, or serialization failure.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The backend identifier (e.g., 'json_file', 'http')."""
        pass

    @abstractmethod
    def load(self) -> Dict[str, Any]:
        """
        Return the full persisted document.

        Returns an empty dict if nothing has been persisted yet.
        """
        pass

    @abstractmethod
    def save(self, doc: Mapping[str, Any]) -> None:
        """Atomically replace the persisted document with doc."""
        pass

    def describe(self) -> Dict[str, Any]:
        """Non-secret settings, for status output."""
        return {"backend": self.name}


def encode_json_document(backend: str, doc: Mapping[str, Any], **dumps_kwargs: Any) -> str:
    """
    Serialize doc to JSON, refusing anything JSON won't hand back unchanged.

    Tuples come back as lists, non-str dict keys as strings and NaN as a
    value that never compares equal, so persisting them would leave the
    mirror holding something the backend doesn't.

    Raises:
        BackendUnavailable: If doc can't be serialized or doesn't round-trip
    """
    data = dict(doc)
    try:
        payload = json.dumps(data, **dumps_kwargs)
    except (TypeError, ValueError) as e:
        raise BackendUnavailable(backend, "save", f"value not serializable: {e}") from e

    if json.loads(payload) != data:
        raise BackendUnavailable(backend, "save", "value does not round-trip through JSON")

    return payload
