"""
JSON File Backend — Whole document as one JSON object on disk.

Saves use atomic write (write to temp, then rename) so a crash or a
serialization failure never leaves a truncated document behind.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping

from ..errors import BackendUnavailable
from .base import DurableBackend, encode_json_document

logger = logging.getLogger(__name__)


class JsonFileBackend(DurableBackend):
    """Durable backend storing the document in a JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    @property
    def name(self) -> str:
        return "json_file"

    @property
    def temp_path(self) -> Path:
        return self.path.with_suffix(self.path.suffix + ".tmp")

    def load(self) -> Dict[str, Any]:
        """
        Load the document from disk.

        Returns:
            Parsed document, or an empty dict if the file doesn't exist

        Raises:
            BackendUnavailable: If the file can't be read, isn't valid JSON,
                or doesn't hold a JSON object
        """
        if not self.path.exists():
            logger.debug(f"No document at {self.path}, starting empty")
            return {}

        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise BackendUnavailable(self.name, "load", f"invalid JSON in {self.path}: {e}") from e
        except OSError as e:
            raise BackendUnavailable(self.name, "load", f"cannot read {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise BackendUnavailable(
                self.name, "load", f"{self.path} holds {type(data).__name__}, expected an object"
            )

        logger.debug(f"Document loaded: {len(data)} keys from {self.path}")
        return data

    def save(self, doc: Mapping[str, Any]) -> None:
        """
        Save the document to disk.

        Args:
            doc: Full document to persist

        Raises:
            BackendUnavailable: If a value can't be serialized or the file
                can't be written
        """
        # Serialize before touching the filesystem
        payload = encode_json_document(self.name, doc, indent=4, ensure_ascii=False)

        temp_path = self.temp_path
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with temp_path.open("w", encoding="utf-8") as f:
                f.write(payload)
                f.write("\n")
            temp_path.replace(self.path)
        except OSError as e:
            temp_path.unlink(missing_ok=True)
            raise BackendUnavailable(self.name, "save", f"cannot write {self.path}: {e}") from e

        logger.debug(f"Document saved: {len(doc)} keys → {self.path.name}")

    def describe(self) -> Dict[str, Any]:
        return {"backend": self.name, "path": str(self.path)}
