"""
Lookup Model — Result of reading a key.

Separates "key not found" from "key holds None", which a bare None return
can't express.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Lookup:
    """Outcome of StoreFacade.get()."""

    key: str
    found: bool
    value: Any = None

    @classmethod
    def hit(cls, key: str, value: Any) -> "Lookup":
        """The key is present (value may be None)."""
        return cls(key=key, found=True, value=value)

    @classmethod
    def miss(cls, key: str) -> "Lookup":
        """The key is absent."""
        return cls(key=key, found=False)

    def unwrap(self, default: Any = None) -> Any:
        """Return the stored value, or default on a miss."""
        return self.value if self.found else default

    def __bool__(self) -> bool:
        return self.found
