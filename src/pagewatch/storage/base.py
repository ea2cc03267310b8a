"""Key-value store contract plus the in-memory implementation.

A store behaves like extension local storage: ``get`` resolves to a mapping
that simply lacks missing keys, ``set`` writes a partial record and
``remove`` drops one key.  Values are JSON-compatible.
"""

from __future__ import annotations

import copy
from typing import Any, Mapping, Protocol


class KeyValueStore(Protocol):
    async def get(self, key: str) -> dict[str, Any]:
        """Return ``{key: value}``, or ``{}`` when the key is absent."""
        ...

    async def set(self, items: Mapping[str, Any]) -> None:
        """Write every key of ``items``."""
        ...

    async def remove(self, key: str) -> None:
        """Delete ``key``; absent keys are ignored."""
        ...


class MemoryStore:
    """Process-local store.  Values are deep-copied in and out so callers
    never share mutable state with the store."""

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(dict(initial or {}))

    async def get(self, key: str) -> dict[str, Any]:
        if key not in self._data:
            return {}
        return {key: copy.deepcopy(self._data[key])}

    async def set(self, items: Mapping[str, Any]) -> None:
        for key, value in items.items():
            self._data[key] = copy.deepcopy(value)

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)
