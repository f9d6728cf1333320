from __future__ import annotations

from typing import Dict, MutableMapping, Optional, Protocol


class KeyValueStore(Protocol):
    """Minimal persistent string store the session manager writes to."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError


class MappingStore(KeyValueStore):
    """Adapter over any mutable mapping, e.g. ``flask.session``."""

    def __init__(self, backing: MutableMapping[str, str]):
        self._backing = backing

    def get(self, key: str) -> Optional[str]:
        value = self._backing.get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        self._backing[key] = value

    def remove(self, key: str) -> None:
        self._backing.pop(key, None)


class InMemoryStore(MappingStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        super().__init__(dict(initial or {}))
