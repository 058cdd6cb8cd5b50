"""In-memory key-value store."""

import copy

from food_track.services.storage import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store for local runs; values are deep-copied on the way in and out."""

    def __init__(self, initial: dict[str, object] | None = None) -> None:
        self._values: dict[str, object] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str) -> object | None:
        """Return a copy of the stored value."""
        return copy.deepcopy(self._values.get(key))

    def set(self, key: str, value: object) -> None:
        """Store a copy of the value."""
        self._values[key] = copy.deepcopy(value)

    def remove(self, key: str) -> None:
        """Delete a key if present."""
        self._values.pop(key, None)
