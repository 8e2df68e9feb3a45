"""Thread-safe store of exported string values."""

from __future__ import annotations

import re
import threading
from collections.abc import Iterable


class ExportedValues:
    """A named collection of string values exported by a service.

    Listing operations return keys in sorted order.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._values: dict[str, str] = {}

    def set(self, key: str, value: str) -> None:
        """Create or replace the value stored under ``key``."""
        with self._lock:
            self._values[key] = value

    def delete(self, key: str) -> None:
        """Forget ``key``; unknown keys are ignored."""
        with self._lock:
            self._values.pop(key, None)

    def get(self, key: str) -> str:
        """Return the value for ``key``, or an empty string if it is unknown."""
        with self._lock:
            return self._values.get(key, "")

    def snapshot(self) -> dict[str, str]:
        """Return a copy of all values, ordered by key."""
        with self._lock:
            return dict(sorted(self._values.items()))

    def selected(self, keys: Iterable[str]) -> dict[str, str]:
        """Return the values of those requested keys that exist."""
        with self._lock:
            found = {key: self._values[key] for key in keys if key in self._values}
        return dict(sorted(found.items()))

    def matching(self, regex: str) -> dict[str, str]:
        """Return values whose whole key matches ``regex``."""
        pattern = re.compile(regex)
        return {
            key: value
            for key, value in self.snapshot().items()
            if pattern.fullmatch(key)
        }

    def clear(self) -> None:
        """Forget every value."""
        with self._lock:
            self._values.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._values

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)