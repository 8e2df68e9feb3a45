"""Flat, thread-safe integer counters with no historical statistics."""

from __future__ import annotations

import operator
import re
import threading
from collections.abc import Iterable

_INT64_MIN = -(1 << 63)
_INT64_SPAN = 1 << 64


def _to_int64(value: int) -> int:
    """Wrap an integer into the signed 64-bit range, two's-complement style."""
    return (value - _INT64_MIN) % _INT64_SPAN + _INT64_MIN


class CounterStore:
    """A named collection of signed 64-bit counters.

    Counters spring into existence at zero on first update. Arithmetic
    wraps around like a 64-bit signed integer. Listing operations return
    keys in sorted order.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._values: dict[str, int] = {}

    def increment(self, key: str, amount: int = 1) -> int:
        """Add ``amount`` to the counter and return its new value."""
        amount = operator.index(amount)
        with self._lock:
            new_value = _to_int64(self._values.get(key, 0) + amount)
            self._values[key] = new_value
            return new_value

    def set(self, key: str, value: int) -> int:
        """Set the counter to ``value`` and return the stored value."""
        stored = _to_int64(operator.index(value))
        with self._lock:
            self._values[key] = stored
        return stored

    def clear(self, key: str) -> None:
        """Forget the counter; unknown keys are ignored."""
        with self._lock:
            self._values.pop(key, None)

    def clear_all(self) -> None:
        """Forget every counter."""
        with self._lock:
            self._values.clear()

    def zero_all(self) -> None:
        """Reset every counter to zero, keeping the keys."""
        with self._lock:
            for key in self._values:
                self._values[key] = 0

    def get(self, key: str) -> int:
        """Return the counter's value; raise KeyError if it does not exist."""
        with self._lock:
            try:
                return self._values[key]
            except KeyError:
                raise KeyError(f'no such counter "{key}"') from None

    def get_if_exists(self, key: str) -> int | None:
        """Return the counter's value, or None if it does not exist."""
        with self._lock:
            return self._values.get(key)

    def keys(self) -> list[str]:
        """Return all counter names in sorted order."""
        with self._lock:
            return sorted(self._values)

    def snapshot(self) -> dict[str, int]:
        """Return a copy of all counters, ordered by name."""
        with self._lock:
            return dict(sorted(self._values.items()))

    def selected(self, keys: Iterable[str]) -> dict[str, int]:
        """Return the values of those requested counters that exist."""
        with self._lock:
            found = {key: self._values[key] for key in keys if key in self._values}
        return dict(sorted(found.items()))

    def matching(self, regex: str) -> dict[str, int]:
        """Return counters whose whole name matches ``regex``."""
        pattern = re.compile(regex)
        with self._lock:
            return {
                key: value
                for key, value in sorted(self._values.items())
                if pattern.fullmatch(key)
            }

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._values

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)