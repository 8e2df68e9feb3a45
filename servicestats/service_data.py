"""The central store of a service's counters, exported values and options."""

from __future__ import annotations

import functools
import time
from collections.abc import Iterable

from servicestats.counters import CounterStore
from servicestats.exported_values import ExportedValues
from servicestats.options import (
    DynamicOptionGetter,
    DynamicOptionSetter,
    FlagRegistry,
    FlagValue,
    OptionStore,
    SetOptionResult,
)


class ServiceData:
    """Flat counters, exported string values and options for one service.

    A process normally shares the instance returned by ``get_service_data()``.
    Separate instances keep completely independent sets of data.
    """

    def __init__(self) -> None:
        self.alive_since = int(time.time())
        self.counters = CounterStore()
        self.exported_values = ExportedValues()
        self.options = OptionStore()

    @property
    def flags(self) -> FlagRegistry:
        """The flags that options may drive."""
        return self.options.flags

    @property
    def use_options_as_flags(self) -> bool:
        """Whether setting any option also updates the flag of that name."""
        return self.options.use_options_as_flags

    @use_options_as_flags.setter
    def use_options_as_flags(self, enabled: bool) -> None:
        self.options.use_options_as_flags = enabled

    def reset_all_data(self) -> None:
        """Forget all counters, exported values and static options."""
        self.options.clear()
        self.counters.clear_all()
        self.exported_values.clear()

    def zero_stats(self) -> None:
        """Set every counter to zero, keeping the counters themselves."""
        self.counters.zero_all()

    def increment_counter(self, key: str, amount: int = 1) -> int:
        """Add ``amount`` to a counter and return its new value."""
        return self.counters.increment(key, amount)

    def set_counter(self, key: str, value: int) -> int:
        """Set a counter and return the stored value."""
        return self.counters.set(key, value)

    def clear_counter(self, key: str) -> None:
        """Forget a counter; unknown keys are ignored."""
        self.counters.clear(key)

    def get_counter(self, key: str) -> int:
        """Return a counter's value; raise KeyError if there is none."""
        return self.counters.get(key)

    def get_counter_if_exists(self, key: str) -> int | None:
        """Return a counter's value, or None if there is none."""
        return self.counters.get_if_exists(key)

    def get_counter_keys(self) -> list[str]:
        """Return the names of all counters."""
        return self.counters.keys()

    def get_num_counters(self) -> int:
        """Return how many counters exist."""
        return len(self.counters)

    def get_counters(self) -> dict[str, int]:
        """Return every counter, ordered by name."""
        return self.counters.snapshot()

    def get_selected_counters(self, keys: Iterable[str]) -> dict[str, int]:
        """Return those of the named counters that exist."""
        return self.counters.selected(keys)

    def get_regex_counters(self, regex: str) -> dict[str, int]:
        """Return the counters whose whole name matches ``regex``."""
        return self.counters.matching(regex)

    def has_counter(self, key: str) -> bool:
        """Return whether a counter with this name exists."""
        return key in self.counters

    def set_exported_value(self, key: str, value: str) -> None:
        """Create or replace an exported value."""
        self.exported_values.set(key, value)

    def delete_exported_key(self, key: str) -> None:
        """Forget an exported value; unknown keys are ignored."""
        self.exported_values.delete(key)

    def get_exported_value(self, key: str) -> str:
        """Return an exported value, or an empty string if it is unknown."""
        return self.exported_values.get(key)

    def get_exported_values(self) -> dict[str, str]:
        """Return every exported value, ordered by key."""
        return self.exported_values.snapshot()

    def get_selected_exported_values(self, keys: Iterable[str]) -> dict[str, str]:
        """Return those of the named exported values that exist."""
        return self.exported_values.selected(keys)

    def get_regex_exported_values(self, regex: str) -> dict[str, str]:
        """Return the exported values whose whole key matches ``regex``."""
        return self.exported_values.matching(regex)

    def register_flag(self, name: str, value: FlagValue) -> None:
        """Define a flag that options may update."""
        self.flags.register(name, value)

    def set_option(self, key: str, value: str) -> None:
        """Set an option."""
        self.options.set_option(key, value)

    def set_option_with_result(self, key: str, value: str) -> SetOptionResult:
        """Set an option and report what was done."""
        return self.options.set_option_with_result(key, value)

    def get_option(self, key: str) -> str:
        """Return an option's value; raise KeyError if nothing has that name."""
        return self.options.get_option(key)

    def get_options(self) -> dict[str, str]:
        """Return all options, ordered by name."""
        return self.options.get_options()

    def register_dynamic_option(
        self,
        name: str,
        getter: DynamicOptionGetter | None,
        setter: DynamicOptionSetter | None,
    ) -> None:
        """Route reads and writes of option ``name`` to the given callbacks."""
        self.options.register_dynamic_option(name, getter, setter)


@functools.lru_cache(maxsize=None)
def get_service_data() -> ServiceData:
    """Return the process-wide ServiceData instance."""
    return ServiceData()