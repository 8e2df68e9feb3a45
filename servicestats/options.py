"""Static options, dynamic options and the command-line flags they may drive."""

from __future__ import annotations

import enum
import fnmatch
import logging
import re
import threading
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_TRUE_WORDS = frozenset({"true", "t", "yes", "y", "1"})
_FALSE_WORDS = frozenset({"false", "f", "no", "n", "0"})
_BLACKLISTED_OPTIONS = frozenset({"logmailer", "whitelist_flags"})
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

FlagValue = bool | int | float | str
DynamicOptionGetter = Callable[[], str]
DynamicOptionSetter = Callable[[str], None]


class SetOptionResult(enum.Enum):
    """What setting an option actually did."""

    DYNAMIC = "dynamic"
    CMDLINE_BLACKLISTED = "cmdline_blacklisted"
    CMDLINE_DISABLED = "cmdline_disabled"
    CMDLINE_NO_UPDATE = "cmdline_no_update"
    CMDLINE_UPDATED = "cmdline_updated"


def _parse_flag_value(current: FlagValue, text: str) -> FlagValue:
    """Convert ``text`` to the type of ``current``; raise ValueError if it cannot."""
    if isinstance(current, bool):
        word = text.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        raise ValueError(f"invalid boolean value {text!r}")
    if isinstance(current, int):
        return int(text.strip())
    if isinstance(current, float):
        return float(text.strip())
    return text


def _format_flag_value(value: FlagValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _atoi(text: str) -> int:
    """Parse a leading integer the lenient way; return 0 when there is none."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


class FlagRegistry:
    """Typed process flags that can be changed at run time.

    The logging flags ``v``, ``vmodule`` and ``minloglevel`` are always present.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._flags: dict[str, FlagValue] = {}
        self._vmodules: dict[str, int] = {}
        self.register("v", 0)
        self.register("vmodule", "")
        self.register("minloglevel", 0)

    def register(self, name: str, value: FlagValue) -> None:
        """Define a flag whose type is that of its default ``value``."""
        with self._lock:
            self._flags[name] = value

    def set(self, name: str, value: str) -> str | None:
        """Set a flag from text.

        Return a description of the change, or None if no flag has this name
        or the text is not valid for the flag's type.
        """
        with self._lock:
            if name not in self._flags:
                return None
            try:
                parsed = _parse_flag_value(self._flags[name], value)
            except ValueError:
                return None
            self._flags[name] = parsed
        return f"{name} set to {_format_flag_value(parsed)}"

    def get(self, name: str) -> str:
        """Return a flag's current value as text; raise KeyError if unknown."""
        with self._lock:
            try:
                return _format_flag_value(self._flags[name])
            except KeyError:
                raise KeyError(f'no such flag "{name}"') from None

    def all(self) -> dict[str, str]:
        """Return every flag's current value as text, ordered by name."""
        with self._lock:
            return {
                name: _format_flag_value(value)
                for name, value in sorted(self._flags.items())
            }

    def set_vmodule(self, value: str) -> None:
        """Apply a ``module=level,...`` list of per-module verbosity levels."""
        for entry in value.split(","):
            parts = entry.split("=")
            if len(parts) != 2:
                logger.warning(
                    "Invalid vmodule value: %s. Expected <module>=<int>", entry
                )
                continue
            module, level_text = parts
            level = _atoi(level_text)
            logger.info("Setting vmodule: %s to %d", module, level)
            with self._lock:
                self._vmodules[module] = level
        self.set("minloglevel", "0")

    def vlog_level(self, module: str) -> int:
        """Return the verbosity for ``module``, falling back to the ``v`` flag."""
        with self._lock:
            if module in self._vmodules:
                return self._vmodules[module]
            for pattern, level in self._vmodules.items():
                if fnmatch.fnmatchcase(module, pattern):
                    return level
            default = self._flags.get("v", 0)
        return int(default)


@dataclass
class _DynamicOption:
    getter: DynamicOptionGetter | None = None
    setter: DynamicOptionSetter | None = None


class OptionStore:
    """Named string options, optionally backed by callbacks or flags."""

    def __init__(
        self,
        flags: FlagRegistry | None = None,
        use_options_as_flags: bool = False,
    ) -> None:
        self.flags = flags if flags is not None else FlagRegistry()
        self._lock = threading.Lock()
        self._options: dict[str, str] = {}
        self._dynamic: dict[str, _DynamicOption] = {}
        self._use_options_as_flags = False
        self.use_options_as_flags = use_options_as_flags

    @property
    def use_options_as_flags(self) -> bool:
        """Whether setting any option also updates the flag of that name."""
        return self._use_options_as_flags

    @use_options_as_flags.setter
    def use_options_as_flags(self, enabled: bool) -> None:
        if enabled:
            logger.warning(
                "Using options as flags lets remote callers change any "
                "process flag; consider a safer way to set properties "
                "dynamically"
            )
        self._use_options_as_flags = bool(enabled)

    def set_option(self, key: str, value: str) -> None:
        """Set an option, ignoring what action was taken."""
        self.set_option_with_result(key, value)

    def set_option_with_result(self, key: str, value: str) -> SetOptionResult:
        """Set an option and report what was done.

        Exceptions raised by a dynamic option's setter propagate.
        """
        with self._lock:
            dynamic = self._dynamic.get(key)
        if dynamic is not None:
            if dynamic.setter is not None:
                dynamic.setter(value)
            return SetOptionResult.DYNAMIC

        with self._lock:
            self._options[key] = value

        if key in _BLACKLISTED_OPTIONS:
            return SetOptionResult.CMDLINE_BLACKLISTED
        if not (self._use_options_as_flags or key in ("v", "vmodule")):
            return SetOptionResult.CMDLINE_DISABLED

        result = self.flags.set(key, value)
        if not result:
            logger.error("Couldn't set flag '%s' to val '%s'", key, value)
            return SetOptionResult.CMDLINE_NO_UPDATE
        if key == "vmodule":
            self.flags.set_vmodule(value)
        elif key == "v":
            self.flags.set("minloglevel", "0")
        logger.warning(
            "FLAG CHANGE: overrode '%s' to val '%s', res '%s'", key, value, result
        )
        return SetOptionResult.CMDLINE_UPDATED

    def get_option(self, key: str) -> str:
        """Return an option's value; raise KeyError if nothing has that name."""
        with self._lock:
            dynamic = self._dynamic.get(key)
            static = self._options.get(key)
        if dynamic is not None:
            return dynamic.getter() if dynamic.getter is not None else ""
        if static is not None:
            return static
        try:
            return self.flags.get(key)
        except KeyError:
            raise KeyError(f'no such option "{key}"') from None

    def get_options(self) -> dict[str, str]:
        """Return all options; a failing getter yields ``<error: ...>``."""
        with self._lock:
            result = dict(self._options)
            dynamic = dict(self._dynamic)
        for name, option in dynamic.items():
            value = ""
            if option.getter is not None:
                try:
                    value = option.getter()
                except Exception as exc:  # noqa: BLE001 - reported in the value
                    value = f"<error: {exc}>"
            result[name] = value
        if self._use_options_as_flags:
            result.update(self.flags.all())
        return dict(sorted(result.items()))

    def register_dynamic_option(
        self,
        name: str,
        getter: DynamicOptionGetter | None,
        setter: DynamicOptionSetter | None,
    ) -> None:
        """Route reads and writes of ``name`` to the given callbacks."""
        with self._lock:
            self._dynamic[name] = _DynamicOption(getter, setter)

    def clear(self) -> None:
        """Forget all static options; dynamic options stay registered."""
        with self._lock:
            self._options.clear()