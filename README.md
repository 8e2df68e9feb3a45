# servicestats

A small, thread-safe registry of runtime information for a long-running
service. It holds three things:

- **flat counters**: named signed 64-bit integers. You can increment, set,
  clear and query them. Arithmetic wraps around the way a 64-bit signed
  integer does.
- **exported values**: named strings that describe the running service.
- **options**: named string settings. An option is either static or dynamic.
  A dynamic option is backed by getter and setter callbacks. Options can also
  drive a registry of typed, command-line-style flags.

The package has no dependencies outside the standard library. It supports
Python 3.10 and later.

## Quick start

```python
from servicestats.service_data import ServiceData, get_service_data

data = ServiceData()

data.increment_counter("requests")        # 1
data.increment_counter("requests", 2)     # 3
data.set_counter("queue_depth", 7)

data.get_counter("requests")              # 3
data.get_counter_if_exists("missing")     # None
data.has_counter("queue_depth")           # True
data.get_num_counters()                   # 2
data.get_counters()                       # {'queue_depth': 7, 'requests': 3}
data.get_selected_counters(["requests", "missing"])  # {'requests': 3}
data.get_regex_counters(r"req.*")         # {'requests': 3}

data.set_exported_value("build", "release-42")
data.get_exported_value("build")          # 'release-42'
data.get_exported_value("unknown")        # ''

data.register_dynamic_option(
    "threads",
    getter=lambda: "8",
    setter=lambda value: print("threads ->", value),
)
data.set_option("threads", "16")          # calls the setter
data.get_option("threads")                # '8', from the getter
```

Some lookups raise `KeyError` when the name is not known: `get_counter` does,
and so does `get_option`. `get_exported_value` does not. It returns an empty
string instead. Regular expressions must match the whole name.

Every listing method returns a dictionary or list sorted by name.

`reset_all_data()` forgets every counter, every exported value and every static
option. Dynamic options stay registered. `zero_stats()` sets every counter to
zero and keeps the counters. `alive_since` holds the creation time of the
instance, in whole seconds since the epoch.

## Process-wide instance

`get_service_data()` always returns the same `ServiceData` for the whole
process. Create your own `ServiceData()` only when you want a set of data that
is kept apart from the shared one.

## Options and flags

`set_option_with_result(key, value)` returns a `SetOptionResult` member:

- `DYNAMIC`: the value went to a dynamic option's setter. Any exception that
  the setter raises propagates to the caller.
- `CMDLINE_BLACKLISTED`: the value was stored as a static option. The options
  `logmailer` and `whitelist_flags` never update flags.
- `CMDLINE_DISABLED`: the value was stored as a static option only. Flag
  updates are turned off for this key.
- `CMDLINE_NO_UPDATE`: the value was stored, but the flag was not updated.
  This happens when no flag has that name or when the text is not valid for
  the flag's type.
- `CMDLINE_UPDATED`: the value was stored and the flag of the same name was
  updated.

You declare flags with `register_flag(name, default)`. The type of the default
value becomes the flag's type: `bool`, `int`, `float` or `str`. The flags `v`,
`vmodule` and `minloglevel` always exist. The options `v` and `vmodule` always
update their flags. Setting either of them also resets `minloglevel` to 0. A
`vmodule` value is a comma-separated list of `module=level` entries. After it
is set, `flags.vlog_level(module)` returns the level for that module. Module
names may use shell-style wildcards, and any module that matches nothing gets
the value of `v`.

Every other option updates a flag only when `use_options_as_flags` is set to
`True`. While it is on, `get_options()` lists every flag as well. Turning it on
logs a warning, because any caller that can set options can then change any
flag. `get_option` falls back to a flag of the same name when no dynamic or
static option has that name.

`get_options()` shows what a dynamic option's getter returns. If the getter
raises, it shows the text `<error: message>` instead.

## Lower-level building blocks

`ServiceData` is assembled from parts that you can also use on their own:

- `servicestats.counters.CounterStore`
- `servicestats.exported_values.ExportedValues`
- `servicestats.options.OptionStore`, `servicestats.options.FlagRegistry`
  and `servicestats.options.SetOptionResult`

## What this package does not do

Everything stays in memory. The package keeps no statistics over time: it has
no time-series averages, rates or sums, no histograms and no percentiles. It
does not persist data. It has no server or network interface for publishing
counters. It has no command-line program. Its flags live only in the registry
and are not read from the process's command line.

## Tests

The `test` extra installs pytest, and the test suite lives in `tests/`.