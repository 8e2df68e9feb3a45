import pytest

from servicestats.options import FlagRegistry, OptionStore, SetOptionResult


def test_static_option_round_trip():
    store = OptionStore()
    assert store.set_option_with_result("color", "blue") is SetOptionResult.CMDLINE_DISABLED
    assert store.get_option("color") == "blue"


def test_get_missing_option_raises():
    store = OptionStore()
    with pytest.raises(KeyError, match="no such option"):
        store.get_option("nothing_here")


def test_get_option_falls_back_to_flag():
    flags = FlagRegistry()
    flags.register("threads", 4)
    store = OptionStore(flags)
    assert store.get_option("threads") == "4"


def test_dynamic_option_uses_callbacks():
    seen = []
    store = OptionStore()
    store.register_dynamic_option("dyn", lambda: "current", seen.append)
    assert store.set_option_with_result("dyn", "new") is SetOptionResult.DYNAMIC
    assert seen == ["new"]
    assert store.get_option("dyn") == "current"


def test_dynamic_option_without_getter_reads_empty():
    store = OptionStore()
    store.register_dynamic_option("dyn", None, None)
    assert store.set_option_with_result("dyn", "x") is SetOptionResult.DYNAMIC
    assert store.get_option("dyn") == ""


def test_dynamic_option_overrides_static():
    store = OptionStore()
    store.set_option("shared", "static")
    store.register_dynamic_option("shared", lambda: "dynamic", None)
    assert store.get_option("shared") == "dynamic"


def test_dynamic_setter_error_propagates():
    def failing(value):
        raise ValueError("rejected")

    store = OptionStore()
    store.register_dynamic_option("dyn", None, failing)
    with pytest.raises(ValueError, match="rejected"):
        store.set_option("dyn", "x")


def test_blacklisted_option_is_stored_but_not_a_flag():
    flags = FlagRegistry()
    flags.register("logmailer", "off")
    store = OptionStore(flags, use_options_as_flags=True)
    result = store.set_option_with_result("logmailer", "on")
    assert result is SetOptionResult.CMDLINE_BLACKLISTED
    assert store.get_option("logmailer") == "on"
    assert flags.get("logmailer") == "off"


def test_verbosity_flag_always_updatable():
    flags = FlagRegistry()
    flags.set("minloglevel", "2")
    store = OptionStore(flags)
    assert store.set_option_with_result("v", "3") is SetOptionResult.CMDLINE_UPDATED
    assert flags.get("v") == "3"
    assert flags.get("minloglevel") == "0"


def test_vmodule_sets_module_levels():
    flags = FlagRegistry()
    store = OptionStore(flags)
    result = store.set_option_with_result("vmodule", "alpha=2,broken")
    assert result is SetOptionResult.CMDLINE_UPDATED
    assert flags.vlog_level("alpha") == 2
    assert flags.vlog_level("other") == 0


def test_vlog_level_glob_and_lenient_number():
    flags = FlagRegistry()
    flags.set_vmodule("net*=5x")
    assert flags.vlog_level("network") == 5


def test_flag_not_updated_without_permission():
    flags = FlagRegistry()
    flags.register("threads", 4)
    store = OptionStore(flags)
    assert store.set_option_with_result("threads", "8") is SetOptionResult.CMDLINE_DISABLED
    assert flags.get("threads") == "4"


def test_flag_updated_when_options_are_flags():
    flags = FlagRegistry()
    flags.register("threads", 4)
    store = OptionStore(flags, use_options_as_flags=True)
    assert store.set_option_with_result("threads", "8") is SetOptionResult.CMDLINE_UPDATED
    assert flags.get("threads") == "8"


def test_unknown_or_invalid_flag_is_no_update():
    flags = FlagRegistry()
    flags.register("threads", 4)
    store = OptionStore(flags, use_options_as_flags=True)
    assert store.set_option_with_result("unknown", "1") is SetOptionResult.CMDLINE_NO_UPDATE
    assert store.set_option_with_result("threads", "many") is SetOptionResult.CMDLINE_NO_UPDATE
    assert flags.get("threads") == "4"


def test_bool_flag_parsing():
    flags = FlagRegistry()
    flags.register("verbose", False)
    assert flags.set("verbose", "yes") is not None
    assert flags.get("verbose") == "true"
    assert flags.set("verbose", "maybe") is None
    assert flags.get("verbose") == "true"


def test_flag_get_unknown_raises():
    with pytest.raises(KeyError):
        FlagRegistry().get("nope")


def test_flags_all_contains_logging_flags():
    everything = FlagRegistry().all()
    assert {"v", "vmodule", "minloglevel"} <= set(everything)
    assert list(everything) == sorted(everything)


def test_get_options_reports_getter_errors():
    def failing():
        raise RuntimeError("boom")

    store = OptionStore()
    store.set_option("a", "1")
    store.register_dynamic_option("b", failing, None)
    store.register_dynamic_option("c", None, None)
    assert store.get_options() == {"a": "1", "b": "<error: boom>", "c": ""}


def test_get_options_merges_flags_when_enabled():
    flags = FlagRegistry()
    flags.register("threads", 4)
    store = OptionStore(flags)
    assert "threads" not in store.get_options()
    store.use_options_as_flags = True
    assert store.use_options_as_flags is True
    assert store.get_options()["threads"] == "4"


def test_clear_keeps_dynamic_options():
    store = OptionStore()
    store.set_option("a", "1")
    store.register_dynamic_option("b", lambda: "x", None)
    store.clear()
    assert store.get_options() == {"b": "x"}
    with pytest.raises(KeyError):
        store.get_option("a")