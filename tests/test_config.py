from __future__ import annotations

import pytest

from pymapstore import MapStoreConfigError, StoreConfig


def test_defaults() -> None:
    config = StoreConfig()
    assert config.key_field == "uid"
    assert config.trace_enabled is False
    assert config.trace_max_items == 20


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAPSTORE_KEY_FIELD", " id ")
    monkeypatch.setenv("MAPSTORE_TRACE_ENABLED", "yes")
    monkeypatch.setenv("MAPSTORE_TRACE_MAX_ITEMS", "5")

    config = StoreConfig.from_env()

    assert config.key_field == "id"
    assert config.trace_enabled is True
    assert config.trace_max_items == 5


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAPSTORE_TRACE_ENABLED", "1")
    monkeypatch.setenv("MAPSTORE_TRACE_MAX_ITEMS", "not-a-number")

    config = StoreConfig.from_env(trace_enabled=False, trace_max_items=3)

    assert config.trace_enabled is False
    assert config.trace_max_items == 3


def test_from_env_unknown_bool_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAPSTORE_TRACE_ENABLED", "maybe")
    assert StoreConfig.from_env().trace_enabled is False


def test_invalid_values_raise(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAPSTORE_TRACE_MAX_ITEMS", "lots")
    with pytest.raises(MapStoreConfigError):
        StoreConfig.from_env()

    with pytest.raises(MapStoreConfigError):
        StoreConfig(key_field="")
    with pytest.raises(MapStoreConfigError):
        StoreConfig(trace_max_items=-1)


@pytest.mark.parametrize(("raw", "expected"), [("ON", True), (" 1 ", True), ("off", False), ("0", False), ("", False)])
def test_from_env_parses_trace_flag(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
    monkeypatch.setenv("MAPSTORE_TRACE_ENABLED", raw)
    assert StoreConfig.from_env().trace_enabled is expected
