import pytest

from modal_engine.runtime import telemetry
from modal_engine.runtime.settings import EditorSettings
from modal_engine.runtime.telemetry import TelemetrySettings


def test_defaults() -> None:
    settings = EditorSettings()

    assert settings.undo_limit == 200
    assert settings.find_cross_line
    assert settings.shift_width == 4
    assert not settings.indent_colon


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MODAL_ENGINE_UNDO_LIMIT", "5")
    monkeypatch.setenv("MODAL_ENGINE_FINDCROSS", "0")
    monkeypatch.setenv("MODAL_ENGINE_INDENTCOLON", "yes")
    monkeypatch.setenv("MODAL_ENGINE_SHIFTWIDTH", "-2")
    monkeypatch.setenv("MODAL_ENGINE_TABWIDTH", "wide")

    settings = EditorSettings.from_env()

    assert settings.undo_limit == 5
    assert not settings.find_cross_line
    assert settings.indent_colon
    assert settings.shift_width == 4
    assert settings.tab_width == 4


def test_telemetry_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MODAL_ENGINE_LOG_LEVEL", "debug")
    monkeypatch.setenv("MODAL_ENGINE_DISABLE_CONSOLE", "1")
    monkeypatch.setenv("MODAL_ENGINE_LOG_BUFFER_SIZE", "oops")

    settings = TelemetrySettings.from_env()

    assert settings.level == "DEBUG"
    assert not settings.console
    assert settings.buffer_size == 2048


def test_configure_rejects_bad_arguments() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(preset="loud")
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="quiet")


def test_span_reraises_and_keeps_logging_usable() -> None:
    with pytest.raises(KeyError):
        with telemetry.span("test::failing", component=True, metadata={"k": 1}):
            raise KeyError("boom")

    telemetry.record_event("test.after_failure", level="debug", data={"ok": True})
