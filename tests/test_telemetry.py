import pytest

from vimdoc_engine.runtime import telemetry


def test_env_flag_reads_prefixed_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VIMDOC_PROFILE", "Yes")
    monkeypatch.delenv("VIMDOC_LOG_JSON", raising=False)

    assert telemetry.env_flag("PROFILE", False) is True
    assert telemetry.env_flag("LOG_JSON", True) is True
    monkeypatch.setenv("VIMDOC_LOG_JSON", "0")
    assert telemetry.env_flag("LOG_JSON", True) is False


def test_unknown_preset_is_rejected() -> None:
    with pytest.raises(ValueError):
        telemetry.preset_config("chatty")


def test_unknown_setting_is_rejected() -> None:
    with pytest.raises(ValueError):
        telemetry.build_config({"not_a_setting": True})


def test_configure_refuses_config_and_preset_together() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="development")


def test_loggers_are_cached_until_reconfigured() -> None:
    telemetry.configure(preset="development")
    first = telemetry.get_logger("vimdoc_engine.tests")

    assert telemetry.get_logger("vimdoc_engine.tests") is first

    telemetry.configure()
    assert telemetry.get_logger("vimdoc_engine.tests") is not first


def test_span_reraises_errors() -> None:
    with pytest.raises(RuntimeError, match="boom"):
        with telemetry.span("tests::span", component=True, metadata={"k": 1}) as handle:
            handle.add_metadata("stage", "before")
            raise RuntimeError("boom")
