import pytest

from vimdoc_engine import EngineConfig
from vimdoc_engine.modes import EditorMode


def test_defaults_enable_every_mode() -> None:
    config = EngineConfig()

    assert config.enabled_modes == frozenset(EditorMode)
    assert config.key_buffer_timeout_ms == 1000
    assert config.coalesce_insert


def test_mode_names_are_normalized() -> None:
    config = EngineConfig(enabled_modes=frozenset({"normal", "insert"}))

    assert config.enabled_modes == {EditorMode.NORMAL, EditorMode.INSERT}


@pytest.mark.parametrize(
    "kwargs",
    [
        {"key_buffer_timeout_ms": 0},
        {"history_limit": 0},
        {"enabled_modes": frozenset({EditorMode.INSERT})},
    ],
)
def test_invalid_settings_rejected(kwargs) -> None:
    with pytest.raises(ValueError):
        EngineConfig(**kwargs)


def test_unknown_mode_name_rejected() -> None:
    with pytest.raises(ValueError):
        EngineConfig(enabled_modes=frozenset({"normal", "select"}))


def test_from_env_reads_prefixed_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VIMDOC_KEY_TIMEOUT_MS", "250")
    monkeypatch.setenv("VIMDOC_ENABLED_MODES", "normal, Visual")
    monkeypatch.setenv("VIMDOC_COALESCE_INSERT", "off")
    monkeypatch.setenv("VIMDOC_HISTORY_LIMIT", "50")
    monkeypatch.setenv("VIMDOC_IGNORE_CASE", "yes")

    config = EngineConfig.from_env()

    assert config.key_buffer_timeout_ms == 250
    assert config.enabled_modes == {EditorMode.NORMAL, EditorMode.VISUAL}
    assert not config.coalesce_insert
    assert config.history_limit == 50
    assert config.search_ignore_case


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VIMDOC_KEY_TIMEOUT_MS", "250")

    config = EngineConfig.from_env(key_buffer_timeout_ms=800, initial_text="abc")

    assert config.key_buffer_timeout_ms == 800
    assert config.initial_text == "abc"


def test_from_env_rejects_unknown_overrides() -> None:
    with pytest.raises(TypeError):
        EngineConfig.from_env(colour_scheme="dark")
