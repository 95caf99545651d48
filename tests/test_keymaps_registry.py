import pytest

from vimdoc_engine.keymaps import (
    Binding,
    Command,
    CommandKind,
    KeySequence,
    KeymapConflictError,
    KeymapRegistry,
)
from vimdoc_engine.keymaps.defaults import DEFAULT_BINDINGS, load_default_keymaps


def make_command(command_id: str = "test.command", modes: tuple[str, ...] = ()) -> Command:
    return Command(
        id=command_id,
        kind=CommandKind.EDIT,
        handler=lambda *args, **kwargs: None,
        modes=modes,
    )


def make_binding(
    *,
    binding_id: str,
    mode: str = "normal",
    keys: tuple[str, ...] = ("g", "g"),
    command_id: str = "test.command",
) -> Binding:
    return Binding(
        id=binding_id,
        mode=mode,
        sequence=KeySequence.from_strings(*keys),
        command_id=command_id,
    )


def test_register_binding_success() -> None:
    registry = KeymapRegistry()
    registry.register_command(make_command())
    binding = make_binding(binding_id="normal.gg")

    registry.register_binding(binding)

    assert registry.stats().binding_count == 1
    assert list(registry.iter_bindings(mode="normal")) == [binding]


def test_register_binding_conflict_detection() -> None:
    registry = KeymapRegistry()
    registry.register_command(make_command())
    registry.register_binding(make_binding(binding_id="normal.gg"))

    with pytest.raises(KeymapConflictError):
        registry.register_binding(make_binding(binding_id="normal.gg.duplicate"))


def test_same_sequence_in_other_scope_is_not_a_conflict() -> None:
    registry = KeymapRegistry()
    registry.register_command(make_command())
    registry.register_binding(make_binding(binding_id="normal.gg"))

    registry.register_binding(make_binding(binding_id="visual.gg", mode="visual"))

    assert registry.stats().modes == ("normal", "visual")


def test_replace_binding_swaps_conflicting_entry() -> None:
    registry = KeymapRegistry()
    registry.register_command(make_command())
    registry.register_binding(make_binding(binding_id="normal.gg"))

    registry.register_binding(make_binding(binding_id="normal.gg.new"), replace=True)

    assert [b.id for b in registry.iter_bindings("normal")] == ["normal.gg.new"]


def test_binding_requires_known_command() -> None:
    registry = KeymapRegistry()

    with pytest.raises(KeyError):
        registry.register_binding(make_binding(binding_id="normal.gg"))


def test_binding_scope_must_match_command_modes() -> None:
    registry = KeymapRegistry()
    registry.register_command(make_command(modes=("insert",)))

    with pytest.raises(ValueError):
        registry.register_binding(make_binding(binding_id="normal.gg"))


def test_duplicate_command_rejected_unless_replacing() -> None:
    registry = KeymapRegistry()
    registry.register_command(make_command())

    with pytest.raises(ValueError):
        registry.register_command(make_command())
    registry.register_command(make_command(), replace=True)


def test_unregister_binding_bumps_revision() -> None:
    registry = KeymapRegistry()
    registry.register_command(make_command())
    registry.register_binding(make_binding(binding_id="normal.gg"))
    revision = registry.revision()

    removed = registry.unregister_binding("normal.gg")

    assert removed is not None
    assert registry.revision() > revision
    assert registry.unregister_binding("normal.gg") is None


def test_override_sequence_timeouts() -> None:
    registry = KeymapRegistry()
    registry.register_command(make_command())
    registry.register_binding(make_binding(binding_id="normal.gg"))

    registry.override_sequence_timeouts(timeout_ms=250)

    assert registry.get_binding("normal.gg").sequence.timeout_ms == 250
    with pytest.raises(ValueError):
        registry.override_sequence_timeouts(timeout_ms=0)


def test_load_default_keymaps_registers_every_scope() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry, default_sequence_timeout_ms=400)

    stats = registry.stats()
    assert stats.binding_count == len(DEFAULT_BINDINGS)
    assert set(stats.modes) == {"normal", "insert", "visual", "replace", "command", "operator"}
    assert all(b.sequence.timeout_ms == 400 for b in registry.iter_bindings())


def test_load_default_keymaps_skips_bindings_of_excluded_commands() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry, exclude_commands=["history.redo"])

    with pytest.raises(KeyError):
        registry.get_command("history.redo")
    assert all(b.command_id != "history.redo" for b in registry.iter_bindings())


def test_per_mode_override_replaces_default_binding() -> None:
    registry = KeymapRegistry()
    override = make_binding(binding_id="normal.join_alt", keys=("x",), command_id="edit.join")

    load_default_keymaps(registry, per_mode_overrides={"normal": [override]})

    bound = [b for b in registry.iter_bindings("normal") if b.key_signature == "x"]
    assert [b.id for b in bound] == ["normal.join_alt"]


def test_per_mode_override_must_target_its_mode() -> None:
    override = make_binding(binding_id="normal.join_alt", keys=("x",), command_id="edit.join")

    with pytest.raises(ValueError):
        load_default_keymaps(KeymapRegistry(), per_mode_overrides={"insert": [override]})
