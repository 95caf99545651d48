from __future__ import annotations

from vimdoc_engine.keymaps import (
    Binding,
    Command,
    CommandKind,
    KeySequence,
    KeymapRegistry,
    KeymapResolver,
)


def make_command(command_id: str) -> Command:
    return Command(id=command_id, kind=CommandKind.EDIT, handler=lambda *args: None)


def make_binding(
    binding_id: str,
    *,
    mode: str = "normal",
    keys: tuple[str, ...] = ("g", "g"),
    command_id: str = "test.command",
    priority: int = 0,
    timeout_ms: int = 1000,
) -> Binding:
    return Binding(
        id=binding_id,
        mode=mode,
        sequence=KeySequence.from_strings(*keys, timeout_ms=timeout_ms),
        command_id=command_id,
        priority=priority,
    )


def build_registry(bindings: list[Binding]) -> KeymapRegistry:
    registry = KeymapRegistry()
    for command_id in {binding.command_id for binding in bindings}:
        registry.register_command(make_command(command_id))
    for binding in bindings:
        registry.register_binding(binding)
    return registry


def test_resolver_matches_exact_sequence() -> None:
    binding = make_binding("normal.gg")
    resolver = KeymapResolver(build_registry([binding]))

    result = resolver.resolve("normal", ("g", "g"))

    assert result.status == "match"
    assert result.match is not None
    assert result.match.binding.id == binding.id
    assert result.consumed == 2


def test_resolver_reports_pending_for_prefix() -> None:
    resolver = KeymapResolver(build_registry([make_binding("normal.gg", timeout_ms=300)]))

    result = resolver.resolve("normal", ("g",))

    assert result.status == "pending"
    assert result.match is None
    assert result.next_expected == ("g",)
    assert result.timeout_ms == 300


def test_complete_match_that_is_also_a_prefix_is_held() -> None:
    registry = build_registry(
        [
            make_binding("normal.g", keys=("g",), command_id="test.short"),
            make_binding("normal.gx", keys=("g", "x"), command_id="test.long"),
        ]
    )
    resolver = KeymapResolver(registry)

    result = resolver.resolve("normal", ("g",))

    assert result.status == "pending"
    assert result.match is not None
    assert result.match.command.id == "test.short"


def test_resolver_misses_unknown_sequence() -> None:
    resolver = KeymapResolver(build_registry([make_binding("normal.gg")]))

    result = resolver.resolve("normal", ("g", "x"))

    assert result.status == "miss"
    assert result.consumed == 1


def test_scopes_are_isolated() -> None:
    resolver = KeymapResolver(build_registry([make_binding("normal.gg")]))

    assert resolver.resolve("visual", ("g", "g")).status == "miss"


def test_resolver_rebuilds_after_registry_changes() -> None:
    registry = build_registry([make_binding("normal.gg")])
    resolver = KeymapResolver(registry)
    assert resolver.resolve("normal", ("g", "g")).status == "match"

    registry.unregister_binding("normal.gg")

    assert resolver.resolve("normal", ("g", "g")).status == "miss"


def test_modifier_tokens_match_host_events() -> None:
    binding = Binding(
        id="normal.redo",
        mode="normal",
        sequence=KeySequence.from_strings("<C-r>"),
        command_id="test.command",
    )
    resolver = KeymapResolver(build_registry([binding]))

    assert resolver.resolve("normal", ("<C-r>",)).status == "match"
