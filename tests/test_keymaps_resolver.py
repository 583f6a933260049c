from __future__ import annotations

from modal_engine.keymaps import (
    ActionRef,
    Binding,
    KeySequence,
    KeymapRegistry,
    KeymapResolver,
    WhenClause,
)


def make_action(action_id: str) -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    binding_id: str,
    *,
    mode: str = "normal",
    keys: tuple[str, ...] = ("g", "g"),
    action_id: str = "core.test",
    when: tuple[WhenClause, ...] = (),
    priority: int = 0,
) -> Binding:
    return Binding(
        id=binding_id,
        mode=mode,
        sequence=KeySequence.from_strings(*keys),
        action_id=action_id,
        when=when,
        priority=priority,
    )


def build_registry(bindings: list[Binding]) -> KeymapRegistry:
    registry = KeymapRegistry()
    action_ids = {binding.action_id for binding in bindings}
    for action_id in action_ids:
        registry.register_action(make_action(action_id))
    for binding in bindings:
        registry.register_binding(binding)
    return registry


def test_resolver_matches_exact_sequence() -> None:
    binding = make_binding("normal.gg")
    registry = build_registry([binding])
    resolver = KeymapResolver(registry)

    result = resolver.resolve("normal", ("g", "g"))

    assert result.status == "match"
    assert result.match is not None
    assert result.match.binding.id == binding.id
    assert result.consumed == 2


def test_resolver_reports_pending_for_prefix() -> None:
    binding = make_binding("normal.gg")
    registry = build_registry([binding])
    resolver = KeymapResolver(registry)

    result = resolver.resolve("normal", ("g",))

    assert result.status == "pending"
    assert result.next_expected == ("g",)
    assert result.match is None


def test_resolver_exact_match_wins_over_longer_binding() -> None:
    short = make_binding("normal.g", keys=("g",), action_id="core.short")
    long = make_binding("normal.gx", keys=("g", "x"), action_id="core.long")
    registry = build_registry([short, long])
    resolver = KeymapResolver(registry)

    result = resolver.resolve("normal", ("g",))

    assert result.status == "match"
    assert result.match is not None
    assert result.match.action.id == "core.short"


def test_resolver_misses_unknown_continuation() -> None:
    registry = build_registry([make_binding("normal.gg")])
    resolver = KeymapResolver(registry)

    result = resolver.resolve("normal", ("g", "x"))

    assert result.status == "miss"
    assert result.consumed == 1


def test_resolver_is_mode_scoped() -> None:
    registry = build_registry([make_binding("insert.gg", mode="insert")])
    resolver = KeymapResolver(registry)

    assert resolver.resolve("normal", ("g", "g")).status == "miss"
    assert resolver.has_bindings("insert")
    assert not resolver.has_bindings("normal")


def test_resolver_honors_when_clauses() -> None:
    gating = make_binding(
        "panel.gg",
        when=(WhenClause("panel_open"),),
        action_id="core.panel",
    )
    registry = build_registry([gating])
    resolver = KeymapResolver(registry)

    miss = resolver.resolve("normal", ("g", "g"), context={})
    assert miss.status == "miss"

    hit = resolver.resolve("normal", ("g", "g"), context={"panel_open": True})
    assert hit.status == "match"
    assert hit.match is not None
    assert hit.match.binding.id == gating.id


def test_resolver_prefers_higher_priority() -> None:
    low = make_binding("low", action_id="core.low")
    high = make_binding(
        "high",
        action_id="core.high",
        when=(WhenClause("command_active"),),
        priority=5,
    )
    registry = KeymapRegistry()
    for action_id in ("core.low", "core.high"):
        registry.register_action(make_action(action_id))
    registry.register_binding(low)
    registry.register_binding(high)
    resolver = KeymapResolver(registry)

    result = resolver.resolve("normal", ("g", "g"), context={"command_active": True})

    assert result.match is not None
    assert result.match.binding.id == "high"


def test_resolver_cache_refreshes_on_revision() -> None:
    registry = build_registry([])
    resolver = KeymapResolver(registry)

    miss = resolver.resolve("normal", ("x",))
    assert miss.status == "miss"

    new_binding = make_binding("normal.x", keys=("x",), action_id="core.x")
    registry.register_action(make_action("core.x"))
    registry.register_binding(new_binding)

    match = resolver.resolve("normal", ("x",))
    assert match.status == "match"
    assert match.match is not None
    assert match.match.binding.id == new_binding.id
