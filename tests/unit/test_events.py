"""Tests for handler resolution and the generative fallback."""

import asyncio

import pytest

from conftest import FakeBackend
from selfgen.caching import GenerationCache, InflightRequests, MemoryStore
from selfgen.context import ContextCapture, FullContext
from selfgen.core.errors import MalformedResultError, TransportError, UnregisteredHandlerError
from selfgen.events import (
    BuiltinHandler,
    EventResolver,
    FallbackOutcome,
    GenerativeFallback,
    HandlerRegistry,
    UIEvent,
    dispatch,
    is_handler_attribute,
)
from selfgen.placement import GrowthLimits
from selfgen.state import TreeStore
from selfgen.tree import ComponentNode, NodeMetadata, TextNode, collect_ids, find_by_id, walk


def make_fallback(store, backend, **options) -> GenerativeFallback:
    cache = options.pop("cache", None) or GenerationCache(MemoryStore())
    return GenerativeFallback(store, cache, backend, **options)


def toolbar_ids(store: TreeStore) -> list[str]:
    return [c.id for c in find_by_id(store.snapshot(), "toolbar").children]


# ============================================================================
# Registry
# ============================================================================

@pytest.mark.unit
def test_registry_has_builtins():
    registry = HandlerRegistry()
    assert set(registry.names()) == {kind.value for kind in BuiltinHandler}
    assert "noop" in registry
    assert 42 not in registry


@pytest.mark.unit
def test_registry_unknown_name_is_an_error():
    with pytest.raises(UnregisteredHandlerError):
        HandlerRegistry().lookup("handleClickMaybe")


@pytest.mark.unit
def test_registry_register():
    registry = HandlerRegistry()
    seen = []
    registry.register("track", seen.append)

    registry.lookup("track")(UIEvent(name="onClick"))

    assert len(seen) == 1
    with pytest.raises(ValueError):
        registry.register("", seen.append)
    with pytest.raises(ValueError):
        registry.register("bad", "not callable")  # type: ignore[arg-type]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_builtin_handlers_touch_event():
    registry = HandlerRegistry()
    event = UIEvent(name="onSubmit", target_id="form")

    await dispatch(registry.lookup("submitForm"), event)
    await dispatch(registry.lookup("stopPropagation"), event)

    assert event.default_prevented
    assert event.propagation_stopped


@pytest.mark.unit
def test_is_handler_attribute():
    assert is_handler_attribute("onClick")
    assert not is_handler_attribute("once")
    assert not is_handler_attribute("title")


# ============================================================================
# Resolution
# ============================================================================

@pytest.mark.unit
def test_resolve_precedence(tree_store, backend):
    registry = HandlerRegistry()
    resolver = EventResolver(registry, make_fallback(tree_store, backend))

    def explicit(event):
        return None

    assert resolver.resolve("onClick", explicit, "btn-1", "btn-1") is explicit
    assert resolver.resolve("onClick", "noop", "btn-1", "btn-1") is registry.lookup("noop")

    generative = resolver.resolve("onClick", "doSomethingClever", "btn-1", "btn-1")
    assert callable(generative)
    assert generative.__name__ == "generative_onClick"
    assert resolver.resolve("onClick", None, "btn-1", "btn-1").__name__ == "generative_onClick"


@pytest.mark.unit
def test_bind_resolves_handler_attributes(tree_store, backend):
    resolver = EventResolver(HandlerRegistry(), make_fallback(tree_store, backend))

    def on_change(event):
        return None

    component = ComponentNode(
        id="form-1",
        kind="form",
        attributes={"onChange": on_change, "onSubmit": "submitForm", "onBlur": "mystery", "title": "Login"},
    )

    handlers = resolver.bind(component)

    assert set(handlers) == {"onChange", "onSubmit", "onBlur"}
    assert handlers["onChange"] is on_change
    assert handlers["onBlur"].__name__ == "generative_onBlur"


# ============================================================================
# Generative fallback
# ============================================================================

@pytest.mark.unit
@pytest.mark.asyncio
async def test_fallback_generates_and_places_after_trigger(tree_store, backend, memory_store):
    fallback = make_fallback(tree_store, backend, cache=GenerationCache(memory_store))
    event = UIEvent(name="onClick", target_id="btn-1", value="shoes")

    outcome = await fallback.trigger("btn-1", "btn-1", "onClick", event)

    assert outcome == FallbackOutcome.GENERATED
    assert event.default_prevented and event.propagation_stopped
    assert toolbar_ids(tree_store) == ["search", "btn-1", "gen-1", "btn-2"]
    assert find_by_id(tree_store.snapshot(), "gen-1").metadata.generation_depth == 1

    context = backend.contexts[0]
    assert isinstance(context, FullContext)
    assert context.user_input == "shoes"
    assert context.trigger_element.kind == "button"
    assert len(memory_store) == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_fallback_second_trigger_hits_cache(tree_store, backend):
    fallback = make_fallback(tree_store, backend, capture=ContextCapture(sibling_limit=0))

    first = await fallback.trigger("btn-1", "btn-1", "onClick")
    second = await fallback.trigger("btn-1", "btn-1", "onClick")

    assert (first, second) == (FallbackOutcome.GENERATED, FallbackOutcome.CACHE_HIT)
    assert backend.calls == 1
    # The cached fragment is placed again under a fresh id
    ids = toolbar_ids(tree_store)
    assert len(ids) == 5
    assert ids.count("gen-1") == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_fallback_for_removed_element_appends_at_root(tree_store, backend):
    resolver = EventResolver(HandlerRegistry(), make_fallback(tree_store, backend))

    handler = resolver.resolve("onClick", None, "x", "x")
    await dispatch(handler, UIEvent(name="onClick", target_id="x"))

    assert backend.calls == 1
    assert backend.contexts[0].trigger_element.kind == "unknown"
    assert tree_store.snapshot()[-1].id == "gen-1"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_concurrent_triggers_coalesce(tree_store, backend):
    backend.gate = asyncio.Event()
    fallback = make_fallback(tree_store, backend, inflight=InflightRequests())

    first = asyncio.create_task(fallback.trigger("btn-1", "btn-1", "onClick"))
    second = asyncio.create_task(fallback.trigger("btn-1", "btn-1", "onClick"))
    await asyncio.sleep(0.01)
    backend.gate.set()
    outcomes = await asyncio.gather(first, second)

    assert sorted(o.value for o in outcomes) == ["coalesced", "generated"]
    assert backend.calls == 1
    assert toolbar_ids(tree_store) == ["search", "btn-1", "gen-1", "btn-2"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_recursive_generation_increments_depth(tree_store, backend):
    fallback = make_fallback(tree_store, backend)

    await fallback.trigger("btn-1", "btn-1", "onClick")
    await fallback.trigger("gen-1", "gen-1", "onClick")

    depths = sorted(
        node.metadata.generation_depth
        for node, _, _ in walk(tree_store.snapshot())
        if isinstance(node, ComponentNode) and node.metadata is not None
    )
    assert depths == [1, 2]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_depth_limit_rejects_trigger(backend):
    deep = ComponentNode(
        id="deep",
        kind="button",
        metadata=NodeMetadata(generation_depth=2),
        children=[TextNode(text="again")],
    )
    store = TreeStore([deep])
    fallback = make_fallback(store, backend, limits=GrowthLimits(max_generation_depth=2))

    outcome = await fallback.trigger("deep", "deep", "onClick")

    assert outcome == FallbackOutcome.REJECTED
    assert backend.calls == 0
    assert store.version == 0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_size_limit_rejects_placement(tree_store, backend, memory_store):
    fallback = make_fallback(
        tree_store,
        backend,
        cache=GenerationCache(memory_store),
        limits=GrowthLimits(max_tree_nodes=7),
    )
    before = tree_store.snapshot()

    outcome = await fallback.trigger("btn-1", "btn-1", "onClick")

    assert outcome == FallbackOutcome.REJECTED
    assert tree_store.snapshot() == before
    assert len(memory_store) == 0


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize("error", [MalformedResultError("not a component"), TransportError("timeout")])
async def test_backend_failure_leaves_tree_unchanged(tree_store, error):
    backend = FakeBackend(error=error)
    fallback = make_fallback(tree_store, backend)
    before = tree_store.snapshot()

    outcome = await fallback.trigger("btn-1", "btn-1", "onClick")

    assert outcome == FallbackOutcome.FAILED
    assert tree_store.snapshot() == before
    assert tree_store.version == 0
    assert "gen-1" not in collect_ids(tree_store.snapshot())
