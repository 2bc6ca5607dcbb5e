"""Tests for component repair and the repair queue."""

import pytest

from conftest import FakeRepairer
from selfgen.context import MinimalContext
from selfgen.core.errors import TransportError
from selfgen.repair import RepairQueue, RepairStrategy, RepairWorker, fix_key, quick_fix
from selfgen.state import TreeStore
from selfgen.tree import ComponentNode, TextNode, find_by_id


def broken(id_: str, kind: str = "Chart", **attributes) -> ComponentNode:
    return ComponentNode(id=id_, kind=kind, attributes=attributes)


# ============================================================================
# Quick fixes
# ============================================================================

@pytest.mark.unit
def test_quick_fix_attribute_names():
    fixed = quick_fix(broken("a", kind="input", **{"class": "wide", "readonly": True}))

    assert fixed.attributes == {"className": "wide", "readOnly": True}
    assert fixed.id == "a"


@pytest.mark.unit
def test_quick_fix_kind_spelling():
    fixed = quick_fix(broken("a", kind="SearchBar"))
    assert fixed.kind == "search-bar"


@pytest.mark.unit
def test_quick_fix_nothing_to_do():
    assert quick_fix(broken("a", kind="card", title="ok")) is None
    assert quick_fix(broken("a", kind="Chart")) is None


# ============================================================================
# Worker
# ============================================================================

@pytest.mark.unit
@pytest.mark.asyncio
async def test_worker_prefers_quick_fix():
    repairer = FakeRepairer()
    worker = RepairWorker(repairer)

    fixed, strategy = await worker.fix(broken("a", kind="card", tabindex=0), "Invalid DOM property")

    assert strategy == RepairStrategy.QUICK_FIX
    assert fixed.attributes == {"tabIndex": 0}
    assert repairer.calls == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_worker_model_fix_keeps_id():
    repairer = FakeRepairer(kind="card")
    worker = RepairWorker(repairer)

    fixed, strategy = await worker.fix(broken("chart-1"), "Unknown component kind 'Chart'")

    assert strategy == RepairStrategy.MODEL
    assert fixed.id == "chart-1"
    assert fixed.kind == "card"
    context, component = repairer.calls[0]
    assert isinstance(context, MinimalContext)
    assert context.error_message == "Unknown component kind 'Chart'"
    assert component.id == "chart-1"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_worker_reuses_fix_for_same_error():
    repairer = FakeRepairer()
    worker = RepairWorker(repairer)

    await worker.fix(broken("chart-1"), "Unknown component kind 'Chart'")
    fixed, strategy = await worker.fix(broken("chart-2"), "Unknown component kind 'Chart'")

    assert strategy == RepairStrategy.CACHED
    assert fixed.id == "chart-2"
    assert len(repairer.calls) == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_worker_does_not_share_fix_across_components():
    repairer = FakeRepairer()
    worker = RepairWorker(repairer)
    error = "Cannot read properties of undefined (reading 'map')"
    first = ComponentNode(id="a", kind="widgetA", attributes={"title": "alpha"}, children=[TextNode(text="from a")])
    second = ComponentNode(id="b", kind="widgetB", attributes={"title": "beta"}, children=[TextNode(text="from b")])

    _, first_strategy = await worker.fix(first, error)
    _, second_strategy = await worker.fix(second, error)

    assert fix_key(first, error) != fix_key(second, error)
    assert first_strategy == second_strategy == RepairStrategy.MODEL
    assert [component.id for _, component in repairer.calls] == ["a", "b"]


@pytest.mark.unit
def test_fix_key_ignores_id():
    assert fix_key(broken("chart-1"), "boom") == fix_key(broken("chart-2"), "boom")
    assert fix_key(broken("chart-1"), "boom") != fix_key(broken("chart-1"), "bang")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_worker_gives_up():
    assert await RepairWorker(None).fix(broken("a"), "boom") is None
    assert await RepairWorker(FakeRepairer(error=TransportError("down"))).fix(broken("a"), "boom") is None


# ============================================================================
# Queue
# ============================================================================

@pytest.mark.unit
@pytest.mark.asyncio
async def test_queue_repairs_in_order():
    store = TreeStore([broken("one"), ComponentNode(id="ok", kind="card"), broken("two", kind="Gauge")])
    repairer = FakeRepairer()
    queue = RepairQueue(RepairWorker(repairer), store)

    queue.submit("one", "Unknown component kind 'Chart'")
    queue.submit("two", "Unknown component kind 'Gauge'")
    await queue.join()
    await queue.close()

    assert [component.id for _, component in repairer.calls] == ["one", "two"]
    assert [n.id for n in store.snapshot()] == ["one", "ok", "two"]
    assert all(n.kind == "card" for n in store.snapshot())
    assert len(queue) == 0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_queue_skips_missing_component():
    store = TreeStore([ComponentNode(id="ok", kind="card")])
    repairer = FakeRepairer()
    queue = RepairQueue(RepairWorker(repairer), store)

    queue.submit("gone", "whatever")
    await queue.join()
    await queue.close()

    assert repairer.calls == []
    assert store.version == 0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_queue_survives_failed_repair():
    store = TreeStore([broken("one"), broken("two", kind="Gauge")])
    queue = RepairQueue(RepairWorker(FakeRepairer(error=TransportError("down"))), store)

    queue.submit("one", "first")
    queue.submit("two", "second")
    await queue.join()
    await queue.close()

    assert find_by_id(store.snapshot(), "one").kind == "Chart"
    assert store.version == 0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_queue_ignores_component_already_queued():
    store = TreeStore([broken("one")])
    repairer = FakeRepairer()
    queue = RepairQueue(RepairWorker(repairer), store)

    assert queue.submit("one", "Unknown component kind 'Chart'") is True
    assert queue.submit("one", "Unknown component kind 'Chart'") is False
    await queue.join()
    await queue.close()

    assert len(repairer.calls) == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_queue_does_not_retry_unchanged_failure():
    store = TreeStore([broken("one")])
    repairer = FakeRepairer(error=TransportError("down"))
    queue = RepairQueue(RepairWorker(repairer), store)

    queue.submit("one", "Unknown component kind 'Chart'")
    await queue.join()
    assert queue.submit("one", "Unknown component kind 'Chart'") is False

    assert queue.submit("one", "Cannot read properties of undefined") is True
    await queue.join()
    await queue.close()

    assert len(repairer.calls) == 2


@pytest.mark.unit
@pytest.mark.asyncio
async def test_queue_retries_after_node_changes():
    store = TreeStore([broken("one")])
    repairer = FakeRepairer(error=TransportError("down"))
    queue = RepairQueue(RepairWorker(repairer), store)

    queue.submit("one", "Unknown component kind 'Chart'")
    await queue.join()
    store.set_tree([broken("one", title="edited")])

    assert queue.submit("one", "Unknown component kind 'Chart'") is True
    await queue.join()
    await queue.close()

    assert len(repairer.calls) == 2
