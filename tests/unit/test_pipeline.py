"""Tests for the five-stage generation pipeline."""

import pytest

from conftest import FakeAnalyzer, FakeCatalog, FakeSynthesizer
from selfgen.agents import ComponentAnalysis, CompositePrimitive
from selfgen.core.validate import GenerationRequest
from selfgen.pipeline import (
    FALLBACK_KIND,
    NOTHING_TO_FETCH,
    STEP_DESCRIPTIONS,
    GenerationPipeline,
    PipelineStep,
    RetryPolicy,
    StepFailed,
    assemble,
    parse_components,
    run_step,
)
from selfgen.tree import ComponentNode


@pytest.mark.unit
@pytest.mark.asyncio
async def test_successful_run_completes_all_steps(pipeline):
    result = await pipeline.run("A card with a greeting")

    assert result.success is True
    assert [s.index for s in result.steps] == [1, 2, 3, 4, 5]
    assert [s.description for s in result.steps] == list(STEP_DESCRIPTIONS)
    assert all(s.status == "completed" for s in result.steps)
    assert len(result.fragments) == 1
    assert result.fragments[0].id == "card-1"
    assert result.failed_step is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unparseable_output_degrades_to_card(fast_retry, catalog):
    """Plain prose from the synthesizer becomes one diagnostic card."""
    pipeline = GenerationPipeline(
        FakeAnalyzer(), FakeSynthesizer("Sorry, I can't do that."), catalog, fast_retry
    )

    result = await pipeline.run("Build me a spaceship")

    assert result.success is True
    assert len(result.fragments) == 1
    card = result.fragments[0]
    assert card.kind == FALLBACK_KIND
    assert "Sorry, I can't do that." in card.attributes["content"]
    assert card.attributes["diagnostic"] is True
    assert card.id.startswith("fallback-")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_analyzer_exhausting_retries_fails_run(fast_retry, catalog):
    analyzer = FakeAnalyzer(failures=3)
    synthesizer = FakeSynthesizer()
    pipeline = GenerationPipeline(analyzer, synthesizer, catalog, fast_retry)

    result = await pipeline.run("A card")

    assert result.success is False
    assert result.fragments == []
    assert analyzer.calls == 3
    assert synthesizer.calls == 0
    assert result.steps[0].status == "failed"
    assert result.steps[0].retry_count == 2
    assert "analyzer unavailable" in result.steps[0].error
    assert [s.status for s in result.steps[1:]] == ["pending"] * 4
    assert result.failed_step.index == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_transient_failure_is_retried(fast_retry, catalog):
    analyzer = FakeAnalyzer(failures=2)
    pipeline = GenerationPipeline(analyzer, FakeSynthesizer(), catalog, fast_retry)

    result = await pipeline.run("A card")

    assert result.success is True
    assert result.steps[0].retry_count == 2
    assert result.steps[0].error is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_nothing_to_fetch(fast_retry):
    catalog = FakeCatalog(installed={"button", "card"})
    pipeline = GenerationPipeline(FakeAnalyzer(), FakeSynthesizer(), catalog, fast_retry)

    result = await pipeline.run("A card")

    assert result.steps[1].result == {"available": ["button", "card"], "missing": []}
    assert result.steps[2].result == NOTHING_TO_FETCH
    assert catalog.acquired == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_acquired_primitives_reach_synthesizer(fast_retry):
    analysis = ComponentAnalysis(
        required_primitives=["button"],
        composite_primitives=[CompositePrimitive(name="login", components=["input", "button", "tooltip"])],
    )
    catalog = FakeCatalog(installed={"button"}, acquirable={"input"})
    synthesizer = FakeSynthesizer()
    pipeline = GenerationPipeline(FakeAnalyzer(analysis), synthesizer, catalog, fast_retry)

    result = await pipeline.run("A login form")

    assert result.success is True
    assert catalog.acquired == [["input", "tooltip"]]
    assert synthesizer.available == ["button", "input"]


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize("request_text", ["", "   ", "x" * 10_001])
async def test_invalid_request(pipeline, request_text):
    result = await pipeline.run(request_text)

    assert result.success is False
    assert all(s.status == "pending" for s in result.steps)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_accepts_validated_request(pipeline):
    result = await pipeline.run(GenerationRequest(message="A card"))
    assert result.success is True


# ============================================================================
# Retry
# ============================================================================

@pytest.mark.unit
def test_retry_backoff_schedule():
    policy = RetryPolicy(max_attempts=4, delay=0.5, backoff=2.0)
    assert [policy.wait_before(k) for k in (1, 2, 3)] == [0.5, 1.0, 2.0]

    with pytest.raises(ValueError):
        RetryPolicy(max_attempts=0)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_run_step_raises_after_attempts():
    step = PipelineStep(index=4, description="Generate component code")
    attempts = 0

    async def operation():
        nonlocal attempts
        attempts += 1
        raise ValueError("nope")

    with pytest.raises(StepFailed) as exc_info:
        await run_step(step, operation, RetryPolicy(max_attempts=2, delay=0.0))

    assert attempts == 2
    assert step.status == "failed"
    assert isinstance(exc_info.value.original, ValueError)


# ============================================================================
# Assembly
# ============================================================================

@pytest.mark.unit
@pytest.mark.parametrize("raw", [
    '[{"id": "a", "type": "card"}]',
    '{"components": [{"id": "a", "type": "card"}]}',
    '{"id": "a", "type": "card"}',
    'Here you go:\n```json\n[{"id": "a", "type": "card"}]\n```',
])
def test_parse_components_shapes(raw):
    nodes = parse_components(raw)
    assert nodes == [ComponentNode(id="a", kind="card")]


@pytest.mark.unit
def test_assemble_does_not_repair():
    """Broken JSON is not patched up; it becomes a diagnostic card."""
    raw = '[{"id": "a", "type": "card",]'
    nodes = assemble(raw, "request")

    assert len(nodes) == 1
    assert nodes[0].attributes["title"] == "Assembly Error"
    assert nodes[0].metadata.prompt == "request"


@pytest.mark.unit
def test_assemble_rejects_non_component_json():
    nodes = assemble('[true, null]')
    assert nodes[0].kind == FALLBACK_KIND
