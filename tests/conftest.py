"""Pytest configuration and fixtures."""

import asyncio
import os
from typing import Any

import pytest

from selfgen.agents import AcquireResult, ComponentAnalysis, FragmentResult, StaticCatalog
from selfgen.caching import GenerationCache, MemoryStore
from selfgen.context import ContextCapture, GenerationContext, MinimalContext
from selfgen.core.errors import TransportError
from selfgen.pipeline import GenerationPipeline, RetryPolicy
from selfgen.state import TreeStore
from selfgen.tree import ComponentNode, Node, Placeholder, TextNode, Tree


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ["SELFGEN_LOG_LEVEL"] = "DEBUG"
    os.environ["SELFGEN_CACHE_BACKEND"] = "memory"
    os.environ["GOOGLE_API_KEY"] = "test-api-key"  # Mock API key


# ============================================================================
# Fakes
# ============================================================================

class FakeTextModel:
    """Text model returning scripted responses in order (last one repeats)."""

    def __init__(self, *responses: str | Exception) -> None:
        self.responses = list(responses) or ["{}"]
        self.prompts: list[str] = []

    async def ainvoke(self, prompt: str, **kwargs: Any) -> str:
        self.prompts.append(prompt)
        index = min(len(self.prompts) - 1, len(self.responses) - 1)
        response = self.responses[index]
        if isinstance(response, Exception):
            raise response
        return response


class FakeAnalyzer:
    """Analyzer that fails its first ``failures`` calls."""

    def __init__(self, analysis: ComponentAnalysis | None = None, failures: int = 0) -> None:
        self.analysis = analysis or ComponentAnalysis(required_primitives=["button", "card"])
        self.failures = failures
        self.calls = 0

    async def analyze(self, request: str, available_kinds: list[str]) -> ComponentAnalysis:
        self.calls += 1
        if self.calls <= self.failures:
            raise TransportError(f"analyzer unavailable (call {self.calls})")
        return self.analysis


class FakeSynthesizer:
    def __init__(self, output: str = '[{"id": "card-1", "type": "card", "props": {"title": "Hello"}}]') -> None:
        self.output = output
        self.calls = 0
        self.requests: list[str] = []
        self.available: list[str] = []
        self.gate: asyncio.Event | None = None

    async def synthesize(self, request: str, analysis: ComponentAnalysis, available: list[str]) -> str:
        self.calls += 1
        self.requests.append(request)
        self.available = list(available)
        if self.gate is not None:
            await self.gate.wait()
        return self.output


class FakeCatalog:
    """Catalog with an explicit installed set and acquirable set."""

    def __init__(self, installed: set[str], acquirable: set[str] | None = None) -> None:
        self.installed = set(installed)
        self.acquirable = set(acquirable or set())
        self.acquired: list[list[str]] = []

    def is_available(self, name: str) -> bool:
        return name in self.installed

    def available_kinds(self) -> list[str]:
        return sorted(self.installed)

    async def acquire(self, names: list[str]) -> list[AcquireResult]:
        self.acquired.append(list(names))
        return [
            AcquireResult(name=n, success=n in self.acquirable, error=None if n in self.acquirable else "missing")
            for n in names
        ]


class FakeBackend:
    """
    Fragment backend counting its calls.

    When ``gate`` is set, every call waits on it before answering.
    """

    def __init__(self, fragment: ComponentNode | None = None, error: Exception | None = None) -> None:
        self.fragment = fragment or ComponentNode(
            id="gen-1", kind="card", attributes={"title": "Generated"}
        )
        self.error = error
        self.calls = 0
        self.contexts: list[GenerationContext] = []
        self.gate: asyncio.Event | None = None

    async def generate_fragment(self, context: GenerationContext) -> FragmentResult:
        self.calls += 1
        self.contexts.append(context)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return FragmentResult(fragment=self.fragment, reasoning="because")


class FakeRepairer:
    def __init__(self, kind: str = "card", error: Exception | None = None) -> None:
        self.kind = kind
        self.error = error
        self.calls: list[tuple[MinimalContext, ComponentNode]] = []

    async def repair(self, context: MinimalContext, component: ComponentNode) -> ComponentNode:
        self.calls.append((context, component))
        if self.error is not None:
            raise self.error
        return ComponentNode(id="model-output", kind=self.kind, attributes={"fixed": True})


class FailingStore:
    """Key-value store whose every call fails."""

    async def get(self, key: str) -> Any | None:
        raise TransportError("store down")

    async def put(self, key: str, value: Any) -> None:
        raise TransportError("store down")


class RecordingRenderer:
    def __init__(self) -> None:
        self.trees: list[Tree] = []
        self.modals: list[list[Node]] = []

    def render(self, tree: Tree) -> None:
        self.trees.append(tree)

    def present_modal(self, nodes: list[Node]) -> None:
        self.modals.append(nodes)


# ============================================================================
# Data Fixtures
# ============================================================================

@pytest.fixture
def sample_tree() -> Tree:
    """Hand-written tree: a page with a toolbar and a placeholder."""
    return [
        ComponentNode(
            id="page",
            kind="div",
            children=[
                ComponentNode(
                    id="toolbar",
                    kind="navigation",
                    children=[
                        ComponentNode(id="search", kind="search-bar", attributes={"placeholder": "Search..."}),
                        ComponentNode(
                            id="btn-1",
                            kind="button",
                            attributes={"onClick": "noop"},
                            children=[TextNode(text="Go")],
                        ),
                        ComponentNode(id="btn-2", kind="button", children=[TextNode(text="More")]),
                    ],
                ),
                ComponentNode(id="results", kind="list"),
            ],
        ),
        Placeholder(
            id="ph-1",
            generation_template="Show details for {{userInput}}",
            trigger_rendering=ComponentNode(id="ph-1-trigger", kind="button", children=[TextNode(text="Load")]),
        ),
    ]


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def fast_retry() -> RetryPolicy:
    """Retry policy without waits."""
    return RetryPolicy(max_attempts=3, delay=0.0)


@pytest.fixture
def tree_store(sample_tree) -> TreeStore:
    return TreeStore(sample_tree)


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def generation_cache(memory_store) -> GenerationCache:
    return GenerationCache(memory_store)


@pytest.fixture
def capture() -> ContextCapture:
    return ContextCapture()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def catalog() -> StaticCatalog:
    return StaticCatalog()


@pytest.fixture
def pipeline(fast_retry, catalog) -> GenerationPipeline:
    """Pipeline with fake model collaborators."""
    return GenerationPipeline(FakeAnalyzer(), FakeSynthesizer(), catalog, fast_retry)
