"""Dependency Injection Container."""

from typing import Any

from injector import Injector, Module, provider, singleton

from ..agents import (
    Analyzer,
    CodeSynthesizer,
    ComponentAnalyzer,
    FragmentBackend,
    FragmentGenerator,
    PrimitiveCatalog,
    Repairer,
    StaticCatalog,
    Synthesizer,
    TextModel,
)
from ..caching import GenerationCache, InflightRequests, KeyValueStore, LRUStore, MemoryStore
from ..clients import HttpKeyValueStore
from ..context import ContextCapture
from ..events import EventResolver, GenerativeFallback, HandlerRegistry
from ..models import GeminiConfig, load_model
from ..orchestrator import Orchestrator
from ..pipeline import GenerationPipeline, RetryPolicy
from ..placement import GrowthLimits
from ..repair import RepairQueue, RepairWorker
from ..state import TreeStore
from .config import Settings, get_settings
from .tracing import init_tracer


class CoreModule(Module):
    """
    Core dependencies.

    Any collaborator can be swapped by passing it as an override:
    ``llm``, ``store``, ``catalog``, ``analyzer``, ``synthesizer``,
    ``backend``, ``repairer`` or ``tree_store``.
    """

    def __init__(self, settings: Settings, **overrides: Any) -> None:
        self.settings = settings
        self.overrides = overrides

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        return self.settings

    @singleton
    @provider
    def provide_text_model(self) -> TextModel:
        """Provide Gemini model for the generation agents."""
        if "llm" in self.overrides:
            return self.overrides["llm"]
        return load_model(GeminiConfig.from_settings(self.settings))

    @singleton
    @provider
    def provide_store(self) -> KeyValueStore:
        """Provide the key-value store selected by cache_backend."""
        if "store" in self.overrides:
            return self.overrides["store"]
        match self.settings.cache_backend:
            case "lru":
                return LRUStore(max_size=self.settings.cache_max_size)
            case "http":
                return HttpKeyValueStore(self.settings.storage_url, self.settings.storage_timeout)
            case _:
                return MemoryStore()

    @singleton
    @provider
    def provide_cache(self, store: KeyValueStore) -> GenerationCache:
        return GenerationCache(store)

    @singleton
    @provider
    def provide_catalog(self) -> PrimitiveCatalog:
        return self.overrides.get("catalog") or StaticCatalog()

    @singleton
    @provider
    def provide_analyzer(self, llm: TextModel) -> Analyzer:
        return self.overrides.get("analyzer") or ComponentAnalyzer(llm)

    @singleton
    @provider
    def provide_synthesizer(self, llm: TextModel) -> Synthesizer:
        return self.overrides.get("synthesizer") or CodeSynthesizer(llm)

    @singleton
    @provider
    def provide_fragment_generator(self, llm: TextModel) -> FragmentGenerator:
        return FragmentGenerator(llm)

    @singleton
    @provider
    def provide_backend(self, generator: FragmentGenerator) -> FragmentBackend:
        return self.overrides.get("backend") or generator

    @singleton
    @provider
    def provide_repairer(self, generator: FragmentGenerator) -> Repairer:
        return self.overrides.get("repairer") or generator

    @singleton
    @provider
    def provide_capture(self) -> ContextCapture:
        return ContextCapture(
            sibling_limit=self.settings.sibling_limit,
            ancestor_limit=self.settings.ancestor_limit,
            client_signature=self.settings.client_signature,
        )

    @singleton
    @provider
    def provide_limits(self) -> GrowthLimits:
        return GrowthLimits(
            max_tree_nodes=self.settings.max_tree_nodes,
            max_generation_depth=self.settings.max_generation_depth,
        )

    @singleton
    @provider
    def provide_tree_store(self) -> TreeStore:
        return self.overrides.get("tree_store") or TreeStore()

    @singleton
    @provider
    def provide_pipeline(
        self, analyzer: Analyzer, synthesizer: Synthesizer, catalog: PrimitiveCatalog
    ) -> GenerationPipeline:
        policy = RetryPolicy(
            max_attempts=self.settings.max_attempts,
            delay=self.settings.retry_delay,
            backoff=self.settings.retry_backoff,
        )
        return GenerationPipeline(analyzer, synthesizer, catalog, policy)

    @singleton
    @provider
    def provide_fallback(
        self,
        store: TreeStore,
        cache: GenerationCache,
        backend: FragmentBackend,
        capture: ContextCapture,
        limits: GrowthLimits,
    ) -> GenerativeFallback:
        inflight = InflightRequests() if self.settings.coalesce_inflight else None
        return GenerativeFallback(store, cache, backend, capture, limits, inflight)

    @singleton
    @provider
    def provide_resolver(self, fallback: GenerativeFallback) -> EventResolver:
        return EventResolver(HandlerRegistry(), fallback)

    @singleton
    @provider
    def provide_repair_queue(self, repairer: Repairer, capture: ContextCapture, store: TreeStore) -> RepairQueue:
        return RepairQueue(RepairWorker(repairer, capture), store)

    @singleton
    @provider
    def provide_orchestrator(
        self,
        store: TreeStore,
        pipeline: GenerationPipeline,
        resolver: EventResolver,
        repairs: RepairQueue,
        capture: ContextCapture,
        limits: GrowthLimits,
    ) -> Orchestrator:
        return Orchestrator(store, pipeline, resolver, repairs, capture, limits)


def create_container(settings: Settings | None = None, **overrides: Any) -> Injector:
    """Create configured injector."""
    settings = settings or get_settings()
    if settings.enable_tracing:
        init_tracer()
    return Injector([CoreModule(settings, **overrides)])
