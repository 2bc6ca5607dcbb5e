"""Generation Collaborator Models and Interfaces."""

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from ..context import GenerationContext, MinimalContext
from ..tree import ComponentNode


class CustomPrimitive(BaseModel):
    """A primitive the analyzer wants built from scratch."""

    name: str
    description: str = ""


class CompositePrimitive(BaseModel):
    """A named grouping of catalog primitives."""

    name: str
    components: list[str] = Field(default_factory=list)
    description: str = ""


class ComponentAnalysis(BaseModel):
    """Analyzer output for a free-form request."""

    model_config = ConfigDict(frozen=True)

    required_primitives: list[str] = Field(default_factory=list)
    custom_primitives: list[CustomPrimitive] = Field(default_factory=list)
    composite_primitives: list[CompositePrimitive] = Field(default_factory=list)
    reasoning: str = "No reasoning provided."

    def candidate_primitives(self) -> list[str]:
        """Required primitives plus every composite member, de-duplicated in order."""
        names = [*self.required_primitives]
        for composite in self.composite_primitives:
            names.extend(composite.components)
        return list(dict.fromkeys(names))


class FragmentResult(BaseModel):
    """Single-fragment backend output."""

    model_config = ConfigDict(frozen=True)

    fragment: ComponentNode
    reasoning: str = ""


class AcquireResult(BaseModel):
    """Outcome of acquiring one primitive."""

    model_config = ConfigDict(frozen=True)

    name: str
    success: bool
    error: str | None = None


@runtime_checkable
class TextModel(Protocol):
    """Anything that turns a prompt into text (LangChain-style)."""

    async def ainvoke(self, prompt: str, **kwargs: Any) -> Any: ...


class Analyzer(Protocol):
    async def analyze(self, request: str, available_kinds: list[str]) -> ComponentAnalysis: ...


class Synthesizer(Protocol):
    async def synthesize(
        self,
        request: str,
        analysis: ComponentAnalysis,
        available: list[str],
    ) -> str: ...


class FragmentBackend(Protocol):
    async def generate_fragment(self, context: GenerationContext) -> FragmentResult: ...


class Repairer(Protocol):
    async def repair(self, context: MinimalContext, component: ComponentNode) -> ComponentNode: ...


class PrimitiveCatalog(Protocol):
    def is_available(self, name: str) -> bool: ...

    def available_kinds(self) -> list[str]: ...

    async def acquire(self, names: list[str]) -> list[AcquireResult]: ...


__all__ = [
    "CustomPrimitive",
    "CompositePrimitive",
    "ComponentAnalysis",
    "FragmentResult",
    "AcquireResult",
    "TextModel",
    "Analyzer",
    "Synthesizer",
    "FragmentBackend",
    "Repairer",
    "PrimitiveCatalog",
]
