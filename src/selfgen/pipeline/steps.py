"""Pipeline step and result models."""

from typing import Any, Literal

from pydantic import BaseModel, Field

from ..tree import Node

StepStatus = Literal["pending", "running", "completed", "failed"]

STEP_DESCRIPTIONS: tuple[str, ...] = (
    "Analyze UI requirements",
    "Check component availability",
    "Fetch missing components",
    "Generate component code",
    "Validate and assemble UI",
)


class PipelineStep(BaseModel):
    """One stage of a run. Mutated in place as the run progresses."""

    index: int = Field(..., ge=1)
    description: str
    status: StepStatus = "pending"
    result: Any = None
    error: str | None = None
    retry_count: int = 0


class PipelineResult(BaseModel):
    """Outcome of a pipeline run."""

    fragments: list[Node] = Field(default_factory=list)
    success: bool
    steps: list[PipelineStep] = Field(default_factory=list)

    @property
    def failed_step(self) -> PipelineStep | None:
        return next((s for s in self.steps if s.status == "failed"), None)


def new_steps() -> list[PipelineStep]:
    """Fresh pending steps for one run."""
    return [
        PipelineStep(index=i, description=description)
        for i, description in enumerate(STEP_DESCRIPTIONS, start=1)
    ]


__all__ = ["StepStatus", "STEP_DESCRIPTIONS", "PipelineStep", "PipelineResult", "new_steps"]
