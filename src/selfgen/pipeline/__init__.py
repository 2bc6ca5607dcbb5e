"""Multi-stage generation pipeline."""

from .steps import StepStatus, STEP_DESCRIPTIONS, PipelineStep, PipelineResult, new_steps
from .retry import RetryPolicy, StepFailed, run_step
from .assemble import assemble, parse_components, fallback_card, FALLBACK_KIND, FALLBACK_TITLE
from .runner import GenerationPipeline, NOTHING_TO_FETCH

__all__ = [
    "StepStatus",
    "STEP_DESCRIPTIONS",
    "PipelineStep",
    "PipelineResult",
    "new_steps",
    "RetryPolicy",
    "StepFailed",
    "run_step",
    "assemble",
    "parse_components",
    "fallback_card",
    "FALLBACK_KIND",
    "FALLBACK_TITLE",
    "GenerationPipeline",
    "NOTHING_TO_FETCH",
]
