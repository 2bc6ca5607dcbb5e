"""
Generation Pipeline
Five sequential stages turning a free-form request into component nodes:
analyze, check availability, acquire missing primitives, synthesize and
assemble. Each stage is retried under the run's RetryPolicy; the first stage
to exhaust its attempts ends the run.
"""

import time

from pydantic import ValidationError as PydanticValidationError

from ..agents.models import AcquireResult, Analyzer, ComponentAnalysis, PrimitiveCatalog, Synthesizer
from ..core.id import new_generation_id
from ..core.logging_config import LogContext, get_logger
from ..core.tracing import trace_operation_async
from ..core.validate import GenerationRequest
from ..monitoring import metrics_collector
from ..tree import Node
from .assemble import assemble
from .retry import RetryPolicy, StepFailed, run_step
from .steps import PipelineResult, new_steps

logger = get_logger(__name__)

NOTHING_TO_FETCH = "nothing to fetch"


class GenerationPipeline:
    """Top-level generation from a free-form request."""

    def __init__(
        self,
        analyzer: Analyzer,
        synthesizer: Synthesizer,
        catalog: PrimitiveCatalog,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self.analyzer = analyzer
        self.synthesizer = synthesizer
        self.catalog = catalog
        self.retry_policy = retry_policy or RetryPolicy()

    async def run(self, request: str | GenerationRequest) -> PipelineResult:
        """
        Run all stages for a request.

        Never raises for collaborator failures: a failed stage yields
        ``success=False`` with no fragments and the remaining stages pending.
        """
        steps = new_steps()
        try:
            validated = request if isinstance(request, GenerationRequest) else GenerationRequest(message=request)
        except PydanticValidationError as e:
            logger.warning("invalid_request", error=str(e))
            metrics_collector.record_generation("pipeline", "invalid", 0.0)
            return PipelineResult(fragments=[], success=False, steps=steps)

        message = validated.message
        generation_id = new_generation_id()
        start = time.time()

        with LogContext(generation_id=generation_id):
            async with trace_operation_async("pipeline_run", generation_id=generation_id):
                logger.info("pipeline_started", request_length=len(message))
                policy = self.retry_policy
                analyze_step, check_step, acquire_step, synth_step, assemble_step = steps

                try:
                    kinds = self.catalog.available_kinds()
                    analysis: ComponentAnalysis = await run_step(
                        analyze_step,
                        lambda: self.analyzer.analyze(message, kinds),
                        policy,
                    )

                    async def check() -> dict[str, list[str]]:
                        available: list[str] = []
                        missing: list[str] = []
                        for name in analysis.candidate_primitives():
                            (available if self.catalog.is_available(name) else missing).append(name)
                        return {"available": available, "missing": missing}

                    partition = await run_step(check_step, check, policy)
                    available = list(partition["available"])
                    missing = partition["missing"]

                    async def acquire() -> list[AcquireResult] | str:
                        if not missing:
                            return NOTHING_TO_FETCH
                        return await self.catalog.acquire(missing)

                    acquired = await run_step(acquire_step, acquire, policy)
                    if isinstance(acquired, list):
                        for item in acquired:
                            if item.success:
                                available.append(item.name)
                            else:
                                logger.warning("primitive_unavailable", name=item.name, error=item.error)

                    raw: str = await run_step(
                        synth_step,
                        lambda: self.synthesizer.synthesize(message, analysis, available),
                        policy,
                    )

                    async def build() -> list[Node]:
                        return assemble(raw, message)

                    fragments = await run_step(assemble_step, build, policy)

                except StepFailed as e:
                    duration = time.time() - start
                    logger.error("pipeline_failed", failed_step=e.step.index, duration=duration)
                    metrics_collector.record_generation("pipeline", "failed", duration)
                    metrics_collector.record_error(type(e.original).__name__, "pipeline")
                    return PipelineResult(fragments=[], success=False, steps=steps)

                duration = time.time() - start
                logger.info("pipeline_completed", fragments=len(fragments), duration=duration)
                metrics_collector.record_generation("pipeline", "success", duration)
                return PipelineResult(fragments=fragments, success=True, steps=steps)


__all__ = ["GenerationPipeline", "NOTHING_TO_FETCH"]
