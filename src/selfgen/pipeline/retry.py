"""Bounded per-step retry."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from ..core.logging_config import get_logger
from ..monitoring import metrics_collector
from .steps import PipelineStep

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Attempts per step and backoff between them.

    The wait before retry k (k >= 1) is ``delay * backoff ** (k - 1)``.
    """

    max_attempts: int = 3
    delay: float = 0.25
    backoff: float = 2.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def wait_before(self, retry: int) -> float:
        return self.delay * self.backoff ** (retry - 1)


class StepFailed(Exception):
    """A step exhausted its attempts."""

    def __init__(self, step: PipelineStep, original: Exception) -> None:
        super().__init__(f"Step {step.index} ({step.description}) failed: {original}")
        self.step = step
        self.original = original


async def run_step(
    step: PipelineStep,
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
) -> T:
    """
    Run one step, retrying failed attempts.

    The step is marked running, then completed with the operation's result or
    failed with the last error.

    Raises:
        StepFailed: After ``policy.max_attempts`` failed attempts
    """
    step.status = "running"
    for attempt in range(1, policy.max_attempts + 1):
        step.retry_count = attempt - 1
        if attempt > 1:
            await asyncio.sleep(policy.wait_before(attempt - 1))

        logger.info(
            "step_started",
            step=step.index,
            description=step.description,
            retry_count=step.retry_count,
        )
        try:
            result = await operation()
        except Exception as e:
            step.error = str(e)
            if attempt < policy.max_attempts:
                logger.warning(
                    "step_retry",
                    step=step.index,
                    attempt=attempt,
                    max_attempts=policy.max_attempts,
                    error=str(e),
                )
                continue

            step.status = "failed"
            logger.error(
                "step_failed",
                step=step.index,
                description=step.description,
                attempts=policy.max_attempts,
                error=str(e),
            )
            metrics_collector.record_step(str(step.index), "failed", step.retry_count)
            raise StepFailed(step, e) from e

        step.status = "completed"
        step.result = result
        step.error = None
        logger.info("step_completed", step=step.index, retry_count=step.retry_count)
        metrics_collector.record_step(str(step.index), "completed", step.retry_count)
        return result

    raise AssertionError("unreachable")


__all__ = ["RetryPolicy", "StepFailed", "run_step"]
