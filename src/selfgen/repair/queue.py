"""Single-consumer FIFO queue serializing component repairs."""

import asyncio
import contextlib
from dataclasses import dataclass

from ..core.logging_config import LogContext, get_logger
from ..core.tracing import trace_operation_async
from ..monitoring import metrics_collector
from ..placement import PlacementRule, place
from ..state import TreeStore
from ..tree import ComponentNode, Tree, find_by_id
from .fixer import RepairWorker

logger = get_logger(__name__)


@dataclass(frozen=True)
class RepairRequest:
    component_id: str
    error_message: str


class RepairQueue:
    """
    Runs one repair at a time, in submission order.

    The consumer task starts on the first submit. A repair that fails is
    logged and the queue moves on. A component is queued at most once at a
    time, and one that could not be fixed is not retried until its node or
    its error changes.
    """

    def __init__(self, worker: RepairWorker, store: TreeStore) -> None:
        self.worker = worker
        self.store = store
        self._queue: asyncio.Queue[RepairRequest] = asyncio.Queue()
        self._consumer: asyncio.Task[None] | None = None
        self._pending: set[str] = set()
        self._unresolved: dict[str, tuple[ComponentNode, str]] = {}

    def __len__(self) -> int:
        return self._queue.qsize()

    def submit(self, component_id: str, error_message: str) -> bool:
        """
        Enqueue a repair. Must be called from a running event loop.

        Returns:
            False if the component is already queued, or already failed to
            repair with the same node and error
        """
        if component_id in self._pending:
            logger.debug("repair_already_queued", component_id=component_id)
            return False
        failed = self._unresolved.pop(component_id, None)
        if failed is not None:
            node, message = failed
            if message == error_message and find_by_id(self.store.snapshot(), component_id) == node:
                self._unresolved[component_id] = failed
                logger.debug("repair_already_failed", component_id=component_id)
                return False

        self._pending.add(component_id)
        self._queue.put_nowait(RepairRequest(component_id, error_message))
        metrics_collector.set_repair_queue_depth(self._queue.qsize())
        logger.info("repair_queued", component_id=component_id, depth=self._queue.qsize())
        if self._consumer is None or self._consumer.done():
            self._consumer = asyncio.get_running_loop().create_task(self._drain())
        return True

    async def join(self) -> None:
        """Wait until every submitted repair has been processed."""
        await self._queue.join()

    async def close(self) -> None:
        """Stop the consumer. Pending repairs are abandoned."""
        if self._consumer is not None:
            self._consumer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._consumer
            self._consumer = None
        self._pending.clear()

    async def _drain(self) -> None:
        while True:
            request = await self._queue.get()
            try:
                await self._process(request)
            except Exception as e:
                logger.error("repair_failed", component_id=request.component_id, error=str(e), exc_info=True)
                metrics_collector.record_error(type(e).__name__, "repair")
            finally:
                self._pending.discard(request.component_id)
                self._queue.task_done()
                metrics_collector.set_repair_queue_depth(self._queue.qsize())

    async def _process(self, request: RepairRequest) -> bool:
        with LogContext(component_id=request.component_id):
            async with trace_operation_async("repair", component_id=request.component_id):
                component = find_by_id(self.store.snapshot(), request.component_id)
                if not isinstance(component, ComponentNode):
                    logger.info("repair_target_gone")
                    return False

                result = await self.worker.fix(component, request.error_message)
                if result is None:
                    self._unresolved[request.component_id] = (component, request.error_message)
                    logger.warning("repair_unresolved", error=request.error_message)
                    return False

                fixed, strategy = result

                def swap(current: Tree) -> tuple[Tree, bool]:
                    if find_by_id(current, request.component_id) is None:
                        return current, False
                    placed = place(current, fixed, PlacementRule(kind="replace", target_id=request.component_id))
                    return placed.tree, placed.applied

                applied = self.store.commit(swap)
                logger.info("repair_applied", strategy=strategy.value, applied=applied)
                return applied


__all__ = ["RepairRequest", "RepairQueue"]
