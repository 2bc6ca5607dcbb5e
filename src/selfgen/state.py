"""
Live Tree State
Single owner of the current tree. Every change is a whole-tree swap.
"""

from collections.abc import Callable, Sequence
from typing import Protocol, TypeVar

from .core.logging_config import get_logger
from .monitoring import metrics_collector
from .tree import Node, Tree, count_nodes

logger = get_logger(__name__)

T = TypeVar("T")


class Renderer(Protocol):
    """Rendering layer fed with every published tree."""

    def render(self, tree: Tree) -> None: ...

    def present_modal(self, nodes: list[Node]) -> None: ...


class TreeStore:
    """
    Holds the current tree and publishes replacements.

    ``commit`` reads the current tree, computes the next one and swaps it in
    without suspending, so concurrent asyncio handlers always build on the
    latest published tree. Readers only ever see complete trees.
    """

    def __init__(self, tree: Sequence[Node] | None = None) -> None:
        self._tree: Tree = list(tree or [])
        self._version = 0
        self._renderers: list[Renderer] = []

    @property
    def version(self) -> int:
        """Incremented on every published change."""
        return self._version

    def snapshot(self) -> Tree:
        """Current tree (a copy of the root list; nodes are immutable)."""
        return list(self._tree)

    def subscribe(self, renderer: Renderer) -> Callable[[], None]:
        """Register a renderer. Returns an unsubscribe function."""
        self._renderers.append(renderer)
        renderer.render(self.snapshot())

        def unsubscribe() -> None:
            if renderer in self._renderers:
                self._renderers.remove(renderer)

        return unsubscribe

    def commit(self, mutator: Callable[[Tree], tuple[Tree, T]]) -> T:
        """
        Apply a pure mutation to the current tree and publish the result.

        Args:
            mutator: Receives the current tree, returns (new tree, value)

        Returns:
            The mutator's value
        """
        new_tree, value = mutator(self.snapshot())
        self._tree = list(new_tree)
        self._version += 1
        count = count_nodes(self._tree)
        metrics_collector.set_tree_nodes(count)
        logger.debug("tree_published", version=self._version, nodes=count)
        self._notify()
        return value

    def set_tree(self, tree: Sequence[Node]) -> None:
        """Replace the whole tree."""
        self.commit(lambda _: (list(tree), None))

    def present_modal(self, nodes: list[Node]) -> None:
        """Hand modal content to renderers; the tree is not changed."""
        for renderer in list(self._renderers):
            try:
                renderer.present_modal(nodes)
            except Exception as e:
                logger.error("renderer_failed", operation="present_modal", error=str(e), exc_info=True)

    def _notify(self) -> None:
        tree = self.snapshot()
        for renderer in list(self._renderers):
            try:
                renderer.render(tree)
            except Exception as e:
                logger.error("renderer_failed", operation="render", error=str(e), exc_info=True)


__all__ = ["Renderer", "TreeStore"]
