"""Growth limits for generated content."""

from collections.abc import Sequence
from dataclasses import dataclass

from ..core.errors import TreeLimitError
from ..tree import ComponentNode, Node, Placeholder, count_nodes


@dataclass(frozen=True)
class GrowthLimits:
    """
    Bounds on recursive generation.

    A trigger on a node produced by ``max_generation_depth`` generative hops
    is rejected, as is any placement that would leave the tree with more
    than ``max_tree_nodes`` addressable nodes.
    """

    max_tree_nodes: int = 500
    max_generation_depth: int = 5

    @staticmethod
    def depth_of(node: ComponentNode | Placeholder | None) -> int:
        """Generation depth of a node; hand-written and missing nodes are 0."""
        match node:
            case ComponentNode(metadata=metadata) if metadata is not None:
                return metadata.generation_depth
            case _:
                return 0

    def check_depth(self, trigger: ComponentNode | Placeholder | None) -> int:
        """
        Depth the generated fragment would have.

        Raises:
            TreeLimitError: If it would exceed max_generation_depth
        """
        depth = self.depth_of(trigger) + 1
        if depth > self.max_generation_depth:
            raise TreeLimitError(
                f"Generation depth {depth} exceeds maximum {self.max_generation_depth}"
            )
        return depth

    def check_size(self, tree: Sequence[Node], fragment: Sequence[Node], removed: int = 0) -> None:
        """
        Raises:
            TreeLimitError: If placing the fragment would exceed max_tree_nodes
        """
        total = count_nodes(tree) + count_nodes(fragment) - removed
        if total > self.max_tree_nodes:
            raise TreeLimitError(f"Tree would hold {total} nodes, maximum is {self.max_tree_nodes}")


__all__ = ["GrowthLimits"]
