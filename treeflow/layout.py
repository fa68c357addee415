"""Hand-off to the layout collaborator.

The engine does not position anything. It turns a VisibleGraph into the
sized nodes and plain edges a layout engine consumes; engines implement
LayoutEngine and must return the same positions for the same input.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict

from treeflow.models import OverflowNode, ViewNode, VisibleGraph
from treeflow.node_types import NodeType

NODE_SIZES: dict[NodeType, tuple[int, int]] = {
    NodeType.OUTCOME: (320, 120),
    NodeType.JOURNEY: (96, 32),
    NodeType.OPPORTUNITY: (248, 80),
    NodeType.SOLUTION: (228, 74),
    NodeType.TEST: (208, 70),
    NodeType.OVERFLOW: (140, 48),
}

# Nested opportunities/solutions render slightly smaller
SUB_NODE_WIDTH_SCALE = 0.92
SUB_NODE_HEIGHT_SCALE = 0.88


class LayoutNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    type: NodeType
    width: int
    height: int


class LayoutEdge(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str
    target: str


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float


def node_size(node: ViewNode | OverflowNode) -> tuple[int, int]:
    width, height = NODE_SIZES.get(node.type, NODE_SIZES[NodeType.SOLUTION])
    if getattr(node, "is_sub_opportunity", False) or getattr(node, "is_sub_solution", False):
        return round(width * SUB_NODE_WIDTH_SCALE), round(height * SUB_NODE_HEIGHT_SCALE)
    return width, height


def to_layout_input(graph: VisibleGraph) -> tuple[list[LayoutNode], list[LayoutEdge]]:
    """Sized nodes (regular nodes first, then overflow) and edges for layout."""
    nodes = []
    for node in [*graph.nodes, *graph.overflow_nodes]:
        width, height = node_size(node)
        nodes.append(LayoutNode(id=node.key, type=node.type, width=width, height=height))
    edges = [LayoutEdge(source=e.source, target=e.target) for e in graph.edges]
    return nodes, edges


class LayoutEngine(ABC):
    """Interface for assigning on-screen positions to a visible graph."""

    @abstractmethod
    def layout(self, nodes: list[LayoutNode], edges: list[LayoutEdge]) -> dict[str, Position]:
        """Return a position per node id; deterministic for identical input."""
        ...


def layout_visible_graph(graph: VisibleGraph, engine: LayoutEngine) -> dict[str, Position]:
    nodes, edges = to_layout_input(graph)
    return engine.layout(nodes, edges)
