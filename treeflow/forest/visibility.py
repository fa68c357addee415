"""Visibility reducer: the bounded subgraph the board actually renders.

Walks depth-first from each root. Collapsed nodes are shown but their
subtrees are not, and no overflow placeholder is made for them. Otherwise at
most ``max_children`` children per parent are shown; the rest go into one
overflow node per parent.
"""

from collections.abc import Iterable

from treeflow.config import DEFAULT_CONFIG, EngineConfig
from treeflow.forest.subtrees import sort_by_order
from treeflow.keys import edge_id, overflow_key
from treeflow.models import OverflowNode, ViewNode, VisibleEdge, VisibleGraph


def _edge(source: str, target: str) -> VisibleEdge:
    return VisibleEdge(id=edge_id(source, target), source=source, target=target)


def _resolve_cap(max_children: int | None, config: EngineConfig | None) -> int:
    cap = max_children if max_children is not None else (config or DEFAULT_CONFIG).max_children_visible
    if cap < 0:
        raise ValueError(f"max_children must be >= 0, got {cap}")
    return cap


def build_visible_forest(
    roots: Iterable[ViewNode],
    collapsed: Iterable[str] | None = None,
    *,
    max_children: int | None = None,
    config: EngineConfig | None = None,
) -> VisibleGraph:
    """Reduce a forest to its visible nodes, edges and overflow placeholders.

    Raises:
        ValueError: If the resolved child cap is negative.
    """
    cap = _resolve_cap(max_children, config)
    collapsed_keys = frozenset(collapsed or ())
    nodes: list[ViewNode] = []
    edges: list[VisibleEdge] = []
    overflow_nodes: list[OverflowNode] = []
    emitted: set[str] = set()

    def walk(node: ViewNode) -> None:
        if node.key in emitted:
            return
        emitted.add(node.key)
        nodes.append(node)
        if node.key in collapsed_keys:
            return

        ordered = sort_by_order(node.children)
        visible, hidden = ordered[:cap], ordered[cap:]
        for child in visible:
            # A repeated key stays with its first parent
            if child.key in emitted:
                continue
            edges.append(_edge(node.key, child.key))
            walk(child)

        if hidden:
            key = overflow_key(node.key)
            overflow_nodes.append(OverflowNode(
                key=key,
                id=key,
                parent_key=node.key,
                title=f"+{len(hidden)} more",
                hidden_children=tuple(hidden),
            ))
            edges.append(_edge(node.key, key))

    for root in roots:
        walk(root)
    return VisibleGraph(nodes=nodes, edges=edges, overflow_nodes=overflow_nodes)


def build_visible_graph(
    root: ViewNode,
    collapsed: Iterable[str] | None = None,
    *,
    max_children: int | None = None,
    config: EngineConfig | None = None,
) -> VisibleGraph:
    """Single-root form of build_visible_forest."""
    return build_visible_forest([root], collapsed, max_children=max_children, config=config)
