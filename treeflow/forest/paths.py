"""Active-path calculation and traversal helpers over a built forest."""

import logging
from collections.abc import Mapping

from treeflow.keys import decode_key, edge_id
from treeflow.models import ActivePath, ViewNode

logger = logging.getLogger(__name__)


def get_active_path(nodes_by_key: Mapping[str, ViewNode], focus_key: str | None) -> ActivePath:
    """Nodes and edges linking ``focus_key`` to its root and all its descendants.

    An empty or unknown focus yields an empty path; a focus that does not
    decode as a node key is also logged.
    """
    if not focus_key:
        return ActivePath()
    start = nodes_by_key.get(focus_key)
    if start is None:
        if decode_key(focus_key) is None:
            logger.warning("Active path requested for undecodable key %r", focus_key)
        return ActivePath()

    nodes: set[str] = set()
    edges: set[str] = set()

    # Ancestors
    current: ViewNode | None = start
    while current is not None and current.key not in nodes:
        nodes.add(current.key)
        if current.parent_key is None:
            break
        edges.add(edge_id(current.parent_key, current.key))
        current = nodes_by_key.get(current.parent_key)

    # Descendants
    stack = [start]
    seen = {start.key}
    while stack:
        node = stack.pop()
        nodes.add(node.key)
        for child in node.children:
            edges.add(edge_id(node.key, child.key))
            if child.key not in seen:
                seen.add(child.key)
                stack.append(nodes_by_key.get(child.key, child))

    return ActivePath(nodes=frozenset(nodes), edges=frozenset(edges))


def get_path_to_root(nodes_by_key: Mapping[str, ViewNode], key: str) -> list[str]:
    """Keys from ``key`` up to its root, focus first. Empty if ``key`` is unknown."""
    path: list[str] = []
    current = nodes_by_key.get(key)
    while current is not None and current.key not in path:
        path.append(current.key)
        current = nodes_by_key.get(current.parent_key) if current.parent_key else None
    return path


def collect_tree_nodes(root: ViewNode) -> list[tuple[ViewNode, int]]:
    """Every node under ``root`` with its depth (root = 1), pre-order."""
    collected: list[tuple[ViewNode, int]] = []
    stack = [(root, 1)]
    while stack:
        node, depth = stack.pop()
        collected.append((node, depth))
        stack.extend((child, depth + 1) for child in reversed(node.children))
    return collected
