"""Forest construction, visibility reduction, active paths and lookups."""

from treeflow.forest.builder import build_forest, build_tree, index_nodes
from treeflow.forest.finder import find_node_by_key
from treeflow.forest.materializer import materialize_node
from treeflow.forest.paths import collect_tree_nodes, get_active_path, get_path_to_root
from treeflow.forest.visibility import build_visible_forest, build_visible_graph

__all__ = [
    "build_forest",
    "build_tree",
    "build_visible_forest",
    "build_visible_graph",
    "collect_tree_nodes",
    "find_node_by_key",
    "get_active_path",
    "get_path_to_root",
    "index_nodes",
    "materialize_node",
]
