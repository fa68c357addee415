"""Treeflow tree-model engine.

Turns outcome records into a typed forest of view nodes, reduces it to the
visible subgraph, and computes highlight paths, layering unsaved local edits
over the records without touching them.
"""

from treeflow.config import EngineConfig
from treeflow.forest import (
    build_forest,
    build_tree,
    build_visible_forest,
    build_visible_graph,
    collect_tree_nodes,
    find_node_by_key,
    get_active_path,
    get_path_to_root,
    materialize_node,
)
from treeflow.keys import NodeKey, decode_key, encode_group_key, encode_key
from treeflow.models import (
    ActivePath,
    Forest,
    NodeLookup,
    OverflowNode,
    ViewNode,
    VisibleEdge,
    VisibleGraph,
)
from treeflow.node_types import NodeType

__all__ = [
    "ActivePath",
    "EngineConfig",
    "Forest",
    "NodeKey",
    "NodeLookup",
    "NodeType",
    "OverflowNode",
    "ViewNode",
    "VisibleEdge",
    "VisibleGraph",
    "build_forest",
    "build_tree",
    "build_visible_forest",
    "build_visible_graph",
    "collect_tree_nodes",
    "decode_key",
    "encode_group_key",
    "encode_key",
    "find_node_by_key",
    "get_active_path",
    "get_path_to_root",
    "materialize_node",
]
