"""Forest builder: outcome records + overrides -> Forest.

Pure function of its inputs. Calling it twice with the same records and
overrides yields equal forests; neither input is modified.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Literal

from treeflow.config import DEFAULT_CONFIG, EngineConfig
from treeflow.forest.grouping import build_stage_groups
from treeflow.forest.materializer import Overrides, materialize_node
from treeflow.forest.subtrees import (
    FIRST_LEVEL_DEPTH,
    BuildContext,
    build_children,
    nested_children,
    usable_records,
)
from treeflow.keys import decode_key, encode_key
from treeflow.models import Forest, ViewNode
from treeflow.node_types import NodeType
from treeflow.utils.records import as_str

logger = logging.getLogger(__name__)

TreeStructure = Literal["classic", "journey"]
TREE_STRUCTURES: tuple[str, ...] = ("classic", "journey")


def check_structure(structure: str) -> None:
    if structure not in TREE_STRUCTURES:
        raise ValueError(f"Unknown tree structure {structure!r}; expected one of {TREE_STRUCTURES}")


def index_nodes(root: ViewNode, ctx: BuildContext | None = None) -> dict[str, ViewNode]:
    """Register every node under ``root`` by key, in pre-order.

    If upstream data repeats a key, the first occurrence wins and the repeat
    is reported.
    """
    index: dict[str, ViewNode] = {}
    stack = [root]
    while stack:
        node = stack.pop()
        if node.key in index:
            if ctx is not None:
                ctx.warn(f"Duplicate node key {node.key}; keeping first occurrence")
            continue
        index[node.key] = node
        stack.extend(reversed(node.children))
    return index


def _build_root(
    outcome: Mapping[str, Any], index: int, structure: str, ctx: BuildContext
) -> ViewNode:
    root_key = encode_key(NodeType.OUTCOME, as_str(outcome["id"]))
    if structure == "journey":
        opportunities = nested_children(outcome, NodeType.OUTCOME, NodeType.OPPORTUNITY)
        children = build_stage_groups(outcome, root_key, opportunities, ctx)
    else:
        # First-level records are always built, whatever the depth limit
        children = build_children(
            NodeType.OUTCOME, outcome, root_key, ctx, FIRST_LEVEL_DEPTH["classic"] - 1, limit_depth=False
        )
    return materialize_node(
        NodeType.OUTCOME, outcome, None, index, ctx.overrides, children=children
    )


def _check_override_keys(overrides: Overrides, ctx: BuildContext) -> None:
    for key in overrides:
        if decode_key(key) is None:
            ctx.warn(f"Ignoring override with undecodable key {key!r}")


def build_forest(
    outcomes: Iterable[Mapping[str, Any]] | None,
    overrides: Overrides | None = None,
    *,
    structure: TreeStructure = "classic",
    config: EngineConfig | None = None,
) -> Forest:
    """Build one tree per outcome record and merge their indexes.

    Args:
        outcomes: Outcome records with nested opportunities, solutions and
            tests. Malformed entries are skipped and reported in
            ``Forest.warnings``.
        overrides: Unsaved local edits, node key -> partial field patch.
        structure: "classic" hangs opportunities directly off each outcome;
            "journey" groups first-level opportunities by journey stage.
        config: Depth limit; defaults to the module default config.

    Raises:
        ValueError: If ``structure`` is not a known tree structure.
    """
    check_structure(structure)
    ctx = BuildContext(overrides=overrides or {}, config=config or DEFAULT_CONFIG)
    _check_override_keys(ctx.overrides, ctx)

    roots: list[ViewNode] = []
    nodes_by_key: dict[str, ViewNode] = {}
    for index, outcome in usable_records(list(outcomes or []), NodeType.OUTCOME, None, ctx):
        root = _build_root(outcome, index, structure, ctx)
        tree_index = index_nodes(root, ctx)
        duplicates = tree_index.keys() & nodes_by_key.keys()
        for key in sorted(duplicates):
            ctx.warn(f"Node key {key} appears under more than one outcome; keeping first")
        roots.append(root)
        nodes_by_key.update({k: v for k, v in tree_index.items() if k not in duplicates})

    logger.debug("Built forest: %d root(s), %d node(s)", len(roots), len(nodes_by_key))
    return Forest(roots=tuple(roots), nodes_by_key=nodes_by_key, warnings=ctx.warnings)


def build_tree(
    outcome: Mapping[str, Any],
    overrides: Overrides | None = None,
    *,
    structure: TreeStructure = "classic",
    config: EngineConfig | None = None,
) -> Forest:
    """Build a single outcome's tree. ``forest.root`` is its root node."""
    return build_forest([outcome], overrides, structure=structure, config=config)
