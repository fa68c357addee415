"""Recursive construction of opportunity and solution subtrees.

Shared by the plain and the stage-grouped builders. Which nested arrays a
record descends into comes from treeflow.node_types.child_sources, so the
builder never creates a child its parent type does not allow. Each node's
children are built first and the node is materialized around them, so nodes
are never modified after creation.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from treeflow.config import EngineConfig
from treeflow.forest.materializer import Overrides, materialize_node
from treeflow.keys import encode_key
from treeflow.models import ViewNode
from treeflow.node_types import NodeType, child_sources
from treeflow.utils.records import as_str, nested

logger = logging.getLogger(__name__)

# Depth of first-level opportunities; the outcome is depth 1 and a stage
# group adds one level in between
FIRST_LEVEL_DEPTH: dict[str, int] = {"classic": 2, "journey": 3}


@dataclass
class BuildContext:
    """Per-call inputs plus the warnings collected while building."""

    overrides: Overrides
    config: EngineConfig
    warnings: list[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)


def sort_by_order(nodes: Iterable[ViewNode]) -> list[ViewNode]:
    """Stable sort on ``order``; ties keep their incoming sequence."""
    return sorted(nodes, key=lambda n: n.order)


def is_usable_record(record: Any) -> bool:
    return isinstance(record, Mapping) and record.get("id") not in (None, "")


def usable_records(
    records: list, node_type: NodeType, parent_key: str | None, ctx: BuildContext
) -> list[tuple[int, Mapping[str, Any]]]:
    """(array index, record) for every entry that can become a node.

    Entries that are not mappings or carry no id are skipped with a warning
    rather than failing the whole build.
    """
    usable = []
    for index, record in enumerate(records):
        if not is_usable_record(record):
            ctx.warn(
                f"Skipping malformed {node_type.value} record at index {index}"
                f" under {parent_key or '(root)'}"
            )
            continue
        usable.append((index, record))
    return usable


def nested_children(record: Mapping[str, Any], node_type: NodeType, child_type: NodeType) -> list:
    """Raw ``child_type`` records nested in ``record``, across its allowed sources."""
    return [
        child
        for source in child_sources(node_type)
        if source.child_type is child_type
        for child in nested(record, *source.fields)
    ]


def _nested_within_depth(
    record: Mapping[str, Any], names: tuple[str, ...], key: str, depth: int, ctx: BuildContext
) -> list:
    records = nested(record, *names)
    if records and depth >= ctx.config.max_depth:
        ctx.warn(
            f"Dropping {len(records)} nested record(s) under {key}:"
            f" max depth {ctx.config.max_depth} reached"
        )
        return []
    return records


def build_children(
    node_type: NodeType,
    record: Mapping[str, Any],
    key: str,
    ctx: BuildContext,
    depth: int,
    *,
    limit_depth: bool = True,
) -> list[ViewNode]:
    """Children of the node at ``depth``, every source merged into one sorted list."""
    children: list[ViewNode] = []
    for source in child_sources(node_type):
        if limit_depth:
            records = _nested_within_depth(record, source.fields, key, depth, ctx)
        else:
            records = nested(record, *source.fields)
        children.extend(
            build_record_node(
                source.child_type, child, key, i, ctx, depth + 1,
                is_sub=source.child_type is node_type,
            )
            for i, child in usable_records(records, source.child_type, key, ctx)
        )
    return sort_by_order(children)


def build_record_node(
    node_type: NodeType,
    record: Mapping[str, Any],
    parent_key: str,
    index: int,
    ctx: BuildContext,
    depth: int,
    *,
    is_sub: bool = False,
) -> ViewNode:
    """An opportunity, solution or test node with its whole subtree."""
    key = encode_key(node_type, as_str(record["id"]))
    return materialize_node(
        node_type, record, parent_key, index, ctx.overrides,
        children=build_children(node_type, record, key, ctx, depth),
        is_sub_opportunity=is_sub and node_type is NodeType.OPPORTUNITY,
        is_sub_solution=is_sub and node_type is NodeType.SOLUTION,
    )
