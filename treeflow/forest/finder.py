"""Node finder over raw (unbuilt) outcome records.

Used by editing flows that need the records around a node, e.g. the outcome
a new sub-opportunity must be created under, or the opportunity that owns a
solution. Same descent as the builder (allowed child sources, usable records,
depth limit per tree structure), stopping at the first match.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from treeflow.config import DEFAULT_CONFIG, EngineConfig
from treeflow.forest.builder import TreeStructure, check_structure
from treeflow.forest.grouping import opportunity_stage
from treeflow.forest.subtrees import FIRST_LEVEL_DEPTH, is_usable_record, nested_children
from treeflow.keys import decode_group_id, decode_key
from treeflow.models import NodeLookup
from treeflow.node_types import RECORD_TYPES, NodeType, child_sources
from treeflow.utils.records import as_str, nested

Record = Mapping[str, Any]

_SEARCHABLE_TYPES = frozenset(t.value for t in RECORD_TYPES)


def _matches(record: Any, node_id: str) -> bool:
    return is_usable_record(record) and as_str(record.get("id")) == node_id


class _Search:
    """One lookup: the target (type, id) plus the depth limit."""

    def __init__(self, node_type: NodeType, node_id: str, max_depth: int, first_level_depth: int) -> None:
        self.node_type = node_type
        self.node_id = node_id
        self.max_depth = max_depth
        self.first_level_depth = first_level_depth

    def in_outcome(self, outcome: Record) -> NodeLookup | None:
        if self.node_type == NodeType.OUTCOME:
            if _matches(outcome, self.node_id):
                return NodeLookup(type=NodeType.OUTCOME, node=outcome, root=outcome)
            return None
        # First-level records are always searched, like the builder builds them
        for source in child_sources(NodeType.OUTCOME):
            for child in nested(outcome, *source.fields):
                found = self.in_record(
                    source.child_type, child, outcome, None, None, outcome, self.first_level_depth
                )
                if found:
                    return found
        return None

    def in_record(
        self,
        node_type: NodeType,
        record: Any,
        parent: Record,
        owner: Record | None,
        top: Record | None,
        outcome: Record,
        depth: int,
    ) -> NodeLookup | None:
        if not is_usable_record(record):
            return None
        if node_type is NodeType.OPPORTUNITY:
            owner = record
            top = top or record
        if node_type == self.node_type and _matches(record, self.node_id):
            return NodeLookup(
                type=node_type, node=record, parent=parent,
                opportunity=owner, top_opportunity=top, root=outcome,
            )
        if depth >= self.max_depth:
            return None
        for source in child_sources(node_type):
            for child in nested(record, *source.fields):
                found = self.in_record(source.child_type, child, record, owner, top, outcome, depth + 1)
                if found:
                    return found
        return None


def _find_stage_group(outcomes: list, group_id: str) -> NodeLookup | None:
    parts = decode_group_id(group_id)
    if parts is None:
        return None
    owner_id, stage_id = parts
    for outcome in outcomes:
        if _matches(outcome, owner_id):
            members = [
                opp for opp in nested_children(outcome, NodeType.OUTCOME, NodeType.OPPORTUNITY)
                if is_usable_record(opp) and opportunity_stage(opp) == stage_id
            ]
            # Only non-empty buckets become group nodes
            if not members:
                return None
            return NodeLookup(type=NodeType.JOURNEY, node=members, parent=outcome, root=outcome)
    return None


def find_node_by_key(
    outcomes: Iterable[Record] | None,
    key: str | None,
    *,
    structure: TreeStructure = "classic",
    config: EngineConfig | None = None,
) -> NodeLookup | None:
    """Locate the raw record for ``key`` with its parent, owners and root.

    ``structure`` and ``config`` should match the build the key came from,
    so records the builder dropped at the depth limit are not found either.
    For a stage group key the lookup's ``node`` is the list of first-level
    opportunity records in that stage, exactly the group's members. Returns
    None, never raises, when the key does not decode or nothing matches.

    Raises:
        ValueError: If ``structure`` is not a known tree structure.
    """
    check_structure(structure)
    decoded = decode_key(key)
    if decoded is None:
        return None
    outcomes = list(outcomes or [])

    if decoded.type == NodeType.JOURNEY:
        return _find_stage_group(outcomes, decoded.id)
    if decoded.type not in _SEARCHABLE_TYPES:
        return None

    search = _Search(
        NodeType(decoded.type),
        decoded.id,
        (config or DEFAULT_CONFIG).max_depth,
        FIRST_LEVEL_DEPTH[structure],
    )
    for outcome in outcomes:
        if is_usable_record(outcome):
            found = search.in_outcome(outcome)
            if found:
                return found
    return None
