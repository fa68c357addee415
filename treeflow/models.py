"""Canonical view structures produced by the engine.

Defined once here, referenced everywhere else. All of them are frozen
snapshots: every build call produces fresh instances and nothing is mutated
after construction.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from treeflow.node_types import NodeType

# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


class ViewNode(BaseModel):
    """A materialized node: record fields resolved over overrides and defaults."""

    model_config = ConfigDict(frozen=True)

    key: str
    id: str
    type: NodeType
    parent_key: str | None = None
    order: float = 0
    title: str
    description: str = ""
    status: str | None = None
    owner: str | None = None
    contributor_ids: tuple[str, ...] = ()
    confidence_score: int | None = None

    # Test-specific
    evidence: str = ""
    result: str = ""
    test_template: str | None = None
    test_type: str | None = None
    test_status: str | None = None
    result_decision: str | None = None
    todo_done: int | None = None
    todo_total: int | None = None

    is_sub_opportunity: bool = False
    is_sub_solution: bool = False

    # Journey groups only
    count: int | None = None
    stage_id: str | None = None
    is_unassigned: bool = False

    children: tuple["ViewNode", ...] = ()
    raw: dict[str, Any] = Field(default_factory=dict)


class OverflowNode(BaseModel):
    """Placeholder for the children of one parent hidden by the visibility cap.

    ``hidden_children`` is the remainder exactly as sorted, not re-nested, so
    paging into it means scanning this list rather than the forest index.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    id: str
    type: NodeType = NodeType.OVERFLOW
    parent_key: str
    title: str
    hidden_children: tuple[ViewNode, ...]


class Forest(BaseModel):
    """All roots plus a flat index of every node reachable from them."""

    model_config = ConfigDict(frozen=True)

    roots: tuple[ViewNode, ...] = ()
    nodes_by_key: dict[str, ViewNode] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)

    @property
    def root(self) -> ViewNode | None:
        """The first root, for single-outcome callers."""
        return self.roots[0] if self.roots else None


# ---------------------------------------------------------------------------
# Derived views
# ---------------------------------------------------------------------------


class VisibleEdge(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    source: str
    target: str


class VisibleGraph(BaseModel):
    model_config = ConfigDict(frozen=True)

    nodes: list[ViewNode] = Field(default_factory=list)
    edges: list[VisibleEdge] = Field(default_factory=list)
    overflow_nodes: list[OverflowNode] = Field(default_factory=list)


class ActivePath(BaseModel):
    """Node keys and edge ids to highlight around a focused node."""

    model_config = ConfigDict(frozen=True)

    nodes: frozenset[str] = frozenset()
    edges: frozenset[str] = frozenset()


@dataclass(frozen=True)
class NodeLookup:
    """Where a raw record sits in the unbuilt outcome records.

    Holds the caller's own record objects, not copies. ``opportunity`` is the
    opportunity that directly owns the node (the node itself for
    opportunities); ``top_opportunity`` is the first-level opportunity of its
    branch. Both are None for outcomes and stage groups.
    """

    type: NodeType
    node: Any
    parent: Mapping[str, Any] | None = None
    opportunity: Mapping[str, Any] | None = None
    top_opportunity: Mapping[str, Any] | None = None
    root: Mapping[str, Any] | None = None
