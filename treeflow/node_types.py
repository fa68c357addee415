"""Closed set of node types and the per-type tables that go with them.

Adding a type means updating ALLOWED_CHILDREN, CHILD_SOURCES, DEFAULT_TITLES
and the layout size table in treeflow.layout together. The builder and the
finder only descend along the child sources ALLOWED_CHILDREN permits.
"""

import math
from dataclasses import dataclass
from enum import StrEnum


class NodeType(StrEnum):
    OUTCOME = "outcome"
    OPPORTUNITY = "opportunity"
    SOLUTION = "solution"
    TEST = "test"
    # Synthetic
    JOURNEY = "journey"
    OVERFLOW = "overflow"


RECORD_TYPES: frozenset[NodeType] = frozenset({
    NodeType.OUTCOME,
    NodeType.OPPORTUNITY,
    NodeType.SOLUTION,
    NodeType.TEST,
})

ALLOWED_CHILDREN: dict[NodeType, tuple[NodeType, ...]] = {
    NodeType.OUTCOME: (NodeType.OPPORTUNITY,),
    NodeType.OPPORTUNITY: (NodeType.OPPORTUNITY, NodeType.SOLUTION),
    NodeType.SOLUTION: (NodeType.SOLUTION, NodeType.TEST),
    NodeType.TEST: (),
    NodeType.JOURNEY: (NodeType.OPPORTUNITY,),
    NodeType.OVERFLOW: (),
}


@dataclass(frozen=True)
class ChildSource:
    """One nested array of a record: accepted field names (first present wins) and child type."""

    fields: tuple[str, ...]
    child_type: NodeType


# Merged siblings keep this source order on order ties
CHILD_SOURCES: dict[NodeType, tuple[ChildSource, ...]] = {
    NodeType.OUTCOME: (
        ChildSource(("opportunities",), NodeType.OPPORTUNITY),
    ),
    NodeType.OPPORTUNITY: (
        ChildSource(("subOpportunities", "sub_opportunities"), NodeType.OPPORTUNITY),
        ChildSource(("solutions",), NodeType.SOLUTION),
    ),
    NodeType.SOLUTION: (
        ChildSource(("subSolutions", "sub_solutions"), NodeType.SOLUTION),
        ChildSource(("tests", "experiments"), NodeType.TEST),
    ),
    NodeType.TEST: (),
}


def child_sources(node_type: NodeType) -> tuple[ChildSource, ...]:
    """Sources a record of ``node_type`` is descended through, per ALLOWED_CHILDREN."""
    allowed = ALLOWED_CHILDREN.get(node_type, ())
    return tuple(s for s in CHILD_SOURCES.get(node_type, ()) if s.child_type in allowed)


DEFAULT_TITLES: dict[NodeType, str] = {
    NodeType.OUTCOME: "New Outcome",
    NodeType.OPPORTUNITY: "New Opportunity",
    NodeType.SOLUTION: "New Solution",
    NodeType.TEST: "New Test",
    NodeType.JOURNEY: "Journey stage",
    NodeType.OVERFLOW: "More",
}

NODE_TYPE_LABELS: dict[str, str] = {
    "outcome": "Outcome",
    "opportunity": "Opportunity",
    "sub_opportunity": "Sub-Opportunity",
    "solution": "Solution",
    "sub_solution": "Sub-Solution",
    "test": "Test",
    "journey": "Journey stage",
    "overflow": "More",
}

MAX_CHILDREN_VISIBLE = 8


class UnknownNodeTypeError(ValueError):
    """Raised when a value outside the closed NodeType set is used as a type."""


def coerce_node_type(value: str) -> NodeType:
    try:
        return NodeType(value)
    except ValueError:
        raise UnknownNodeTypeError(f"Unknown node type: {value!r}") from None


def can_add_child(parent_type: str, child_type: str) -> bool:
    """Whether ``child_type`` may be nested directly under ``parent_type``."""
    try:
        parent, child = NodeType(parent_type), NodeType(child_type)
    except ValueError:
        return False
    return child in ALLOWED_CHILDREN[parent]


def node_type_label(node_type: str, *, is_sub: bool = False) -> str:
    """Human-readable label, distinguishing nested opportunities/solutions."""
    if is_sub and node_type in ("opportunity", "solution"):
        return NODE_TYPE_LABELS[f"sub_{node_type}"]
    return NODE_TYPE_LABELS.get(node_type, node_type)


# -- Status catalogues --

STATUS_OPTIONS: tuple[tuple[str, str], ...] = (
    ("idea", "Idea"),
    ("in_progress", "In Progress"),
    ("validated", "Validated"),
    ("killed", "Killed"),
)

# Design phase only: idea -> draft -> designed
TEST_STATUS_OPTIONS: tuple[tuple[str, str], ...] = (
    ("idea", "Idea"),
    ("draft", "Draft"),
    ("designed", "Designed experiment"),
)

RESULT_DECISION_OPTIONS: tuple[tuple[str, str], ...] = (
    ("ongoing", "Ongoing"),
    ("pass", "Pass"),
    ("iterate", "Iterate"),
    ("kill", "Kill"),
)

_LEGACY_DESIGNED_STATUSES = {
    "running", "active", "testing", "live",
    "done", "completed", "done_pass", "done_iterate", "done_kill",
}


def normalize_test_status(value: object) -> str:
    """Map legacy or API test statuses onto idea / draft / designed."""
    if not value:
        return "draft"
    v = str(value).lower().strip()
    if v in ("idea", "draft", "designed"):
        return v
    if v in _LEGACY_DESIGNED_STATUSES:
        return "designed"
    return "draft"


def status_label_for_test(value: object) -> str:
    return dict(TEST_STATUS_OPTIONS)[normalize_test_status(value)]


def normalize_result_decision(value: object) -> str | None:
    if value is None or value == "":
        return None
    v = str(value).lower().strip()
    if v in dict(RESULT_DECISION_OPTIONS):
        return v
    return None


def result_decision_label(value: object, has_open_todos: bool = False) -> str:
    """Label for a result decision; open todos always read as Ongoing."""
    if has_open_todos:
        return "Ongoing"
    v = normalize_result_decision(value)
    if v is None:
        return "Ongoing"
    return dict(RESULT_DECISION_OPTIONS)[v]


def clamp_confidence_score(value: object) -> int | None:
    """Clamp to an integer in 0..100, or None when not numeric."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        n = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(n):
        return None
    return math.floor(min(100.0, max(0.0, n)) + 0.5)
