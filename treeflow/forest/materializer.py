"""Node materializer: one raw record (+ optional override) -> one ViewNode.

Every field resolves by precedence override > record > type default.
Overrides are read, never written.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from treeflow.keys import encode_key
from treeflow.models import ViewNode
from treeflow.node_types import (
    DEFAULT_TITLES,
    RECORD_TYPES,
    NodeType,
    UnknownNodeTypeError,
    clamp_confidence_score,
    coerce_node_type,
)
from treeflow.utils.records import as_str, first_present, is_number

Overrides = Mapping[str, Mapping[str, Any]]

# view field -> accepted source names, camelCase first
_FIELD_NAMES: dict[str, tuple[str, ...]] = {
    "title": ("title",),
    "description": ("description",),
    "status": ("status",),
    "owner": ("owner",),
    "contributor_ids": ("contributorIds", "contributor_ids", "contributors"),
    "confidence_score": ("confidenceScore", "confidence_score"),
    "evidence": ("evidence",),
    "result": ("result",),
    "test_template": ("testTemplate", "test_template"),
    "test_type": ("testType", "test_type"),
    "test_status": ("testStatus", "test_status"),
    "result_decision": ("resultDecision", "result_decision"),
    "todo_done": ("todoDone", "todo_done"),
    "todo_total": ("todoTotal", "todo_total"),
}

_SECONDARY_ORDER_NAMES = ("sortIndex", "sort_index")


def resolve_order(record: Mapping[str, Any], override: Mapping[str, Any], index: int) -> float:
    """Sibling position: explicit order, then sort index, then array index."""
    for source, names in ((override, ("order",)), (record, ("order",)), (record, _SECONDARY_ORDER_NAMES)):
        for name in names:
            value = source.get(name)
            if is_number(value):
                return value
    return index


def _field(name: str, override: Mapping[str, Any], record: Mapping[str, Any], default: Any = None) -> Any:
    names = _FIELD_NAMES[name]
    return first_present((override, names), (record, names), default=default)


def _optional_int(value: Any) -> int | None:
    return int(value) if is_number(value) else None


def materialize_node(
    node_type: NodeType | str,
    record: Mapping[str, Any],
    parent_key: str | None,
    index: int,
    overrides: Overrides | None = None,
    *,
    children: Sequence[ViewNode] = (),
    is_sub_opportunity: bool = False,
    is_sub_solution: bool = False,
) -> ViewNode:
    """Build the ViewNode for ``record``.

    ``children`` must already be materialized; they are attached as given.

    Raises:
        UnknownNodeTypeError: If ``node_type`` is not a record type.
    """
    node_type = coerce_node_type(node_type)
    if node_type not in RECORD_TYPES:
        raise UnknownNodeTypeError(f"{node_type.value!r} is not a record type")

    node_id = as_str(record.get("id"))
    key = encode_key(node_type, node_id)
    override = (overrides or {}).get(key)
    if not isinstance(override, Mapping):
        override = {}

    contributors = _field("contributor_ids", override, record, default=())
    if not isinstance(contributors, (list, tuple)):
        contributors = ()

    test_type = _field("test_type", override, record)
    if test_type is None and node_type is NodeType.TEST:
        # Experiment records keep their kind in the bare "type" column
        test_type = record.get("type")

    return ViewNode(
        key=key,
        id=node_id,
        type=node_type,
        parent_key=parent_key,
        order=resolve_order(record, override, index),
        title=as_str(_field("title", override, record, default=DEFAULT_TITLES[node_type])),
        description=as_str(_field("description", override, record, default="")),
        status=as_str(_field("status", override, record)),
        owner=as_str(_field("owner", override, record)),
        contributor_ids=tuple(str(c) for c in contributors),
        confidence_score=clamp_confidence_score(_field("confidence_score", override, record)),
        evidence=as_str(_field("evidence", override, record, default="")),
        result=as_str(_field("result", override, record, default="")),
        test_template=as_str(_field("test_template", override, record)),
        test_type=as_str(test_type),
        test_status=as_str(_field("test_status", override, record)),
        result_decision=as_str(_field("result_decision", override, record)),
        todo_done=_optional_int(_field("todo_done", override, record)),
        todo_total=_optional_int(_field("todo_total", override, record)),
        is_sub_opportunity=is_sub_opportunity,
        is_sub_solution=is_sub_solution,
        children=tuple(children),
        raw=dict(record),
    )
