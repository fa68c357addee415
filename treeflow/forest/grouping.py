"""Stage-grouped presentation of an outcome's first-level opportunities.

Instead of hanging opportunities directly off the outcome, they are bucketed
by journey stage into synthetic group nodes. Below the groups the ordinary
opportunity subtrees are reused unchanged.
"""

from collections import defaultdict
from collections.abc import Mapping
from typing import Any

from treeflow.forest.subtrees import FIRST_LEVEL_DEPTH, BuildContext, build_record_node, usable_records
from treeflow.keys import encode_group_id, encode_group_key
from treeflow.models import ViewNode
from treeflow.node_types import NodeType
from treeflow.stages import UNASSIGNED_STAGE_ID, is_known_stage, resolve_stage, stage_label, stage_sort_key
from treeflow.utils.records import as_str, first_present

STAGE_FIELDS = ("journeyStage", "journey_stage")


def opportunity_stage(record: Mapping[str, Any], ctx: BuildContext | None = None) -> str:
    """Bucket id for an opportunity record.

    A stage value outside the fixed set lands in the unassigned bucket and is
    reported through ``ctx`` when one is given.
    """
    value = first_present((record, STAGE_FIELDS))
    stage_id = resolve_stage(value)
    if ctx is not None and value not in (None, "") and not is_known_stage(value):
        ctx.warn(
            f"Unknown journey stage {value!r} on opportunity {record.get('id')};"
            " grouping as unassigned"
        )
    return stage_id


def build_stage_groups(
    outcome: Mapping[str, Any],
    root_key: str,
    opportunities: list,
    ctx: BuildContext,
) -> list[ViewNode]:
    """One group node per non-empty stage bucket, in canonical stage order."""
    outcome_id = as_str(outcome["id"])
    buckets: dict[str, list[tuple[int, Mapping[str, Any]]]] = defaultdict(list)
    for index, record in usable_records(opportunities, NodeType.OPPORTUNITY, root_key, ctx):
        buckets[opportunity_stage(record, ctx)].append((index, record))

    groups = []
    for position, stage_id in enumerate(sorted(buckets, key=stage_sort_key)):
        members = buckets[stage_id]
        group_key = encode_group_key(outcome_id, stage_id)
        children = tuple(
            build_record_node(
                NodeType.OPPORTUNITY, record, group_key, index, ctx, FIRST_LEVEL_DEPTH["journey"]
            )
            for index, record in members
        )
        groups.append(ViewNode(
            key=group_key,
            id=encode_group_id(outcome_id, stage_id),
            type=NodeType.JOURNEY,
            parent_key=root_key,
            order=position,
            title=stage_label(stage_id),
            count=len(members),
            stage_id=stage_id,
            is_unassigned=stage_id == UNASSIGNED_STAGE_ID,
            children=children,
        ))
    return groups
