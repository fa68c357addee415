"""Product journey stages used to group first-level opportunities.

The stage set is fixed. Opportunities with no stage, or with a stage outside
the set, belong to the reserved unassigned bucket, which always sorts last.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class JourneyStage:
    id: str
    label: str
    sort_order: int


JOURNEY_STAGES: tuple[JourneyStage, ...] = (
    JourneyStage("awareness", "Awareness", 1),
    JourneyStage("education", "Education", 2),
    JourneyStage("acquisition", "Acquisition", 3),
    JourneyStage("product", "Product", 4),
    JourneyStage("onboarding", "Onboarding", 5),
    JourneyStage("usage", "Usage", 6),
    JourneyStage("support", "Support", 7),
    JourneyStage("loyalty", "Loyalty", 8),
)

JOURNEY_STAGE_IDS: tuple[str, ...] = tuple(s.id for s in JOURNEY_STAGES)

UNASSIGNED_STAGE_ID = "__unassigned__"
UNASSIGNED_LABEL = "Unassigned"

_STAGES_BY_ID: dict[str, JourneyStage] = {s.id: s for s in JOURNEY_STAGES}


def is_known_stage(value: object) -> bool:
    return isinstance(value, str) and value in _STAGES_BY_ID


def resolve_stage(value: object) -> str:
    """Bucket id for a raw stage value: the stage itself, or unassigned."""
    if is_known_stage(value):
        return value  # type: ignore[return-value]
    return UNASSIGNED_STAGE_ID


def stage_label(stage_id: str | None) -> str:
    if not stage_id or stage_id == UNASSIGNED_STAGE_ID:
        return UNASSIGNED_LABEL
    stage = _STAGES_BY_ID.get(stage_id)
    return stage.label if stage else stage_id


def stage_sort_key(stage_id: str) -> int:
    """Canonical position of a bucket; unassigned (and anything unknown) last."""
    stage = _STAGES_BY_ID.get(stage_id)
    return stage.sort_order if stage else len(JOURNEY_STAGES) + 1
