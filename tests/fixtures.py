"""Shared record builders for tests.

Records mirror what the API layer hands the engine: camelCase dicts with
nested arrays.
"""

from typing import Any


def make_test(test_id: str, title: str | None = None, **fields: Any) -> dict[str, Any]:
    record: dict[str, Any] = {"id": test_id, **fields}
    if title is not None:
        record["title"] = title
    return record


def make_solution(
    solution_id: str,
    title: str | None = None,
    sub_solutions: list[dict] | None = None,
    tests: list[dict] | None = None,
    **fields: Any,
) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": solution_id,
        "subSolutions": sub_solutions or [],
        "tests": tests or [],
        **fields,
    }
    if title is not None:
        record["title"] = title
    return record


def make_opportunity(
    opportunity_id: str,
    title: str | None = None,
    sub_opportunities: list[dict] | None = None,
    solutions: list[dict] | None = None,
    **fields: Any,
) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": opportunity_id,
        "subOpportunities": sub_opportunities or [],
        "solutions": solutions or [],
        **fields,
    }
    if title is not None:
        record["title"] = title
    return record


def make_outcome(
    outcome_id: str,
    title: str | None = None,
    opportunities: list[dict] | None = None,
    **fields: Any,
) -> dict[str, Any]:
    record: dict[str, Any] = {"id": outcome_id, "opportunities": opportunities or [], **fields}
    if title is not None:
        record["title"] = title
    return record


def make_minimal_outcome() -> dict[str, Any]:
    """o1 -> opp1 -> sol1 -> t1"""
    return make_outcome(
        "o1", "Outcome 1",
        opportunities=[
            make_opportunity(
                "opp1", "Opp 1",
                solutions=[make_solution("sol1", "Sol 1", tests=[make_test("t1", "Test 1")])],
            )
        ],
    )


def make_wide_outcome(outcome_id: str = "o1", sub_count: int = 9) -> dict[str, Any]:
    """One opportunity, one solution with ``sub_count`` sub-solutions."""
    return make_outcome(
        outcome_id, "Wide",
        opportunities=[
            make_opportunity(
                f"{outcome_id}-opp", "Opp",
                solutions=[
                    make_solution(
                        f"{outcome_id}-sol", "Parent Sol",
                        sub_solutions=[
                            make_solution(f"{outcome_id}-sub{i}", f"Sub {i}")
                            for i in range(sub_count)
                        ],
                    )
                ],
            )
        ],
    )
