"""Shared pytest fixtures for treeflow tests."""

import pytest

from tests.fixtures import make_minimal_outcome, make_wide_outcome
from treeflow.forest.builder import build_forest, build_tree
from treeflow.models import Forest


@pytest.fixture
def minimal_outcome() -> dict:
    return make_minimal_outcome()


@pytest.fixture
def minimal_forest(minimal_outcome) -> Forest:
    return build_tree(minimal_outcome)


@pytest.fixture
def two_goal_forest() -> Forest:
    """Two outcomes; the first has a solution with 9 sub-solutions."""
    return build_forest([make_wide_outcome("g1"), make_wide_outcome("g2", sub_count=2)])
