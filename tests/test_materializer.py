"""Tests for the node materializer: override > record > default precedence."""

import copy

import pytest

from treeflow.forest.materializer import materialize_node, resolve_order
from treeflow.node_types import NodeType, UnknownNodeTypeError


class TestPrecedence:
    def test_defaults_when_record_is_bare(self):
        node = materialize_node("opportunity", {"id": "a"}, "outcome:o1", 3)
        assert node.key == "opportunity:a"
        assert node.type is NodeType.OPPORTUNITY
        assert node.parent_key == "outcome:o1"
        assert node.title == "New Opportunity"
        assert node.description == ""
        assert node.status is None
        assert node.contributor_ids == ()
        assert node.children == ()

    def test_record_fields_used(self):
        node = materialize_node(
            "solution",
            {"id": "s", "title": "Sol", "status": "idea", "owner": "u1", "contributor_ids": ["u2"]},
            None, 0,
        )
        assert node.title == "Sol"
        assert node.status == "idea"
        assert node.owner == "u1"
        assert node.contributor_ids == ("u2",)

    def test_override_wins(self):
        overrides = {"solution:s": {"title": "Edited", "confidenceScore": 80}}
        node = materialize_node(
            "solution", {"id": "s", "title": "Sol", "confidenceScore": 40}, None, 0, overrides
        )
        assert node.title == "Edited"
        assert node.confidence_score == 80

    def test_override_none_falls_through_to_record(self):
        overrides = {"solution:s": {"title": None}}
        node = materialize_node("solution", {"id": "s", "title": "Sol"}, None, 0, overrides)
        assert node.title == "Sol"

    def test_override_for_other_key_ignored(self):
        overrides = {"solution:other": {"title": "Nope"}}
        node = materialize_node("solution", {"id": "s", "title": "Sol"}, None, 0, overrides)
        assert node.title == "Sol"

    def test_inputs_not_mutated(self):
        record = {"id": "s", "title": "Sol", "tests": []}
        overrides = {"solution:s": {"title": "Edited"}}
        before = (copy.deepcopy(record), copy.deepcopy(overrides))
        materialize_node("solution", record, None, 0, overrides)
        assert (record, overrides) == before

    def test_test_type_falls_back_to_type_column(self):
        node = materialize_node("test", {"id": "t", "type": "interview"}, "solution:s", 0)
        assert node.test_type == "interview"

    def test_numeric_id_is_stringified(self):
        node = materialize_node("test", {"id": 7}, None, 0)
        assert node.key == "test:7"
        assert node.id == "7"

    def test_raw_keeps_record_fields(self):
        node = materialize_node("outcome", {"id": "o", "teamId": "t1"}, None, 0)
        assert node.raw["teamId"] == "t1"

    def test_unknown_type_raises(self):
        with pytest.raises(UnknownNodeTypeError):
            materialize_node("goal", {"id": "g"}, None, 0)

    def test_synthetic_type_raises(self):
        with pytest.raises(UnknownNodeTypeError):
            materialize_node("journey", {"id": "o:usage"}, None, 0)


class TestOrder:
    def test_explicit_order_first(self):
        assert resolve_order({"order": 5, "sortIndex": 2}, {}, 9) == 5

    def test_sort_index_second(self):
        assert resolve_order({"sort_index": 2}, {}, 9) == 2

    def test_sibling_index_last(self):
        assert resolve_order({}, {}, 9) == 9

    def test_override_order(self):
        assert resolve_order({"order": 5}, {"order": 1}, 9) == 1

    def test_non_numeric_ignored(self):
        assert resolve_order({"order": "3", "sortIndex": True}, {}, 4) == 4
