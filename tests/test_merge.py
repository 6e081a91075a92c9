"""Tests for merging hardware definition answers."""

import copy

import pytest

from pyicbridge.merge import merge_response


def _panel(*children):
    return [{"objnam": "PNL01", "params": {"OBJTYP": "PANEL", "OBJLIST": list(children)}}]


CIRCUITS_ANSWER = _panel(
    {"objnam": "B1101", "params": {"OBJTYP": "BODY", "STATUS": "OFF"}},
    {"objnam": "C0003", "params": {"OBJTYP": "CIRCUIT", "FEATR": "ON"}},
)
PUMPS_ANSWER = _panel(
    {"objnam": "PMP01", "params": {"OBJTYP": "PUMP", "SUBTYP": "VSF"}},
)


class TestMergeResponse:
    """Tests for merge_response()."""

    def test_merge_into_empty_accumulator(self):
        """Merging into an empty accumulator yields the answer unchanged."""
        target: list = []
        merge_response(target, copy.deepcopy(CIRCUITS_ANSWER))
        assert target == CIRCUITS_ANSWER

    def test_merge_is_idempotent(self):
        """Merging the same answer twice changes nothing the second time."""
        target = copy.deepcopy(CIRCUITS_ANSWER)
        merge_response(target, copy.deepcopy(CIRCUITS_ANSWER))
        assert target == CIRCUITS_ANSWER

    def test_disjoint_answers_are_united(self):
        """Children of the same panel from two answers end up side by side."""
        target = copy.deepcopy(CIRCUITS_ANSWER)
        merge_response(target, copy.deepcopy(PUMPS_ANSWER))

        assert len(target) == 1
        children = [child["objnam"] for child in target[0]["params"]["OBJLIST"]]
        assert children == ["B1101", "C0003", "PMP01"]

    def test_order_does_not_change_content(self):
        """Either merge order yields the same set of nodes."""
        first = copy.deepcopy(CIRCUITS_ANSWER)
        merge_response(first, copy.deepcopy(PUMPS_ANSWER))
        second = copy.deepcopy(PUMPS_ANSWER)
        merge_response(second, copy.deepcopy(CIRCUITS_ANSWER))

        def nodes(tree):
            return {child["objnam"]: child for child in tree[0]["params"]["OBJLIST"]}

        assert nodes(first) == nodes(second)

    def test_later_answer_adds_sibling_data(self):
        """A later answer adds params to a node introduced earlier."""
        target = copy.deepcopy(CIRCUITS_ANSWER)
        merge_response(target, _panel({"objnam": "B1101", "params": {"LSTTMP": "78"}}))

        body = target[0]["params"]["OBJLIST"][0]
        assert body["params"] == {"OBJTYP": "BODY", "STATUS": "OFF", "LSTTMP": "78"}

    def test_scalar_overwrites(self):
        """Scalar values of the addition win."""
        target = {"params": {"STATUS": "OFF", "SNAME": "Pool"}}
        merge_response(target, {"params": {"STATUS": "ON"}})
        assert target == {"params": {"STATUS": "ON", "SNAME": "Pool"}}

    def test_empty_list_keeps_existing_children(self):
        """An answer without children of its category leaves others alone."""
        target = copy.deepcopy(CIRCUITS_ANSWER)
        merge_response(target, _panel())
        assert target == CIRCUITS_ANSWER

    def test_nested_lists_merge_by_objnam(self):
        """Nested child lists are merged by objnam at every level."""
        target = _panel({"objnam": "M0101", "params": {"CIRCUITS": [{"objnam": "B1101"}]}})
        merge_response(
            target,
            _panel({"objnam": "M0101", "params": {"CIRCUITS": [{"objnam": "H0101"}]}}),
        )
        module = target[0]["params"]["OBJLIST"][0]
        assert module["params"]["CIRCUITS"] == [{"objnam": "B1101"}, {"objnam": "H0101"}]

    def test_mismatched_types(self):
        """A list cannot be merged into a dict."""
        with pytest.raises(TypeError):
            merge_response({}, [])
