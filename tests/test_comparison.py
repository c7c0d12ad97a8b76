from __future__ import annotations

import pytest

from portfolio_cms.services.comparison import changed_fields, structurally_equal


@pytest.mark.parametrize(
    ("left", "right"),
    [
        ({"a": 1, "b": [1, {"c": "x"}]}, {"b": [1, {"c": "x"}], "a": 1}),
        (1, 1.0),
        (None, None),
        ([], []),
        ("", ""),
    ],
)
def test_structurally_equal_values(left, right):
    assert structurally_equal(left, right)
    assert structurally_equal(right, left)


@pytest.mark.parametrize(
    ("left", "right"),
    [
        (True, 1),
        (False, 0),
        (None, ""),
        (None, {}),
        ([1, 2], [2, 1]),
        ({"a": 1}, {"a": 1, "b": None}),
        ("1", 1),
        ([1], (1, 2)),
    ],
)
def test_structurally_different_values(left, right):
    assert not structurally_equal(left, right)
    assert not structurally_equal(right, left)


def test_changed_fields_reports_only_differences():
    draft = {"title": "New", "content": {"x": [1, 2]}, "tags": []}
    baseline = {"title": "Old", "content": {"x": [1, 2]}, "tags": []}

    assert changed_fields(draft, baseline) == ["title"]
    assert changed_fields(draft, dict(draft)) == []
