"""Unit tests for FacetTable aggregation."""

from __future__ import annotations

from nicefacets.facet_engine.facet_table import FacetTable
from nicefacets.facet_engine.record_parser import Category, parse_line


def _table(lines):
    table = FacetTable()
    for line in lines:
        table.apply(parse_line(line))
    return table


def test_apply_groups_samples_per_column(sample_lines):
    table = _table(sample_lines)
    assert table.columns() == [1, 2]
    assert table.facet_map(1) == {"red": [10.5, 15.2], "blue": [8.7, 12.1]}
    assert table.facet_map(2) == {"seattle": [10.5, 12.1], "portland": [8.7], "san jose": [15.2]}


def test_apply_ignores_categories_and_none():
    table = FacetTable()
    table.apply(Category(label="x"))
    table.apply(None)
    assert table.is_empty()
    assert len(table) == 0


def test_value_only_line_adds_no_columns():
    table = _table(["1.0"])
    assert table.is_empty()


def test_short_rows_only_touch_their_columns():
    table = _table(["1\ta\tb\tc", "2\ta"])
    assert table.max_column() == 3
    assert table.facet_map(1) == {"a": [1.0, 2.0]}
    assert table.facet_map(3) == {"c": [1.0]}


def test_missing_column_and_empty_max():
    table = FacetTable()
    assert table.max_column() == 0
    assert table.facet_map(5) == {}
    assert 1 not in table


def test_column_of_returns_lowest_column():
    table = _table(["1\tx\ty", "2\ty\tx"])
    assert table.column_of("x") == 1
    assert table.column_of("y") == 1
    assert table.column_of("z") is None


def test_iter_samples_counts_once_per_column(sample_lines):
    table = _table(sample_lines)
    samples = list(table.iter_samples())
    # every record contributes once per facet column
    assert len(samples) == 8
    assert sorted(samples) == sorted([10.5, 8.7, 15.2, 12.1] * 2)


def test_snapshot_is_a_deep_copy(sample_lines):
    table = _table(sample_lines)
    snap = table.snapshot()
    snap[1]["red"].append(99.0)
    assert table.facet_map(1)["red"] == [10.5, 15.2]


def test_clear(sample_lines):
    table = _table(sample_lines)
    table.clear()
    assert table.is_empty()
    assert "FacetTable(columns=[]" in repr(table)
