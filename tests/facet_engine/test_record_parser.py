"""Unit tests for record_parser (line splitting and classification)."""

from __future__ import annotations

import pytest

from nicefacets.facet_engine.record_parser import (
    Category,
    Observation,
    parse_line,
    parse_value,
    split_fields,
)


def test_split_fields_trims_and_splits_on_tabs():
    assert split_fields("  1.5\ta\tb \n") == ["1.5", "a", "b"]


def test_split_fields_empty_and_whitespace_lines():
    assert split_fields("") == []
    assert split_fields("   \n") == []


def test_split_fields_keeps_spaces_inside_fields():
    assert split_fields("3\tsan jose") == ["3", "san jose"]


@pytest.mark.parametrize("text,expected", [("10.5", 10.5), ("-2", -2.0), ("1e3", 1000.0)])
def test_parse_value_numbers(text, expected):
    assert parse_value(text) == pytest.approx(expected)


@pytest.mark.parametrize("text", ["abc", "", "nan", "inf", "-Infinity", "1,5"])
def test_parse_value_non_numbers(text):
    assert parse_value(text) is None


def test_parse_line_observation_columns_are_one_indexed():
    record = parse_line("10.5\tred\tseattle")
    assert isinstance(record, Observation)
    assert record.value == pytest.approx(10.5)
    assert record.facets == ("red", "seattle")
    assert list(record.columns()) == [(1, "red"), (2, "seattle")]


def test_parse_line_value_only_has_no_facets():
    record = parse_line("4.0")
    assert isinstance(record, Observation)
    assert record.facets == ()


def test_parse_line_category():
    record = parse_line("GET\t/index")
    assert record == Category(label="GET")


def test_parse_line_empty_returns_none():
    assert parse_line("\n") is None
