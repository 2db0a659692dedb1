"""Unit tests for PinSet and the pin filter predicate."""

from __future__ import annotations

import pytest

from nicefacets.facet_engine.pin_filter import (
    PinSet,
    format_pins_display,
    matches_pins,
)


def test_pinset_add_remove_and_membership():
    pins = PinSet()
    assert not pins
    pins.add("red", 1)
    assert "red" in pins
    assert pins.column_of("red") == 1
    assert len(pins) == 1
    pins.remove("red")
    assert "red" not in pins
    pins.remove("red")  # no-op


def test_pinset_keeps_first_column_binding():
    pins = PinSet()
    pins.add("red", 1)
    pins.add("red", 2)
    assert pins.column_of("red") == 1


def test_pinset_rejects_observation_column():
    with pytest.raises(ValueError):
        PinSet().add("x", 0)


def test_pinset_items_sorted_by_column_then_value():
    pins = PinSet()
    pins.add("seattle", 2)
    pins.add("red", 1)
    pins.add("blue", 1)
    assert pins.items() == [("blue", 1), ("red", 1), ("seattle", 2)]
    assert list(pins) == pins.items()


def test_matches_with_no_pins():
    assert matches_pins(["1", "a"], PinSet())


def test_matches_requires_equal_field_at_pin_column():
    pins = PinSet()
    pins.add("red", 1)
    assert matches_pins(["10.5", "red", "seattle"], pins)
    assert not matches_pins(["8.7", "blue", "portland"], pins)


def test_pins_on_missing_columns_do_not_veto():
    pins = PinSet()
    pins.add("seattle", 2)
    assert matches_pins(["1", "red"], pins)


def test_all_pins_must_hold():
    pins = PinSet()
    pins.add("red", 1)
    pins.add("seattle", 2)
    assert matches_pins(["1", "red", "seattle"], pins)
    assert not matches_pins(["1", "red", "portland"], pins)


def test_value_in_other_column_does_not_match():
    pins = PinSet()
    pins.add("red", 1)
    assert not matches_pins(["1", "blue", "red"], pins)


def test_format_pins_display():
    pins = PinSet()
    assert format_pins_display(pins) == ""
    pins.add("seattle", 2)
    pins.add("red", 1)
    assert format_pins_display(pins) == "1:red, 2:seattle"
    assert format_pins_display([("red", 1)]) == "1:red"
