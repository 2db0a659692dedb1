"""Tests for the LineIngestor producer thread and its non-blocking drain."""

from __future__ import annotations

import io
import time

import pytest

from nicefacets.facet_engine.line_ingestor import LineIngestor


def _drain_until_closed(ingestor: LineIngestor, timeout: float = 5.0) -> list[str]:
    lines: list[str] = []
    deadline = time.monotonic() + timeout
    while not ingestor.closed:
        lines.extend(ingestor.drain())
        if time.monotonic() > deadline:
            pytest.fail("ingestor did not close in time")
        time.sleep(0.01)
    return lines


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        LineIngestor(io.StringIO(""), capacity=0)


def test_drain_before_start_is_empty():
    ingestor = LineIngestor(io.StringIO("a\n"))
    assert ingestor.drain() == []
    assert not ingestor.closed


def test_reads_all_lines_and_strips_newlines():
    ingestor = LineIngestor(io.StringIO("1\ta\n2\tb\r\n\n3\tc"))
    ingestor.start()
    ingestor.join(timeout=5.0)
    assert ingestor.drain() == ["1\ta", "2\tb", "", "3\tc"]
    assert ingestor.closed
    assert ingestor.lines_read == 4
    assert ingestor.drain() == []


def test_start_twice_is_noop():
    ingestor = LineIngestor(io.StringIO("x\n"))
    ingestor.start()
    ingestor.start()
    assert _drain_until_closed(ingestor) == ["x"]


def test_bounded_queue_preserves_order():
    text = "".join(f"{i}\n" for i in range(50))
    ingestor = LineIngestor(io.StringIO(text), capacity=3)
    assert ingestor.capacity == 3
    ingestor.start()
    assert _drain_until_closed(ingestor) == [str(i) for i in range(50)]


def test_read_error_still_closes():
    def broken_stream():
        yield "1\ta\n"
        raise OSError("device gone")

    ingestor = LineIngestor(broken_stream())
    ingestor.start()
    assert _drain_until_closed(ingestor) == ["1\ta"]
