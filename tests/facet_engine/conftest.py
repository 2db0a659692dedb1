# tests/facet_engine/conftest.py
"""Pytest configuration and fixtures for facet_engine tests."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

SAMPLE_LINES = [
    "10.5\tred\tseattle",
    "8.7\tblue\tportland",
    "15.2\tred\tsan jose",
    "12.1\tblue\tseattle",
]


def pytest_configure() -> None:
    # Ensure nicefacets package is importable when running tests from repo root.
    repo_root = Path(__file__).resolve().parents[2]
    src_dir = repo_root / "src"
    if src_dir.exists() and str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def sample_lines() -> list[str]:
    """Four records over two facet columns (color, city)."""
    return list(SAMPLE_LINES)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
