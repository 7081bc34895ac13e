"""Shared fixtures for frame log tests."""

import matplotlib

matplotlib.use("Agg")

import pytest


def _frame_block(values, rows=256):
    """Render values as one ``Frame { data: [[...], ...] }`` block."""
    values = list(values)
    width = max(1, len(values) // rows)
    lines = [
        "[" + ", ".join(str(v) for v in values[i:i + width]) + "]"
        for i in range(0, len(values), width)
    ]
    return "Frame { data: [" + ", ".join(lines) + "], particles: [] }\n"


@pytest.fixture
def frame_block():
    return _frame_block


@pytest.fixture
def uniform_frame(frame_block):
    """Block for a complete frame with every cell set to ``value``."""
    def make(value):
        return frame_block([value] * 256 * 256)
    return make
