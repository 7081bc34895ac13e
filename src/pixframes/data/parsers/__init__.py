"""Parsers for detector frame logs."""

from .frame_parser import (
    FRAME_CELLS,
    FRAME_SIZE,
    MAX_VALUE,
    MIN_VALUE,
    FrameParser,
    ParseReport,
    SkippedSegment,
    SkipReason,
    iter_frames,
)

__all__ = [
    "FRAME_CELLS",
    "FRAME_SIZE",
    "MAX_VALUE",
    "MIN_VALUE",
    "FrameParser",
    "ParseReport",
    "SkippedSegment",
    "SkipReason",
    "iter_frames",
]
