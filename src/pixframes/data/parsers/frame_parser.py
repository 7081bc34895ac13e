"""
Frame log parser.

Parses the text dump written by the pixel detector, where each captured frame
appears as ``Frame { data: [[v, v, ...], [v, ...], ...] }``, into validated
256x256 integer arrays.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional

import numpy as np

logger = logging.getLogger(__name__)

FRAME_SIZE = 256
FRAME_CELLS = FRAME_SIZE * FRAME_SIZE
MIN_VALUE = 0
MAX_VALUE = 10000

# Values that fit a signed 32-bit reader; anything wider is a malformed token
INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1

# ASCII whitespace only; NBSP and other Unicode spaces stay inside tokens
_WHITESPACE = r"[ \t\n\x0b\f\r]"

_FRAME_MARKER = re.compile(r"Frame" + _WHITESPACE + r"*\{")
_TOKEN_SEPARATOR = re.compile(_WHITESPACE + r"+")
_INTEGER_TOKEN = re.compile(r"[+-]?[0-9]+")
_PAYLOAD_SEPARATORS = str.maketrans("[],", "   ")


class SkipReason(str, Enum):
    """Why a segment of the log did not produce a frame."""

    NO_DATA = "no_data"
    NO_PAYLOAD = "no_payload"
    TOO_FEW_VALUES = "too_few_values"


@dataclass
class SkippedSegment:
    index: int
    reason: SkipReason
    value_count: int = 0


@dataclass
class ParseReport:
    """Summary of one full pass over a frame log."""

    segments: int = 0
    frames: int = 0
    skipped: List[SkippedSegment] = field(default_factory=list)

    def count(self, reason: SkipReason) -> int:
        return sum(1 for s in self.skipped if s.reason == reason)


def clamp_value(value: int) -> int:
    """Clamp a value to [MIN_VALUE, MAX_VALUE]."""
    return max(MIN_VALUE, min(MAX_VALUE, value))


def parse_token(token: str) -> Optional[int]:
    """
    Parse one payload token as a signed decimal integer.

    Returns None for empty, non-numeric, or out of 32-bit range tokens.
    """
    if not _INTEGER_TOKEN.fullmatch(token):
        return None
    value = int(token)
    if value < INT32_MIN or value > INT32_MAX:
        return None
    return value


def parse_payload(payload: str) -> List[int]:
    """
    Tokenize a payload region and return its clamped integer values.

    Parameters
    ----------
    payload : str
        Text between the first ``[[`` and the last ``]]`` of a segment

    Returns
    -------
    list of int
        Clamped values in document order; malformed tokens are dropped
    """
    values = []
    for token in _TOKEN_SEPARATOR.split(payload.translate(_PAYLOAD_SEPARATORS)):
        if not token:
            continue
        value = parse_token(token)
        if value is not None:
            values.append(clamp_value(value))
    return values


def extract_payload(segment: str) -> Optional[str]:
    """Return the text strictly between the first '[[' and the last ']]'."""
    start = segment.find("[[")
    end = segment.rfind("]]")
    if start == -1 or end == -1 or end < start + 2:
        return None
    return segment[start + 2:end]


class FrameParser:
    """
    Lazy, restartable parser over the text of a frame log.

    Iterating the parser yields one read-only (256, 256) array per well formed
    ``Frame {`` segment, in document order. Segments without a ``data``
    keyword, without a ``[[ ... ]]`` payload, or with fewer than 65536 numeric
    values are skipped; the reasons are kept in ``report``.

    Parameters
    ----------
    text : str
        Full contents of the frame log

    Examples
    --------
    >>> parser = FrameParser(text)
    >>> frames = list(parser)
    >>> parser.report.frames == len(frames)
    True
    """

    def __init__(self, text: str):
        self.text = text
        self.report = ParseReport()

    def __iter__(self) -> Iterator[np.ndarray]:
        return self.frames()

    def frames(self) -> Iterator[np.ndarray]:
        """
        Start a fresh pass over the text.

        ``report`` is replaced as soon as this is called and describes the
        newest pass; an older generator keeps filling its own report.
        """
        report = ParseReport()
        self.report = report
        return self._generate(report)

    def _generate(self, report: ParseReport) -> Iterator[np.ndarray]:
        for index, segment in enumerate(_FRAME_MARKER.split(self.text)):
            report.segments += 1

            if "data" not in segment:
                self._skip(report, index, SkipReason.NO_DATA)
                continue

            payload = extract_payload(segment)
            if payload is None:
                self._skip(report, index, SkipReason.NO_PAYLOAD)
                continue

            values = parse_payload(payload)
            if len(values) < FRAME_CELLS:
                self._skip(report, index, SkipReason.TOO_FEW_VALUES, len(values))
                continue

            frame = np.array(values[:FRAME_CELLS], dtype=np.int32)
            frame = frame.reshape((FRAME_SIZE, FRAME_SIZE))
            frame.flags.writeable = False

            report.frames += 1
            yield frame

        logger.debug(
            f"Parsed {report.frames} frames from {report.segments} segments "
            f"({len(report.skipped)} skipped)"
        )

    @staticmethod
    def _skip(report: ParseReport, index: int, reason: SkipReason, value_count: int = 0):
        logger.debug(f"Skipping segment {index}: {reason.value} ({value_count} values)")
        report.skipped.append(SkippedSegment(index, reason, value_count))


def iter_frames(text: str) -> Iterator[np.ndarray]:
    """Generate the valid frames of a frame log."""
    return FrameParser(text).frames()
