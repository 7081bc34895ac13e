#!/usr/bin/env python3
"""Test frame log parsing."""

import numpy as np
import pytest

from pixframes.data.parsers.frame_parser import (
    FRAME_CELLS,
    FrameParser,
    SkipReason,
    clamp_value,
    extract_payload,
    iter_frames,
    parse_payload,
    parse_token,
)


@pytest.mark.parametrize(
    "value, expected",
    [(-5, 0), (0, 0), (42, 42), (10000, 10000), (10001, 10000), (2 ** 31 - 1, 10000)],
)
def test_clamp_value(value, expected):
    assert clamp_value(value) == expected


def test_parse_token():
    assert parse_token("123") == 123
    assert parse_token("-7") == -7
    assert parse_token("+8") == 8
    assert parse_token("") is None
    assert parse_token("abc") is None
    assert parse_token("12a") is None
    assert parse_token("1.5") is None
    assert parse_token("1_000") is None
    # Wider than a 32-bit reader accepts
    assert parse_token("2147483648") is None
    assert parse_token("-2147483649") is None
    assert parse_token("2147483647") == 2147483647


def test_parse_payload_drops_malformed_tokens():
    assert parse_payload("100, abc, 200, , 300], [-4, 99999") == [100, 200, 300, 0, 10000]


def test_extract_payload():
    assert extract_payload(" data: [[1, 2], [3]] }") == "1, 2], [3"
    assert extract_payload(" data: [1, 2] }") is None
    assert extract_payload(" data: ]] [[ }") is None


def test_single_frame_layout(frame_block):
    values = list(range(FRAME_CELLS))
    frames = list(FrameParser(frame_block(values)))

    assert len(frames) == 1
    frame = frames[0]
    assert frame.shape == (256, 256)
    # Row-major, clamped
    assert frame[0, 0] == 0
    assert frame[0, 255] == 255
    assert frame[1, 0] == 256
    assert frame[39, 16] == 39 * 256 + 16
    assert frame[255, 255] == 10000
    assert not frame.flags.writeable


def test_values_are_clamped(frame_block):
    values = [-300, 20000, 5000, 10000] * (FRAME_CELLS // 4)
    frame = next(iter_frames(frame_block(values)))

    assert frame.min() >= 0
    assert frame.max() <= 10000
    assert list(frame[0, :4]) == [0, 10000, 5000, 10000]


def test_extra_values_are_ignored(frame_block):
    values = [1] * FRAME_CELLS + [9999] * 10
    frame = next(iter_frames(frame_block(values)))

    assert np.all(frame == 1)


def test_empty_text_yields_nothing():
    parser = FrameParser("")
    assert list(parser) == []
    assert parser.report.frames == 0


def test_short_frame_is_skipped(frame_block, uniform_frame):
    text = frame_block([7] * (FRAME_CELLS - 1)) + uniform_frame(500)
    parser = FrameParser(text)
    frames = list(parser)

    assert len(frames) == 1
    assert np.all(frames[0] == 500)
    skipped = [s for s in parser.report.skipped if s.reason == SkipReason.TOO_FEW_VALUES]
    assert len(skipped) == 1
    assert skipped[0].value_count == FRAME_CELLS - 1


def test_segments_without_data_or_payload(uniform_frame):
    text = (
        "capture started\n"
        "Frame { }\n"
        "Frame { data: [] }\n"
        + uniform_frame(3)
        + "Frame{data: nothing here}\n"
    )
    parser = FrameParser(text)
    frames = list(parser)

    assert len(frames) == 1
    report = parser.report
    assert report.segments == 5
    assert report.frames == 1
    # Leading preamble and the empty frame have no "data"
    assert report.count(SkipReason.NO_DATA) == 2
    assert report.count(SkipReason.NO_PAYLOAD) == 2


def test_stray_tokens_do_not_change_frame(frame_block):
    values = list(np.arange(FRAME_CELLS) % 9000)
    clean = frame_block(values)
    noisy = clean.replace("[0, 1, 2", "[0, abc, 1, , 2x, 2", 1)
    assert noisy != clean

    clean_frame = next(iter_frames(clean))
    noisy_frame = next(iter_frames(noisy))
    assert np.array_equal(clean_frame, noisy_frame)


def test_marker_whitespace_variants(uniform_frame):
    text = uniform_frame(1) + uniform_frame(2).replace("Frame {", "Frame\n\t{") + uniform_frame(3).replace("Frame {", "Frame{")
    frames = list(iter_frames(text))

    assert [int(f[0, 0]) for f in frames] == [1, 2, 3]


def test_parser_is_restartable(frame_block, uniform_frame):
    text = uniform_frame(10) + frame_block(range(FRAME_CELLS))
    parser = FrameParser(text)

    first = list(parser)
    second = list(parser)

    assert len(first) == len(second) == 2
    for a, b in zip(first, second):
        assert np.array_equal(a, b)
    assert parser.report.frames == 2


def test_only_ascii_whitespace_separates_tokens():
    # NBSP, em space and the \x1c-\x1f separators stay inside a token
    assert parse_payload("100\u00a0200, 300") == [300]
    assert parse_payload("1\u20032 3\x1c4 5") == [5]
    assert parse_payload("6\t7\x0b8\x0c9\r\n10") == [6, 7, 8, 9, 10]


def test_non_ascii_space_does_not_start_a_segment(uniform_frame):
    # The second block stays inside the first segment's payload
    text = uniform_frame(1) + uniform_frame(2).replace("Frame {", "Frame\u00a0{")
    frames = list(iter_frames(text))

    assert len(frames) == 1
    assert np.all(frames[0] == 1)


def test_report_belongs_to_newest_pass(uniform_frame):
    parser = FrameParser(uniform_frame(1) + uniform_frame(2))

    first = parser.frames()
    first_report = parser.report
    next(first)
    second = parser.frames()

    assert parser.report is not first_report
    assert len(list(second)) == 2
    assert parser.report.frames == 2
    assert len(list(first)) == 1
    assert first_report.frames == 2
    assert parser.report.frames == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
