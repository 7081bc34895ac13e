"""
Clamped accumulation of detector frames into a single grid.
"""

import logging
from typing import Iterable

import numpy as np
from tqdm import tqdm

from pixframes.data.parsers.frame_parser import FRAME_SIZE, MAX_VALUE

logger = logging.getLogger(__name__)


def saturating_add(grid: np.ndarray, frame: np.ndarray) -> np.ndarray:
    """Elementwise ``min(MAX_VALUE, grid + frame)``."""
    return np.minimum(grid + frame, MAX_VALUE)


class FrameCombiner:
    """
    Fold a sequence of frames into one combined grid.

    The first frame is copied as the starting grid, every following frame is
    added with a clamp to 10000 after each addition. An empty sequence yields
    an all-zero grid.

    Args:
        progress: Show a tqdm progress bar while folding
    """

    def __init__(self, progress: bool = False):
        self.progress = progress
        self.frame_count = 0

    def combine(self, frames: Iterable[np.ndarray]) -> np.ndarray:
        """
        Combine frames in the order given.

        Args:
            frames: Iterable of (256, 256) integer arrays

        Returns:
            Read-only (256, 256) int32 array with values in [0, 10000]
        """
        combined = np.zeros((FRAME_SIZE, FRAME_SIZE), dtype=np.int32)
        self.frame_count = 0

        for frame in tqdm(frames, desc="Combining frames", unit="frame", disable=not self.progress):
            if frame.shape != (FRAME_SIZE, FRAME_SIZE):
                raise ValueError(
                    f"Frame must be {FRAME_SIZE}x{FRAME_SIZE}, got {frame.shape}"
                )

            if self.frame_count == 0:
                combined = np.array(frame, dtype=np.int32)
            else:
                combined = saturating_add(combined, frame.astype(np.int32))
            self.frame_count += 1

        logger.info(f"Combined {self.frame_count} frames")

        combined.flags.writeable = False
        return combined


def combine_frames(frames: Iterable[np.ndarray]) -> np.ndarray:
    """Combine frames with a default FrameCombiner."""
    return FrameCombiner().combine(frames)
