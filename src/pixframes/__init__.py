"""
pixframes

Combine the frames of a pixel detector log into one clamped-sum grid and
display it as a grayscale image.
"""

from pixframes.__version__ import __version__
from pixframes.data.combiner import FrameCombiner, combine_frames
from pixframes.data.parsers.frame_parser import FrameParser, iter_frames

__all__ = [
    "__version__",
    "FrameCombiner",
    "FrameParser",
    "combine_frames",
    "iter_frames",
]
