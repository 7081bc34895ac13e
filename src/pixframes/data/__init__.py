"""Frame log parsing and frame combination."""

from .combiner import FrameCombiner, combine_frames, saturating_add

__all__ = [
    "FrameCombiner",
    "combine_frames",
    "saturating_add",
]
