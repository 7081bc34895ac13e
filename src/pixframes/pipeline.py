"""End-to-end frame log pipeline: read, parse, combine, analyse."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import numpy as np

from pixframes.analysis.particles import Particle, ParticleDetector
from pixframes.data.combiner import FrameCombiner
from pixframes.data.parsers.frame_parser import FrameParser, ParseReport, SkipReason
from pixframes.utils.config import Config, get_config

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    grid: np.ndarray
    frame_count: int
    report: ParseReport
    particles: List[Particle] = field(default_factory=list)


class FrameLogPipeline:
    """
    Pipeline from a frame log to a combined grid.

    Pipeline steps:
    1. Read the log text
    2. Parse frames, skipping malformed segments
    3. Fold frames into the combined grid with clamped addition
    4. Optionally group hits of the combined grid into particles

    Args:
        config: Configuration (default: global configuration)
        detect_particles: Run particle detection on the combined grid
    """

    def __init__(self, config: Optional[Config] = None, detect_particles: bool = False):
        self.config = config or get_config()
        self.detect_particles = detect_particles
        self.combiner = FrameCombiner(progress=self.config.progress)
        self.detector = ParticleDetector(
            kernel_size=self.config.particle_kernel,
            muon_min_size=self.config.muon_min_size,
        )

    @staticmethod
    def load_text(path: Path) -> str:
        """
        Read a frame log.

        Raises:
            FileNotFoundError: If the log does not exist
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Frame log not found: {path}")

        logger.info(f"Reading frame log {path}")
        return path.read_text()

    def run_text(self, text: str) -> PipelineResult:
        """Parse and combine the frames in ``text``."""
        parser = FrameParser(text)
        grid = self.combiner.combine(parser)
        report = parser.report

        too_short = report.count(SkipReason.TOO_FEW_VALUES)
        if too_short:
            logger.info(f"Dropped {too_short} incomplete frames")
        if report.frames == 0:
            logger.warning("No complete frames found, combined grid is all zeros")

        particles = []
        if self.detect_particles:
            particles = self.detector.detect(grid)

        return PipelineResult(
            grid=grid,
            frame_count=self.combiner.frame_count,
            report=report,
            particles=particles,
        )

    def run(self, path: Optional[Path] = None) -> PipelineResult:
        """Read the frame log at ``path`` (default: configured log path) and combine it."""
        path = Path(path) if path is not None else self.config.log_path
        return self.run_text(self.load_text(path))
