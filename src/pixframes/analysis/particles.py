"""Particle track detection on detector frames."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

import cv2
import numpy as np

logger = logging.getLogger(__name__)


class ParticleType(str, Enum):
    POSSIBLE_MUON = "possible_muon"
    UNKNOWN = "unknown"


@dataclass
class Particle:
    """
    A group of neighbouring hit pixels.

    Args:
        positions: (row, col, value) for every pixel of the particle
        muon_min_size: Extent at which a track counts as a possible muon
    """

    positions: List[Tuple[int, int, int]]
    muon_min_size: int = 12
    particle_type: ParticleType = field(init=False)

    def __post_init__(self):
        self.particle_type = (
            ParticleType.POSSIBLE_MUON
            if self.size >= self.muon_min_size
            else ParticleType.UNKNOWN
        )

    @property
    def size(self) -> int:
        """Largest of the row and column extents (max - min)."""
        rows = [p[0] for p in self.positions]
        cols = [p[1] for p in self.positions]
        return max(max(rows) - min(rows), max(cols) - min(cols))

    @property
    def total_energy(self) -> int:
        return sum(p[2] for p in self.positions)

    @property
    def centroid(self) -> Tuple[float, float]:
        rows = [p[0] for p in self.positions]
        cols = [p[1] for p in self.positions]
        return float(np.mean(rows)), float(np.mean(cols))


class ParticleDetector:
    """
    Group nonzero pixels of a grid into particles.

    Two hits belong to the same particle when they lie within ``kernel_size // 2``
    pixels of each other along both axes, transitively. Even kernel sizes are
    bumped to the next odd size.

    Args:
        kernel_size: Neighbourhood size (default: 3, i.e. 8-connectivity)
        muon_min_size: Minimum track extent for a possible muon (default: 12)
    """

    def __init__(self, kernel_size: int = 3, muon_min_size: int = 12):
        if kernel_size < 1:
            raise ValueError(f"kernel_size must be positive, got {kernel_size}")
        if kernel_size % 2 == 0:
            kernel_size += 1

        self.kernel_size = kernel_size
        self.radius = kernel_size // 2
        self.muon_min_size = muon_min_size

    def label(self, grid: np.ndarray) -> Tuple[int, np.ndarray]:
        """
        Label connected hits.

        Returns:
            (number of particles, int32 label image with 0 as background)
        """
        hits = (np.asarray(grid) > 0).astype(np.uint8)

        if self.radius == 0:
            labels = np.zeros(hits.shape, dtype=np.int32)
            rows, cols = np.nonzero(hits)
            labels[rows, cols] = np.arange(1, len(rows) + 1, dtype=np.int32)
            return len(rows), labels

        # Dilating every hit by an r x r square makes hits at most r apart
        # touch, so 8-connected components of the dilated mask are particles.
        if self.radius > 1:
            kernel = np.ones((self.radius, self.radius), dtype=np.uint8)
            mask = cv2.dilate(hits, kernel)
        else:
            mask = hits

        num_labels, labels = cv2.connectedComponents(mask, connectivity=8, ltype=cv2.CV_32S)
        labels = np.where(hits > 0, labels, 0).astype(np.int32)
        return num_labels - 1, labels

    def detect(self, grid: np.ndarray) -> List[Particle]:
        """
        Detect particles in a grid.

        Args:
            grid: 2D array of hit values; zero means no hit

        Returns:
            Particles ordered by their first pixel in row-major order
        """
        grid = np.asarray(grid)
        _, labels = self.label(grid)

        groups = {}
        for row, col in zip(*np.nonzero(labels)):
            groups.setdefault(labels[row, col], []).append(
                (int(row), int(col), int(grid[row, col]))
            )

        particles = [
            Particle(positions, muon_min_size=self.muon_min_size)
            for positions in groups.values()
        ]

        muons = sum(1 for p in particles if p.particle_type == ParticleType.POSSIBLE_MUON)
        logger.info(f"Detected {len(particles)} particles ({muons} possible muons)")
        return particles

    def count(self, grid: np.ndarray) -> int:
        """Number of particles in a grid."""
        num_particles, _ = self.label(grid)
        return num_particles
