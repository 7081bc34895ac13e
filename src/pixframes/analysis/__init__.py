"""Analysis of detector grids."""

from .particles import Particle, ParticleDetector, ParticleType

__all__ = [
    "Particle",
    "ParticleDetector",
    "ParticleType",
]
