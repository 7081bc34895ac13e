#!/usr/bin/env python3
"""
Count particles frame by frame in a detector log.

Prints one line per complete frame with its particle and possible muon
counts, followed by a summary over the whole log.
"""

import argparse
import sys
from pathlib import Path
import logging

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pixframes.analysis.particles import ParticleDetector, ParticleType
from pixframes.data.parsers.frame_parser import FrameParser
from pixframes.pipeline import FrameLogPipeline

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description='Count particles in each frame of a detector log')
    parser.add_argument('log', type=Path, nargs='?', default=Path('log.txt'), help='Frame log (default: log.txt)')
    parser.add_argument('--kernel-size', type=int, default=3, help='Particle neighbourhood size (default: 3)')
    args = parser.parse_args()

    try:
        text = FrameLogPipeline.load_text(args.log)
    except FileNotFoundError as e:
        logger.error(str(e))
        sys.exit(1)

    detector = ParticleDetector(kernel_size=args.kernel_size)
    frame_parser = FrameParser(text)

    total_particles = 0
    total_muons = 0
    for i, frame in enumerate(frame_parser):
        particles = detector.detect(frame)
        muons = sum(1 for p in particles if p.particle_type == ParticleType.POSSIBLE_MUON)
        total_particles += len(particles)
        total_muons += muons
        logger.info(f"Frame {i}: {len(particles)} particles, {muons} possible muons")

    report = frame_parser.report

    # Print summary
    logger.info("=" * 60)
    logger.info("PARTICLE SUMMARY")
    logger.info("=" * 60)
    logger.info(f"Segments: {report.segments}")
    logger.info(f"Complete frames: {report.frames}")
    logger.info(f"Skipped segments: {len(report.skipped)}")
    logger.info(f"Particles: {total_particles}")
    logger.info(f"Possible muons: {total_muons}")


if __name__ == "__main__":
    main()
