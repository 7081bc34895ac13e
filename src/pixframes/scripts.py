"""CLI script for the combined frame viewer."""

import argparse
import logging
import sys
from pathlib import Path

from .pipeline import FrameLogPipeline
from .render.viewer import STRETCHES, GridRenderer
from .utils.config import get_config

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Combine the frames of a detector log and display them as a grayscale grid',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show log.txt from the current directory
  pixframes-view

  # Show a specific log with a linear gray scale
  pixframes-view runs/capture.txt --stretch linear

  # Count particles without opening a window
  pixframes-view runs/capture.txt --particles --no-show
        """,
    )

    parser.add_argument(
        'log',
        nargs='?',
        type=Path,
        help='Frame log to read (default: log.txt in the working directory)',
    )

    parser.add_argument(
        '--config',
        type=Path,
        help='YAML configuration file (overrides environment)',
    )

    parser.add_argument(
        '--stretch',
        choices=STRETCHES,
        help='Gray level mapping (default: saturate)',
    )

    parser.add_argument(
        '--window-size',
        type=_positive_int,
        help='Window canvas size in pixels (default: 512)',
    )

    parser.add_argument(
        '--particles',
        action='store_true',
        help='Detect particles on the combined grid',
    )

    parser.add_argument(
        '--no-show',
        action='store_true',
        help='Do not open the viewer window',
    )

    return parser


def run_viewer(argv=None) -> int:
    """Main entry point for the combined frame viewer."""
    args = build_parser().parse_args(argv)

    config = get_config()
    if args.config:
        try:
            config.load_yaml(args.config)
        except (OSError, ValueError) as e:
            print(f"Error: {e}")
            return 1

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )

    log_path = args.log or config.log_path
    if not log_path.exists():
        print(f"{log_path} not found in directory: {Path.cwd()}")
        return 0

    try:
        config.validate()
        pipeline = FrameLogPipeline(config, detect_particles=args.particles)
        result = pipeline.run(log_path)

        logger.info(
            f"Combined {result.frame_count} frames "
            f"({len(result.report.skipped)} segments skipped)"
        )
        if args.particles:
            for i, particle in enumerate(result.particles):
                row, col = particle.centroid
                logger.info(
                    f"  Particle {i}: {len(particle.positions)} px, size {particle.size}, "
                    f"energy {particle.total_energy}, centroid ({row:.1f}, {col:.1f}), "
                    f"{particle.particle_type.value}"
                )

        if not args.no_show:
            renderer = GridRenderer(
                window_size=args.window_size or config.window_size,
                stretch=args.stretch or config.stretch,
            )
            renderer.show(result.grid)

    except Exception as e:
        logger.exception(f"Viewer failed with error: {e}")
        print(f"Error: {e}")
        return 1

    return 0


def main():
    sys.exit(run_viewer())


if __name__ == '__main__':
    main()
