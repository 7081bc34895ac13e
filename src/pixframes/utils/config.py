"""
Configuration and environment variable management.
"""

import os
from pathlib import Path
from typing import Optional
import logging

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Keys accepted in YAML config files, mapped to environment variables
_YAML_KEYS = {
    "log_path": "PIXFRAMES_LOG_PATH",
    "window_size": "PIXFRAMES_WINDOW_SIZE",
    "stretch": "PIXFRAMES_STRETCH",
    "particle_kernel": "PIXFRAMES_PARTICLE_KERNEL",
    "muon_min_size": "PIXFRAMES_MUON_MIN_SIZE",
    "log_level": "PIXFRAMES_LOG_LEVEL",
    "progress": "PIXFRAMES_PROGRESS",
}


class Config:
    """
    Configuration manager for the frame log viewer.

    Loads environment variables from a .env file and provides convenient
    access to configuration values. Defaults reproduce the plain viewer:
    read ``log.txt`` from the working directory and show a 512 pixel window.
    """

    def __init__(self, env_file: Optional[Path] = None):
        """
        Initialize configuration.

        Parameters
        ----------
        env_file : Path, optional
            Path to .env file. If None, searches for .env in the working
            directory and its parents.
        """
        if env_file is None:
            current = Path.cwd()
            for parent in [current] + list(current.parents):
                env_path = parent / ".env"
                if env_path.exists():
                    env_file = env_path
                    break

        if env_file and Path(env_file).exists():
            load_dotenv(env_file)
            logger.info(f"Loaded environment from {env_file}")
        else:
            logger.debug("No .env file found - using environment variables only")

    @property
    def log_path(self) -> Path:
        """Frame log to read."""
        return Path(os.getenv("PIXFRAMES_LOG_PATH", "log.txt"))

    @property
    def window_size(self) -> int:
        """Viewer canvas size in pixels."""
        return int(os.getenv("PIXFRAMES_WINDOW_SIZE", "512"))

    @property
    def stretch(self) -> str:
        """Gray level mapping used by the viewer."""
        return os.getenv("PIXFRAMES_STRETCH", "saturate")

    @property
    def particle_kernel(self) -> int:
        """Neighbourhood size for particle grouping."""
        return int(os.getenv("PIXFRAMES_PARTICLE_KERNEL", "3"))

    @property
    def muon_min_size(self) -> int:
        return int(os.getenv("PIXFRAMES_MUON_MIN_SIZE", "12"))

    @property
    def log_level(self) -> str:
        return os.getenv("PIXFRAMES_LOG_LEVEL", "INFO").upper()

    @property
    def progress(self) -> bool:
        """Whether to show a progress bar while combining."""
        return os.getenv("PIXFRAMES_PROGRESS", "false").lower() in ("true", "1", "yes")

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get arbitrary environment variable."""
        return os.getenv(key, default)

    def set(self, key: str, value: str):
        """Set environment variable."""
        os.environ[key] = value

    def load_yaml(self, yaml_path: Path):
        """
        Override configuration from a YAML file.

        Parameters
        ----------
        yaml_path : Path
            File with any of the keys log_path, window_size, stretch,
            particle_kernel, muon_min_size, log_level, progress

        Raises
        ------
        ValueError
            If the file contains unknown keys or is not a mapping
        """
        with open(yaml_path, 'r') as f:
            values = yaml.safe_load(f) or {}

        if not isinstance(values, dict):
            raise ValueError(f"Config file {yaml_path} must contain a mapping")

        unknown = sorted(set(values) - set(_YAML_KEYS))
        if unknown:
            raise ValueError(f"Unknown config keys in {yaml_path}: {', '.join(unknown)}")

        for key, value in values.items():
            self.set(_YAML_KEYS[key], str(value))

        logger.info(f"Loaded configuration from {yaml_path}")

    def validate(self):
        """
        Validate configuration values.

        Raises
        ------
        ValueError
            If a value is out of range
        """
        from pixframes.render.viewer import STRETCHES

        if self.window_size < 1:
            raise ValueError(f"PIXFRAMES_WINDOW_SIZE must be positive, got {self.window_size}")
        if self.stretch not in STRETCHES:
            raise ValueError(
                f"PIXFRAMES_STRETCH must be one of {STRETCHES}, got '{self.stretch}'"
            )
        if self.particle_kernel < 1:
            raise ValueError(
                f"PIXFRAMES_PARTICLE_KERNEL must be positive, got {self.particle_kernel}"
            )
        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown PIXFRAMES_LOG_LEVEL '{self.log_level}'")

        logger.debug("Configuration validated successfully")


# Global configuration instance
_config = None


def get_config(reload: bool = False) -> Config:
    """
    Get global configuration instance.

    Parameters
    ----------
    reload : bool
        Whether to reload configuration from .env file

    Returns
    -------
    Config
        Global configuration instance
    """
    global _config
    if _config is None or reload:
        _config = Config()
    return _config
