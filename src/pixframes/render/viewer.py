"""
Grayscale rendering of combined detector grids.

Maps grid values in [0, 10000] to 8-bit gray levels and displays them with
nearest-neighbor magnification so single pixels stay crisp.
"""

import logging
from typing import Optional

import numpy as np
from PIL import Image

from pixframes.data.parsers.frame_parser import MAX_VALUE, MIN_VALUE

logger = logging.getLogger(__name__)

STRETCHES = ("saturate", "linear", "log")


def grid_to_intensity(grid: np.ndarray, stretch: str = "saturate") -> np.ndarray:
    """
    Convert grid values to uint8 gray levels.

    Parameters
    ----------
    grid : ndarray
        2D array with values in [0, 10000]
    stretch : str
        'saturate' (any hit is white), 'linear' or 'log' (default: 'saturate')

    Returns
    -------
    ndarray
        uint8 array of the same shape
    """
    arr = np.clip(np.asarray(grid, dtype=np.float64), MIN_VALUE, MAX_VALUE)

    if stretch == "saturate":
        arr = np.minimum(arr * 255, 255)
    elif stretch == "linear":
        arr = arr * 255 / MAX_VALUE
    elif stretch == "log":
        arr = np.log1p(arr) * 255 / np.log1p(MAX_VALUE)
    else:
        raise ValueError(f"Unknown stretch '{stretch}', expected one of {STRETCHES}")

    return np.round(arr).astype(np.uint8)


def grid_to_image(grid: np.ndarray, scale: int = 1, stretch: str = "saturate") -> Image.Image:
    """
    Convert a grid to a grayscale Pillow image.

    Parameters
    ----------
    grid : ndarray
        2D array with values in [0, 10000]
    scale : int
        Integer magnification factor (default: 1)
    stretch : str
        Gray level mapping, see ``grid_to_intensity``

    Returns
    -------
    Image
        Mode 'L' image, upscaled with nearest-neighbor resampling
    """
    if scale < 1:
        raise ValueError(f"scale must be >= 1, got {scale}")

    img = Image.fromarray(grid_to_intensity(grid, stretch))
    if scale > 1:
        img = img.resize((img.width * scale, img.height * scale), Image.NEAREST)
    return img


class GridRenderer:
    """
    Display a grid in a matplotlib window.

    Args:
        window_size: Canvas size in pixels (default: 512)
        stretch: Gray level mapping (default: 'saturate')
        title: Window title
    """

    def __init__(
        self,
        window_size: int = 512,
        stretch: str = "saturate",
        title: str = "Combined 256x256 Grayscale Grid Viewer",
    ):
        if stretch not in STRETCHES:
            raise ValueError(f"Unknown stretch '{stretch}', expected one of {STRETCHES}")
        self.window_size = window_size
        self.stretch = stretch
        self.title = title

    def build_figure(self, grid: np.ndarray):
        """Build the figure without showing it."""
        import matplotlib.pyplot as plt

        dpi = 100
        fig = plt.figure(figsize=(self.window_size / dpi, self.window_size / dpi), dpi=dpi)
        ax = fig.add_axes([0, 0, 1, 1])
        ax.imshow(
            grid_to_intensity(grid, self.stretch),
            cmap="gray",
            vmin=0,
            vmax=255,
            interpolation="nearest",
        )
        ax.set_axis_off()

        manager = fig.canvas.manager
        if manager is not None:
            manager.set_window_title(self.title)
        return fig

    def show(self, grid: np.ndarray, block: Optional[bool] = None):
        """Open a window with the grid and return the figure."""
        import matplotlib.pyplot as plt

        fig = self.build_figure(grid)
        logger.info(f"Displaying grid in {self.window_size}x{self.window_size} window")
        plt.show(block=block)
        return fig


def show_grid(grid: np.ndarray, window_size: int = 512, stretch: str = "saturate"):
    """Display a grid with a default GridRenderer."""
    return GridRenderer(window_size=window_size, stretch=stretch).show(grid)
