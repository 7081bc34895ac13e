"""Grayscale rendering of detector grids."""

from .viewer import GridRenderer, grid_to_image, grid_to_intensity, show_grid

__all__ = [
    "GridRenderer",
    "grid_to_image",
    "grid_to_intensity",
    "show_grid",
]
