"""
General Algorithms Module

Grid-agnostic building blocks used by the grid and raster layers. Nothing here
knows about strides or element storage.

Available Algorithms:
    - vec2: Vec2 integer vector with componentwise arithmetic, min/max,
      clamping and saturating subtraction
    - bresenham: integer Bresenham line walk (both endpoints inclusive)
    - distance_mask: ellipse membership mask and disc_mask, integer-distance
      disc mask, over a box of cells,
      evaluated with numpy or, with the taichi backend, a ti.kernel

Example Usage:
    ```python
    from pystridegrid.general_algorithms import Vec2, bresenham_points, distance_mask

    Vec2(4, 3).sat_sub((6, 1))             # Vec2(0, 2)
    list(bresenham_points((0, 0), (3, 1))) # 4 cells, endpoints included
    distance_mask(0, 0, 5, 5, 2.5, 2.5, 2.5, 2.5)  # (5, 5) boolean disc
    ```
"""

from .vec2 import Vec2
from .bresenham import bresenham_points
from .distance_mask import disc_mask, disc_mask_numpy, distance_mask, distance_mask_numpy

__all__ = [
    'Vec2',
    'bresenham_points',
    'disc_mask',
    'disc_mask_numpy',
    'distance_mask',
    'distance_mask_numpy'
]
