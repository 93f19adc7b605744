"""
Strided grid descriptor, views and lifecycle for pystridegrid.

This submodule provides the Grid class: a rectangular window of
(width, height) elements onto a one-dimensional numpy buffer whose rows start
`stride` elements apart. Separating the logical width from the physical
stride lets one buffer host several independent sub-grids (views) and lets
row copies skip padding.

Core Classes:
- Grid: descriptor, addressing, views and chaining drawing methods

Lifecycle Functions:
- copy_into: row-by-row copy between equally sized grids of any stride
- temp_grid: context manager around allocate/release

Ways to build a grid:
- Grid.empty(): the canonical empty grid
- Grid.from_elements / from_elements_with_stride / from_numpy: borrow a buffer
- Grid.static_filled / static_with_stride: process-lifetime storage
- Grid.allocate* / duplicate_*: owning, must be released to the allocator
- grid.view / view_or_empty / pad / pad_ex: alias part of another grid

Usage:
    import numpy as np
    import pystridegrid as psg

    pool = psg.pool.bufpool

    canvas = psg.grid.Grid.allocate_zeroed(pool, (16, 8), dtype=np.uint8)
    inner = canvas.pad(1)                      # 14x6 view, no copy
    inner.border(1, 2).fill_rect((2, 2), (4, 2), 9)
    assert canvas[1, 1] == 2                   # drawn through the view

    packed = canvas.view((4, 2), (6, 3)).duplicate_compact(pool)
    assert packed.stride == 6

    packed.release(pool)
    canvas.release(pool)
"""

from .gridfields import Grid
from .lifecycle import copy_into, temp_grid

# Export main classes
__all__ = [
	"Grid",
	"copy_into",
	"temp_grid"
]
