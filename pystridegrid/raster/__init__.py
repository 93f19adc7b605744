"""
Rasterization primitives for pystridegrid.

This submodule provides in-place drawing operations on grids. They are free
functions taking the grid as first argument and returning it; the Grid class
exposes the same names as methods so calls chain naturally.

Available Operations:
- fill, zero: whole-grid fill (single assignment for compact grids)
- draw, draw_unsafe: single element, clipped or checked
- draw_hline, draw_vline: signed-length runs, end exclusive
- draw_line: integer Bresenham, both endpoints inclusive
- draw_rect, fill_rect: axis-aligned outline and fill, signed sizes
- fill_ellipse: ellipse inscribed in a box, sampled at cell centres
- fill_circle: disc of integer radius around a cell
- border, border_ex: frames built from four fill_rect calls

Clipping:
Every operation clips silently to the grid bounds and never raises on
geometry. Only draw_unsafe, which skips clipping by contract, can report a
precondition violation.

Usage:
    import numpy as np
    import pystridegrid as psg
    from pystridegrid import raster

    grid = psg.grid.Grid.from_numpy(np.zeros((8, 8), dtype=np.uint8))

    raster.draw_line(grid, (0, 0), (7, 3), 1)
    grid.fill_rect((-2, -2), (4, 4), 2).border(1, 3)
    grid.fill_ellipse((2, 2), (5, 4), 4)
"""

from .drawing import (
    as_element,
    fill,
    zero,
    draw,
    draw_unsafe,
    draw_hline,
    draw_vline,
    draw_line,
    draw_rect,
    fill_rect,
    fill_ellipse,
    fill_circle,
    border,
    border_ex
)

__all__ = [
    "as_element",
    "fill",
    "zero",
    "draw",
    "draw_unsafe",
    "draw_hline",
    "draw_vline",
    "draw_line",
    "draw_rect",
    "fill_rect",
    "fill_ellipse",
    "fill_circle",
    "border",
    "border_ex"
]
