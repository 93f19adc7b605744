"""
In-place rasterization primitives for strided grids.

Every function takes the grid as its first argument, mutates its elements and
returns the grid so calls can be chained. Drawing never fails on geometry:
anything outside the grid is clipped away silently. The functions only touch
the grid through `in_bounds`, `set` and `row`, so they behave identically on
compact grids, padded grids and views.

Span conventions:
- Lines given by origin and length cover [min(o, o + len), max(o, o + len)),
  so the end at `origin + length` is exclusive and negative lengths draw
  leftward/upward.
- Rectangles given by pos and size cover [min(p, p + s), max(p, p + s)) on
  each axis, negative sizes flipping the direction.
- draw_line includes both endpoints.
"""

import math

import numpy as np

from ..general_algorithms import Vec2, bresenham_points, disc_mask, distance_mask


def as_element(dtype, value):
    """
    Wrap `value` as a 0-d array of `dtype`.

    Assigning the result to a slice broadcasts one element, including for
    structured records given as tuples and for object dtypes whose values
    are themselves sequences.
    """
    cell = np.empty((), dtype=dtype)
    cell[()] = value
    return cell


def _span(origin, length, limit):
    start = min(origin, origin + length)
    end = max(origin, origin + length)
    return min(max(start, 0), limit), min(max(end, 0), limit)


def _clipped_box(grid, pos, size):
    """Normalize pos/size into [start, end) and clamp it to the grid."""
    end = pos + size
    lo = pos.min(end).clamp((0, 0), grid.size)
    hi = pos.max(end).clamp((0, 0), grid.size)
    return lo, hi


def fill(grid, value):
    """Set every element of the grid to `value`."""
    if grid.is_empty():
        return grid

    element = as_element(grid.dtype, value)
    if grid.is_compact():
        # Rows are contiguous: one assignment covers the whole grid
        grid.elements[:grid.width * grid.height] = element
    else:
        for row in grid.rows():
            row[...] = element

    return grid


def zero(grid):
    """Set every element to the zero value of the grid's dtype."""
    return fill(grid, np.zeros((), dtype=grid.dtype)[()])


def draw(grid, pos, value):
    """Set the element at `pos`; no-op when pos is out of bounds."""
    pos = Vec2.of(pos)
    if grid.in_bounds(pos):
        grid.set(pos, value)
    return grid


def draw_unsafe(grid, pos, value):
    """
    Set the element at `pos` without clipping.

    The caller must already know that pos is in bounds; a violation is a
    PreconditionError in checked mode.
    """
    grid.set(pos, value)
    return grid


def draw_hline(grid, origin, length, value):
    """
    Horizontal run of `length` elements starting at `origin`.

    Args:
        origin: Start position
        length (int): Signed length, negative draws leftward
        value: Element to write
    """
    ox, oy = Vec2.of(origin)
    length = int(length)
    if length == 0 or grid.is_empty() or oy < 0 or oy >= grid.height:
        return grid

    start, end = _span(ox, length, grid.width)
    if start < end:
        grid.row(oy)[start:end] = as_element(grid.dtype, value)
    return grid


def draw_vline(grid, origin, length, value):
    """
    Vertical run of `length` elements starting at `origin`.

    Args:
        origin: Start position
        length (int): Signed length, negative draws upward
        value: Element to write
    """
    ox, oy = Vec2.of(origin)
    length = int(length)
    if length == 0 or grid.is_empty() or ox < 0 or ox >= grid.width:
        return grid

    start, end = _span(oy, length, grid.height)
    for y in range(start, end):
        grid.set((ox, y), value)
    return grid


def draw_line(grid, start, end, value):
    """
    Bresenham line from `start` to `end`, both included.

    Points falling outside the grid are skipped one by one, so a line that
    crosses the border is clipped rather than rejected.
    """
    for point in bresenham_points(start, end):
        draw(grid, point, value)
    return grid


def draw_rect(grid, pos, size, value):
    """
    Outline of the rectangle that fill_rect(grid, pos, size) would cover.

    Nothing is drawn when either size component is 0.
    """
    pos = Vec2.of(pos)
    size = Vec2.of(size)
    if grid.is_empty() or size.x == 0 or size.y == 0:
        return grid

    end = pos + size
    lo = pos.min(end)
    hi = pos.max(end)
    width = hi.x - lo.x
    height = hi.y - lo.y

    draw_hline(grid, lo, width, value)
    draw_hline(grid, (lo.x, hi.y - 1), width, value)
    draw_vline(grid, lo, height, value)
    draw_vline(grid, (hi.x - 1, lo.y), height, value)
    return grid


def fill_rect(grid, pos, size, value):
    """Fill the rectangle at `pos` of signed `size`, clipped to the grid."""
    if grid.is_empty():
        return grid

    lo, hi = _clipped_box(grid, Vec2.of(pos), Vec2.of(size))
    if lo.x >= hi.x:
        return grid

    element = as_element(grid.dtype, value)
    for y in range(lo.y, hi.y):
        grid.row(y)[lo.x:hi.x] = element
    return grid


def _fill_masked(grid, lo, mask, value):
    element = as_element(grid.dtype, value)
    for i in range(mask.shape[0]):
        segment = grid.row(lo.y + i)[lo.x:lo.x + mask.shape[1]]
        segment[mask[i]] = element


def fill_ellipse(grid, pos, size, value):
    """
    Filled axis-aligned ellipse inscribed in the box at `pos` of signed `size`.

    A cell is drawn when its centre (x + 0.5, y + 0.5) lies inside the ellipse
    whose centre is the box centre and whose radii are half the box extent.
    """
    pos = Vec2.of(pos)
    size = Vec2.of(size)
    if grid.is_empty() or size.x == 0 or size.y == 0:
        return grid

    cx = pos.x + size.x / 2.0
    cy = pos.y + size.y / 2.0
    rx = abs(size.x) / 2.0
    ry = abs(size.y) / 2.0

    lo, hi = _clipped_box(grid, pos, size)
    extent = hi - lo
    if extent.x > 0 and extent.y > 0:
        mask = distance_mask(lo.x, lo.y, extent.x, extent.y, cx, cy, rx, ry, 0.5)
        _fill_masked(grid, lo, mask, value)
    return grid


def fill_circle(grid, center, radius, value):
    """
    Filled disc of the cells whose coordinates lie within `radius` of `center`.

    Distances are measured between integer cell coordinates, so the disc is
    symmetric around `center`. A radius of 0 draws the centre cell only; a
    negative radius draws nothing.
    """
    center = Vec2.of(center)
    radius = float(radius)
    if grid.is_empty() or radius < 0:
        return grid
    if radius == 0:
        return draw(grid, center, value)

    reach = int(math.floor(radius))
    lo = (center - reach).clamp((0, 0), grid.size)
    hi = (center + (reach + 1)).clamp((0, 0), grid.size)
    extent = hi - lo
    if extent.x > 0 and extent.y > 0:
        mask = disc_mask(lo.x, lo.y, extent.x, extent.y, center.x, center.y, radius * radius)
        _fill_masked(grid, lo, mask, value)
    return grid


def border_ex(grid, upper_left, bottom_right, value):
    """
    Frame of independent thickness per side.

    Args:
        upper_left: (left, top) thickness
        bottom_right: (right, bottom) thickness
        value: Element to write

    Thicknesses larger than the grid simply cover it.
    """
    ul = Vec2.of(upper_left)
    br = Vec2.of(bottom_right)
    width, height = grid.size

    fill_rect(grid, (0, 0), (width, ul.y), value)
    fill_rect(grid, (0, 0), (ul.x, height), value)
    fill_rect(grid, (0, max(0, height - br.y)), (width, br.y), value)
    fill_rect(grid, (max(0, width - br.x), 0), (br.x, height), value)
    return grid


def border(grid, thickness, value):
    """Frame of `thickness` elements on every side."""
    return border_ex(grid, thickness, thickness, value)
