"""
Integer Bresenham line walk.

Yields every cell of the 8-connected line between two points, both endpoints
included, using only integer arithmetic. The walk knows nothing about grids:
clipping is the caller's business.
"""

from .vec2 import Vec2


def bresenham_points(start, end):
    """
    Iterate the cells of the Bresenham line from `start` to `end`.

    Args:
        start: First endpoint (anything Vec2.of accepts)
        end: Last endpoint (anything Vec2.of accepts)

    Yields:
        Vec2: Successive cells, starting with `start` and ending with `end`

    Example:
        >>> list(bresenham_points((0, 0), (3, 1)))
        [Vec2(0, 0), Vec2(1, 0), Vec2(2, 1), Vec2(3, 1)]
    """
    x, y = Vec2.of(start)
    x1, y1 = Vec2.of(end)

    dx = abs(x1 - x)
    dy = abs(y1 - y)
    sx = 1 if x < x1 else -1
    sy = 1 if y < y1 else -1
    err = dx - dy

    while True:
        yield Vec2(x, y)
        if x == x1 and y == y1:
            break
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x += sx
        if e2 < dx:
            err += dx
            y += sy
