"""
Taichi kernels for the optional 'taichi' backend.

This module imports taichi at load time; it is only imported once the taichi
backend has been selected through `pystridegrid.environment.initialise`, which
also performs `ti.init`.

Floats are f64 so results match the numpy implementations cell for cell.

Available Kernels:
    - distance_mask_2d: ellipse predicate over a (h, w) uint8 ndarray
    - disc_mask_2d: integer-distance disc predicate over a (h, w) uint8 ndarray
"""

import taichi as ti


@ti.kernel
def distance_mask_2d(mask: ti.types.ndarray(dtype=ti.u8, ndim=2),
                     x0: ti.i32, y0: ti.i32, cx: ti.f64, cy: ti.f64,
                     rx: ti.f64, ry: ti.f64, cell_offset: ti.f64):
    """
    Mark the cells of a box whose sample point lies inside an ellipse.

    Operates directly on a 2D numpy array, one thread per cell. Row index i
    maps to grid row y0 + i and column index j to grid column x0 + j.

    Args:
        mask: Output mask (2D uint8 numpy array), 1 inside, 0 outside
        x0, y0: Grid coordinates of mask[0, 0]
        cx, cy: Ellipse centre in grid coordinates
        rx, ry: Ellipse radii, both > 0
        cell_offset: Offset of the sample point inside each cell
    """
    ny, nx = mask.shape
    rx2 = rx * rx
    ry2 = ry * ry

    for i, j in ti.ndrange(ny, nx):
        dx = ti.cast(x0 + j, ti.f64) + cell_offset - cx
        dy = ti.cast(y0 + i, ti.f64) + cell_offset - cy
        inside = ti.u8(0)
        if dx * dx * ry2 + dy * dy * rx2 <= rx2 * ry2:
            inside = ti.u8(1)
        mask[i, j] = inside


@ti.kernel
def disc_mask_2d(mask: ti.types.ndarray(dtype=ti.u8, ndim=2),
                 x0: ti.i32, y0: ti.i32, cx: ti.i32, cy: ti.i32,
                 radius_sq: ti.f64):
    """
    Mark the cells of a box within a disc centred on cell (cx, cy).

    The squared distance is an exact integer; only the comparison with
    `radius_sq` involves a float.
    """
    ny, nx = mask.shape

    for i, j in ti.ndrange(ny, nx):
        dx = x0 + j - cx
        dy = y0 + i - cy
        inside = ti.u8(0)
        if ti.cast(dx * dx + dy * dy, ti.f64) <= radius_sq:
            inside = ti.u8(1)
        mask[i, j] = inside
