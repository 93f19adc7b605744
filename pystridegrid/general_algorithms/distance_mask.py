"""
Per-cell distance masks for disc and ellipse rasterization.

A mask covers a rectangular box of cells `[x0, x0 + w) x [y0, y0 + h)` and marks
the cells whose sample point lies inside the axis-aligned ellipse of centre
(cx, cy) and radii (rx, ry). The sample point of cell (x, y) is
(x + cell_offset, y + cell_offset): 0.5 samples cell centres, 0.0 samples the
integer lattice.

The predicate is evaluated without division,

    dx^2 * ry^2 + dy^2 * rx^2 <= rx^2 * ry^2

and both backends evaluate it in float64.

Discs centred on a cell use `disc_mask`, which compares exact integer squared
distances against a squared radius.

The numpy implementations live here; the taichi kernels with the same contract
are in ti_kernels.py and are selected through constants.BACKEND.
"""

import numpy as np

from .. import constants as cte


def distance_mask_numpy(x0, y0, w, h, cx, cy, rx, ry, cell_offset=0.5):
    """
    Evaluate the ellipse predicate over a box with numpy broadcasting.

    Args:
        x0, y0 (int): Upper-left cell of the box
        w, h (int): Box extent in cells (may be 0)
        cx, cy (float): Ellipse centre
        rx, ry (float): Ellipse radii, both > 0
        cell_offset (float): Offset of the sample point inside each cell

    Returns:
        np.ndarray: Boolean array of shape (h, w), True inside the ellipse
    """
    px = np.arange(x0, x0 + w, dtype=np.float64) + cell_offset - cx
    py = np.arange(y0, y0 + h, dtype=np.float64) + cell_offset - cy
    rx2 = float(rx) * float(rx)
    ry2 = float(ry) * float(ry)
    return (px[np.newaxis, :] ** 2) * ry2 + (py[:, np.newaxis] ** 2) * rx2 <= rx2 * ry2


def distance_mask(x0, y0, w, h, cx, cy, rx, ry, cell_offset=0.5):
    """
    Evaluate the ellipse predicate with the active backend.

    Same arguments and result as distance_mask_numpy. With the 'taichi'
    backend the predicate runs in a ti.kernel writing a uint8 mask which is
    returned as a boolean view.
    """
    if cte.BACKEND == 'taichi':
        from .ti_kernels import distance_mask_2d
        mask = np.zeros((h, w), dtype=np.uint8)
        if w > 0 and h > 0:
            distance_mask_2d(mask, x0, y0, cx, cy, rx, ry, cell_offset)
        return mask.view(np.bool_)
    return distance_mask_numpy(x0, y0, w, h, cx, cy, rx, ry, cell_offset)


def disc_mask_numpy(x0, y0, w, h, cx, cy, radius_sq):
    """
    Mark the cells of a box lying within a disc centred on a cell.

    Squared distances between integer cell coordinates are exact integers, so
    the only float is `radius_sq`, computed once by the caller. Both backends
    therefore agree for any radius.

    Args:
        x0, y0 (int): Upper-left cell of the box
        w, h (int): Box extent in cells (may be 0)
        cx, cy (int): Centre cell
        radius_sq (float): Squared radius

    Returns:
        np.ndarray: Boolean array of shape (h, w), True inside the disc
    """
    dx = np.arange(x0, x0 + w, dtype=np.int64) - cx
    dy = np.arange(y0, y0 + h, dtype=np.int64) - cy
    return dx[np.newaxis, :] ** 2 + dy[:, np.newaxis] ** 2 <= radius_sq


def disc_mask(x0, y0, w, h, cx, cy, radius_sq):
    """Same as disc_mask_numpy, evaluated with the active backend."""
    if cte.BACKEND == 'taichi':
        from .ti_kernels import disc_mask_2d
        mask = np.zeros((h, w), dtype=np.uint8)
        if w > 0 and h > 0:
            disc_mask_2d(mask, x0, y0, cx, cy, radius_sq)
        return mask.view(np.bool_)
    return disc_mask_numpy(x0, y0, w, h, cx, cy, radius_sq)
