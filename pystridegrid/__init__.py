"""
pystridegrid - strided 2D grids with zero-copy views and clipped rasterization.

A small package for bitmap-like data (pixel buffers, tile maps, masks) stored
in one-dimensional numpy buffers. A grid maps its logical (width, height) onto
a buffer whose rows start `stride` elements apart, so sub-rectangles can be
described as views sharing the parent's memory, and provides in-place drawing
primitives that clip to the grid instead of failing.

Key Features:
- Any numpy element type (numeric, bool, structured records, Python objects)
- Compact and padded (strided) layouts behind the same descriptor
- Zero-copy views, padding views and all-or-nothing view_or_empty
- Checked accessors with diagnostic PreconditionError, plus total
  at_or_none / row_or_none / view_or_empty variants
- Pooled allocator for owning grids with reuse and optional capacity
- Clipped lines (Bresenham), rectangles, ellipses, discs and borders
- Optional taichi backend for the per-cell ellipse/disc predicate

Core Components:
- grid: Grid descriptor, addressing, views, construction and lifecycle
- raster: drawing operations
- pool: BufferPool allocator
- general_algorithms: Vec2, Bresenham walk, distance masks
- environment: backend selection (numpy or taichi)
- constants: global configuration (checked mode, backend, default dtype)
- errors: PreconditionError, AllocationError, BackendError
- logging_config: setup_logging() for the package logger

Basic Usage:
    import numpy as np
    import pystridegrid as psg

    pool = psg.pool.bufpool

    # 64x48 single-channel canvas from the pool
    canvas = psg.grid.Grid.allocate_zeroed(pool, (64, 48), dtype=np.uint8)

    # Draw through the canvas and through a view of it
    canvas.border(2, 255)
    panel = canvas.view((8, 8), (24, 16))
    panel.fill(40).draw_line((0, 0), (23, 15), 200)
    canvas.fill_ellipse((36, 10), (20, 30), 128)

    # Borrow an existing numpy image
    image = np.zeros((10, 10), dtype=np.float32)
    psg.grid.Grid.from_numpy(image).fill_rect((-3, -3), (6, 6), 1.0)

    # Owning grids go back to their allocator
    canvas.release(pool)
"""

import logging

__version__ = "0.1.0"

# Import all submodules in alphabetical order
from . import constants
from . import environment
from . import errors
from . import general_algorithms
from . import grid
from . import logging_config
from . import pool
from . import raster

# Library logger stays silent until the application calls setup_logging()
logging.getLogger(__name__).addHandler(logging.NullHandler())

# Export all submodules
__all__ = [
    "constants",
    "environment",
    "errors",
    "general_algorithms",
    "grid",
    "logging_config",
    "pool",
    "raster"
]
