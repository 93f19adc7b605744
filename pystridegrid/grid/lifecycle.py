"""
Allocator-backed construction, release and copying of grids.

These are the operations that involve an allocator, i.e. any object providing
`allocate(dtype, count) -> np.ndarray` and `release(array)` such as
`pystridegrid.pool.BufferPool`. The Grid class exposes each of them as a
method; the free functions are the implementation.

Allocation failures surface as AllocationError from the allocator and are
never retried here.
"""

import logging
from contextlib import contextmanager

from .. import constants as cte
from ..errors import grid_assert
from ..general_algorithms import Vec2
from .gridfields import Grid

logger = logging.getLogger(__name__)


def allocate_with_stride(allocator, size, stride, dtype=None):
	size = Vec2.of(size)
	stride = int(stride)
	dtype = cte.resolve_dtype(dtype)
	grid_assert(0 <= size.x <= stride and size.y >= 0,
		"Grid width must not exceed the stride\nGrid size: {}\nStride: {}",
		tuple(size), stride)

	if size.x == 0 or size.y == 0:
		return Grid.empty(dtype)

	elements = allocator.allocate(dtype, stride * size.y)
	logger.debug("Allocated %s grid with stride %d (%s)", tuple(size), stride, dtype)
	return Grid(elements, size, stride)


def allocate(allocator, size, dtype=None):
	size = Vec2.of(size)
	return allocate_with_stride(allocator, size, size.x, dtype)


def allocate_zeroed(allocator, size, dtype=None):
	return allocate(allocator, size, dtype).zero()


def allocate_zeroed_with_stride(allocator, size, stride, dtype=None):
	return allocate_with_stride(allocator, size, stride, dtype).zero()


def release(grid, allocator):
	"""
	Return the buffer of an owning grid to `allocator`.

	The canonical empty grid owns nothing, so releasing it is a no-op. For
	any other grid the allocator decides whether the buffer is one of its own
	and raises PreconditionError if not.
	"""
	if grid.is_empty() and len(grid.elements) == 0:
		return
	allocator.release(grid.elements)
	logger.debug("Released %s grid", tuple(grid.size))


def copy_into(dest, src):
	"""
	Copy every logical row of `src` into `dest`.

	Works across any combination of strides. If the two grids alias
	overlapping memory the result is only defined row by row, top to bottom.

	Returns:
		Grid: dest

	Raises:
		PreconditionError: If the sizes differ (checked mode)
	"""
	grid_assert(dest.size == src.size,
		"Attempt to copy between grids of different sizes\nDestination size: {}\nSource size: {}",
		tuple(dest.size), tuple(src.size))

	for y in range(dest.height):
		dest.row(y)[:] = src.row(y)
	return dest


def duplicate_preserving_stride(grid, allocator):
	"""Owning copy of the underlying buffer, inter-row padding included."""
	if grid.is_empty():
		return Grid.empty(grid.dtype)

	new_grid = allocate_with_stride(allocator, grid.size, grid.stride, grid.dtype)
	# A view's buffer may stop short of its last row's padding
	n = len(grid.elements)
	new_grid.elements[:n] = grid.elements
	return new_grid


def duplicate_compact(grid, allocator):
	"""Owning compact copy: width * height elements, no padding."""
	new_grid = allocate(allocator, grid.size, grid.dtype)
	if new_grid.is_empty():
		return new_grid
	return copy_into(new_grid, grid)


@contextmanager
def temp_grid(allocator, size, dtype=None, zeroed=False):
	"""
	Owning grid released automatically at the end of a with block.

	    with temp_grid(bufpool, (32, 32), np.float32, zeroed=True) as scratch:
	        scratch.fill_rect((4, 4), (8, 8), 1.0)
	    # buffer back in the pool here

	Views of the scratch grid must not escape the block.
	"""
	grid = allocate_zeroed(allocator, size, dtype) if zeroed else allocate(allocator, size, dtype)
	try:
		yield grid
	finally:
		release(grid, allocator)
