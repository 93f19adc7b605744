import logging

import numpy as np

from .. import constants as cte
from ..errors import grid_assert
from ..general_algorithms import Vec2
from ..raster import drawing

logger = logging.getLogger(__name__)

# Process-lifetime storage backing Grid.static_filled / Grid.static_with_stride.
# Keyed by (size, stride, dtype, fill): identical requests share one buffer.
_static_storage = {}


def _as_flat(buffer):
	elements = np.asarray(buffer)
	if elements.ndim != 1:
		# View for C-contiguous input, copy otherwise
		elements = elements.reshape(-1)
	return elements


class Grid:
	"""
	Strided 2D grid descriptor over a one-dimensional numpy buffer.

	A grid is a window of `size = (width, height)` elements onto a buffer in
	which consecutive rows start `stride` elements apart. `stride >= width`;
	the elements between the end of a row and the start of the next one are
	padding that the grid never reads or writes. The element type is the
	buffer's numpy dtype and may be anything numpy stores, including object
	and structured dtypes.

	Element (x, y) lives at offset `y * stride + x`. That arithmetic exists in
	exactly one place, `offset_of`; everything else (element access, rows,
	views and every drawing operation) is expressed through it, `row` and
	`in_bounds`.

	Ownership is not recorded on the grid. It follows from the constructor:
		- borrowed: `from_elements`, `from_elements_with_stride`, `from_numpy`.
		  The caller keeps the buffer alive.
		- static: `static_filled`, `static_with_stride`. Lives for the whole
		  process and is never released.
		- owning: `allocate*` and `duplicate_*`. Must be handed back with
		  `release` to the allocator that produced it.
		- view: `view`, `view_or_empty`, `pad`, `pad_ex`. Aliases the parent's
		  buffer and is only meaningful while the parent's storage is.

	The descriptor itself is immutable: `elements`, `size` and `stride` are
	read-only and only the contents of the buffer change.

	Attributes:
		elements (np.ndarray): One-dimensional element buffer
		size (Vec2): Logical (width, height)
		stride (int): Elements from the start of one row to the next

	Methods:
		at(), set(), row(), view(): checked accessors
		at_or_none(), row_or_none(), view_or_empty(): total variants
		fill(), draw_line(), fill_rect(), border(), ...: chaining drawing
		operations, see pystridegrid.raster
	"""

	def __init__(self, elements, size, stride):
		"""
		Wrap an already validated buffer.

		This is the raw descriptor constructor and performs no checks; use one
		of the class method constructors unless the invariants are already
		known to hold.

		Args:
			elements (np.ndarray): One-dimensional element buffer
			size: (width, height)
			stride (int): Row pitch in elements
		"""
		self._elements = elements
		self._size = Vec2.of(size)
		self._stride = int(stride)

	# ====== DESCRIPTOR ======

	@property
	def elements(self):
		return self._elements

	@property
	def size(self):
		return self._size

	@property
	def stride(self):
		return self._stride

	@property
	def width(self):
		return self._size.x

	@property
	def height(self):
		return self._size.y

	@property
	def dtype(self):
		return self._elements.dtype

	def __repr__(self):
		return f"Grid(size={tuple(self._size)}, stride={self._stride}, dtype={self._elements.dtype})"

	# ====== CONSTRUCTION ======

	@classmethod
	def empty(cls, dtype=None):
		"""
		Return the canonical empty grid: size (0, 0), stride 0, no elements.
		"""
		return cls(np.empty(0, dtype=cte.resolve_dtype(dtype)), (0, 0), 0)

	@classmethod
	def from_elements(cls, buffer, size):
		"""
		Describe a tightly packed buffer as a grid (stride == width).

		The grid borrows `buffer`: a one-dimensional ndarray is referenced
		without copying and the caller must keep it alive. Other array-likes
		go through numpy.asarray, which copies lists and tuples.

		Args:
			buffer: Element buffer of exactly width * height elements
			size: (width, height)

		Returns:
			Grid: Borrowing grid, or the canonical empty grid if a dimension is 0

		Raises:
			PreconditionError: If the buffer length does not match the size
		"""
		elements = _as_flat(buffer)
		size = Vec2.of(size)
		grid_assert(size.x >= 0 and size.y >= 0,
			"Attempt to build a grid with a negative size\nGrid size: {}", tuple(size))
		grid_assert(len(elements) == size.x * size.y,
			"Buffer length does not match grid size\nGrid size: {}\nBuffer length: {}",
			tuple(size), len(elements))

		if size.x == 0 or size.y == 0:
			return cls.empty(elements.dtype)
		return cls(elements, size, size.x)

	@classmethod
	def from_elements_with_stride(cls, buffer, size, stride):
		"""
		Describe a padded buffer as a grid.

		Args:
			buffer: Element buffer of exactly stride * height elements
			size: (width, height), width <= stride
			stride (int): Row pitch in elements

		Raises:
			PreconditionError: If width > stride or the length is not stride * height
		"""
		elements = _as_flat(buffer)
		size = Vec2.of(size)
		stride = int(stride)
		grid_assert(0 <= size.x <= stride and size.y >= 0,
			"Grid width must not exceed the stride\nGrid size: {}\nStride: {}",
			tuple(size), stride)
		grid_assert(len(elements) == stride * size.y,
			"Buffer length does not match stride * height\nGrid size: {}\nStride: {}\nBuffer length: {}",
			tuple(size), stride, len(elements))

		if size.x == 0 or size.y == 0:
			return cls.empty(elements.dtype)
		return cls(elements, size, stride)

	@classmethod
	def from_numpy(cls, array):
		"""
		Describe a 2D numpy array of shape (height, width) as a compact grid.

		C-contiguous arrays are borrowed; anything else is copied first.
		"""
		array = np.asarray(array)
		grid_assert(array.ndim == 2, "Expected a 2D array, got shape {}", array.shape)
		array = np.ascontiguousarray(array)
		height, width = array.shape
		return cls.from_elements(array.reshape(-1), (width, height))

	@classmethod
	def static_filled(cls, size, fill, dtype=None):
		"""
		Grid on process-lifetime storage with every element set to `fill`.

		Calls with the same size, fill value and dtype return grids sharing one
		buffer, so writes through one are visible through the others. The
		storage is never released.

		Args:
			size: (width, height)
			fill: Initial value (must be hashable)
			dtype: Element dtype, default cte.DEFAULT_DTYPE
		"""
		size = Vec2.of(size)
		return cls.static_with_stride(size, size.x, fill, dtype)

	@classmethod
	def static_with_stride(cls, size, stride, fill, dtype=None):
		"""
		Same as static_filled with `stride - width` padding elements per row.

		Padding is initialised to `fill` too.
		"""
		size = Vec2.of(size)
		stride = int(stride)
		dtype = cte.resolve_dtype(dtype)
		grid_assert(0 <= size.x <= stride and size.y >= 0,
			"Grid width must not exceed the stride\nGrid size: {}\nStride: {}",
			tuple(size), stride)

		if size.x == 0 or size.y == 0:
			return cls.empty(dtype)

		key = (size, stride, dtype, fill)
		elements = _static_storage.get(key)
		if elements is None:
			elements = np.empty(stride * size.y, dtype=dtype)
			elements[...] = drawing.as_element(dtype, fill)
			_static_storage[key] = elements
			logger.debug("Created static storage for %s grid, stride %d, dtype %s",
				tuple(size), stride, dtype)
		return cls(elements, size, stride)

	@classmethod
	def allocate(cls, allocator, size, dtype=None):
		"""
		Owning compact grid with uninitialised elements.

		Args:
			allocator: Object with allocate(dtype, count) and release(array),
				e.g. pystridegrid.pool.bufpool
			size: (width, height)
			dtype: Element dtype, default cte.DEFAULT_DTYPE

		Raises:
			AllocationError: If the allocator cannot provide the buffer
		"""
		from .lifecycle import allocate
		return allocate(allocator, size, dtype)

	@classmethod
	def allocate_with_stride(cls, allocator, size, stride, dtype=None):
		"""Owning grid of stride * height uninitialised elements."""
		from .lifecycle import allocate_with_stride
		return allocate_with_stride(allocator, size, stride, dtype)

	@classmethod
	def allocate_zeroed(cls, allocator, size, dtype=None):
		"""Owning compact grid with every element set to the dtype's zero."""
		from .lifecycle import allocate_zeroed
		return allocate_zeroed(allocator, size, dtype)

	@classmethod
	def allocate_zeroed_with_stride(cls, allocator, size, stride, dtype=None):
		from .lifecycle import allocate_zeroed_with_stride
		return allocate_zeroed_with_stride(allocator, size, stride, dtype)

	def release(self, allocator):
		"""
		Hand the buffer of an owning grid back to its allocator.

		Only valid for grids returned by allocate* or duplicate_* with the same
		allocator. Neither this grid nor any view of it may be used afterwards.
		"""
		from .lifecycle import release
		release(self, allocator)

	def duplicate_preserving_stride(self, allocator):
		"""Owning copy of the whole buffer, padding included, with the same stride."""
		from .lifecycle import duplicate_preserving_stride
		return duplicate_preserving_stride(self, allocator)

	def duplicate_compact(self, allocator):
		"""Owning compact copy of the logical rows, padding dropped."""
		from .lifecycle import duplicate_compact
		return duplicate_compact(self, allocator)

	def copy_from(self, src):
		"""Copy `src` into this grid row by row. Sizes must be equal."""
		from .lifecycle import copy_into
		return copy_into(self, src)

	# ====== ADDRESSING ======

	def is_empty(self):
		return self._size.x == 0 or self._size.y == 0

	def is_compact(self):
		"""True if rows are tightly packed (stride == width)."""
		return self._size.x == self._stride

	def stride_in_bytes(self):
		return self._stride * self._elements.itemsize

	def in_bounds(self, pos):
		x, y = Vec2.of(pos)
		return 0 <= x < self._size.x and 0 <= y < self._size.y

	def offset_of(self, pos):
		"""
		Buffer offset of element `pos`.

		Raises:
			PreconditionError: If pos is out of bounds (checked mode)
		"""
		pos = Vec2.of(pos)
		grid_assert(self.in_bounds(pos),
			"Attempt to access an element when pos is out of bounds\nGrid size: {}\nElement pos: {}",
			tuple(self._size), tuple(pos))
		return pos.y * self._stride + pos.x

	def at(self, pos):
		return self._elements[self.offset_of(pos)]

	def at_or_none(self, pos):
		if not self.in_bounds(pos):
			return None
		return self.at(pos)

	def set(self, pos, value):
		self._elements[self.offset_of(pos)] = value

	def __getitem__(self, pos):
		return self.at(pos)

	def __setitem__(self, pos, value):
		self.set(pos, value)

	def row(self, index):
		"""
		Writable view of the `width` elements of row `index`.

		Raises:
			PreconditionError: If index is not in [0, height) (checked mode)
		"""
		index = int(index)
		grid_assert(0 <= index < self._size.y,
			"Attempt to get a grid row with index out of bounds\nGrid size: {}\nRow index: {}",
			tuple(self._size), index)
		start = self.offset_of((0, index))
		return self._elements[start:start + self._size.x]

	def row_or_none(self, index):
		if not 0 <= index < self._size.y:
			return None
		return self.row(index)

	def rows(self):
		"""Iterate the rows from top to bottom."""
		for y in range(self._size.y):
			yield self.row(y)

	def to_numpy(self):
		"""Compact (height, width) copy of the logical contents."""
		out = np.empty((self._size.y, self._size.x), dtype=self._elements.dtype)
		for y, row in enumerate(self.rows()):
			out[y] = row
		return out

	# ====== VIEWS ======

	def view(self, pos, size):
		"""
		Grid aliasing the `size` region of this grid starting at `pos`.

		No element is copied: the view's buffer is a slice of this grid's
		buffer and it shares this grid's stride.

		Raises:
			PreconditionError: If size has a zero component or the region
				leaves this grid (checked mode)
		"""
		pos = Vec2.of(pos)
		size = Vec2.of(size)
		grid_assert(size.x > 0 and size.y > 0,
			"Attempt to create a view with an empty size\nGrid size: {}\nView size: {}",
			tuple(self._size), tuple(size))
		grid_assert(self.in_bounds(pos) and self.in_bounds(pos + size - (1, 1)),
			"Attempt to create a view reaching out of bounds\nGrid size: {}\nView pos: {}\nView size: {}",
			tuple(self._size), tuple(pos), tuple(size))

		start = self.offset_of(pos)
		return Grid(self._elements[start:start + size.y * self._stride], size, self._stride)

	def view_or_empty(self, pos, size):
		"""Like view, but returns the empty grid instead of failing. Never clamps."""
		pos = Vec2.of(pos)
		size = Vec2.of(size)
		if size.x <= 0 or size.y <= 0:
			return Grid.empty(self.dtype)
		if not (self.in_bounds(pos) and self.in_bounds(pos + size - (1, 1))):
			return Grid.empty(self.dtype)
		return self.view(pos, size)

	def pad(self, offset):
		"""View shrunk by `offset` elements on every side."""
		return self.pad_ex(offset, offset)

	def pad_ex(self, upper_left, bottom_right):
		"""
		View shrunk by `upper_left` on the top/left and `bottom_right` on the
		bottom/right. Sizes saturate at zero, giving the empty grid.
		"""
		upper_left = Vec2.of(upper_left)
		size = self._size.sat_sub(bottom_right).sat_sub(upper_left)
		return self.view_or_empty(upper_left, size)

	# ====== DRAWING ======

	def fill(self, value):
		return drawing.fill(self, value)

	def zero(self):
		return drawing.zero(self)

	def draw(self, pos, value):
		return drawing.draw(self, pos, value)

	def draw_unsafe(self, pos, value):
		return drawing.draw_unsafe(self, pos, value)

	def draw_hline(self, origin, length, value):
		return drawing.draw_hline(self, origin, length, value)

	def draw_vline(self, origin, length, value):
		return drawing.draw_vline(self, origin, length, value)

	def draw_line(self, start, end, value):
		return drawing.draw_line(self, start, end, value)

	def draw_rect(self, pos, size, value):
		return drawing.draw_rect(self, pos, size, value)

	def fill_rect(self, pos, size, value):
		return drawing.fill_rect(self, pos, size, value)

	def fill_ellipse(self, pos, size, value):
		return drawing.fill_ellipse(self, pos, size, value)

	def fill_circle(self, center, radius, value):
		return drawing.fill_circle(self, center, radius, value)

	def border(self, thickness, value):
		return drawing.border(self, thickness, value)

	def border_ex(self, upper_left, bottom_right, value):
		return drawing.border_ex(self, upper_left, bottom_right, value)
