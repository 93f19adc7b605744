"""
Buffer Pool Module

Pooling allocator for the one-dimensional numpy buffers that back owning grids.
Released buffers are kept and handed out again for requests of the same dtype
and element count, so repeatedly allocating and releasing scratch grids of a
fixed size costs no new memory.

The pool is the allocator capability consumed by `Grid.allocate*`,
`Grid.release` and `Grid.duplicate_*`:

    allocate(dtype, count) -> np.ndarray     (raises AllocationError)
    release(array)                           (raises PreconditionError)

Any object with those two methods can be passed wherever a pool is expected.

Buffers handed out by `allocate` are uninitialised: a reused buffer still holds
whatever its previous user wrote.
"""

import logging
from contextlib import contextmanager
from typing import Any, Optional

import numpy as np

from ..errors import AllocationError, PreconditionError

logger = logging.getLogger(__name__)


class PooledBuffer:
    """
    Pool entry wrapping one numpy buffer.

    Tracks usage state so the owning pool can reuse the buffer once it has
    been released.

    Attributes:
        id: Unique buffer identifier
        array: The underlying one-dimensional numpy array
        in_use: Current usage status
        dtype: Element dtype
        count: Number of elements
    """

    _next_id = 0

    def __init__(self, dtype: Any, count: int):
        """
        Allocate the buffer. The entry is initially marked as available.

        Args:
            dtype: numpy dtype of the elements
            count: Number of elements

        Raises:
            AllocationError: If numpy cannot provide the memory
        """
        try:
            self.array = np.empty(count, dtype=dtype)
        except MemoryError as e:
            raise AllocationError(f"Failed to allocate {count} elements of {dtype}") from e

        PooledBuffer._next_id += 1
        self.id = PooledBuffer._next_id
        self.in_use = False
        self.dtype = np.dtype(dtype)
        self.count = count

    def acquire(self):
        """Mark buffer as in use and unavailable for other requests."""
        self.in_use = True

    def release(self):
        """Mark buffer as available for reuse in the pool."""
        self.in_use = False

    def __str__(self):
        return f"Pooled buffer id:{self.id} - in_use:{self.in_use} - dtype:{self.dtype} - count:{self.count}"


class BufferPool:
    """
    Pool manager for grid element buffers.

    Manages pools of PooledBuffer objects organised by dtype and element count,
    reusing released buffers whenever possible. An optional capacity bounds
    the total number of elements the pool may hold. A request that does not
    fit first drops the idle buffers, and fails with AllocationError only if
    the buffers still in use leave no room.

    Attributes:
        max_elements: Capacity in elements across all buffers, or None
        _pools: Dictionary mapping (dtype, count) tuples to lists of PooledBuffer
        _by_id: Dictionary mapping id(array) to its PooledBuffer

    Usage:
        pool = BufferPool()
        buf = pool.allocate(np.uint8, 64)
        # Use buf...
        pool.release(buf)
    """

    def __init__(self, max_elements: Optional[int] = None):
        """
        Initialize an empty pool.

        Args:
            max_elements: Optional capacity in elements. None means unbounded.
        """
        self.max_elements = max_elements
        self._pools = {}  # (dtype, count) -> [PooledBuffer]
        self._by_id = {}  # id(array) -> PooledBuffer

    def _total_elements(self) -> int:
        return sum(pb.count for pool in self._pools.values() for pb in pool)

    def _fits(self, count: int) -> bool:
        return self.max_elements is None or self._total_elements() + count <= self.max_elements

    def _new_buffer(self, dtype: np.dtype, count: int, reclaim: bool = True) -> PooledBuffer:
        if not self._fits(count) and reclaim:
            # Idle buffers of other sizes give their room back before failing
            self.clear_unused()
        if not self._fits(count):
            logger.warning("Pool capacity exceeded: %d + %d > %d elements",
                           self._total_elements(), count, self.max_elements)
            raise AllocationError(
                f"Pool capacity of {self.max_elements} elements exceeded "
                f"by a request for {count} elements of {dtype}"
            )
        pb = PooledBuffer(dtype, count)
        self._by_id[id(pb.array)] = pb
        return pb

    def allocate(self, dtype: Any, count: int) -> np.ndarray:
        """
        Get an available buffer or create a new one.

        Searches for an unused buffer with matching dtype and count. If none is
        found, creates a new one and adds it to the pool. The returned buffer
        is marked as in use until released.

        Args:
            dtype: numpy dtype of the elements
            count: Number of elements

        Returns:
            np.ndarray: One-dimensional buffer of `count` uninitialised elements

        Raises:
            AllocationError: If the capacity would be exceeded or numpy fails
        """
        dtype = np.dtype(dtype)
        count = int(count)
        key = (dtype, count)

        for pb in self._pools.get(key, ()):
            if not pb.in_use:
                pb.acquire()
                logger.debug("Reused buffer %d (%s x %d)", pb.id, dtype, count)
                return pb.array

        pb = self._new_buffer(dtype, count)
        self._pools.setdefault(key, []).append(pb)
        pb.acquire()
        logger.debug("Allocated buffer %d (%s x %d)", pb.id, dtype, count)
        return pb.array

    def release(self, array: np.ndarray):
        """
        Return a buffer obtained from `allocate` to the pool.

        Args:
            array: The exact array object returned by `allocate`

        Raises:
            PreconditionError: If the array did not come from this pool or
                has already been released
        """
        pb = self._by_id.get(id(array))
        if pb is None or pb.array is not array:
            raise PreconditionError(
                "Attempt to release a buffer that was not allocated by this pool "
                f"(length {len(array)}, dtype {array.dtype})"
            )
        if not pb.in_use:
            raise PreconditionError(f"Attempt to release buffer {pb.id} twice")
        pb.release()
        logger.debug("Released buffer %d", pb.id)

    def owns(self, array: np.ndarray) -> bool:
        """Return True if `array` is a buffer currently handed out by this pool."""
        pb = self._by_id.get(id(array))
        return pb is not None and pb.array is array and pb.in_use

    def add_n_buffers(self, dtype: Any, count: int, n: int, check: bool = True):
        """
        Pre-allocate buffers of given dtype and element count.

        Args:
            dtype: numpy dtype of the elements
            count: Number of elements per buffer
            n: Number of buffers to ensure/add
            check: If True, only add if fewer than n exist. If False, add n buffers regardless
        """
        dtype = np.dtype(dtype)
        key = (dtype, int(count))

        if key not in self._pools:
            self._pools[key] = []

        pool = self._pools[key]
        existing = len(pool)

        for _ in range(max(0, (n - existing) if check else n)):
            pool.append(self._new_buffer(dtype, int(count), reclaim=False))

    def clear_unused(self):
        """Drop all buffers that are not currently in use."""
        dropped = 0
        for key, pool in list(self._pools.items()):
            for pb in pool[:]:
                if not pb.in_use:
                    pool.remove(pb)
                    del self._by_id[id(pb.array)]
                    dropped += 1
            if not pool:
                del self._pools[key]
        logger.debug("Dropped %d unused buffers", dropped)

    def clear_all(self):
        """
        Forced removal of all buffers.

        Grids still using a dropped buffer keep working (numpy keeps the memory
        alive) but can no longer be released to this pool.
        """
        for pool in self._pools.values():
            pool.clear()
        self._by_id.clear()

    def stats(self) -> dict:
        """
        Get pool usage statistics.

        Returns:
            dict: Statistics containing:
                - total: Total number of buffers across all pools
                - in_use: Number of buffers currently in use
                - available: Number of buffers available for use
                - elements: Total number of elements held by the pool
        """
        total = sum(len(pool) for pool in self._pools.values())
        in_use = sum(1 for pool in self._pools.values() for pb in pool if pb.in_use)
        return {"total": total, "in_use": in_use, "available": total - in_use,
                "elements": self._total_elements()}


# Global pool instance
bufpool = BufferPool()


def get_temp_buffer(dtype: Any, count: int) -> np.ndarray:
    """Get a buffer from the global pool."""
    return bufpool.allocate(dtype, count)


def release_temp_buffer(array: np.ndarray):
    """Release a buffer back to the global pool."""
    bufpool.release(array)


def pool_stats() -> dict:
    """Get statistics from the global pool."""
    return bufpool.stats()


def clear_pool():
    """Drop unused buffers from the global pool."""
    bufpool.clear_unused()


@contextmanager
def temp_buffer(dtype: Any, count: int):
    """
    Borrow a buffer from the global pool for the duration of a with block.

        with temp_buffer(np.float32, 1024) as buf:
            buf[:] = 0.0
        # buffer returned to the pool here
    """
    array = bufpool.allocate(dtype, count)
    try:
        yield array
    finally:
        bufpool.release(array)
