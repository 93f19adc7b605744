"""
Buffer Pooling Allocator for pystridegrid.

This submodule implements the allocator consumed by owning grids. Buffers are
one-dimensional numpy arrays organised by (dtype, element count); released
buffers are recycled for later requests of the same kind.

Core Classes:
- PooledBuffer: Pool entry wrapping one buffer with its usage state
- BufferPool: Pool manager with reuse, optional capacity and statistics

Pool Management Functions:
- get_temp_buffer: Acquire a buffer from the global pool
- release_temp_buffer: Return a buffer to the global pool
- temp_buffer: Context manager for automatic buffer lifecycle
- pool_stats: Usage statistics of the global pool
- clear_pool: Drop unused buffers from the global pool

Usage Patterns:
    import numpy as np
    import pystridegrid as psg

    # Owning grids take the allocator explicitly
    grid = psg.grid.Grid.allocate(psg.pool.bufpool, (64, 32), dtype=np.uint8)
    try:
        grid.fill(7)
    finally:
        grid.release(psg.pool.bufpool)

    # A bounded pool turns runaway allocation into AllocationError
    small = psg.pool.BufferPool(max_elements=1024)

    stats = psg.pool.pool_stats()
    print(f"Buffers in use: {stats['in_use']}/{stats['total']}")
"""

from .pool import (
    PooledBuffer,
    BufferPool,
    get_temp_buffer,
    release_temp_buffer,
    pool_stats,
    clear_pool,
    temp_buffer,
    bufpool
)

__all__ = [
    "PooledBuffer",
    "BufferPool",
    "get_temp_buffer",
    "release_temp_buffer",
    "pool_stats",
    "clear_pool",
    "temp_buffer",
    "bufpool"
]
