"""Tests for the buffer pool and allocator-backed grid lifecycle."""

import numpy as np
import pytest

from pystridegrid import pool as psg_pool
from pystridegrid.errors import AllocationError, PreconditionError
from pystridegrid.grid import Grid, copy_into, temp_grid
from pystridegrid.pool import BufferPool

from conftest import numbered


def test_allocate_fill_read_back(pool):
    grid = Grid.allocate(pool, (5, 4), dtype=np.int32)
    assert grid.size == (5, 4)
    assert grid.is_compact()
    assert grid.dtype == np.int32

    grid.fill(9)
    for y in range(4):
        for x in range(5):
            assert grid.at((x, y)) == 9
    for pos in [(-1, 0), (5, 0), (0, 4), (5, 4), (0, -1)]:
        assert grid.at_or_none(pos) is None


def test_allocate_with_stride(pool):
    grid = Grid.allocate_with_stride(pool, (5, 4), 7, dtype=np.float32)
    assert grid.stride == 7
    assert len(grid.elements) == 28
    assert not grid.is_compact()


def test_allocate_with_stride_rejects_narrow_stride(pool):
    with pytest.raises(PreconditionError):
        Grid.allocate_with_stride(pool, (5, 4), 4)


def test_allocate_zeroed(pool):
    # Dirty a buffer so the zeroed allocation has to reuse stale memory
    dirty = Grid.allocate(pool, (3, 3), dtype=np.uint8).fill(255)
    dirty.release(pool)

    grid = Grid.allocate_zeroed(pool, (3, 3), dtype=np.uint8)
    assert grid.elements is dirty.elements
    assert not grid.to_numpy().any()

    padded = Grid.allocate_zeroed_with_stride(pool, (2, 3), 4, dtype=np.uint8)
    assert not padded.to_numpy().any()


def test_allocate_zero_size_returns_empty_without_allocating(pool):
    grid = Grid.allocate(pool, (0, 4))
    assert grid.is_empty()
    assert pool.stats()["total"] == 0
    grid.release(pool)


def test_release_returns_buffer_for_reuse(pool):
    grid = Grid.allocate(pool, (4, 4))
    assert pool.stats() == {"total": 1, "in_use": 1, "available": 0, "elements": 16}

    grid.release(pool)
    assert pool.stats()["in_use"] == 0
    assert pool.stats()["available"] == 1

    again = Grid.allocate(pool, (2, 8))
    assert again.elements is grid.elements
    assert pool.stats()["total"] == 1


def test_release_rejects_non_owning_grids(pool):
    borrowed = Grid.from_elements(np.zeros(4, dtype=np.uint8), (2, 2))
    with pytest.raises(PreconditionError, match="not allocated by this pool"):
        borrowed.release(pool)

    owner = Grid.allocate(pool, (4, 4))
    with pytest.raises(PreconditionError):
        owner.view((1, 1), (2, 2)).release(pool)

    other_pool = BufferPool()
    with pytest.raises(PreconditionError):
        owner.release(other_pool)


def test_double_release_raises(pool):
    grid = Grid.allocate(pool, (2, 2))
    grid.release(pool)
    with pytest.raises(PreconditionError, match="twice"):
        grid.release(pool)


def test_capacity_exhaustion_raises_allocation_error():
    pool = BufferPool(max_elements=16)
    first = Grid.allocate(pool, (4, 4))

    with pytest.raises(AllocationError) as excinfo:
        Grid.allocate(pool, (2, 1))
    assert isinstance(excinfo.value, MemoryError)

    # A released buffer of the right size is reused without growing the pool
    first.release(pool)
    second = Grid.allocate(pool, (8, 2))
    assert second.elements is first.elements


def test_capped_pool_reclaims_idle_buffers_of_other_sizes():
    pool = BufferPool(max_elements=16)
    Grid.allocate(pool, (4, 4)).release(pool)
    assert pool.stats() == {"total": 1, "in_use": 0, "available": 1, "elements": 16}

    small = Grid.allocate(pool, (2, 1))
    assert small.size == (2, 1)
    assert pool.stats() == {"total": 1, "in_use": 1, "available": 0, "elements": 2}

    # The buffer in use still counts against the capacity
    with pytest.raises(AllocationError):
        Grid.allocate(pool, (4, 4))
    assert pool.stats()["total"] == 1


def test_failed_allocation_leaves_no_empty_entry():
    pool = BufferPool(max_elements=4)
    with pytest.raises(AllocationError):
        Grid.allocate(pool, (3, 3))
    assert pool._pools == {}


def test_duplicate_compact_drops_padding(pool):
    src = numbered(4, 3, stride=6)
    dup = src.duplicate_compact(pool)

    assert dup.stride == 4
    assert len(dup.elements) == 12
    assert dup.is_compact()
    np.testing.assert_array_equal(dup.to_numpy(), src.to_numpy())


def test_duplicate_preserving_stride_copies_padding(pool):
    src = numbered(4, 3, stride=6)
    dup = src.duplicate_preserving_stride(pool)

    assert dup.stride == 6
    assert len(dup.elements) == 18
    np.testing.assert_array_equal(dup.elements, src.elements)


def test_duplicate_preserving_stride_of_view(pool):
    src = numbered(4, 3, stride=6)
    view = src.view((2, 1), (2, 2))
    dup = view.duplicate_preserving_stride(pool)

    assert dup.stride == 6
    assert len(dup.elements) == 12
    np.testing.assert_array_equal(dup.to_numpy(), view.to_numpy())


def test_duplicates_are_independent(pool):
    src = numbered(3, 3)
    dup = src.duplicate_compact(pool)
    dup.fill(0)
    assert src.at((2, 2)) == 202


def test_duplicate_of_empty_grid(pool):
    assert Grid.empty().duplicate_compact(pool).is_empty()
    assert Grid.empty().duplicate_preserving_stride(pool).is_empty()
    assert pool.stats()["total"] == 0


def test_copy_into_across_strides(pool):
    src = numbered(4, 3, stride=6)
    dest = Grid.allocate_with_stride(pool, (4, 3), 9, dtype=np.int32)

    assert copy_into(dest, src) is dest
    np.testing.assert_array_equal(dest.to_numpy(), src.to_numpy())

    other = Grid.allocate(pool, (4, 3), dtype=np.int32).zero()
    other.copy_from(dest.view((0, 0), (4, 3)))
    np.testing.assert_array_equal(other.to_numpy(), src.to_numpy())


def test_copy_into_size_mismatch_raises():
    with pytest.raises(PreconditionError, match="different sizes"):
        copy_into(numbered(4, 3), numbered(3, 4))


def test_temp_grid_releases_on_exit(pool):
    with temp_grid(pool, (3, 3), np.uint8, zeroed=True) as scratch:
        assert pool.stats()["in_use"] == 1
        assert not scratch.to_numpy().any()
    assert pool.stats()["in_use"] == 0

    with pytest.raises(RuntimeError):
        with temp_grid(pool, (3, 3), np.uint8):
            raise RuntimeError("boom")
    assert pool.stats()["in_use"] == 0


def test_pool_prewarm_and_clear(pool):
    pool.add_n_buffers(np.uint8, 16, 3)
    assert pool.stats()["total"] == 3
    pool.add_n_buffers(np.uint8, 16, 2)
    assert pool.stats()["total"] == 3

    grid = Grid.allocate(pool, (4, 4), dtype=np.uint8)
    pool.clear_unused()
    assert pool.stats() == {"total": 1, "in_use": 1, "available": 0, "elements": 16}
    assert pool.owns(grid.elements)

    pool.clear_all()
    assert pool.stats()["total"] == 0
    assert not pool.owns(grid.elements)


def test_global_pool_helpers():
    before = psg_pool.pool_stats()["in_use"]

    buf = psg_pool.get_temp_buffer(np.float64, 10)
    assert buf.shape == (10,)
    assert psg_pool.pool_stats()["in_use"] == before + 1
    psg_pool.release_temp_buffer(buf)

    with psg_pool.temp_buffer(np.float64, 10) as tmp:
        assert tmp is buf
    assert psg_pool.pool_stats()["in_use"] == before
    psg_pool.clear_pool()
