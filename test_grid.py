"""Tests for the grid descriptor, addressing, construction and views."""

import numpy as np
import pytest

import pystridegrid.constants as cte
from pystridegrid.errors import PreconditionError
from pystridegrid.general_algorithms import Vec2
from pystridegrid.grid import Grid

from conftest import PAD, numbered


def test_empty_grid_is_canonical():
    grid = Grid.empty()
    assert grid.is_empty()
    assert grid.size == (0, 0)
    assert grid.stride == 0
    assert len(grid.elements) == 0


@pytest.mark.parametrize("size", [(3, 0), (0, 5), (0, 0)])
def test_zero_dimension_gives_empty_grid(size):
    grid = Grid.from_elements(np.zeros(0, dtype=np.uint8), size)
    assert grid.is_empty()
    assert grid.stride == 0
    assert grid.size == (0, 0)


def test_from_elements_borrows_buffer():
    buf = np.arange(6, dtype=np.int16)
    grid = Grid.from_elements(buf, (3, 2))

    assert grid.stride == 3
    assert grid.is_compact()
    assert grid.at((2, 0)) == 2
    assert grid.at((0, 1)) == 3

    grid.set((1, 1), 42)
    assert buf[4] == 42


def test_from_elements_rejects_length_mismatch():
    with pytest.raises(PreconditionError, match="Buffer length"):
        Grid.from_elements(np.zeros(5), (3, 2))


def test_from_elements_with_stride_checks():
    with pytest.raises(PreconditionError, match="stride"):
        Grid.from_elements_with_stride(np.zeros(6), (4, 2), 3)
    with pytest.raises(PreconditionError, match="Buffer length"):
        Grid.from_elements_with_stride(np.zeros(10), (4, 2), 6)

    grid = Grid.from_elements_with_stride(np.zeros(12), (4, 2), 6)
    assert grid.size == (4, 2)
    assert grid.stride == 6
    assert not grid.is_compact()


def test_from_numpy_borrows_contiguous_array():
    arr = np.zeros((2, 3), dtype=np.uint8)
    grid = Grid.from_numpy(arr)
    assert grid.size == (3, 2)

    grid[2, 1] = 5
    assert arr[1, 2] == 5


def test_from_numpy_copies_non_contiguous_array():
    arr = np.zeros((4, 6), dtype=np.uint8)
    grid = Grid.from_numpy(arr[:, ::2])
    assert grid.size == (3, 4)

    grid.fill(9)
    assert not arr.any()


def test_in_bounds_accepts_negative_positions():
    grid = numbered(4, 3)
    assert grid.in_bounds((0, 0))
    assert grid.in_bounds(Vec2(3, 2))
    assert not grid.in_bounds((-1, 0))
    assert not grid.in_bounds((0, -1))
    assert not grid.in_bounds((4, 0))
    assert not grid.in_bounds((0, 3))


def test_at_uses_stride():
    grid = numbered(4, 3, stride=6)
    assert grid.offset_of((3, 2)) == 15
    assert grid.at((3, 2)) == 203
    assert grid[1, 1] == 101


def test_at_out_of_bounds_reports_size_and_position():
    grid = numbered(4, 3)
    with pytest.raises(PreconditionError, match=r"Grid size: \(4, 3\)\nElement pos: \(4, 0\)"):
        grid.at((4, 0))


def test_precondition_error_is_an_assertion_error():
    with pytest.raises(AssertionError):
        numbered(2, 2).set((-1, 0), 1)


def test_at_or_none():
    grid = numbered(3, 2, stride=5)
    for x in range(3):
        for y in range(2):
            assert grid.at_or_none((x, y)) == 100 * y + x
    for pos in [(-1, 0), (0, -1), (3, 0), (0, 2), (3, 2), (-5, -5)]:
        assert grid.at_or_none(pos) is None


def test_row_returns_exactly_width_elements():
    grid = numbered(4, 3, stride=6)
    row = grid.row(1)
    assert list(row) == [100, 101, 102, 103]

    row[0] = 7
    assert grid.at((0, 1)) == 7


def test_row_out_of_bounds():
    grid = numbered(4, 3)
    with pytest.raises(PreconditionError, match="Row index: 3"):
        grid.row(3)
    assert grid.row_or_none(-1) is None
    assert grid.row_or_none(3) is None
    assert list(grid.row_or_none(2)) == [200, 201, 202, 203]


def test_compactness_and_stride_in_bytes():
    padded = numbered(4, 3, stride=6)
    assert not padded.is_compact()
    assert padded.stride_in_bytes() == 24

    assert numbered(4, 3).is_compact()


def test_unchecked_mode_skips_bounds_checks(monkeypatch):
    monkeypatch.setattr(cte, "CHECKED", False)
    grid = numbered(4, 3, stride=6)
    # Reads into the row padding instead of raising
    assert grid.at((4, 0)) == PAD


def test_to_numpy_drops_padding():
    grid = numbered(4, 3, stride=6)
    expected = np.array([[0, 1, 2, 3], [100, 101, 102, 103], [200, 201, 202, 203]])
    np.testing.assert_array_equal(grid.to_numpy(), expected)


def test_static_filled_shares_storage_between_identical_requests():
    a = Grid.static_filled((3, 3), 7, dtype=np.uint8)
    b = Grid.static_filled((3, 3), 7, dtype=np.uint8)
    c = Grid.static_filled((3, 3), 8, dtype=np.uint8)

    assert a.at((2, 2)) == 7
    a.set((0, 0), 1)
    assert b.at((0, 0)) == 1
    assert c.at((0, 0)) == 8


def test_static_with_stride_fills_padding():
    grid = Grid.static_with_stride((2, 2), 5, 3, dtype=np.int8)
    assert grid.stride == 5
    assert len(grid.elements) == 10
    assert (grid.elements == 3).all()


def test_view_aliases_parent():
    grid = numbered(6, 5)
    pos = Vec2(1, 2)
    view = grid.view(pos, (3, 2))

    assert view.size == (3, 2)
    assert view.stride == grid.stride
    assert np.shares_memory(view.elements, grid.elements)
    for y in range(2):
        for x in range(3):
            assert view.at((x, y)) == grid.at(pos + (x, y))

    view.set((0, 0), -5)
    assert grid.at((1, 2)) == -5


def test_view_of_view():
    grid = numbered(8, 8, stride=10)
    inner = grid.view((2, 2), (5, 5)).view((1, 3), (2, 2))
    assert inner.at((0, 0)) == grid.at((3, 5))
    assert inner.at((1, 1)) == grid.at((4, 6))


def test_view_touching_last_row():
    grid = numbered(4, 3, stride=6)
    view = grid.view((2, 2), (2, 1))
    assert list(view.row(0)) == [202, 203]


def test_view_rejects_out_of_bounds_regions():
    grid = numbered(6, 5)
    with pytest.raises(PreconditionError, match="out of bounds"):
        grid.view((4, 3), (3, 2))
    with pytest.raises(PreconditionError, match="out of bounds"):
        grid.view((-1, 0), (2, 2))
    with pytest.raises(PreconditionError, match="empty size"):
        grid.view((0, 0), (0, 2))


@pytest.mark.parametrize("pos,size", [
    ((4, 3), (3, 2)),
    ((-1, 0), (2, 2)),
    ((0, 0), (7, 1)),
    ((6, 5), (1, 1)),
    ((1, 1), (0, 3)),
    ((1, 1), (3, 0)),
])
def test_view_or_empty_is_all_or_nothing(pos, size):
    view = numbered(6, 5).view_or_empty(pos, size)
    assert view.is_empty()
    assert view.size == (0, 0)
    assert view.dtype == np.int32


def test_view_or_empty_matches_view_in_bounds():
    grid = numbered(6, 5)
    a = grid.view_or_empty((2, 1), (4, 4))
    b = grid.view((2, 1), (4, 4))
    np.testing.assert_array_equal(a.to_numpy(), b.to_numpy())


def test_pad():
    grid = numbered(6, 5)
    padded = grid.pad(1)
    assert padded.size == (4, 3)
    assert padded.at((0, 0)) == grid.at((1, 1))
    assert padded.at((3, 2)) == grid.at((4, 3))


def test_pad_ex():
    grid = numbered(6, 5)
    padded = grid.pad_ex((1, 0), (2, 1))
    assert padded.size == (3, 4)
    assert padded.at((0, 0)) == grid.at((1, 0))


def test_pad_saturates_to_empty():
    grid = numbered(6, 5)
    assert grid.pad(3).is_empty()
    assert grid.pad(10).is_empty()
    assert grid.pad_ex((0, 0), (6, 0)).is_empty()


def test_float_positions_are_rejected():
    grid = numbered(3, 3)
    with pytest.raises(TypeError):
        grid.in_bounds((-0.5, 0))
    with pytest.raises(TypeError):
        grid.draw((-0.9, -0.9), 7)
    assert grid.at((0, 0)) == 0
