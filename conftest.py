"""Shared test fixtures."""

import numpy as np
import pytest

import pystridegrid.constants as cte
from pystridegrid import environment
from pystridegrid.grid import Grid
from pystridegrid.pool import BufferPool

# Value stored in the padding of numbered grids
PAD = -1


def numbered(width, height, stride=None, dtype=np.int32):
    """Grid whose element (x, y) holds 100 * y + x; padding holds PAD."""
    stride = width if stride is None else stride
    buf = np.full(stride * height, PAD, dtype=dtype)
    for y in range(height):
        for x in range(width):
            buf[y * stride + x] = 100 * y + x
    return Grid.from_elements_with_stride(buf, (width, height), stride)


def blank(width, height, stride=None, dtype=np.uint8):
    """Zeroed grid over a fresh buffer, optionally padded."""
    stride = width if stride is None else stride
    return Grid.from_elements_with_stride(np.zeros(stride * height, dtype=dtype), (width, height), stride)


def cells(grid, value=1):
    """Set of (x, y) positions holding `value`."""
    return {(x, y) for y in range(grid.height) for x in range(grid.width) if grid.at((x, y)) == value}


@pytest.fixture
def pool():
    return BufferPool()


@pytest.fixture(autouse=True)
def _reset_environment():
    yield
    if cte.INITIALISED:
        environment.reboot()
    cte.BACKEND = 'numpy'
