"""
Exception hierarchy and precondition checks for pystridegrid.

Two families of failures exist:
- Precondition violations: a caller asked for something the contract forbids
  (out-of-bounds access, mismatched sizes, releasing a borrowed buffer). They
  are reported through `grid_assert` while `constants.CHECKED` is true.
- Allocation failures: the allocator could not provide storage. They are
  always raised and never retried.

Drawing operations never raise either kind; they clip instead.
"""

from . import constants as cte


class GridError(Exception):
	"""Base class for every error raised by pystridegrid."""


class PreconditionError(GridError, AssertionError):
	"""A documented precondition of a grid operation was violated."""


class AllocationError(GridError, MemoryError):
	"""The allocator could not provide the requested buffer."""


class BackendError(GridError, RuntimeError):
	"""The compute backend was misconfigured or initialised twice."""


def grid_assert(condition, message, *args):
	"""
	Raise PreconditionError when `condition` is false and checking is enabled.

	The message is only formatted on failure, so callers can pass the values
	to interpolate without paying for string formatting on the hot path.

	Args:
		condition (bool): The precondition that must hold
		message (str): str.format template describing the violation
		*args: Values interpolated into `message`

	Raises:
		PreconditionError: If cte.CHECKED is true and condition is false
	"""
	if cte.CHECKED and not condition:
		raise PreconditionError(message.format(*args))
