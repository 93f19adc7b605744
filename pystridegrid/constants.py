"""
Global constants and configuration parameters for pystridegrid.

This module holds the runtime switches read by every grid operation. They are
plain module attributes, looked up at call time, so changing one affects all
subsequent calls without rebuilding any grid.

Constant Categories:
- Checking: whether precondition violations are reported or left unspecified
- Backend: which implementation evaluates the per-cell distance masks
- Storage: default element dtype for constructors that allocate storage

Checked Mode:
- CHECKED = True: out-of-bounds `at`/`row`/`view`, mismatched sizes and
  misuse of `release` raise `PreconditionError` with a diagnostic message
- CHECKED = False: the checks are skipped. A violated precondition then has
  unspecified results, exactly like an unchecked optimised build

Backends:
- 'numpy': vectorised numpy evaluation (default, no initialisation needed)
- 'taichi': parallel ti.kernel evaluation, requires the optional taichi
  dependency and `pystridegrid.environment.initialise('taichi')`

Usage:
    import pystridegrid.constants as cte

    # Trade diagnostics for speed in a hot loop
    cte.CHECKED = False

    # Default element type for grid.allocate(...) and friends
    cte.DEFAULT_DTYPE = np.float32
"""

import numpy as np

#########################################
###### UTILS CONSTANTS ##################
#########################################

INITIALISED = False


#########################################
###### CHECKING CONSTANTS ###############
#########################################

# Report precondition violations (True) or skip the checks (False)
CHECKED = True


#########################################
###### BACKEND CONSTANTS ################
#########################################

# Names accepted by environment.initialise()
BACKENDS = ('numpy', 'taichi')

# Active backend for distance mask evaluation
BACKEND = 'numpy'


#########################################
###### STORAGE CONSTANTS ################
#########################################

# Element dtype used when a constructor is not given one
DEFAULT_DTYPE = np.uint8


def resolve_dtype(dtype=None):
	"""
	Return `dtype` as a numpy dtype, falling back to DEFAULT_DTYPE.

	Args:
		dtype: Anything numpy.dtype() accepts, or None

	Returns:
		np.dtype: The resolved element type
	"""
	return np.dtype(DEFAULT_DTYPE if dtype is None else dtype)
