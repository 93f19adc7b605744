"""
Backend initialization and management for pystridegrid.

The default 'numpy' backend needs no setup. The 'taichi' backend evaluates the
per-cell distance masks of fill_ellipse / fill_circle in a parallel ti.kernel
and requires the optional taichi dependency:

    pip install taichi   or   pip install pystridegrid[taichi]

Usage:
    import pystridegrid as psg

    psg.environment.initialise('taichi')            # ti.init(arch=ti.cpu)
    psg.environment.initialise('taichi', arch=ti.gpu)
    ...
    psg.environment.reboot()                        # back to numpy
"""

import logging

from . import constants as cte
from .errors import BackendError

logger = logging.getLogger(__name__)

try:
	import taichi as ti
	TAICHI_AVAILABLE = True
except ImportError:
	TAICHI_AVAILABLE = False
	ti = None


def _check_taichi():
	"""Check if taichi is available and raise informative error if not."""
	if not TAICHI_AVAILABLE:
		raise ImportError(
			"taichi is required for the 'taichi' backend but not installed. "
			"Install with: pip install taichi or pip install pystridegrid[taichi]"
		)


def initialise(backend='numpy', arch=None, **ti_kwargs):
	"""
	Select the compute backend.

	Args:
		backend (str): 'numpy' or 'taichi'
		arch: Taichi architecture passed to ti.init (default ti.cpu). Ignored
			for the numpy backend.
		**ti_kwargs: Extra keyword arguments forwarded to ti.init

	Raises:
		BackendError: If already initialised or the backend name is unknown
		ImportError: If the taichi backend is requested without taichi installed
	"""
	if cte.INITIALISED:
		raise BackendError("pystridegrid backend already initialised, call reboot() first")

	if backend not in cte.BACKENDS:
		raise BackendError(f"Unknown backend '{backend}'. Available backends: {cte.BACKENDS}")

	if backend == 'taichi':
		_check_taichi()
		ti.init(arch=ti.cpu if arch is None else arch, **ti_kwargs)

	cte.BACKEND = backend
	cte.INITIALISED = True
	logger.info("Initialised %s backend", backend)


def reboot():
	"""
	Reset the backend to the uninitialised numpy default.

	With the taichi backend this also calls ti.reset(), releasing all taichi
	memory.
	"""
	if cte.BACKEND == 'taichi' and TAICHI_AVAILABLE:
		ti.reset()
	cte.BACKEND = 'numpy'
	cte.INITIALISED = False
	logger.info("Backend reset to numpy")
