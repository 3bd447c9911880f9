# file        :   sparse_lanczos/algebra/utils.py

'''
Backend detection and process-wide defaults for the linear algebra layer.

Provides:
- JAX_AVAILABLE flag and the optional `jax`, `jnp` modules.
- Defaults read from the environment:
    - PY_BACKEND        : 'numpy' (default) or 'jax', backend for vector operations,
    - PY_GLOBAL_SEED    : seed for random start vectors (default 42).
- `Array` type alias and `is_jax_array`.
'''

import os
from typing import Union, TypeAlias

import numpy as np

# ---------------------------------------------------------------------
#! Environment variable names
# ---------------------------------------------------------------------

PY_BACKEND_STR          : str               = "PY_BACKEND"
PY_GLOBAL_SEED_STR      : str               = "PY_GLOBAL_SEED"

DEFAULT_SEED            : int               = 42
DEFAULT_NP_FLOAT_TYPE                       = np.float64
DEFAULT_NP_CPX_TYPE                         = np.complex128

# ---------------------------------------------------------------------
#! Optional JAX
# ---------------------------------------------------------------------

try:
    import jax
    import jax.numpy as jnp
    from jax import config as jcfg
    jcfg.update("jax_enable_x64", True)
    JAX_AVAILABLE   = True
    Array : TypeAlias = Union[np.ndarray, jnp.ndarray]
except ImportError:
    JAX_AVAILABLE   = False
    jax             = None
    jnp             = None
    Array : TypeAlias = np.ndarray

# ---------------------------------------------------------------------
#! Defaults
# ---------------------------------------------------------------------

PY_GLOBAL_SEED          : int               = int(os.environ.get(PY_GLOBAL_SEED_STR, DEFAULT_SEED))
DEFAULT_BACKEND         : str               = os.environ.get(PY_BACKEND_STR, "numpy").lower()

if DEFAULT_BACKEND == "jax" and not JAX_AVAILABLE:
    DEFAULT_BACKEND = "numpy"

def is_jax_array(x) -> bool:
    """True if x is a JAX array (False whenever JAX is not installed)."""
    return JAX_AVAILABLE and isinstance(x, jax.Array)

# ---------------------------------------------------------------------
#! EOF
# ---------------------------------------------------------------------
