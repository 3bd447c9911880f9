"""
Eigenvalue Solvers Module

Iterative eigenvalue solvers for large sparse Hermitian operators.

Available Solvers:
    - Lanczos: k smallest eigenvalues (and Ritz vectors) of Hermitian operators
    - Tridiagonal (tqli): full spectrum of a real symmetric tridiagonal matrix

Building blocks:
    - LanczosEngine: step-wise Lanczos iteration with termination reasons
    - GrowableBuffer / grow: append-only storage used by the engine
    - SolverContext: scoped backend / logger / floating-point policy

Standard Result:
    - EigenResult: eigenvalues, eigenvectors, iterations, converged, termination

This module uses lazy imports to minimize startup overhead.

-----------------------------------------------------------
File            : sparse_lanczos/algebra/eigen/__init__.py
-----------------------------------------------------------
"""

from typing import TYPE_CHECKING
import importlib

# -----------------------------------------------------------------------------------------------
# Lazy Import Configuration
# -----------------------------------------------------------------------------------------------

_LAZY_IMPORTS = {
    # Lanczos
    'LanczosEngine'                 : ('.lanczos', 'LanczosEngine'),
    'LanczosEigensolver'            : ('.lanczos', 'LanczosEigensolver'),
    'IterationState'                : ('.lanczos', 'IterationState'),
    'get_lanczos_parameters'        : ('.lanczos', 'get_lanczos_parameters'),
    'get_lanczos_memory_estimate_gb': ('.lanczos', 'get_lanczos_memory_estimate_gb'),
    # Tridiagonal
    'tqli'                          : ('.tqli', 'tqli'),
    'pythag'                        : ('.tqli', 'pythag'),
    'eigh_tridiagonal'              : ('.tqli', 'eigh_tridiagonal'),
    'TridiagonalEigensolver'        : ('.tqli', 'TridiagonalEigensolver'),
    'TqliResult'                    : ('.tqli', 'TqliResult'),
    # Buffers and context
    'GrowableBuffer'                : ('.buffers', 'GrowableBuffer'),
    'grow'                          : ('.buffers', 'grow'),
    'SolverContext'                 : ('.context', 'SolverContext'),
    # Result and errors
    'EigenResult'                   : ('.result', 'EigenResult'),
    'TerminationReason'             : ('.result', 'TerminationReason'),
    'LanczosError'                  : ('.errors', 'LanczosError'),
    'LanczosErrorMsg'               : ('.errors', 'LanczosErrorMsg'),
    'DimensionMismatchError'        : ('.errors', 'DimensionMismatchError'),
    'ResourceExhaustedError'        : ('.errors', 'ResourceExhaustedError'),
    'OperatorError'                 : ('.errors', 'OperatorError'),
    'NotHermitianError'             : ('.errors', 'NotHermitianError'),
    'EngineStateError'              : ('.errors', 'EngineStateError'),
}

_LAZY_CACHE = {}

# For type checking only
if TYPE_CHECKING:
    from .lanczos   import LanczosEngine, LanczosEigensolver, IterationState, get_lanczos_parameters, get_lanczos_memory_estimate_gb
    from .tqli      import tqli, pythag, eigh_tridiagonal, TridiagonalEigensolver, TqliResult
    from .buffers   import GrowableBuffer, grow
    from .context   import SolverContext
    from .result    import EigenResult, TerminationReason
    from .errors    import (LanczosError, LanczosErrorMsg, DimensionMismatchError, ResourceExhaustedError,
                            OperatorError, NotHermitianError, EngineStateError)

# -----------------------------------------------------------------------------------------------

def __getattr__(name: str):
    """
    Module-level __getattr__ for lazy imports.
    """
    if name in _LAZY_CACHE:
        return _LAZY_CACHE[name]

    if name not in _LAZY_IMPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module_path, attr_name = _LAZY_IMPORTS[name]
    module = importlib.import_module(module_path, package=__name__)
    result = module if attr_name is None else getattr(module, attr_name)

    _LAZY_CACHE[name] = result
    return result

__all__ = list(_LAZY_IMPORTS.keys())

# The 'tqli' function shares its name with the '.tqli' submodule; importing the
# submodule (e.g. from .lanczos) binds the package attribute to the module and
# bypasses __getattr__. Bind the exported function explicitly.
from .tqli import tqli

# ------------------------------------------------------------------------------------------------
#! EOF
# ------------------------------------------------------------------------------------------------
