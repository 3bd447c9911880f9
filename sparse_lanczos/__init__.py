# sparse_lanczos/__init__.py

"""
sparse_lanczos - lowest eigenvalues of large sparse Hermitian operators.

The package computes the k smallest eigenvalues (optionally Ritz vectors) of
operators too large for dense diagonalization, such as many-body Hamiltonians,
with the Lanczos iteration and an implicit-shift QL (tqli) solver for the
tridiagonal projection.

Modules:
--------
- algebra   : operator adapters, vector operations and the eigensolvers
- common    : logging

Examples:
---------
>>> import scipy.sparse as sp
>>> from sparse_lanczos import LanczosEigensolver
>>> H       = sp.diags([[2.0] * 100, [-1.0] * 99, [-1.0] * 99], [0, -1, 1])
>>> result  = LanczosEigensolver(k=4).solve(A=H)
>>> result.eigenvalues, result.termination

File    : sparse_lanczos/__init__.py
Version : 0.1.0
License : MIT
"""

import importlib

# Package metadata
__version__         = "0.1.0"
__license__         = "MIT"

MODULE_DESCRIPTION  = "Lanczos eigensolver with tqli for sparse Hermitian operators."

# Subpackages (not imported by default)
_SUBPACKAGES        = ["algebra", "common"]

# Convenience exports resolved lazily
_EXPORTS            = {
    "LanczosEigensolver"    : ".algebra.eigen.lanczos",
    "LanczosEngine"         : ".algebra.eigen.lanczos",
    "TridiagonalEigensolver": ".algebra.eigen.tqli",
    "SolverContext"         : ".algebra.eigen.context",
    "EigenResult"           : ".algebra.eigen.result",
    "TerminationReason"     : ".algebra.eigen.result",
    "as_operator"           : ".algebra.operators",
    "get_global_logger"     : ".common.flog",
}

__all__             = _SUBPACKAGES + list(_EXPORTS.keys())

# Lazy import subpackages on attribute access (PEP 562)
def __getattr__(name):  # pragma: no cover - simple indirection
    if name in _EXPORTS:
        return getattr(importlib.import_module(_EXPORTS[name], __name__), name)
    if name in _SUBPACKAGES:
        return importlib.import_module(f".{name}", __name__)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")

def __dir__():  # pragma: no cover
    return sorted(list(globals().keys()) + __all__)

# ---------------------------------------------------------------------
#! EOF
# ---------------------------------------------------------------------
