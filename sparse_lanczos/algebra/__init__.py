"""
Linear algebra layer: operator adapters, vector operations and eigensolvers.

Submodules:
    - operators     : HermitianOperator adapters (dense, sparse, CSR triplets, matvec)
    - backend_ops   : VectorOps (dot, axpy, norm2) over NumPy or JAX
    - eigen         : Lanczos engine, tqli, buffers, results
    - utils         : backend detection and environment defaults

This module uses lazy imports to minimize startup overhead.

# -----------------------------------------------------------------------------------------------
File            : sparse_lanczos/algebra/__init__.py
# -----------------------------------------------------------------------------------------------
"""

from typing import TYPE_CHECKING
import importlib

# -----------------------------------------------------------------------------------------------
# Lazy Import Configuration
# -----------------------------------------------------------------------------------------------

_LAZY_IMPORTS = {
    # Operators
    'HermitianOperator'     : ('.operators', 'HermitianOperator'),
    'DenseOperator'         : ('.operators', 'DenseOperator'),
    'SparseOperator'        : ('.operators', 'SparseOperator'),
    'CSROperator'           : ('.operators', 'CSROperator'),
    'LinearOperatorAdapter' : ('.operators', 'LinearOperatorAdapter'),
    'MatvecOperator'        : ('.operators', 'MatvecOperator'),
    'as_operator'           : ('.operators', 'as_operator'),
    # Vector operations
    'VectorOps'             : ('.backend_ops', 'VectorOps'),
    'get_vector_ops'        : ('.backend_ops', 'get_vector_ops'),
    # Utility imports from common
    'get_logger'            : ('..common.flog', 'get_global_logger'),
    # Submodules (lazy)
    'eigen'                 : ('.eigen', None),
    'operators'             : ('.operators', None),
    'backend_ops'           : ('.backend_ops', None),
    'utils'                 : ('.utils', None),
}

_LAZY_CACHE = {}

if TYPE_CHECKING:
    from .operators import (HermitianOperator, DenseOperator, SparseOperator, CSROperator,
                            LinearOperatorAdapter, MatvecOperator, as_operator)
    from .backend_ops import VectorOps, get_vector_ops

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

def __dir__():
    return sorted(list(globals().keys()) + list(_LAZY_IMPORTS.keys()))

__all__ = list(_LAZY_IMPORTS.keys())

# ------------------------------------------------------------------------------------------------
#! EOF
# ------------------------------------------------------------------------------------------------
