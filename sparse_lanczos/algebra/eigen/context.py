'''
Scoped solver context.

A `SolverContext` bundles what every engine needs besides the operator: the
vector operations backend and the logger. Entering it also switches NumPy
floating-point overflow / invalid-operation handling to 'raise', so a matvec
producing garbage fails the run instead of silently propagating NaNs.

Every engine initialized with a context is registered there and released
when the `with` block exits, on normal return and on exceptions alike.

Example:
    >>> with SolverContext(backend='numpy') as ctx:
    ...     engine = LanczosEngine.initialize(H, v0, capacity=32, k=4, tol=1e-10, context=ctx)
    ...     result = engine.run()

File:       sparse_lanczos/algebra/eigen/context.py
'''

from typing import Optional, List, Union, TYPE_CHECKING
import numpy as np

from ..backend_ops import VectorOps, get_vector_ops
from ...common.flog import Logger, get_global_logger

if TYPE_CHECKING:
    from .lanczos import LanczosEngine

class SolverContext:
    """
    Backend, logger and floating-point policy for a group of solves.

    Args:
        backend:
            'numpy', 'jax', 'default' or a VectorOps instance.
        logger:
            Logger to report through (default: the global logger).
        fp_errors:
            NumPy error policy for overflow / invalid operations inside the
            context ('raise', 'warn', 'ignore', ...).
    """

    def __init__(self,
                backend     : Union[str, VectorOps, None]   = 'default',
                logger      : Optional[Logger]              = None,
                fp_errors   : str                           = 'raise'):
        self.ops                                = get_vector_ops(backend)
        self.logger                             = logger if logger is not None else get_global_logger()
        self.fp_errors                          = fp_errors
        self._errstate                          = None
        self._engines : List['LanczosEngine']   = []

    @property
    def active(self) -> bool:
        return self._errstate is not None

    @property
    def engines(self) -> List['LanczosEngine']:
        return list(self._engines)

    def register(self, engine: 'LanczosEngine') -> None:
        """Release `engine` together with this context."""
        self._engines.append(engine)

    # ---------------------------------------------------------

    def __enter__(self) -> 'SolverContext':
        if self._errstate is not None:
            raise RuntimeError("SolverContext is not reentrant")
        self._errstate = np.errstate(over=self.fp_errors, invalid=self.fp_errors)
        self._errstate.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb):
        try:
            self.release()
        finally:
            errstate, self._errstate = self._errstate, None
            if errstate is not None:
                errstate.__exit__(exc_type, exc, tb)
        return False

    def release(self) -> None:
        """Release every registered engine."""
        engines, self._engines = self._engines, []
        for engine in engines:
            engine.release()

    def __repr__(self):
        return f"SolverContext(ops={self.ops!r}, active={self.active}, engines={len(self._engines)})"

# ------------------------------------------------------------------------------------------------
#! EOF
# ------------------------------------------------------------------------------------------------
