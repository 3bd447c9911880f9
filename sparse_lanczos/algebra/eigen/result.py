"""
Eigenvalue Solver Result Types

Standardized result containers for eigenvalue computations.
"""

import numpy as np
import scipy.sparse as sp
from enum import Enum, auto, unique
from typing import Optional, NamedTuple
from numpy.typing import NDArray

class EigenSolver:
    """
    Marker class for eigenvalue solver types.
    """

    @staticmethod
    def _is_hermitian(A, tol=1e-12):
        """Check if A is symmetric/Hermitian, works for dense and sparse."""
        if sp.issparse(A):
            diff = A - A.T.conjugate()
            # For sparse: use the largest absolute entry in the difference
            return diff.nnz == 0 or np.all(np.abs(diff.data) < tol)
        else:
            return np.allclose(A, A.T.conj(), atol=tol)

    @staticmethod
    def is_iterative_solver() -> bool:
        """Indicate if the solver is iterative."""
        return False

    # ----------------------------------------------------------------------------

    def solve(self, *args, **kwargs) -> 'EigenResult':
        """
        Solve the eigenvalue problem.

        Returns:
            EigenResult: Standardized result container.
        """
        raise NotImplementedError("This method should be implemented by subclasses.")

# ---------------------------------------------------------------------------------

@unique
class TerminationReason(Enum):
    """
    Why an iterative eigensolver stopped.
    """
    CONVERGED           = auto()    # eigenvalue change between rounds below tolerance
    INVARIANT_SUBSPACE  = auto()    # residual vanished, spectrum exact on the subspace
    MAX_ITERATIONS      = auto()    # hard iteration cap reached, best effort result
    EXACT               = auto()    # direct method

    @property
    def success(self) -> bool:
        return self is not TerminationReason.MAX_ITERATIONS

# ---------------------------------------------------------------------------------

class EigenResult(NamedTuple):
    r"""
    Standardized result from eigenvalue solvers.

    Attributes:
        eigenvalues:
            Computed eigenvalues, ascending
        eigenvectors:
            Corresponding eigenvectors as columns (None if not requested)
        subspacevectors:
            Basis vectors of the subspace used (for iterative methods), as columns
        iterations:
            Number of iterations performed (None for direct methods)
        converged:
            Whether the solver converged successfully
        residual_norms:
            Residual norms ||A v - \lambda v|| for each eigenpair (optional)
        termination:
            Why the solver stopped
        lanczos_alpha, lanczos_beta:
            Tridiagonal projection, beta[0] == 0
        history:
            Eigenvalue change per round (convergence diagnostics)
        tqli_converged:
            False if the last tridiagonal solve hit its per-index iteration cap
    """
    eigenvalues     : NDArray
    eigenvectors    : Optional[NDArray]         = None
    subspacevectors : Optional[NDArray]         = None
    iterations      : Optional[int]             = None
    converged       : bool                      = True
    residual_norms  : Optional[NDArray]         = None
    termination     : TerminationReason         = TerminationReason.EXACT
    lanczos_alpha   : Optional[NDArray]         = None
    lanczos_beta    : Optional[NDArray]         = None
    history         : Optional[NDArray]         = None
    tqli_converged  : bool                      = True

    @property
    def krylov_basis(self) -> Optional[NDArray]:
        """Alias of `subspacevectors` for Lanczos results."""
        return self.subspacevectors

    def __repr__(self):
        n_eigs      = len(self.eigenvalues) if self.eigenvalues is not None else 0
        iter_str    = f"{self.iterations}" if self.iterations is not None else "N/A"
        return (f"EigenResult(n_eigenvalues={n_eigs}, "
                f"converged={self.converged}, iterations={iter_str}, "
                f"termination={self.termination.name})")

    def __str__(self):
        return f'converged={self.converged}, iterations={self.iterations}, termination={self.termination.name}'

# ------------------------------------------------------------------------------------------------
#! EOF
# ------------------------------------------------------------------------------------------------
