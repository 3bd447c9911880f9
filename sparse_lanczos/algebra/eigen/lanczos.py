r"""
Lanczos Eigenvalue Solver

Implements the Lanczos algorithm for the k smallest eigenvalues (and optionally
eigenvectors) of large sparse Hermitian operators, e.g. many-body Hamiltonians
far too large for dense diagonalization.

Key Features:
    - One engine for every operator representation (dense, scipy.sparse, CSR
      triplets, LinearOperator, matvec callable)
    - Growable Krylov storage: start small, double on demand
    - Tridiagonal projection solved each round with tqli
    - Stops on eigenvalue stagnation, on invariant-subspace breakdown or at a
      hard iteration cap (flagged as not converged)
    - Exposes the Krylov basis and the tridiagonal coefficients for
      eigenvector reconstruction

Mathematical Background:
    1. Starting from a normalized
        $$
        v_0, \quad v_{-1} = 0, \quad \beta_0 = 0,
        $$
        each step computes
        $$
        w = H v_i, \quad \alpha_i = \langle v_i, w \rangle,
        \quad w \leftarrow w - \alpha_i v_i - \beta_i v_{i-1},
        \quad \beta_{i+1} = \| w \|, \quad v_{i+1} = w / \beta_{i+1}.
        $$
    2. The coefficients build the tridiagonal projection
        $$
        H V_m = V_m T_m + \beta_m v_m e_{m}^T,
        $$
        whose eigenvalues (Ritz values) approximate the extremal spectrum of H.
    3. Residual of a Ritz pair
        $$
        \| H V_m y - \theta V_m y \| = |\beta_m \, y_{m-1}|.
        $$

Only the three-term recurrence orthogonalizes the basis; no reorthogonalization
is performed, so the Krylov vectors are orthonormal only approximately and
spurious copies of converged Ritz values may appear in long runs.

File        : sparse_lanczos/algebra/eigen/lanczos.py
"""

from typing import Optional, Callable, Literal, Dict, List, Sequence, Union, NamedTuple, Any
from numpy.typing import NDArray
import numpy as np
import scipy.sparse as sp

from .result import EigenResult, EigenSolver, TerminationReason
from .errors import (
    LanczosError, LanczosErrorMsg, DimensionMismatchError, ResourceExhaustedError,
    OperatorError, NotHermitianError, EngineStateError
)
from .buffers import GrowableBuffer
from .tqli import eigh_tridiagonal, TQLI_MAX_ITER
from .context import SolverContext
from ..operators import HermitianOperator, as_operator
from ..backend_ops import VectorOps, get_vector_ops
from ..utils import PY_GLOBAL_SEED
from ...common.flog import Logger, get_global_logger

# ----------------------------------------------------------------------------------------
#! Scalable Lanczos Parameters
# ----------------------------------------------------------------------------------------

MAX_ITER_CAP = 10000

def get_lanczos_parameters(hilbert_dim          : int,
                        requested_k             : Optional[int]         = None,
                        requested_max_iter      : Optional[int]         = None,
                        requested_capacity      : Optional[int]         = None,
                        logger                  : Optional[Logger]      = None
                        ) -> Dict[str, Any]:
    """
    Default Lanczos sizes for a problem of dimension `hilbert_dim`.

    Rules of thumb:
    - k defaults to min(6, dim): ground state plus a few excitations.
    - The hard iteration cap is the Krylov dimension bound, capped at 10000.
    - The initial capacity is max(2k + 1, 20); buffers double when it runs out,
      so it only trades memory for reallocations.
    - Tolerance: tighter for small systems, relaxed for huge ones.

    Returns:
        Dict with 'k', 'max_iter', 'capacity', 'tol'
    """
    if hilbert_dim < 1:
        raise ValueError(f"hilbert_dim must be >= 1, got {hilbert_dim}")

    k           = requested_k if requested_k is not None else min(6, hilbert_dim)
    max_iter    = min(hilbert_dim, MAX_ITER_CAP) if requested_max_iter is None else requested_max_iter
    max_iter    = max(max_iter, k)
    capacity    = min(max(2 * k + 1, 20), max_iter) if requested_capacity is None else requested_capacity

    if hilbert_dim < 1e4:
        tol = 1e-12
    elif hilbert_dim < 1e6:
        tol = 1e-10
    elif hilbert_dim < 1e9:
        tol = 1e-8
    else:
        tol = 1e-6

    params = {
        'k'         : k,
        'max_iter'  : max_iter,
        'capacity'  : capacity,
        'tol'       : tol,
    }
    if logger:
        logger.info(f"Lanczos parameters for dim={hilbert_dim:.2e}:", lvl=1, color='green')
        logger.info(f"k={k}, max_iter={max_iter}, capacity={capacity}, tol={tol:.0e}", lvl=2, color='green')
    return params

def get_lanczos_memory_estimate_gb(hilbert_dim: int, capacity: int, dtype=np.complex128) -> float:
    """
    Estimate memory held by one engine.

    The engine stores:
    - the Krylov basis: `capacity` vectors
    - ~3 working vectors (v_prev, v_cur, w)
    - alpha and beta: 2 * capacity floats (negligible)
    """
    bytes_per_element   = np.dtype(dtype).itemsize
    vec_size            = hilbert_dim * bytes_per_element
    total_bytes         = (capacity + 3) * vec_size + 2 * capacity * np.dtype(np.float64).itemsize
    return total_bytes / (1024**3)

# ----------------------------------------------------------------------------------------
#! Lanczos engine
# ----------------------------------------------------------------------------------------

class IterationState(NamedTuple):
    """ Snapshot of the outer loop. """
    iteration       : int
    capacity        : int
    previous_delta  : Optional[float]
    delta           : Optional[float]

class LanczosEngine:
    r"""
    Lanczos iteration for the k smallest eigenvalues of a Hermitian operator.

    The engine owns the Krylov basis and the tridiagonal coefficients; nothing
    else may write them during a run. The operator is only read.

    Use `initialize` to build one, then either `run()` to iterate to
    termination or `step()` to advance one round at a time. Round boundaries
    are the only points where a run can be stopped.

    Example:
        >>> engine = LanczosEngine.initialize(H, v0, capacity=32, k=4, tol=1e-10)
        >>> result = engine.run()
        >>> result.eigenvalues, result.termination
    """

    def __init__(self,
                operator            : HermitianOperator,
                v0                  : NDArray,
                capacity            : int,
                k                   : int,
                tol                 : float,
                *,
                max_iter            : Optional[int]                 = None,
                criterion           : Literal['kth', 'all']         = 'kth',
                breakdown_tol       : float                         = 1e-12,
                hermitian_tol       : float                         = 1e-8,
                memory_limit_gb     : Optional[float]               = None,
                tridiagonal_solver  : Literal['tqli', 'scipy']      = 'tqli',
                tqli_max_iter       : int                           = TQLI_MAX_ITER,
                context             : Optional[SolverContext]       = None,
                backend             : Union[str, VectorOps, None]   = None,
                logger              : Optional[Logger]              = None,
                verbose             : bool                          = False):
        '''
        Validate the problem and seed the recurrence from `v0`.

        Parameters
        ----------
        operator: HermitianOperator
            The operator H (see `as_operator` for wrapping matrices and callables).
        v0: array
            Start vector, length n, nonzero. Normalized internally.
        capacity: int
            Initial number of Krylov vectors the buffers hold.
        k: int
            Number of smallest eigenvalues requested, 1 <= k <= n.
        tol: float
            Convergence threshold on the change of the tracked eigenvalue(s)
            between consecutive rounds.
        max_iter: int, optional
            Hard iteration cap (default: min(n, 10000)).
        criterion: {'kth', 'all'}
            'kth' tracks only the k-th smallest value, 'all' requires all k
            values to move less than `tol`.
        breakdown_tol: float
            beta_{i+1} <= breakdown_tol * ||T|| counts as an invariant subspace,
            with ||T|| estimated by the running max of |alpha_j| + beta_j + beta_{j+1}.
            The test is relative, so rescaling the operator does not change it.
        hermitian_tol: float
            Largest relative imaginary part tolerated in alpha_i.
        memory_limit_gb: float, optional
            Refuse to grow the buffers beyond this footprint.
        tridiagonal_solver: {'tqli', 'scipy'}
            Solver for the projection.
        context: SolverContext, optional
            Supplies backend and logger; releases the engine on exit.
        '''
        self.context        = context
        self.ops            = context.ops if context is not None else get_vector_ops(backend)
        self.logger         = logger if logger is not None else (context.logger if context is not None else get_global_logger())
        self.verbose        = verbose

        if not isinstance(operator, HermitianOperator):
            operator = as_operator(operator)
        v0                  = np.asarray(v0)
        n                   = operator.n

        # reject before any matvec
        if v0.ndim != 1 or v0.shape[0] != n:
            raise DimensionMismatchError(f"Operator has dimension {n}, start vector has shape {v0.shape}")
        if k < 1 or k > n:
            raise ValueError(f"k must satisfy 1 <= k <= n={n}, got {k}")
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        if tol <= 0:
            raise ValueError(f"tol must be positive, got {tol}")
        if criterion not in ('kth', 'all'):
            raise ValueError(f"Invalid criterion='{criterion}'. Must be 'kth' or 'all'")

        max_iter            = min(n, MAX_ITER_CAP) if max_iter is None else max_iter
        if max_iter < k:
            raise ValueError(f"max_iter={max_iter} cannot be smaller than k={k}")

        self.operator           = operator
        self.n                  = n
        self.k                  = k
        self.tol                = tol
        self.max_iter           = max_iter
        self.criterion          = criterion
        self.breakdown_tol      = breakdown_tol
        self.hermitian_tol      = hermitian_tol
        self.memory_limit_gb    = memory_limit_gb
        self.tridiagonal_solver = tridiagonal_solver
        self.tqli_max_iter      = tqli_max_iter
        self.dtype              = np.result_type(operator.dtype, v0.dtype, np.float64)

        self._check_memory(capacity)
        self._alpha             = GrowableBuffer(capacity, dtype=np.float64)
        self._beta              = GrowableBuffer(capacity, dtype=np.float64)
        self._basis             = GrowableBuffer(capacity, item_shape=n, dtype=self.dtype)

        # seed: v_{-1} = 0, beta_0 = 0, v_0 = x0 / |x0|
        v0                      = self.ops.asarray(v0, dtype=self.dtype)
        norm0                   = self.ops.norm2(v0)
        if norm0 == 0.0 or not np.isfinite(norm0):
            raise ValueError(f"Start vector must be nonzero and finite, got norm {norm0}")
        self._v_cur             = self.ops.normalize(v0, norm0)
        self._v_prev            = self.ops.zeros(n, dtype=self.dtype)
        self._beta_cur          = 0.0
        self._beta_next         = None
        self._tnorm             = 0.0

        self._iteration         = 0
        self._ritz_values       = np.zeros(0)
        self._spectrum          = None
        self._history : List[float] = []
        self._termination       = None
        self._tqli_converged    = True
        self._failed            = False
        self._released          = False

        if context is not None:
            context.register(self)

        self.logger.info(f"Lanczos engine: n={n}, k={k}, capacity={capacity}, max_iter={max_iter}, "
                        f"tol={tol:.1e}, criterion='{criterion}', dtype={np.dtype(self.dtype).name}",
                        lvl=1, verbose=self.verbose)

    @classmethod
    def initialize(cls,
                operator    : Any,
                v0          : NDArray,
                capacity    : int,
                k           : int,
                tol         : float,
                **kwargs) -> 'LanczosEngine':
        """
        Build an engine; `operator` may be anything `as_operator` accepts.

        Raises:
            DimensionMismatchError: if len(v0) differs from the operator dimension.
            ResourceExhaustedError: if the initial buffers cannot be allocated.
        """
        return cls(as_operator(operator), v0, capacity, k, tol, **kwargs)

    # ------------------------------------------------------------------------------------
    #! State
    # ------------------------------------------------------------------------------------

    @property
    def iteration(self) -> int:
        return self._iteration

    @property
    def capacity(self) -> int:
        self._check_alive()
        return self._alpha.capacity

    @property
    def alpha(self) -> NDArray:
        """Diagonal of the projection (read-only view)."""
        self._check_alive()
        return self._alpha.view()

    @property
    def beta(self) -> NDArray:
        """Off-diagonal of the projection, beta[0] == 0 (read-only view)."""
        self._check_alive()
        return self._beta.view()

    @property
    def residual_beta(self) -> Optional[float]:
        """beta_m, the norm of the last residual vector."""
        return self._beta_next

    @property
    def krylov_basis(self) -> NDArray:
        """Basis vectors v_0 .. v_{m-1} as columns, shape (n, m) (read-only view)."""
        self._check_alive()
        return self._basis.view().T

    @property
    def ritz_values(self) -> NDArray:
        """All eigenvalues of the current projection, ascending."""
        return self._ritz_values.copy()

    @property
    def spectrum(self) -> Optional[NDArray]:
        """The k smallest Ritz values, or None before k iterations."""
        return None if self._spectrum is None else self._spectrum.copy()

    @property
    def history(self) -> NDArray:
        return np.array(self._history, dtype=float)

    @property
    def termination(self) -> Optional[TerminationReason]:
        return self._termination

    @property
    def done(self) -> bool:
        return self._termination is not None

    @property
    def state(self) -> IterationState:
        return IterationState(
            iteration       = self._iteration,
            capacity        = self.capacity,
            previous_delta  = self._history[-2] if len(self._history) > 1 else None,
            delta           = self._history[-1] if self._history else None,
        )

    # ------------------------------------------------------------------------------------
    #! Iteration
    # ------------------------------------------------------------------------------------

    def step(self) -> Optional[float]:
        """
        Advance one Lanczos round.

        Extends the basis by one vector, appends (alpha_i, beta_i), solves the
        projection and applies the convergence test. Does nothing once the
        engine has terminated.

        Returns:
            The eigenvalue change of this round (None if not yet measurable).
        Raises:
            OperatorError: if the matvec or a vector operation fails.
            NotHermitianError: if alpha_i is not real within tolerance.
            ResourceExhaustedError: if buffer growth fails; buffers keep their
                old capacity.
            Each of these leaves the engine failed; later calls raise
            EngineStateError.
        """
        self._check_usable()
        if self._termination is not None:
            return None

        i = self._iteration
        if i >= self.max_iter:
            self._terminate(TerminationReason.MAX_ITERATIONS)
            return None
        if i >= self._alpha.capacity - 2:
            try:
                self._grow_buffers()
            except ResourceExhaustedError:
                self._failed = True
                raise

        w, alpha, beta_next = self._recurrence()

        self._basis.append(self.ops.to_numpy(self._v_cur))
        self._alpha.append(alpha)
        self._beta.append(self._beta_cur)
        self._iteration     = i + 1
        self._beta_next     = beta_next

        self._tnorm         = max(self._tnorm, abs(alpha) + self._beta_cur + beta_next)
        if beta_next <= self.breakdown_tol * self._tnorm:
            self._solve_projection()
            self._terminate(TerminationReason.INVARIANT_SUBSPACE)
            return None

        self._v_prev        = self._v_cur
        self._v_cur         = self.ops.scale(1.0 / beta_next, w)
        self._beta_cur      = beta_next

        delta               = self._solve_projection()
        self.logger.debug(f"iter={self._iteration}, alpha={alpha:.10g}, beta={beta_next:.6e}, "
                        f"delta={'n/a' if delta is None else f'{delta:.3e}'}", lvl=2)

        if delta is not None and delta < self.tol:
            self._terminate(TerminationReason.CONVERGED)
        elif self._iteration >= self.max_iter:
            self._terminate(TerminationReason.MAX_ITERATIONS)
        return delta

    def run(self, compute_eigenvectors: bool = False) -> EigenResult:
        """
        Iterate until convergence, breakdown or the iteration cap.

        Returns:
            EigenResult with the k smallest eigenvalues (ascending) and the
            termination reason; `converged` is False when the cap was hit.
        """
        self._check_usable()
        while self._termination is None:
            self.step()
        return self.result(compute_eigenvectors=compute_eigenvectors)

    # ------------------------------------------------------------------------------------

    def _recurrence(self):
        ''' One three-term step. Collaborator failures abort the run. '''
        ops = self.ops
        try:
            w = self.operator.apply(self._v_cur)
            w = ops.asarray(w)
            if w.shape != (self.n,):
                raise DimensionMismatchError(f"Operator returned shape {w.shape}, expected ({self.n},)")
            if not np.can_cast(w.dtype, self.dtype, casting='same_kind'):
                raise TypeError(f"Operator returned {w.dtype} for a {np.dtype(self.dtype).name} problem; "
                                f"declare the operator dtype or pass a complex start vector")
            w = ops.asarray(w, dtype=self.dtype)
            if not ops.is_jax and (np.may_share_memory(w, self._v_cur) or np.may_share_memory(w, self._v_prev)):
                w = w.copy()
            if not ops.all_finite(w):
                raise FloatingPointError("Operator produced NaN or Inf")

            a       = complex(ops.dot(self._v_cur, w))
            alpha   = a.real
            if abs(a.imag) > self.hermitian_tol * max(1.0, abs(alpha)):
                raise NotHermitianError(f"<v, Hv> = {a} has a significant imaginary part at iteration {self._iteration}")

            w           = ops.axpy(-alpha, self._v_cur, w)
            w           = ops.axpy(-self._beta_cur, self._v_prev, w)
            beta_next   = ops.norm2(w)
            if not np.isfinite(beta_next):
                raise FloatingPointError(f"Residual norm is {beta_next}")
        except LanczosError:
            self._failed = True
            raise
        except Exception as e:
            self._failed = True
            raise OperatorError(f"Lanczos step {self._iteration} failed: {e}") from e
        return w, alpha, beta_next

    def _solve_projection(self) -> Optional[float]:
        ''' Ritz values of the current projection and the change of the tracked ones. '''
        evals, _, conv      = eigh_tridiagonal(self._alpha.view(), self._beta.view(),
                                    eigvals_only    = True,
                                    method          = self.tridiagonal_solver,
                                    max_iter        = self.tqli_max_iter)
        if not conv and self._tqli_converged:
            self.logger.warning(f"Tridiagonal solver hit its sweep cap at iteration {self._iteration}", lvl=1)
        self._tqli_converged = conv
        self._ritz_values    = evals

        if self._iteration < self.k:
            return None

        current = evals[:self.k]
        delta   = None
        if self._spectrum is not None:
            diff    = np.abs(current - self._spectrum)
            delta   = float(diff[-1] if self.criterion == 'kth' else diff.max())
            self._history.append(delta)
        self._spectrum = current
        return delta

    def _grow_buffers(self):
        ''' Double capacity of every buffer (2c + 1), prefix untouched. '''
        old         = self._alpha.capacity
        new         = GrowableBuffer.next_capacity(old)
        self._check_memory(new)
        buffers     = (self._alpha, self._beta, self._basis)
        storage     = [buf.allocate(new) for buf in buffers]
        for buf, data in zip(buffers, storage):
            buf.adopt(data)
        self.logger.debug(f"Lanczos buffers grown: {old} -> {new} at iteration {self._iteration}", lvl=2)

    def _check_memory(self, capacity: int):
        if self.memory_limit_gb is None:
            return
        need = get_lanczos_memory_estimate_gb(self.n, capacity, self.dtype)
        if need > self.memory_limit_gb:
            raise ResourceExhaustedError(f"Capacity {capacity} needs {need:.3f} GB, "
                                        f"limit is {self.memory_limit_gb:.3f} GB")

    def _terminate(self, reason: TerminationReason):
        self._termination = reason
        m = self._iteration
        if reason is TerminationReason.MAX_ITERATIONS:
            last = self._history[-1] if self._history else float('nan')
            self.logger.warning(f"Lanczos not converged after {m} iterations (last delta={last:.3e}, tol={self.tol:.1e})", lvl=1)
        elif reason is TerminationReason.INVARIANT_SUBSPACE and m < self.k:
            self.logger.warning(f"Invariant subspace of dimension {m} < k={self.k}: only {m} eigenvalues available", lvl=1)
        else:
            self.logger.info(f"Lanczos finished: {reason.name} after {m} iterations", lvl=1, verbose=self.verbose)

    # ------------------------------------------------------------------------------------
    #! Results
    # ------------------------------------------------------------------------------------

    def result(self, compute_eigenvectors: bool = False) -> EigenResult:
        """
        Package the current state.

        Ritz vectors are reconstructed as V y when requested; the Krylov basis
        itself is always returned in `subspacevectors`. Residual norms use
        |beta_m y_{m-1}| and need no extra matvec.
        """
        self._check_alive()
        m = self._iteration
        if m == 0:
            raise EngineStateError(LanczosErrorMsg.ENGINE_FAILED, "No Lanczos step has been performed yet")

        alpha                   = self._alpha.view()
        beta                    = self._beta.view()
        evals, evecs_T, conv    = eigh_tridiagonal(alpha, beta,
                                    method      = self.tridiagonal_solver,
                                    max_iter    = self.tqli_max_iter)
        kk                      = min(self.k, m)
        selected_T              = evecs_T[:, :kk]
        basis                   = self.krylov_basis
        residual_norms          = np.abs((self._beta_next or 0.0) * selected_T[-1, :])
        eigenvectors            = basis @ selected_T if compute_eigenvectors else None

        return EigenResult(
            eigenvalues     = evals[:kk],
            eigenvectors    = eigenvectors,
            subspacevectors = basis,
            iterations      = m,
            converged       = self._termination in (TerminationReason.CONVERGED, TerminationReason.INVARIANT_SUBSPACE),
            residual_norms  = residual_norms,
            termination     = self._termination,
            lanczos_alpha   = alpha.copy(),
            lanczos_beta    = beta.copy(),
            history         = self.history,
            tqli_converged  = conv,
        )

    # ------------------------------------------------------------------------------------
    #! Lifetime
    # ------------------------------------------------------------------------------------

    def release(self) -> None:
        """Drop the buffers and working vectors. Idempotent."""
        if self._released:
            return
        for buf in (self._alpha, self._beta, self._basis):
            buf.release()
        self._v_cur     = None
        self._v_prev    = None
        self._released  = True

    def __enter__(self) -> 'LanczosEngine':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False

    def _check_alive(self):
        if self._released:
            raise EngineStateError(LanczosErrorMsg.ENGINE_RELEASED, "Engine has been released")

    def _check_usable(self):
        self._check_alive()
        if self._failed:
            raise EngineStateError(LanczosErrorMsg.ENGINE_FAILED, "Engine failed earlier; its state is undefined")

    def __repr__(self):
        return (f"LanczosEngine(n={self.n}, k={self.k}, iteration={self._iteration}, "
                f"termination={None if self._termination is None else self._termination.name})")

# ----------------------------------------------------------------------------------------
#! LanczosEigensolver
# ----------------------------------------------------------------------------------------

class LanczosEigensolver(EigenSolver):
    r"""
    Lanczos algorithm for the smallest eigenvalues of Hermitian operators.

    Convenience front-end over `LanczosEngine`: wraps matrices or matvec
    functions into an operator, picks sizes with `get_lanczos_parameters`,
    draws a seeded start vector if none is given and runs the engine inside
    a `SolverContext`.

    Parameters:
    -----------
        k:
            Number of eigenvalues to compute (default: min(6, n))
        max_iter:
            Hard iteration cap (default: min(n, 10000))
        tol:
            Convergence tolerance on the eigenvalue change per round (default: 1e-10)
        capacity:
            Initial Krylov buffer size (default: max(2k+1, 20))
        criterion:
            'kth' or 'all', see `LanczosEngine`
        breakdown_tol, hermitian_tol:
            Breakdown and Hermiticity thresholds, see `LanczosEngine`
        compute_eigenvectors:
            Reconstruct Ritz vectors (default: True)
        backend:
            'numpy', 'jax' or 'default'
        seed:
            Seed of the random start vector used when v0 is not given
            (default: PY_GLOBAL_SEED)

    Example:
        >>> solver = LanczosEigensolver(k=5, tol=1e-10)
        >>> result = solver.solve(A=H)
        >>> print(f"Smallest eigenvalues: {result.eigenvalues}")
    """

    def __init__(self,
                k                       : Optional[int]                     = None,
                max_iter                : Optional[int]                     = None,
                tol                     : float                             = 1e-10,
                capacity                : Optional[int]                     = None,
                criterion               : Literal['kth', 'all']             = 'kth',
                breakdown_tol           : float                             = 1e-12,
                hermitian_tol           : float                             = 1e-8,
                memory_limit_gb         : Optional[float]                   = None,
                tridiagonal_solver      : Literal['tqli', 'scipy']          = 'tqli',
                compute_eigenvectors    : bool                              = True,
                check_hermitian         : bool                              = True,
                backend                 : str                               = 'default',
                seed                    : Optional[int]                     = None,
                logger                  : Optional[Logger]                  = None,
                verbose                 : bool                              = False):
        if k is not None and k < 1:
            raise ValueError(f"k must be >= 1, got {k}")

        self.k                      = k
        self.max_iter               = max_iter
        self.tol                    = tol
        self.capacity               = capacity
        self.criterion              = criterion
        self.breakdown_tol          = breakdown_tol
        self.hermitian_tol          = hermitian_tol
        self.memory_limit_gb        = memory_limit_gb
        self.tridiagonal_solver     = tridiagonal_solver
        self.compute_eigenvectors   = compute_eigenvectors
        self.check_hermitian        = check_hermitian
        self.backend                = backend
        self.seed                   = PY_GLOBAL_SEED if seed is None else seed
        self.logger                 = logger
        self.verbose                = verbose

    @staticmethod
    def is_iterative_solver() -> bool:
        return True

    # ------------------------------------------------------------------------------------

    def start_vector(self, n: int, dtype=np.float64, seed: Optional[int] = None) -> NDArray:
        """
        Seeded random start vector; complex when `dtype` is complex.
        """
        rng = np.random.default_rng(self.seed if seed is None else seed)
        v0  = rng.standard_normal(n)
        if np.issubdtype(np.dtype(dtype), np.complexfloating):
            v0 = v0 + 1j * rng.standard_normal(n)
        return v0 / np.linalg.norm(v0)

    def _prepare(self,
                A       : Any,
                matvec  : Optional[Callable[[NDArray], NDArray]],
                n       : Optional[int],
                dtype   : Optional[np.dtype]) -> HermitianOperator:
        operator = as_operator(A, matvec=matvec, n=n, dtype=dtype)
        if self.check_hermitian and A is not None and (sp.issparse(A) or isinstance(A, np.ndarray)):
            if not EigenSolver._is_hermitian(A):
                raise NotHermitianError("A must be symmetric or Hermitian for Lanczos")
        return operator

    def _run(self,
            context     : SolverContext,
            operator    : HermitianOperator,
            v0          : Optional[NDArray],
            k           : Optional[int],
            max_iter    : Optional[int],
            tol         : Optional[float],
            capacity    : Optional[int]) -> EigenResult:
        params  = get_lanczos_parameters(operator.n,
                            requested_k         = self.k if k is None else k,
                            requested_max_iter  = self.max_iter if max_iter is None else max_iter,
                            requested_capacity  = self.capacity if capacity is None else capacity)
        if v0 is None:
            v0  = self.start_vector(operator.n, dtype=operator.dtype)

        engine  = LanczosEngine.initialize(operator, v0,
                            capacity            = params['capacity'],
                            k                   = params['k'],
                            tol                 = self.tol if tol is None else tol,
                            max_iter            = params['max_iter'],
                            criterion           = self.criterion,
                            breakdown_tol       = self.breakdown_tol,
                            hermitian_tol       = self.hermitian_tol,
                            memory_limit_gb     = self.memory_limit_gb,
                            tridiagonal_solver  = self.tridiagonal_solver,
                            context             = context,
                            verbose             = self.verbose)
        return engine.run(compute_eigenvectors=self.compute_eigenvectors)

    # ------------------------------------------------------------------------------------
    #! solve
    # ------------------------------------------------------------------------------------

    def solve(self,
            A           : Optional[Any]                             = None,
            matvec      : Optional[Callable[[NDArray], NDArray]]    = None,
            v0          : Optional[NDArray]                         = None,
            n           : Optional[int]                             = None,
            *,
            k           : Optional[int]                             = None,
            max_iter    : Optional[int]                             = None,
            tol         : Optional[float]                           = None,
            capacity    : Optional[int]                             = None,
            dtype       : Optional[np.dtype]                        = None,
            context     : Optional[SolverContext]                   = None) -> EigenResult:
        """
        Solve for the k smallest eigenvalues (and Ritz vectors).

        Parameters:
        -----------
            A:
                Matrix, sparse matrix, LinearOperator or HermitianOperator
            matvec:
                Matrix-vector product function (if A not provided)
            v0:
                Start vector (seeded random if None)
            n:
                Dimension of the problem (required if matvec provided without A)
            dtype:
                Scalar type of a matvec-defined operator
            context:
                Run inside an existing SolverContext instead of a private one
        Returns:
            EigenResult with eigenvalues, eigenvectors, termination and the
            Lanczos internals (krylov basis, alpha, beta).
        """
        operator = self._prepare(A, matvec, n, dtype)
        if context is not None:
            return self._run(context, operator, v0, k, max_iter, tol, capacity)
        with SolverContext(backend=self.backend, logger=self.logger) as ctx:
            return self._run(ctx, operator, v0, k, max_iter, tol, capacity)

    def solve_batch(self,
                    operators   : Sequence[Any],
                    v0          : Union[NDArray, Sequence[Optional[NDArray]], None] = None,
                    *,
                    k           : Optional[int]                                     = None,
                    context     : Optional[SolverContext]                           = None) -> List[EigenResult]:
        """
        Solve several independent problems in one call.

        Each operator gets its own engine; all share one context, which
        releases every engine at the end.

        Parameters:
        -----------
            operators:
                Anything `as_operator` accepts, one per problem.
            v0:
                None (seeded random per problem), one vector used for every
                problem (array or plain list of numbers), or one entry per
                problem (sequence of vectors or a 2-D array, one row each).
        Returns:
            One EigenResult per operator, in order.
        """
        operators = [self._prepare(A, None, None, None) for A in operators]
        if v0 is not None and not (isinstance(v0, (list, tuple))
                                and all(s is None or np.ndim(s) == 1 for s in v0)):
            v0 = np.asarray(v0)
        if v0 is None or (isinstance(v0, np.ndarray) and v0.ndim == 1):
            starts = [v0] * len(operators)
        else:
            starts = list(v0)
            if len(starts) != len(operators):
                raise ValueError(f"Got {len(starts)} start vectors for {len(operators)} operators")

        def _all(ctx: SolverContext) -> List[EigenResult]:
            results = []
            for idx, (op, start) in enumerate(zip(operators, starts)):
                ctx.logger.info(f"Batch problem {idx + 1}/{len(operators)} (n={op.n})", lvl=1, verbose=self.verbose)
                results.append(self._run(ctx, op, start, k, None, None, None))
            return results

        if context is not None:
            return _all(context)
        with SolverContext(backend=self.backend, logger=self.logger) as ctx:
            return _all(ctx)

# ------------------------------------------------------------------------------------------------
#! EOF
# ------------------------------------------------------------------------------------------------
