r"""
Symmetric Tridiagonal Eigensolver (tqli)

Implicit-shift QL iteration with deflation for real symmetric tridiagonal
matrices

$$
T = \begin{pmatrix}
    d_0 & e_1 &        &         \\
    e_1 & d_1 & \ddots &         \\
        & \ddots & \ddots & e_{n-1} \\
        &        & e_{n-1} & d_{n-1}
\end{pmatrix}.
$$

Algorithm:
    1. For the leading index l, look for the first m >= l whose coupling e[m]
       is negligible next to |d[m]| + |d[m+1]| (the sum does not change when
       e[m] is added). The block l..m then decouples from the rest.
    2. If m == l, d[l] is an eigenvalue; move on to l + 1.
    3. Otherwise take the Wilkinson-type shift
        g = (d[l+1] - d[l]) / (2 e[l]),  r = pythag(g, 1),
        g = d[m] - d[l] + e[l] / (g + sign(r, g))
       and chase the bulge with plane rotations from m - 1 up to l,
       updating d, e and (optionally) the columns of z.
    4. Each l gets at most `max_iter` sweeps. Hitting the cap marks l as not
       converged; the remaining indices are still processed.

Eigenvalues come out in deflation order, not sorted. If z starts as the
identity its columns end up as the matching eigenvectors; if z holds a basis
Q, the result is Q times the eigenvectors of T.

The Lanczos engine calls this once per round on the growing projection, so the
scalar sweep loop is compiled with numba. No fastmath: the deflation test
relies on exact IEEE addition.

References:
    - Press et al., "Numerical Recipes", section 11.3
    - Golub & Van Loan, "Matrix Computations" (4th ed.), section 8.3
"""

import math
from typing import Optional, NamedTuple, Tuple, Literal

import numba
import numpy as np
import scipy.linalg as scipy_linalg
from numpy.typing import NDArray

from .result import EigenResult, EigenSolver, TerminationReason

# ----------------------------------------------------------------------------------------
#! Scalar helpers
# ----------------------------------------------------------------------------------------

TQLI_MAX_ITER = 30

@numba.njit(cache=True, error_model='numpy')
def pythag(a: float, b: float) -> float:
    """
    sqrt(a^2 + b^2) without destructive overflow or underflow.

    The larger magnitude is factored out before squaring.
    """
    absa = abs(a)
    absb = abs(b)
    if absa > absb:
        return absa * math.sqrt(1.0 + (absb / absa) ** 2)
    if absb == 0.0:
        return 0.0
    return absb * math.sqrt(1.0 + (absa / absb) ** 2)

@numba.njit(cache=True, error_model='numpy')
def _sign(a: float, b: float) -> float:
    """|a| with the sign of b."""
    return abs(a) if b >= 0.0 else -abs(a)

# ----------------------------------------------------------------------------------------
#! tqli
# ----------------------------------------------------------------------------------------

class TqliResult(NamedTuple):
    """
    Raw output of `tqli`.

    Attributes:
        eigenvalues:
            Eigenvalues in deflation order (unsorted).
        eigenvectors:
            The rotated accumulator z (None if not given).
        converged:
            False if any index exceeded the sweep cap.
        failed_indices:
            Indices l that exceeded the sweep cap.
        sweeps:
            Total number of QL sweeps performed.
    """
    eigenvalues     : NDArray
    eigenvectors    : Optional[NDArray]
    converged       : bool
    failed_indices  : Tuple[int, ...]
    sweeps          : int

def _offdiagonal(e: NDArray, n: int) -> NDArray:
    '''
    Off-diagonal as a length n array with e[i] coupling i and i+1 and e[n-1] = 0.

    Accepts the plain off-diagonal (length n - 1) or the Lanczos layout
    (length n, leading entry unused).
    '''
    e = np.asarray(e, dtype=np.float64).ravel()
    if len(e) == n:
        e = e[1:]
    elif len(e) != max(n - 1, 0):
        raise ValueError(f"Off-diagonal must have length {n - 1} or {n}, got {len(e)}")
    out                 = np.zeros(n, dtype=np.float64)
    out[:max(n - 1, 0)] = e
    return out

@numba.njit(cache=True, error_model='numpy')
def _tqli_kernel(d, e, z, max_iter):
    '''
    In-place QL sweeps on d, e and the rows of z (z may have zero rows).

    Returns the indices that hit the sweep cap and the total sweep count.
    '''
    n       = d.shape[0]
    rows    = z.shape[0]
    failed  = np.empty(n, dtype=np.int64)
    nfailed = 0
    sweeps  = 0

    for l in range(n):
        it = 0
        while True:
            # look for a negligible coupling to split the matrix at
            m = l
            while m < n - 1:
                dd = abs(d[m]) + abs(d[m + 1])
                if abs(e[m]) + dd == dd:
                    break
                m += 1
            if m == l:
                break
            if it == max_iter:
                failed[nfailed]  = l
                nfailed         += 1
                break
            it     += 1
            sweeps += 1

            # shift
            g = (d[l + 1] - d[l]) / (2.0 * e[l])
            r = pythag(g, 1.0)
            g = d[m] - d[l] + e[l] / (g + _sign(r, g))

            s           = 1.0
            c           = 1.0
            p           = 0.0
            underflow   = False
            i           = m - 1
            while i >= l:
                f           = s * e[i]
                b           = c * e[i]
                r           = pythag(f, g)
                e[i + 1]    = r
                if r == 0.0:
                    # recover from underflow and restart the sweep
                    d[i + 1]   -= p
                    e[m]        = 0.0
                    underflow   = True
                    break
                s           = f / r
                c           = g / r
                g           = d[i + 1] - p
                r           = (d[i] - g) * s + 2.0 * c * b
                p           = s * r
                d[i + 1]    = g + p
                g           = c * r - b
                for row in range(rows):
                    zk              = z[row, i + 1]
                    z[row, i + 1]   = s * z[row, i] + c * zk
                    z[row, i]       = c * z[row, i] - s * zk
                i -= 1

            if underflow:
                continue
            d[l]   -= p
            e[l]    = g
            e[m]    = 0.0

    return failed[:nfailed], sweeps

def tqli(d          : NDArray,
        e           : NDArray,
        z           : Optional[NDArray] = None,
        max_iter    : int               = TQLI_MAX_ITER) -> TqliResult:
    """
    Eigenvalues (and optionally eigenvectors) of a real symmetric tridiagonal matrix.

    The inputs are not modified; `z`, when given, is copied before rotation.

    Parameters:
    -----------
        d:
            Diagonal, length n.
        e:
            Off-diagonal, length n - 1 (e[i] couples i and i+1), or length n
            with e[0] unused and e[i] coupling i-1 and i.
        z:
            Optional (p, n) accumulator; pass the identity to obtain the
            eigenvectors of T as columns.
        max_iter:
            Sweep cap per index.
    Returns:
        TqliResult with the unsorted eigenvalues and the rotated accumulator.
    """
    d = np.array(d, dtype=np.float64).ravel()
    n = len(d)
    e = _offdiagonal(e, n)

    if z is not None:
        zz = np.array(z, dtype=np.float64, copy=True, order='C')
        if zz.ndim != 2 or zz.shape[1] != n:
            raise ValueError(f"z must have {n} columns, got shape {zz.shape}")
    else:
        zz = np.zeros((0, n), dtype=np.float64)

    failed, sweeps = _tqli_kernel(d, e, zz, int(max_iter))

    return TqliResult(
        eigenvalues     = d,
        eigenvectors    = None if z is None else zz,
        converged       = len(failed) == 0,
        failed_indices  = tuple(int(i) for i in failed),
        sweeps          = int(sweeps),
    )

# ----------------------------------------------------------------------------------------
#! Sorted wrapper
# ----------------------------------------------------------------------------------------

def eigh_tridiagonal(alpha          : NDArray,
                    beta            : NDArray,
                    eigvals_only    : bool                      = False,
                    method          : Literal['tqli', 'scipy']  = 'tqli',
                    max_iter        : int                       = TQLI_MAX_ITER
                    ) -> Tuple[NDArray, Optional[NDArray], bool]:
    """
    Ascending eigenvalues (and eigenvectors) of a symmetric tridiagonal matrix.

    Parameters:
    -----------
        alpha:
            Diagonal, length m.
        beta:
            Off-diagonal, length m - 1 or the Lanczos layout of length m.
        eigvals_only:
            Skip the eigenvector accumulation.
        method:
            'tqli' (default) or 'scipy' (LAPACK through scipy.linalg).
    Returns:
        (eigenvalues, eigenvectors or None, converged)
    """
    alpha   = np.asarray(alpha, dtype=float)
    m       = len(alpha)
    if m == 0:
        return np.zeros(0), (None if eigvals_only else np.zeros((0, 0))), True

    if method == 'scipy':
        off = _offdiagonal(beta, m)[:-1]
        if eigvals_only:
            return scipy_linalg.eigh_tridiagonal(alpha, off, eigvals_only=True), None, True
        evals, evecs = scipy_linalg.eigh_tridiagonal(alpha, off)
        return evals, evecs, True
    elif method != 'tqli':
        raise ValueError(f"Unknown method '{method}'. Must be 'tqli' or 'scipy'")

    res     = tqli(alpha, beta, z=None if eigvals_only else np.eye(m), max_iter=max_iter)
    order   = np.argsort(res.eigenvalues, kind='stable')
    evals   = res.eigenvalues[order]
    evecs   = None if eigvals_only else res.eigenvectors[:, order]
    return evals, evecs, res.converged

# ----------------------------------------------------------------------------------------
#! Solver class
# ----------------------------------------------------------------------------------------

class TridiagonalEigensolver(EigenSolver):
    """
    Full eigendecomposition of a real symmetric tridiagonal matrix via tqli.

    Example:
        >>> solver = TridiagonalEigensolver()
        >>> result = solver.solve([2., 2., 2.], [1., 1.])
        >>> result.eigenvalues
        array([0.58578644, 2.        , 3.41421356])
    """

    def __init__(self, max_iter: int = TQLI_MAX_ITER, compute_eigenvectors: bool = True):
        if max_iter < 1:
            raise ValueError(f"max_iter must be >= 1, got {max_iter}")
        self.max_iter               = max_iter
        self.compute_eigenvectors   = compute_eigenvectors

    def solve(self,
            d                       : NDArray,
            e                       : NDArray,
            *,
            compute_eigenvectors    : Optional[bool] = None) -> EigenResult:
        """
        Returns:
            EigenResult with ascending eigenvalues; `converged` is False if
            some index exceeded the sweep cap.
        """
        vectors             = self.compute_eigenvectors if compute_eigenvectors is None else compute_eigenvectors
        evals, evecs, conv  = eigh_tridiagonal(d, e, eigvals_only=not vectors, max_iter=self.max_iter)
        return EigenResult(
            eigenvalues     = evals,
            eigenvectors    = evecs,
            converged       = conv,
            termination     = TerminationReason.EXACT,
            tqli_converged  = conv,
        )

# ------------------------------------------------------------------------------------------------
#! EOF
# ------------------------------------------------------------------------------------------------
