'''
Hermitian operator adapters.

The Lanczos engine only ever calls `apply(x) -> H x` on a fixed-dimension
operator. This module wraps the representations a caller typically holds
(dense arrays, any scipy.sparse matrix, compressed-row triplets, SciPy
`LinearOperator`s and bare matvec callables) into that single capability, so
one engine serves all of them.

Operators are read-only once built and may be shared by several engines.

File:       sparse_lanczos/algebra/operators.py
'''

from abc import ABC, abstractmethod
from typing import Optional, Callable, Tuple, Any

import numpy as np
import scipy.sparse as sp
from scipy.sparse.linalg import LinearOperator

from .utils import Array

# ----------------------------------------------------------------------------------------
#! Base class
# ----------------------------------------------------------------------------------------

class HermitianOperator(ABC):
    """
    Read-only operator y = H x of fixed dimension n.

    Subclasses implement `_apply`; `apply` returns a fresh vector and never
    writes into its argument.
    """

    def __init__(self, n: int, dtype=np.float64):
        if n < 1:
            raise ValueError(f"Operator dimension must be >= 1, got {n}")
        self._n     = int(n)
        self._dtype = np.dtype(dtype)

    @property
    def n(self) -> int:
        return self._n

    @property
    def shape(self) -> Tuple[int, int]:
        return (self._n, self._n)

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @abstractmethod
    def _apply(self, x: Array) -> Array:
        ...

    def apply(self, x: Array) -> Array:
        """Return H x."""
        return self._apply(x)

    def __call__(self, x: Array) -> Array:
        return self.apply(x)

    def __matmul__(self, x: Array) -> Array:
        return self.apply(x)

    def __repr__(self):
        return f"{self.__class__.__name__}(n={self._n}, dtype={self._dtype})"

# ----------------------------------------------------------------------------------------
#! Concrete adapters
# ----------------------------------------------------------------------------------------

class DenseOperator(HermitianOperator):
    """Operator backed by a dense square ndarray."""

    def __init__(self, A: np.ndarray):
        A = np.asarray(A)
        if A.ndim != 2 or A.shape[0] != A.shape[1]:
            raise ValueError(f"A must be square, got shape {A.shape}")
        super().__init__(A.shape[0], A.dtype)
        self.A = A

    def _apply(self, x):
        return self.A @ np.asarray(x)

class SparseOperator(HermitianOperator):
    """
    Operator backed by a scipy.sparse matrix (converted to CSR once).
    """

    def __init__(self, A):
        if not sp.issparse(A):
            raise TypeError(f"Expected a scipy.sparse matrix, got {type(A)}")
        if A.shape[0] != A.shape[1]:
            raise ValueError(f"A must be square, got shape {A.shape}")
        super().__init__(A.shape[0], A.dtype)
        self.A = sp.csr_matrix(A)

    @property
    def nnz(self) -> int:
        return self.A.nnz

    def _apply(self, x):
        return self.A @ np.asarray(x)

class CSROperator(SparseOperator):
    """
    Operator assembled from compressed-row triplets.

    Example:
        >>> H = CSROperator.from_arrays(indptr, indices, data, n)
        >>> y = H.apply(x)
    """

    @classmethod
    def from_arrays(cls,
                    indptr  : Array,
                    indices : Array,
                    data    : Array,
                    n       : Optional[int] = None) -> 'CSROperator':
        """
        Build from row pointers, column indices and values.

        Args:
            indptr:
                Row pointer array of length n + 1.
            indices:
                Column index for each stored value.
            data:
                Stored values.
            n:
                Dimension; inferred from `indptr` when omitted.
        """
        indptr  = np.asarray(indptr)
        indices = np.asarray(indices)
        data    = np.asarray(data)
        rows    = len(indptr) - 1
        n       = rows if n is None else n
        if rows != n:
            raise ValueError(f"indptr describes {rows} rows, expected n={n}")
        if len(indices) != len(data) or indptr[-1] != len(data):
            raise ValueError(f"Inconsistent CSR arrays: indptr[-1]={indptr[-1]}, "
                            f"len(indices)={len(indices)}, len(data)={len(data)}")
        return cls(sp.csr_matrix((data, indices, indptr), shape=(n, n)))

class LinearOperatorAdapter(HermitianOperator):
    """Operator backed by a scipy.sparse.linalg.LinearOperator."""

    def __init__(self, op: LinearOperator):
        if op.shape[0] != op.shape[1]:
            raise ValueError(f"Operator must be square, got shape {op.shape}")
        super().__init__(op.shape[0], op.dtype if op.dtype is not None else np.float64)
        self.op = op

    def _apply(self, x):
        return self.op.matvec(np.asarray(x))

class MatvecOperator(HermitianOperator):
    """
    Matrix-free operator defined by a callable x -> H x.

    The callable must not modify its argument.
    """

    def __init__(self, matvec: Callable[[Array], Array], n: int, dtype=np.float64):
        if not callable(matvec):
            raise TypeError("matvec must be callable")
        super().__init__(n, dtype)
        self.matvec = matvec

    def _apply(self, x):
        return self.matvec(x)

# ----------------------------------------------------------------------------------------
#! Factory
# ----------------------------------------------------------------------------------------

def as_operator(A       : Any                                   = None,
                matvec  : Optional[Callable[[Array], Array]]    = None,
                n       : Optional[int]                         = None,
                dtype   : Optional[np.dtype]                    = None) -> HermitianOperator:
    """
    Wrap whatever the caller holds into a HermitianOperator.

    Parameters:
    -----------
        A:
            HermitianOperator (returned as is), scipy.sparse matrix,
            LinearOperator or dense 2D array.
        matvec:
            Matrix-vector product function, used when A is None.
        n:
            Dimension, required together with `matvec`.
        dtype:
            Scalar type of a matrix-free operator (default float64).
    """
    if A is not None:
        if isinstance(A, HermitianOperator):
            return A
        if sp.issparse(A):
            return SparseOperator(A)
        if isinstance(A, LinearOperator):
            return LinearOperatorAdapter(A)
        return DenseOperator(A)

    if matvec is not None:
        if n is None:
            raise ValueError("n (dimension) must be provided when using matvec")
        return MatvecOperator(matvec, n, dtype if dtype is not None else np.float64)

    raise ValueError("Either A or matvec must be provided")

# ----------------------------------------------------------------------------------------
#! EOF
# ----------------------------------------------------------------------------------------
