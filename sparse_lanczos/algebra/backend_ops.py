'''
Vector operations consumed by the Lanczos engine.

The engine only needs four primitives over length-n (possibly complex) vectors:
the conjugate-linear inner product, the scaled add (axpy), the Euclidean norm and
scaling. They are gathered here behind one small class so the engine stays
independent of the array library doing the work (NumPy by default, JAX when
installed and requested).

All operations are synchronous: a call returns only after its result is complete.

File:       sparse_lanczos/algebra/backend_ops.py
Desc:       Backend-agnostic vector operations for the Lanczos engine.
'''

from typing import Union, Optional
import numpy as np

from .utils import JAX_AVAILABLE, DEFAULT_BACKEND, jnp, Array, is_jax_array

# ============================================================================
#! Vector Operations Class
# ============================================================================

class VectorOps:
    """
    Backend-agnostic vector operations.

    For the NumPy backend `axpy` updates `y` in place and returns it. JAX arrays
    are immutable, so there the updated vector is only available as the return
    value; callers always use the returned array.

    Example:
        >>> ops = VectorOps('numpy')
        >>> y   = ops.axpy(2.0, x, y)
        >>> nrm = ops.norm2(y)
    """

    def __init__(self, backend: str = 'numpy'):
        """
        Args:
            backend: 'numpy', 'jax' or 'default' (environment variable PY_BACKEND)
        """
        backend_lower = backend.lower()
        if backend_lower in ['default', 'auto']:
            backend_lower = DEFAULT_BACKEND

        if backend_lower in ['numpy', 'np']:
            self.backend        = np
            self.is_jax         = False
            self.backend_name   = 'numpy'
        elif backend_lower in ['jax', 'jnp']:
            if not JAX_AVAILABLE:
                raise ImportError("JAX backend requested but JAX is not installed")
            self.backend        = jnp
            self.is_jax         = True
            self.backend_name   = 'jax'
        else:
            raise ValueError(f"Unknown backend: {backend}")

    def __repr__(self):
        return f"VectorOps(backend='{self.backend_name}')"

    # ------------------------------------------------------------------------
    #! Array handling
    # ------------------------------------------------------------------------

    def asarray(self, x, dtype=None) -> Array:
        """Convert to a backend array."""
        return self.backend.asarray(x, dtype=dtype)

    def to_numpy(self, x: Array) -> np.ndarray:
        """Host copy as a NumPy array (no copy for NumPy input)."""
        return np.asarray(x)

    def zeros(self, n: int, dtype=None) -> Array:
        return self.backend.zeros(n, dtype=dtype)

    # ------------------------------------------------------------------------
    #! Level-1 operations
    # ------------------------------------------------------------------------

    def dot(self, x: Array, y: Array) -> Union[float, complex]:
        """
        Inner product <x, y>, conjugate-linear in x and linear in y.
        """
        return self.backend.vdot(x, y)

    def axpy(self, a: Union[float, complex], x: Array, y: Array) -> Array:
        """
        y <- a x + y.

        Returns:
            The updated y (the same object for NumPy input).
        """
        if self.is_jax or is_jax_array(y):
            return y + a * x
        y += a * x
        return y

    def norm2(self, x: Array) -> float:
        """Euclidean norm, always a non-negative real float."""
        return float(self.backend.linalg.norm(x))

    def scale(self, a: Union[float, complex], x: Array) -> Array:
        """Return a x as a new vector."""
        return a * x

    def normalize(self, x: Array, norm: Optional[float] = None) -> Array:
        """
        Return x / ||x||.

        Raises:
            ValueError: if x has zero norm.
        """
        norm = self.norm2(x) if norm is None else norm
        if norm == 0.0:
            raise ValueError("Cannot normalize a vector of zero norm")
        return x / norm

    def all_finite(self, x: Array) -> bool:
        return bool(self.backend.all(self.backend.isfinite(x)))

# ============================================================================
#! Helper Functions
# ============================================================================

numpy_ops = VectorOps('numpy')

def get_vector_ops(backend: Union[str, VectorOps, None] = None) -> VectorOps:
    """
    Get a vector operations instance.

    Args:
        backend: 'numpy', 'jax', 'default', an existing VectorOps, or None
            (same as 'default', i.e. the PY_BACKEND environment variable).
    """
    if isinstance(backend, VectorOps):
        return backend
    if backend is None:
        backend = 'default'
    if backend in ('numpy', 'np') or (backend == 'default' and DEFAULT_BACKEND == 'numpy'):
        return numpy_ops
    return VectorOps(backend)

# ============================================================================
#! EOF
# ============================================================================
