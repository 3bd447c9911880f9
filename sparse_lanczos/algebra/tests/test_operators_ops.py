"""
Tests for the operator adapters and backend vector operations.
"""

import numpy as np
import pytest
import scipy.sparse as sp
from scipy.sparse.linalg import aslinearoperator

from sparse_lanczos.algebra.operators import (
    HermitianOperator, DenseOperator, SparseOperator, CSROperator,
    LinearOperatorAdapter, MatvecOperator, as_operator,
)
from sparse_lanczos.algebra.backend_ops import VectorOps, get_vector_ops, numpy_ops
from sparse_lanczos.algebra.utils import JAX_AVAILABLE

# ----------------------------------
#! Operators
# ----------------------------------

class TestAsOperator:

    @pytest.fixture
    def matrix(self):
        return np.array([[2.0, -1.0, 0.0], [-1.0, 2.0, -1.0], [0.0, -1.0, 2.0]])

    def test_dense(self, matrix):
        op = as_operator(matrix)
        assert isinstance(op, DenseOperator)
        assert op.shape == (3, 3)
        assert np.allclose(op.apply(np.ones(3)), matrix @ np.ones(3))

    def test_sparse(self, matrix):
        op = as_operator(sp.coo_matrix(matrix))
        assert isinstance(op, SparseOperator)
        assert op.nnz == 7
        assert np.allclose(op @ np.ones(3), [1.0, 0.0, 1.0])

    def test_linear_operator(self, matrix):
        op = as_operator(aslinearoperator(matrix))
        assert isinstance(op, LinearOperatorAdapter)
        assert np.allclose(op(np.ones(3)), [1.0, 0.0, 1.0])

    def test_matvec(self):
        op = as_operator(matvec=lambda x: 3.0 * x, n=4, dtype=np.complex128)
        assert isinstance(op, MatvecOperator)
        assert op.dtype == np.complex128
        assert np.allclose(op.apply(np.ones(4)), 3.0)

    def test_passthrough(self, matrix):
        op = DenseOperator(matrix)
        assert as_operator(op) is op

    def test_missing_inputs(self):
        with pytest.raises(ValueError):
            as_operator()
        with pytest.raises(ValueError):
            as_operator(matvec=lambda x: x)

    def test_not_square(self):
        with pytest.raises(ValueError):
            as_operator(np.ones((2, 3)))
        with pytest.raises(ValueError):
            as_operator(sp.csr_matrix(np.ones((2, 3))))

    def test_apply_does_not_modify_input(self, matrix):
        x = np.array([1.0, 2.0, 3.0])
        as_operator(sp.csr_matrix(matrix)).apply(x)
        assert np.array_equal(x, [1.0, 2.0, 3.0])

    def test_abstract(self):
        with pytest.raises(TypeError):
            HermitianOperator(3)

class TestCSROperator:

    def test_from_arrays(self):
        # [[1, 2], [2, 3]]
        op = CSROperator.from_arrays([0, 2, 4], [0, 1, 0, 1], [1.0, 2.0, 2.0, 3.0])
        assert op.n == 2
        assert np.allclose(op.apply(np.array([1.0, 1.0])), [3.0, 5.0])

    def test_wrong_row_count(self):
        with pytest.raises(ValueError):
            CSROperator.from_arrays([0, 1, 2], [0, 1], [1.0, 1.0], n=3)

    def test_inconsistent_lengths(self):
        with pytest.raises(ValueError):
            CSROperator.from_arrays([0, 1, 2], [0, 1], [1.0, 1.0, 1.0])

# ----------------------------------
#! Vector operations
# ----------------------------------

class TestVectorOps:

    def test_dot_conjugate_linear(self):
        x = np.array([1j, 1.0])
        y = np.array([1.0, 2.0])
        assert numpy_ops.dot(x, y) == pytest.approx(2.0 - 1j)

    def test_axpy_in_place(self):
        x = np.array([1.0, 2.0])
        y = np.array([1.0, 1.0])
        out = numpy_ops.axpy(2.0, x, y)
        assert out is y
        assert np.allclose(y, [3.0, 5.0])

    def test_norm2(self):
        nrm = numpy_ops.norm2(np.array([3.0, 4j]))
        assert isinstance(nrm, float)
        assert nrm == pytest.approx(5.0)

    def test_normalize(self):
        v = numpy_ops.normalize(np.array([0.0, 2.0]))
        assert np.allclose(v, [0.0, 1.0])
        with pytest.raises(ValueError):
            numpy_ops.normalize(np.zeros(3))

    def test_all_finite(self):
        assert numpy_ops.all_finite(np.ones(3))
        assert not numpy_ops.all_finite(np.array([1.0, np.inf]))

    def test_get_vector_ops(self):
        assert get_vector_ops('numpy') is numpy_ops
        ops = VectorOps('numpy')
        assert get_vector_ops(ops) is ops
        with pytest.raises(ValueError):
            get_vector_ops('torch')

    @pytest.mark.skipif(not JAX_AVAILABLE, reason="JAX not available")
    def test_jax_axpy_functional(self):
        import jax.numpy as jnp
        ops = VectorOps('jax')
        y   = jnp.ones(2)
        out = ops.axpy(2.0, jnp.array([1.0, 2.0]), y)
        assert np.allclose(np.asarray(out), [3.0, 5.0])
        assert np.allclose(np.asarray(y), [1.0, 1.0])

# ----------------------------------
#! EOF
# ----------------------------------
