"""
Tests for the growable Lanczos storage.
"""

import numpy as np
import pytest

from sparse_lanczos.algebra.eigen import GrowableBuffer, grow

# ----------------------------------

class TestGrow:

    def test_prefix_preserved(self):
        old = np.arange(4, dtype=float)
        new = grow(old, 4, 9)
        assert new.shape == (9,)
        assert np.array_equal(new[:4], old)
        assert np.all(new[4:] == 0.0)

    def test_matrix_rows(self):
        old = np.arange(12, dtype=complex).reshape(3, 4)
        new = grow(old, 3, 7)
        assert new.shape == (7, 4)
        assert new.dtype == old.dtype
        assert np.array_equal(new[:3], old)

    def test_never_shrinks(self):
        with pytest.raises(ValueError):
            grow(np.zeros(5), 5, 3)

# ----------------------------------

class TestGrowableBuffer:

    def test_append_and_view(self):
        buf = GrowableBuffer(4)
        for x in (1.0, 2.0, 3.0):
            buf.append(x)
        assert len(buf) == 3
        assert buf.capacity == 4
        assert np.array_equal(buf.view(), [1.0, 2.0, 3.0])
        assert buf[1] == 2.0

    def test_view_read_only(self):
        buf = GrowableBuffer(2)
        buf.append(1.0)
        with pytest.raises(ValueError):
            buf.view()[0] = 5.0

    def test_full_append(self):
        buf = GrowableBuffer(1)
        buf.append(1.0)
        with pytest.raises(IndexError):
            buf.append(2.0)

    def test_growth_policy(self):
        buf = GrowableBuffer(8, item_shape=3)
        buf.append([1.0, 2.0, 3.0])
        before = buf.view().tobytes()
        assert buf.grow() == 17
        assert buf.capacity == 17
        assert buf.item_shape == (3,)
        assert buf.view().tobytes() == before

    def test_allocate_leaves_buffer_untouched(self):
        buf = GrowableBuffer(4)
        buf.append(7.0)
        data = buf.allocate()
        assert data.shape == (9,)
        assert buf.capacity == 4
        assert data[0] == 7.0
        buf.adopt(data)
        assert buf.capacity == 9
        assert np.array_equal(buf.view(), [7.0])

    def test_adopt_wrong_shape(self):
        buf = GrowableBuffer(4, item_shape=3)
        with pytest.raises(ValueError):
            buf.adopt(np.zeros((9, 2)))

    def test_reserve(self):
        buf = GrowableBuffer(4)
        assert buf.reserve(2) == 4
        assert buf.reserve(10) == 10

    def test_release(self):
        buf = GrowableBuffer(4)
        buf.append(1.0)
        assert buf.nbytes > 0
        buf.release()
        assert buf.released
        assert buf.nbytes == 0
        with pytest.raises(RuntimeError):
            buf.view()

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            GrowableBuffer(0)

# ----------------------------------
#! EOF
# ----------------------------------
