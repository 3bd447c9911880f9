'''
Append-only growable storage for the Lanczos coefficients and Krylov basis.

All growth in the engine goes through `grow`: a new block is allocated, the
used prefix is copied over unchanged and the old block is dropped. Capacity
never shrinks and stored items are never reordered.

File:       sparse_lanczos/algebra/eigen/buffers.py
'''

from typing import Optional, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .errors import ResourceExhaustedError

# ----------------------------------------------------------------------------------------

def grow(buffer: NDArray, old_capacity: int, new_capacity: int) -> NDArray:
    """
    Reallocate `buffer` with room for `new_capacity` items along axis 0.

    Parameters:
    -----------
        buffer:
            Current storage, shape (old_capacity, ...).
        old_capacity:
            Number of leading items to carry over.
        new_capacity:
            New number of slots, >= old_capacity.
    Returns:
        The new storage; slots past the copied prefix are zero.
    Raises:
        ValueError: on a shrinking request.
        ResourceExhaustedError: if the allocation fails.
    """
    if new_capacity < old_capacity:
        raise ValueError(f"Buffers never shrink: {old_capacity} -> {new_capacity}")
    try:
        new = np.zeros((new_capacity,) + buffer.shape[1:], dtype=buffer.dtype)
    except MemoryError as e:
        nbytes = new_capacity * buffer.dtype.itemsize * int(np.prod(buffer.shape[1:], dtype=np.int64))
        raise ResourceExhaustedError(f"Cannot allocate {nbytes / 1024**3:.3f} GB "
                                    f"for capacity {new_capacity}") from e
    new[:old_capacity] = buffer[:old_capacity]
    return new

# ----------------------------------------------------------------------------------------

class GrowableBuffer:
    """
    Sequence of fixed-shape items with explicit capacity.

    Example:
        >>> alpha = GrowableBuffer(8)
        >>> alpha.append(1.5)
        >>> alpha.grow()           # 8 -> 17
        >>> alpha.view()
        array([1.5])
    """

    def __init__(self,
                capacity    : int,
                item_shape  : Union[int, Tuple[int, ...]]   = (),
                dtype                                       = np.float64):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        item_shape = (item_shape,) if isinstance(item_shape, (int, np.integer)) else tuple(item_shape)
        try:
            self._data = np.zeros((capacity,) + item_shape, dtype=dtype)
        except MemoryError as e:
            raise ResourceExhaustedError(f"Cannot allocate buffer of capacity {capacity} "
                                        f"with items of shape {item_shape}") from e
        self._size  = 0

    # ---------------------------------------------------------

    @property
    def capacity(self) -> int:
        self._check_alive()
        return self._data.shape[0]

    @property
    def item_shape(self) -> Tuple[int, ...]:
        self._check_alive()
        return self._data.shape[1:]

    @property
    def dtype(self) -> np.dtype:
        self._check_alive()
        return self._data.dtype

    @property
    def nbytes(self) -> int:
        return 0 if self._data is None else self._data.nbytes

    @property
    def released(self) -> bool:
        return self._data is None

    def __len__(self) -> int:
        return self._size

    def __getitem__(self, idx):
        return self.view()[idx]

    def _check_alive(self):
        if self._data is None:
            raise RuntimeError("Buffer has been released")

    # ---------------------------------------------------------

    @staticmethod
    def next_capacity(capacity: int) -> int:
        """Doubling policy: 2 * capacity + 1."""
        return 2 * capacity + 1

    def grow(self, new_capacity: Optional[int] = None) -> int:
        """
        Grow to `new_capacity` (default `next_capacity(capacity)`).

        Returns:
            The new capacity.
        """
        self.adopt(self.allocate(new_capacity))
        return self.capacity

    def allocate(self, new_capacity: Optional[int] = None) -> NDArray:
        """
        Larger storage holding a copy of the current prefix.

        The buffer itself is left untouched; hand the result to `adopt`.
        Several buffers grown this way change together or not at all.
        """
        self._check_alive()
        old_capacity    = self.capacity
        new_capacity    = self.next_capacity(old_capacity) if new_capacity is None else new_capacity
        return grow(self._data, old_capacity, new_capacity)

    def adopt(self, data: NDArray) -> None:
        """Replace the storage by `data` obtained from `allocate`."""
        self._check_alive()
        if data.shape[1:] != self._data.shape[1:] or data.shape[0] < self._size:
            raise ValueError(f"Cannot adopt storage of shape {data.shape} for buffer of shape {self._data.shape}")
        self._data = data

    def reserve(self, capacity: int) -> int:
        """Make sure at least `capacity` slots exist."""
        if capacity > self.capacity:
            return self.grow(capacity)
        return self.capacity

    def append(self, item) -> None:
        """
        Store one item at the end.

        Raises:
            IndexError: if the buffer is full; growth is the owner's decision.
        """
        if self._size >= self.capacity:
            raise IndexError(f"Buffer full (capacity {self.capacity})")
        self._data[self._size]  = item
        self._size             += 1

    def view(self) -> NDArray:
        """Read-only view of the stored items."""
        self._check_alive()
        v                   = self._data[:self._size]
        v.flags.writeable   = False
        return v

    def release(self) -> None:
        """Drop the storage. The buffer is unusable afterwards."""
        self._data = None
        self._size = 0

# ----------------------------------------------------------------------------------------
#! EOF
# ----------------------------------------------------------------------------------------
