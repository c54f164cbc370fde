"""
Packed symmetric matrix for silinapse.

Stores an n x n symmetric matrix in n*(n+1)/2 slots. The coordinates
(i, j) and (j, i) address the same slot, so symmetry holds by construction:
writing through one ordering is visible through the other.

Storage layout (lower triangle, row-major on the larger index):

    offset(i, j) = j*(j+1)/2 + i    for i <= j

    j=0: (0,0)
    j=1: (0,1) (1,1)
    j=2: (0,2) (1,2) (2,2)
    ...
"""

from typing import Tuple

import numpy as np


def packed_size(n: int) -> int:
    """Number of distinct coefficients of an n x n symmetric matrix."""
    return n * (n + 1) // 2


def _order_pair(i: int, j: int) -> Tuple[int, int]:
    return (i, j) if i <= j else (j, i)


class SymmetricMatrix:
    """
    A square symmetric matrix addressed by unordered coordinate pairs.

    Attributes:
        n: Side length of the matrix
        values: Packed float64 storage of length n*(n+1)/2
    """

    def __init__(self, n: int, values: np.ndarray):
        values = np.asarray(values, dtype=np.float64)
        if values.shape != (packed_size(n),):
            raise ValueError(f"Packed storage of length {values.shape} does not match side {n}")
        self.n = n
        self.values = values

    @classmethod
    def zeros(cls, n: int) -> 'SymmetricMatrix':
        """Create an n x n symmetric matrix filled with zeros."""
        if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
            raise ValueError(f"Matrix side must be an integer, got {n!r}")
        n = int(n)
        if n < 0:
            raise ValueError(f"Matrix side must be non-negative, got {n}")
        coeffs = packed_size(n)
        if coeffs > np.iinfo(np.intp).max:
            raise OverflowError(f"A {n} x {n} symmetric matrix needs {coeffs} slots, "
                                f"more than the platform can index")
        return cls(n, np.zeros(coeffs, dtype=np.float64))

    @classmethod
    def from_dense(cls, dense) -> 'SymmetricMatrix':
        """
        Build from a dense square array.

        The array must be symmetric (up to float tolerance); the lower
        triangle is what gets stored.
        """
        dense = np.asarray(dense, dtype=np.float64)
        if dense.ndim != 2 or dense.shape[0] != dense.shape[1]:
            raise ValueError(f"Expected a square matrix, got shape {dense.shape}")
        if not np.allclose(dense, dense.T):
            raise ValueError("Matrix is not symmetric")
        n = dense.shape[0]
        matrix = cls.zeros(n)
        # np.tril_indices walks rows in order, which is exactly the packed layout
        # once rows/columns are read as (j, i).
        rows, cols = np.tril_indices(n)
        matrix.values[:] = dense[rows, cols]
        return matrix

    def size(self) -> int:
        """
        The size of a side of the matrix.

        If it returns n, the matrix is an n x n matrix.
        """
        return self.n

    @property
    def storage(self) -> np.ndarray:
        """Read-only view of the packed coefficients."""
        view = self.values.view()
        view.flags.writeable = False
        return view

    def _offset(self, i: int, j: int) -> int:
        if not (0 <= i < self.n and 0 <= j < self.n):
            raise IndexError(f"Coordinates ({i}, {j}) out of range for a {self.n} x {self.n} matrix")
        i, j = _order_pair(i, j)
        return j * (j + 1) // 2 + i

    def get(self, i: int, j: int) -> float:
        """Coefficient shared by (i, j) and (j, i)."""
        return float(self.values[self._offset(i, j)])

    def set(self, i: int, j: int, value: float) -> None:
        """Overwrite the slot shared by (i, j) and (j, i)."""
        self.values[self._offset(i, j)] = value

    def add(self, i: int, j: int, delta: float) -> float:
        """Increment the slot shared by (i, j) and (j, i) in place; returns the new value."""
        k = self._offset(i, j)
        self.values[k] += delta
        return float(self.values[k])

    def row(self, i: int) -> np.ndarray:
        """Dense copy of row i, i.e. the coefficients (i, 0), ..., (i, n-1)."""
        if not 0 <= i < self.n:
            raise IndexError(f"Row {i} out of range for a {self.n} x {self.n} matrix")
        j = np.arange(self.n)
        lo = np.minimum(i, j)
        hi = np.maximum(i, j)
        return self.values[hi * (hi + 1) // 2 + lo]

    def to_dense(self) -> np.ndarray:
        """Expand into a full n x n array."""
        dense = np.zeros((self.n, self.n), dtype=np.float64)
        rows, cols = np.tril_indices(self.n)
        dense[rows, cols] = self.values
        dense[cols, rows] = self.values
        return dense

    def copy(self) -> 'SymmetricMatrix':
        return SymmetricMatrix(self.n, self.values.copy())

    def __getitem__(self, index: Tuple[int, int]) -> float:
        i, j = index
        return self.get(i, j)

    def __setitem__(self, index: Tuple[int, int], value: float) -> None:
        i, j = index
        self.set(i, j, value)

    def __len__(self) -> int:
        return self.n

    def __eq__(self, other) -> bool:
        if not isinstance(other, SymmetricMatrix):
            return NotImplemented
        return self.n == other.n and np.array_equal(self.values, other.values)

    def __repr__(self) -> str:
        return f"SymmetricMatrix(n={self.n}, nonzero={int(np.count_nonzero(self.values))})"
