"""
Dense real matrices and vectors.

Just enough linear algebra for the Linear algebra's SVD: products,
transpose, rank, norms. A Matrix wraps a read-only 2-d numpy array;
vectors are 1-d numpy arrays.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np

Vector = np.ndarray

# Singular values below this fraction of the largest count as zero in rank()
RANK_TOLERANCE = 1e-9


def dot(u: Sequence[float], v: Sequence[float]) -> float:
    return float(np.dot(u, v))


def l2_norm(v: Sequence[float]) -> float:
    return float(np.linalg.norm(v))


def distance(u: Sequence[float], v: Sequence[float]) -> float:
    return float(np.linalg.norm(np.subtract(u, v)))


def normalize(v: Sequence[float]) -> Vector:
    """Scale to unit length. Raises ZeroDivisionError for the zero vector."""
    array = np.asarray(v, dtype=float)
    norm = np.linalg.norm(array)
    if norm == 0:
        raise ZeroDivisionError("Cannot normalize the zero vector")
    return array / norm


class Matrix:
    """
    An immutable rows x cols matrix of floats.

    The shape always has two dimensions, so matrices with zero columns (a
    rank-0 eigenbasis, for instance) still know their row count.
    """

    __slots__ = ("_data",)

    # Let numpy defer to Matrix's own operators
    __array_ufunc__ = None

    def __init__(self, data: Iterable[Iterable[float]] | np.ndarray, cols: int | None = None):
        if isinstance(data, np.ndarray):
            array = np.array(data, dtype=float)
            if array.ndim != 2:
                raise ValueError(f"Expected a 2-d array, got {array.ndim} dimensions")
        else:
            rows = [[float(v) for v in row] for row in data]
            width = len(rows[0]) if rows else (cols or 0)
            if any(len(row) != width for row in rows):
                raise ValueError("All rows must have the same length")
            array = np.array(rows, dtype=float).reshape(len(rows), width)
        if cols is not None and array.shape[1] != cols:
            raise ValueError(f"Expected {cols} columns, got {array.shape[1]}")
        array.flags.writeable = False
        self._data = array

    @classmethod
    def zeros(cls, rows: int, cols: int) -> Matrix:
        return cls(np.zeros((rows, cols)))

    @classmethod
    def identity(cls, n: int) -> Matrix:
        return cls(np.eye(n))

    @classmethod
    def diagonal(cls, values: Sequence[float]) -> Matrix:
        return cls(np.diag(np.asarray(values, dtype=float)))

    @classmethod
    def from_columns(cls, columns: Sequence[Sequence[float]], rows: int) -> Matrix:
        """Build a rows x len(columns) matrix from column vectors."""
        if len(columns) == 0:
            return cls.zeros(rows, 0)
        array = np.column_stack([np.asarray(col, dtype=float) for col in columns])
        if array.shape[0] != rows:
            raise ValueError(f"Expected columns of length {rows}, got {array.shape[0]}")
        return cls(array)

    @classmethod
    def outer(cls, u: Sequence[float], v: Sequence[float]) -> Matrix:
        """u * v^t."""
        return cls(np.outer(u, v))

    @property
    def array(self) -> np.ndarray:
        """The underlying read-only array."""
        return self._data

    @property
    def shape(self) -> tuple[int, int]:
        rows, cols = self._data.shape
        return rows, cols

    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def cols(self) -> int:
        return self._data.shape[1]

    def get(self, i: int, j: int) -> float:
        return float(self._data[i, j])

    def row(self, i: int) -> Vector:
        return self._data[i].copy()

    def column(self, j: int) -> Vector:
        return self._data[:, j].copy()

    def columns(self) -> list[Vector]:
        return [self.column(j) for j in range(self.cols)]

    def to_lists(self) -> list[list[float]]:
        return self._data.tolist()

    def transpose(self) -> Matrix:
        return Matrix(self._data.T)

    def add(self, other: Matrix) -> Matrix:
        self._check_same_shape(other)
        return Matrix(self._data + other._data)

    def subtract(self, other: Matrix) -> Matrix:
        self._check_same_shape(other)
        return Matrix(self._data - other._data)

    def scale(self, scalar: float) -> Matrix:
        return Matrix(scalar * self._data)

    def multiply(self, other: Matrix) -> Matrix:
        if self.cols != other.rows:
            raise ValueError(f"Cannot multiply {self.shape} by {other.shape}")
        return Matrix(self._data @ other._data)

    def apply(self, v: Sequence[float]) -> Vector:
        """Matrix-vector product."""
        if len(v) != self.cols:
            raise ValueError(f"Cannot apply {self.shape} to a vector of length {len(v)}")
        return self._data @ np.asarray(v, dtype=float)

    def abs_difference(self, other: Matrix) -> float:
        """Sum of elementwise absolute differences."""
        self._check_same_shape(other)
        return float(np.abs(self._data - other._data).sum())

    def rank(self, tolerance: float = RANK_TOLERANCE) -> int:
        """
        Numeric rank.

        A singular value counts when it exceeds tolerance times the largest
        singular value.
        """
        if self._data.size == 0:
            return 0
        largest = np.linalg.norm(self._data, 2)
        if largest == 0:
            return 0
        return int(np.linalg.matrix_rank(self._data, tol=tolerance * largest))

    def _check_same_shape(self, other: Matrix) -> None:
        if self.shape != other.shape:
            raise ValueError(f"Shape mismatch: {self.shape} vs {other.shape}")

    def __add__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.subtract(other)

    def __matmul__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.multiply(other)

    def __mul__(self, scalar: float) -> Matrix:
        if not isinstance(scalar, (int, float, np.number)):
            return NotImplemented
        return self.scale(scalar)

    __rmul__ = __mul__

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    def __hash__(self) -> int:
        # -0.0 + 0.0 is +0.0, so equal matrices hash equally
        return hash((self.shape, (self._data + 0.0).tobytes()))

    def __repr__(self) -> str:
        return f"Matrix({self.to_lists()!r})"
