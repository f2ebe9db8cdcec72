import sys

import numpy as np

from .exceptions import DimensionMismatch
from .xorshift import Xorshift96


class Matrix:
    """
    Dense float64 matrix that owns its storage.

    The buffer is a private NumPy array: building a Matrix from a list, an
    array or another Matrix always copies, so callers never share memory
    with it. Elements are addressed as ``m[row, col]`` and out-of-range
    positions raise IndexError (negative indices included).

    Row operations act on the full row width at once.
    """

    def __init__(self, data):
        if isinstance(data, Matrix):
            data = data._data
        try:
            array = np.array(data, dtype=np.float64)
        except (TypeError, ValueError) as err:
            raise DimensionMismatch(f"Cannot build a matrix from {type(data).__name__}: {err}") from err
        if array.ndim != 2:
            raise DimensionMismatch(f"Expected a 2-D matrix, got {array.ndim} dimension(s)")
        if array.size == 0:
            raise DimensionMismatch(f"Matrix must have at least one row and one column, got {array.shape}")
        self._data = array

    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def cols(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self):
        return self._data.shape

    @property
    def array(self) -> np.ndarray:
        """The backing buffer itself, not a copy. Writes go straight into the matrix."""
        return self._data

    def _check_index(self, key):
        if not isinstance(key, tuple) or len(key) != 2:
            raise TypeError("Matrix indices must be (row, col) pairs")
        row, col = key
        if not 0 <= row < self.rows or not 0 <= col < self.cols:
            raise IndexError(f"Index ({row}, {col}) out of range for {self.rows}x{self.cols} matrix")
        return row, col

    def _check_row(self, row):
        if not 0 <= row < self.rows:
            raise IndexError(f"Row {row} out of range for {self.rows}x{self.cols} matrix")

    def __getitem__(self, key) -> float:
        return float(self._data[self._check_index(key)])

    def __setitem__(self, key, value):
        self._data[self._check_index(key)] = value

    def row(self, i):
        self._check_row(i)
        return self._data[i].tolist()

    def swap_rows(self, i, j):
        self._check_row(i)
        self._check_row(j)
        if i != j:
            self._data[[i, j]] = self._data[[j, i]]

    def divide_row(self, i, value):
        self._check_row(i)
        self._data[i] /= value

    def subtract_row(self, target, source, ratio, start=0):
        """row[target] -= ratio * row[source], over columns ``start`` to the end."""
        self._check_row(target)
        self._check_row(source)
        self._data[target, start:] -= ratio * self._data[source, start:]

    def copy(self) -> "Matrix":
        return Matrix(self._data)

    def tolist(self):
        return self._data.tolist()

    def to_numpy(self) -> np.ndarray:
        return self._data.copy()

    def __array__(self, dtype=None, copy=None):
        if dtype is None:
            return self._data.copy()
        return self._data.astype(dtype)

    def __matmul__(self, other):
        return mul(self, as_matrix(other))

    def __add__(self, other):
        return add(self, as_matrix(other))

    def __repr__(self):
        return f"Matrix({self.tolist()!r})"

    def __str__(self):
        return format_matrix(self)


def as_matrix(obj) -> Matrix:
    if isinstance(obj, Matrix):
        return obj
    return Matrix(obj)


def _wrap(array: np.ndarray) -> Matrix:
    m = Matrix.__new__(Matrix)
    m._data = array
    return m


def _check_size(rows, cols):
    if rows < 1 or cols < 1:
        raise DimensionMismatch(f"Matrix must be at least 1x1, got {rows}x{cols}")


def zeros(rows: int, cols: int) -> Matrix:
    _check_size(rows, cols)
    return _wrap(np.zeros((rows, cols)))


def ones(rows: int, cols: int) -> Matrix:
    _check_size(rows, cols)
    return _wrap(np.ones((rows, cols)))


def identity(n: int) -> Matrix:
    _check_size(n, n)
    return _wrap(np.eye(n))


def rand(rows: int, cols: int, low: float = 0.0, high: float = 1.0, rng=None) -> Matrix:
    """
    Matrix of uniform values in [low, high).

    ``rng`` is anything with a ``uniform(low, high)`` method, e.g. an
    Xorshift96 or a numpy Generator. Without one a fresh Xorshift96 with
    the default seed is used, so the result is reproducible.
    """
    _check_size(rows, cols)
    if rng is None:
        rng = Xorshift96()
    values = [[rng.uniform(low, high) for _ in range(cols)] for _ in range(rows)]
    return _wrap(np.array(values, dtype=np.float64))


def mul(left: Matrix, right: Matrix) -> Matrix:
    if left.cols != right.rows:
        raise DimensionMismatch(f"Cannot multiply {left.rows}x{left.cols} by {right.rows}x{right.cols}")
    return _wrap(left.array @ right.array)


def transpose(m: Matrix) -> Matrix:
    return _wrap(m.array.T.copy())


def diag(vector) -> Matrix:
    """Square matrix with ``vector`` on the diagonal. Accepts a sequence or a 1xN / Nx1 matrix."""
    if isinstance(vector, Matrix):
        if vector.rows != 1 and vector.cols != 1:
            raise DimensionMismatch(f"Expected a row or column vector, got {vector.rows}x{vector.cols}")
        values = vector.array.ravel()
    else:
        values = np.asarray(vector, dtype=np.float64)
        if values.ndim != 1 or values.size == 0:
            raise DimensionMismatch("Expected a non-empty 1-D sequence")
    return _wrap(np.diag(values))


def add(a: Matrix, b: Matrix) -> Matrix:
    if a.shape != b.shape:
        raise DimensionMismatch(f"Cannot add {a.rows}x{a.cols} and {b.rows}x{b.cols}")
    return _wrap(a.array + b.array)


def copy_block(dst: Matrix, src: Matrix, rows: int, cols: int) -> None:
    """Copy the top-left rows x cols block of ``src`` into the top-left of ``dst``."""
    if rows > min(dst.rows, src.rows) or cols > min(dst.cols, src.cols):
        raise DimensionMismatch(
            f"Block {rows}x{cols} does not fit in {src.rows}x{src.cols} -> {dst.rows}x{dst.cols}"
        )
    dst.array[:rows, :cols] = src.array[:rows, :cols]


def format_matrix(m: Matrix, fmt: str = "%f") -> str:
    return "\n".join("  ".join(fmt % value for value in row) for row in m.array)


def print_matrix(m: Matrix, fmt: str = "%f", file=None):
    print(format_matrix(m, fmt), file=file or sys.stdout)
