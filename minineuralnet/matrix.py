"""
Dense 2-D matrix engine built on plain Python lists.

Values are stored as a flat list in row-major order, so the cell (r, c)
lives at index r * cols + c. Arithmetic operators always return a new
Matrix; the only in-place mutations are `randomize`, `__setitem__` and
`subtract_`, which layers use to initialise and update their parameters.
"""
from numbers import Real

import numpy as np

from .exceptions import InvalidArgumentError, ShapeMismatchError


class Matrix:
    """
    Row-major dense matrix of floats with shape-checked arithmetic.

    Stores data as a flat list. `+`, `-` and `*` work element-wise between
    two matrices of the same shape, or broadcast a scalar over every cell.
    Matrix multiplication is `dot`.
    """

    __slots__ = ['rows', 'cols', 'data']

    def __init__(self, rows, cols, data=None):
        """
        Args:
            rows : int
                Number of rows, must be positive
            cols : int
                Number of columns, must be positive
            data : list of float, optional
                Row-major values of length rows * cols (zeros when omitted)
        """
        if rows <= 0 or cols <= 0:
            raise InvalidArgumentError(f"Matrix shape must be positive, got ({rows}, {cols})")

        if data is None:
            data = [0.0] * (rows * cols)
        else:
            data = [float(value) for value in data]
            if len(data) != rows * cols:
                raise InvalidArgumentError(
                    f"Expected {rows * cols} values for shape ({rows}, {cols}), got {len(data)}"
                )

        self.rows = rows
        self.cols = cols
        self.data = data

    @classmethod
    def zeros(cls, rows, cols):
        """Create zero matrix."""
        return cls(rows, cols)

    @classmethod
    def from_rows(cls, rows):
        """Create matrix from a list of equally long rows."""
        if not rows or not rows[0]:
            raise InvalidArgumentError("Cannot build a matrix from an empty row list")

        cols = len(rows[0])
        data = []
        for row in rows:
            if len(row) != cols:
                raise InvalidArgumentError(f"Ragged rows: expected {cols} columns, got {len(row)}")
            data.extend(row)
        return cls(len(rows), cols, data)

    @classmethod
    def column(cls, values):
        """Create an (n, 1) column vector."""
        values = list(values)
        return cls(len(values), 1, values)

    @classmethod
    def from_numpy(cls, array):
        """
        Copy a 1-D or 2-D numpy array into a new Matrix.
        A 1-D array becomes a single row.
        """
        array = np.asarray(array, dtype=np.float64)
        if array.ndim == 1:
            array = array.reshape(1, -1)
        if array.ndim != 2:
            raise InvalidArgumentError(f"Expected a 1-D or 2-D array, got {array.ndim} dimensions")
        return cls(array.shape[0], array.shape[1], array.ravel().tolist())

    def to_numpy(self) -> np.ndarray:
        return np.array(self.data, dtype=np.float64).reshape(self.rows, self.cols)

    @property
    def shape(self):
        return (self.rows, self.cols)

    @property
    def transposed(self):
        """New matrix with rows and columns swapped."""
        result = Matrix(self.cols, self.rows)
        for r in range(self.rows):
            for c in range(self.cols):
                result.data[c * self.rows + r] = self.data[r * self.cols + c]
        return result

    def _index(self, r, c):
        if not (0 <= r < self.rows and 0 <= c < self.cols):
            raise IndexError(f"Index ({r}, {c}) out of range for shape {self.shape}")
        return r * self.cols + c

    def __getitem__(self, idx):
        row, col = idx
        return self.data[self._index(row, col)]

    def __setitem__(self, idx, value):
        row, col = idx
        self.data[self._index(row, col)] = float(value)

    def get(self, r, c):
        return self[r, c]

    def set(self, r, c, value):
        self[r, c] = value

    def rows_as_lists(self):
        """Convert to a list of row lists."""
        return [self.data[r * self.cols:(r + 1) * self.cols] for r in range(self.rows)]

    def flatten(self):
        """All values in row-major order."""
        return list(self.data)

    def copy(self):
        return Matrix(self.rows, self.cols, self.data)

    def map(self, fn):
        """New matrix with `fn` applied to every cell."""
        return Matrix(self.rows, self.cols, [fn(value) for value in self.data])

    def map_indexed(self, fn):
        """New matrix with `fn(r, c, value)` applied to every cell."""
        result = Matrix(self.rows, self.cols)
        for r in range(self.rows):
            for c in range(self.cols):
                i = r * self.cols + c
                result.data[i] = float(fn(r, c, self.data[i]))
        return result

    def slice_rows(self, indices):
        """
        New matrix made of the given rows, in the given order.
        Repeated indices produce repeated rows.
        """
        indices = list(indices)
        if not indices:
            raise InvalidArgumentError("slice_rows needs at least one row index")

        data = []
        for r in indices:
            if not 0 <= r < self.rows:
                raise IndexError(f"Row {r} out of range for {self.rows} rows")
            data.extend(self.data[r * self.cols:(r + 1) * self.cols])
        return Matrix(len(indices), self.cols, data)

    def randomize(self, random_source):
        """
        Fill every cell in place with a uniform value in [-1, 1).
        Cells are drawn in row-major order.
        """
        for i in range(len(self.data)):
            self.data[i] = random_source.next_uniform() * 2 - 1
        return self

    def dot(self, other):
        """
        Matrix multiplication.
        ---
        Args:
            other : Matrix
                Right operand, other.rows must equal self.cols
        ---
        Returns:
            Matrix of shape (self.rows, other.cols)
        """
        if self.cols != other.rows:
            raise ShapeMismatchError(f"Cannot multiply {self.shape} dot {other.shape}")

        n, m, p = self.rows, self.cols, other.cols
        a, b = self.data, other.data
        result = [0.0] * (n * p)
        for i in range(n):
            row = a[i * m:(i + 1) * m]
            for j in range(p):
                total = 0.0
                for k in range(m):
                    total += row[k] * b[k * p + j]
                result[i * p + j] = total
        return Matrix(n, p, result)

    def _elementwise(self, other, op, symbol):
        if isinstance(other, Matrix):
            if self.shape != other.shape:
                raise ShapeMismatchError(f"Cannot apply {self.shape} {symbol} {other.shape}")
            return Matrix(self.rows, self.cols, [op(x, y) for x, y in zip(self.data, other.data)])
        if isinstance(other, Real):
            return Matrix(self.rows, self.cols, [op(x, other) for x in self.data])
        return NotImplemented

    def __add__(self, other):
        return self._elementwise(other, lambda x, y: x + y, '+')

    def __sub__(self, other):
        return self._elementwise(other, lambda x, y: x - y, '-')

    def __mul__(self, other):
        return self._elementwise(other, lambda x, y: x * y, '*')

    def __radd__(self, other):
        return self.__add__(other)

    def __rmul__(self, other):
        return self.__mul__(other)

    def __rsub__(self, other):
        if isinstance(other, Real):
            return self.map(lambda x: other - x)
        return NotImplemented

    def __neg__(self):
        return self.map(lambda x: -x)

    def subtract_(self, other):
        """In-place `self -= other`; shapes must match."""
        if self.shape != other.shape:
            raise ShapeMismatchError(f"Cannot subtract {other.shape} from {self.shape} in place")
        for i, value in enumerate(other.data):
            self.data[i] -= value
        return self

    def allclose(self, other, tol=1e-9):
        """Same shape and every pair of cells within `tol`."""
        if self.shape != other.shape:
            return False
        return all(abs(x - y) <= tol for x, y in zip(self.data, other.data))

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.rows == other.rows and self.cols == other.cols and self.data == other.data

    __hash__ = None

    def __repr__(self):
        return f"Matrix({self.rows}x{self.cols}, {self.rows_as_lists()})"


def mean(matrix, axis=0):
    """
    Mean along an axis, always returned as a single-row matrix.
    ---
    Args:
        matrix : Matrix
        axis : int
            0 for column means, shape (1, cols); 1 for row means, shape (1, rows)
    """
    if axis == 0:
        m = matrix.transposed
    elif axis == 1:
        m = matrix
    else:
        raise InvalidArgumentError(f"Axis can be 0 or 1 for a matrix, got {axis}")

    result = Matrix(1, m.rows)
    for r in range(m.rows):
        result.data[r] = sum(m.data[r * m.cols:(r + 1) * m.cols]) / m.cols
    return result
