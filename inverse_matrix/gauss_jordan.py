# Gauss-Jordan inversion on the augmented matrix [A | I]

import logging
import warnings

import numpy as np

from .exceptions import DimensionMismatch, NumericalInstabilityWarning, SingularMatrixError
from .matrix import Matrix, as_matrix, copy_block, zeros

LOGGER = logging.getLogger(__name__)

# Relative to the input's largest entry: smaller pivots trigger a warning, and
# with check_singular remaining rows this small are treated as zero
PIVOT_WARN_TOLERANCE = 1e-12


def _square_dim(m: Matrix) -> int:
    if m.rows != m.cols:
        raise DimensionMismatch(f"Expected a square matrix, got {m.rows}x{m.cols}")
    return m.rows


def augment(matrix) -> Matrix:
    """Build the N x 2N matrix [A | I]."""
    a = as_matrix(matrix)
    n = _square_dim(a)
    aug = zeros(n, 2 * n)
    copy_block(aug, a, n, n)
    for i in range(n):
        aug[i, n + i] = 1.0
    return aug


def _leftmost_nonzero(block: np.ndarray):
    """(row, col) of the nonzero entry with the smallest column, topmost on ties."""
    nonzero = block != 0
    cols = np.flatnonzero(nonzero.any(axis=0))
    if cols.size == 0:
        return None
    col = int(cols[0])
    return int(np.argmax(nonzero[:, col])), col


def leading_columns(matrix, width=None):
    """
    Leftmost nonzero column of each row, restricted to the first ``width``
    columns (all columns by default). Rows that are zero there map to None.
    """
    m = as_matrix(matrix)
    block = m.array[:, :width] != 0
    return [int(np.argmax(row)) if row.any() else None for row in block]


def ref(matrix, check_singular: bool = True, stacklevel: int = 2) -> Matrix:
    """
    Reduce [A | I] to row echelon form.

    Pivots are chosen by column first and row second: the leftmost column
    holding a nonzero entry among the rows not yet fixed, and the topmost
    such row. There is no magnitude pivoting. Every row operation spans
    both blocks so the right block tracks the elimination.

    Args:
        matrix: square N x N input (list of rows, ndarray or Matrix). Not modified.
        check_singular: raise SingularMatrixError when fewer than N pivots
            exist. Remaining rows whose entries are all within
            PIVOT_WARN_TOLERANCE of the input scale count as zero. When
            False only exact zeros end the elimination and a rank-deficient
            input silently yields a partial staircase.
        stacklevel: passed to warnings.warn for NumericalInstabilityWarning.

    Returns:
        New N x 2N Matrix in row echelon form with every pivot equal to 1.
    """
    aug = augment(matrix)
    n = aug.rows
    a = aug.array
    scale = np.abs(a[:, :n]).max()

    rank = 0
    for i in range(n):
        # Step 1: leftmost nonzero column in the rows not yet fixed
        found = _leftmost_nonzero(a[i:, :n])
        if found is None:
            LOGGER.debug("No pivot left at row %d", i)
            break
        # Rows left holding nothing but rounding residue count as zero rows
        if check_singular and np.abs(a[i:, :n]).max() <= PIVOT_WARN_TOLERANCE * scale:
            LOGGER.debug("Rows from %d on are rounding residue", i)
            break
        offset, col = found
        pivot_row = i + offset

        # Step 2: bring it to row i
        if pivot_row != i:
            LOGGER.debug("Swapping rows %d and %d", i, pivot_row)
            aug.swap_rows(i, pivot_row)

        pivot = a[i, col]
        if abs(pivot) < PIVOT_WARN_TOLERANCE * scale:
            warnings.warn(
                f"Pivot {pivot:.3e} at ({i}, {col}) is tiny relative to the input scale {scale:.3e}",
                NumericalInstabilityWarning,
                stacklevel=stacklevel,
            )

        # Step 3: normalize the pivot to 1
        aug.divide_row(i, pivot)
        rank += 1

        # Step 4: zero the pivot column below row i
        for j in range(i + 1, n):
            if a[j, col] != 0:
                aug.subtract_row(j, i, a[j, col] / a[i, col])

        # Step 5: nothing but zero rows below, already in echelon form
        if not a[i + 1:, :n].any():
            LOGGER.debug("Rows below %d are zero, stopping early", i)
            break

    if rank < n:
        LOGGER.debug("Echelon form has rank %d of %d", rank, n)
        if check_singular:
            raise SingularMatrixError(rank, n)
    return aug


def _erase_above(aug: Matrix, row_bound: int, col_bound: int):
    """
    Find the pivot of the window rows [0, row_bound] x cols [0, col_bound],
    scanning bottom-up and left to right, and clear the entries above it.
    Returns the pivot column, or None when the window is all zero.
    """
    a = aug.array
    pivot_row = pivot_col = None
    for r in range(row_bound, -1, -1):
        nonzero = np.flatnonzero(a[r, :col_bound + 1])
        if nonzero.size:
            pivot_row, pivot_col = r, int(nonzero[0])
            break
    if pivot_row is None:
        return None

    for above in range(pivot_row - 1, -1, -1):
        ratio = a[above, pivot_col] / a[pivot_row, pivot_col]
        aug.subtract_row(above, pivot_row, ratio, start=pivot_col)
    return pivot_col


def rref(aug: Matrix) -> Matrix:
    """
    Turn an augmented matrix in row echelon form into reduced row echelon
    form, in place. The input must come from ``ref``: pivots are assumed to
    sit on a strict staircase, which is not re-checked.
    """
    n = aug.rows
    if aug.cols != 2 * n:
        raise DimensionMismatch(f"Expected an N x 2N augmented matrix, got {aug.rows}x{aug.cols}")

    row_bound = col_bound = n - 1
    while row_bound >= 0:
        _erase_above(aug, row_bound, col_bound)
        row_bound -= 1
        col_bound -= 1
    return aug


def extract_inverse(aug: Matrix) -> Matrix:
    """Copy the right N x N block of a reduced augmented matrix into a new matrix."""
    n = aug.rows
    if aug.cols != 2 * n:
        raise DimensionMismatch(f"Expected an N x 2N augmented matrix, got {aug.rows}x{aug.cols}")
    result = zeros(n, n)
    result.array[:, :] = aug.array[:, n:]
    return result


def inverse(matrix, check_singular: bool = True) -> Matrix:
    """
    Inverse of a square matrix by Gauss-Jordan elimination.

    Raises DimensionMismatch for non-square input and, unless
    ``check_singular`` is False, SingularMatrixError for singular input.
    The input is copied and never modified.
    """
    reduced = rref(ref(matrix, check_singular=check_singular, stacklevel=3))
    result = extract_inverse(reduced)
    del reduced
    return result
