"""Matrix inversion by Gauss-Jordan elimination on the augmented matrix [A | I]."""

from .exceptions import DimensionMismatch, MatrixError, NumericalInstabilityWarning, SingularMatrixError
from .gauss_jordan import augment, extract_inverse, inverse, leading_columns, ref, rref
from .matrix import Matrix, as_matrix, identity, zeros
from .xorshift import Xorshift96

__version__ = "0.1.0"

__all__ = [
    "DimensionMismatch",
    "Matrix",
    "MatrixError",
    "NumericalInstabilityWarning",
    "SingularMatrixError",
    "Xorshift96",
    "as_matrix",
    "augment",
    "extract_inverse",
    "identity",
    "inverse",
    "leading_columns",
    "ref",
    "rref",
    "zeros",
]
