class MatrixError(ValueError):
    pass


class DimensionMismatch(MatrixError):
    """Raised when a matrix has the wrong shape for the requested operation."""


class SingularMatrixError(MatrixError):
    """Raised when elimination runs out of nonzero pivots before every column is covered."""

    def __init__(self, rank, dim):
        super().__init__(f"Singular matrix: found {rank} pivots for a {dim}x{dim} matrix")
        self.rank = rank
        self.dim = dim


class NumericalInstabilityWarning(RuntimeWarning):
    """Pivot magnitude is tiny relative to the input, so the result may carry large cancellation error."""
