import os
import subprocess
import sys

import numpy as np
import pytest

from inverse_matrix import (
    DimensionMismatch,
    Matrix,
    NumericalInstabilityWarning,
    SingularMatrixError,
    augment,
    extract_inverse,
    inverse,
    leading_columns,
    ref,
    rref,
)

TOL = 1e-9

KNOWN = [[7.0, 9.0, 3.0], [4.0, 6.0, 8.0], [5.0, 2.0, 5.0]]

TINY_PIVOT = [[1e-20, 1.0], [1.0, 1.0]]


def well_conditioned(n, seed):
    rng = np.random.default_rng(seed)
    return rng.uniform(-1, 1, (n, n)) + n * np.eye(n)


def assert_strictly_increasing_pivots(aug, n):
    cols = [c for c in leading_columns(aug, n) if c is not None]
    assert all(a < b for a, b in zip(cols, cols[1:]))


@pytest.mark.parametrize("n", [1, 2, 3, 5, 10])
def test_identity_round_trip(n):
    result = inverse(np.eye(n))
    assert np.allclose(result, np.eye(n), atol=TOL)


@pytest.mark.parametrize("n", [2, 4, 8, 16])
def test_double_inverse(n):
    A = well_conditioned(n, seed=n)
    assert np.allclose(inverse(inverse(A)), A, atol=TOL)


@pytest.mark.parametrize("n", [1, 3, 6, 12, 25])
def test_inverse_identity_law(n):
    A = well_conditioned(n, seed=100 + n)
    A_inv = np.asarray(inverse(A))
    assert np.allclose(A @ A_inv, np.eye(n), atol=TOL)
    assert np.allclose(A_inv @ A, np.eye(n), atol=TOL)


def test_known_3x3():
    A = np.array(KNOWN)
    A_inv = inverse(KNOWN)
    assert isinstance(A_inv, Matrix)
    assert A_inv.shape == (3, 3)
    assert np.allclose(A @ np.asarray(A_inv), np.eye(3), atol=TOL)
    assert np.allclose(A_inv, np.linalg.inv(A), atol=TOL)


def test_scalar():
    assert inverse([[4.0]])[0, 0] == pytest.approx(0.25)


@pytest.mark.parametrize("A", [
    [[0.0, 1.0], [1.0, 0.0]],
    [[0.0, 2.0, 1.0], [1.0, 1.0, 0.0], [3.0, 0.0, 1.0]],
    [[0.0, 0.0, 1.0], [0.0, 1.0, 0.0], [2.0, 0.0, 0.0]],
])
def test_row_swap(A):
    A = np.array(A)
    A_inv = np.asarray(inverse(A))
    assert np.allclose(A @ A_inv, np.eye(len(A)), atol=TOL)
    assert np.allclose(A_inv @ A, np.eye(len(A)), atol=TOL)


def test_input_not_modified():
    A = np.array(KNOWN)
    before = A.copy()
    inverse(A)
    assert np.array_equal(A, before)

    M = Matrix(KNOWN)
    inverse(M)
    assert M.tolist() == KNOWN


def test_augment_layout():
    aug = augment(KNOWN)
    assert aug.shape == (3, 6)
    assert np.array_equal(aug.array[:, :3], np.array(KNOWN))
    assert np.array_equal(aug.array[:, 3:], np.eye(3))


def test_ref_staircase():
    aug = ref(KNOWN)
    assert aug.shape == (3, 6)
    assert leading_columns(aug, 3) == [0, 1, 2]
    for i in range(3):
        assert aug[i, i] == pytest.approx(1.0)
    # zeros below every pivot
    assert np.allclose(np.tril(aug.array[:, :3], -1), 0.0)


@pytest.mark.parametrize("seed", range(5))
def test_ref_pivot_ordering(seed):
    A = well_conditioned(6, seed)
    A[0, :] = 0.0
    A[0, 3] = 1.0
    assert_strictly_increasing_pivots(ref(A), 6)


def test_ref_pivot_ordering_rank_deficient():
    A = [[0.0, 1.0, 2.0], [0.0, 2.0, 4.0], [0.0, 0.0, 1.0]]
    aug = ref(A, check_singular=False)
    assert leading_columns(aug, 3) == [1, 2, None]
    assert_strictly_increasing_pivots(aug, 3)


def test_rref_clears_above_pivots():
    aug = rref(ref(KNOWN))
    assert np.allclose(aug.array[:, :3], np.eye(3), atol=TOL)


def test_extract_inverse_is_independent_copy():
    aug = rref(ref(KNOWN))
    result = extract_inverse(aug)
    result[0, 0] = 123.0
    assert aug[0, 3] != 123.0


def test_rref_rejects_non_augmented():
    with pytest.raises(DimensionMismatch):
        rref(Matrix(KNOWN))


@pytest.mark.parametrize("bad", [
    [[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]],
    [[1.0], [2.0]],
    [1.0, 2.0],
    [[1.0, 2.0], [3.0]],
    [],
    [[]],
])
def test_dimension_mismatch(bad):
    with pytest.raises(DimensionMismatch):
        inverse(bad)


@pytest.mark.parametrize("A, rank", [
    ([[1.0, 2.0], [2.0, 4.0]], 1),
    ([[0.0, 0.0], [0.0, 0.0]], 0),
    ([[0.0, 1.0, 2.0], [0.0, 2.0, 4.0], [0.0, 0.0, 1.0]], 2),
])
def test_singular_raises(A, rank):
    with pytest.raises(SingularMatrixError) as excinfo:
        inverse(A)
    assert excinfo.value.rank == rank
    assert excinfo.value.dim == len(A)


def test_singular_unchecked_is_silent():
    result = inverse([[1.0, 2.0], [2.0, 4.0]], check_singular=False)
    assert result.shape == (2, 2)


def test_tiny_pivot_warns():
    with pytest.warns(NumericalInstabilityWarning):
        inverse(TINY_PIVOT)


def test_instability_warning_points_at_caller():
    with pytest.warns(NumericalInstabilityWarning) as record:
        inverse(TINY_PIVOT)
    assert os.path.basename(record[0].filename) == "test_gauss_jordan.py"

    with pytest.warns(NumericalInstabilityWarning) as record:
        ref(TINY_PIVOT)
    assert os.path.basename(record[0].filename) == "test_gauss_jordan.py"


@pytest.mark.parametrize("A, rank", [
    ([[0.1, 0.2, 0.3], [0.4, 0.5, 0.6], [0.7, 0.8, 0.9]], 2),
    (np.arange(16).reshape(4, 4) / 7, 2),
])
def test_rounded_singular_raises(A, rank):
    with pytest.raises(SingularMatrixError) as excinfo:
        inverse(A)
    assert excinfo.value.rank == rank


def test_rounded_singular_unchecked_keeps_exact_test():
    A = [[0.1, 0.2, 0.3], [0.4, 0.5, 0.6], [0.7, 0.8, 0.9]]
    with pytest.raises(SingularMatrixError):
        ref(A)
    with pytest.warns(NumericalInstabilityWarning):
        aug = ref(A, check_singular=False)
    assert leading_columns(aug, 3) == [0, 1, 2]


def test_ref_topmost_row_wins_over_larger_pivot():
    aug = ref([[0.0, 1.0, 0.0], [2.0, 0.0, 0.0], [5.0, 0.0, 1.0]])
    assert aug.row(0) == [1.0, 0.0, 0.0, 0.0, 0.5, 0.0]
    assert aug.row(1) == [0.0, 1.0, 0.0, 1.0, 0.0, 0.0]


def test_matches_numpy_on_xorshift_matrix():
    from inverse_matrix.matrix import add, diag, rand
    from inverse_matrix.xorshift import Xorshift96

    A = add(rand(7, 7, -1.0, 1.0, rng=Xorshift96(2024)), diag([7.0] * 7))
    assert np.allclose(inverse(A), np.linalg.inv(np.asarray(A)), atol=TOL)


def test_core_import_needs_only_numpy():
    code = (
        "import sys, inverse_matrix; "
        "assert 'torch' not in sys.modules and 'matplotlib' not in sys.modules"
    )
    subprocess.run([sys.executable, "-c", code], check=True)
