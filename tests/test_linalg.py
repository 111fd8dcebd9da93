"""Tests for the linear algebra kernel and the eigen solver."""

import math

import hypothesis
import jax
import jax.numpy as jnp
import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from jax_liemaps.core import DEFAULT_TOLERANCES, Tolerances
from jax_liemaps.core.matrix import approx_equal, as_column, matmul, matrix_power, zeros
from jax_liemaps.errors import ShapeError, SingularMatrixError, SlowConvergenceError
from jax_liemaps.linalg import (
    determinant,
    eigenvalues,
    factorize,
    invert,
    norm,
    qr_decompose,
    solve,
    trace,
)

# Use hypothesis profile for CI
hypothesis.settings.register_profile("ci", max_examples=10, deadline=None)


def _random_nonsingular(seed, n):
    """Diagonally dominant random matrix, safely away from singular."""
    key = jax.random.PRNGKey(seed)
    A = jax.random.uniform(key, (n, n), minval=-1.0, maxval=1.0)
    return A + (n + 1) * jnp.eye(n)


# Trace and determinant
def test_trace():
    assert trace(jnp.array([[1.0, 2.0], [3.0, 4.0]])) == 5.0
    assert trace([[7.0]]) == 7.0


def test_trace_requires_square():
    with pytest.raises(ShapeError):
        trace(jnp.ones((2, 3)))


def test_determinant_small():
    """Test cofactor determinant on hand-checked matrices."""
    assert determinant([[3.0]]) == 3.0
    assert determinant([[1.0, 2.0], [3.0, 4.0]]) == pytest.approx(-2.0)
    A = jnp.array([[2.0, -1.0, 0.0], [-1.0, 2.0, -1.0], [0.0, -1.0, 2.0]])
    assert determinant(A) == pytest.approx(4.0)


def test_determinant_requires_square():
    with pytest.raises(ShapeError):
        determinant(jnp.ones((3, 2)))


def test_determinant_matches_lu():
    """Cofactor expansion and LU pivot product agree on a 5x5 matrix."""
    A = _random_nonsingular(7, 5)
    expected = np.linalg.det(np.asarray(A))
    assert determinant(A) == pytest.approx(expected, rel=1e-10)
    assert factorize(A).determinant() == pytest.approx(expected, rel=1e-10)


def test_lu_determinant_sign_follows_permutation():
    """Swapping two rows flips the sign of the LU determinant."""
    A = jnp.array([[0.0, 1.0], [1.0, 0.0]])
    lu = factorize(A)
    assert lu.permutation == (1, 0)
    assert lu.determinant() == pytest.approx(-1.0)


# LU factorization
def test_factorize_uses_scaled_pivoting():
    """The pivot is chosen relative to each row's largest entry."""
    # Raw magnitude would pick row 0 (2 > 1); scaled magnitude picks row 1.
    A = jnp.array([[2.0, 100000.0], [1.0, 1.0]])
    lu = factorize(A)
    assert lu.permutation == (1, 0)


def test_factorize_requires_square():
    with pytest.raises(ShapeError):
        factorize(jnp.ones((2, 3)))


def test_factorize_singular():
    """A rank-deficient matrix has a vanishing pivot."""
    with pytest.raises(SingularMatrixError):
        factorize(jnp.array([[1.0, 2.0], [2.0, 4.0]]))
    with pytest.raises(SingularMatrixError):
        invert(jnp.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0], [7.0, 8.0, 9.0]]))
    with pytest.raises(ArithmeticError):
        solve(jnp.zeros((3, 3)), jnp.ones(3))


def test_factorize_tolerance():
    """A small but nonzero pivot is accepted or rejected by the tolerance."""
    A = jnp.array([[1e-8, 0.0], [0.0, 1.0]])
    factorize(A, tolerance=1e-10)
    with pytest.raises(SingularMatrixError):
        factorize(A, tolerance=1e-6)


def test_factorize_does_not_modify_input():
    A = jnp.array([[0.0, 2.0, 4.0], [4.0, 2.0, 1.0], [-1.0, 0.0, -1.0]])
    original = np.array(A)
    factorize(A)
    np.testing.assert_array_equal(A, original)


# Solve and invert
def test_solve_regression():
    """Test solve against a hand-checked system."""
    A = jnp.array([[0.0, 2.0, 4.0], [4.0, 2.0, 1.0], [-1.0, 0.0, -1.0]])
    b = jnp.array([-1.0, 1.0, 3.0])
    x = solve(A, b)
    assert x.shape == (3,)
    np.testing.assert_allclose(x, jnp.array([-1.0, 3.5, -2.0]), rtol=0, atol=1e-12)


def test_solve_column_vector():
    """A column right-hand side gives a column solution."""
    A = jnp.array([[3.5, 0.9, 6.3], [8.2, -0.7, -6.5], [-4.6, 9.3, -8.9]])
    b = jnp.array([[1.0], [-6.3], [0.3]])
    x = solve(A, b)
    assert x.shape == (3, 1)
    expected = jnp.array([[-0.4494608992983296], [0.1766566088810417], [0.3831939999287645]])
    np.testing.assert_allclose(x, expected, rtol=0, atol=1e-12)


def test_solve_multiple_right_hand_sides():
    A = _random_nonsingular(3, 4)
    B = jax.random.uniform(jax.random.PRNGKey(4), (4, 2))
    X = solve(A, B)
    assert X.shape == (4, 2)
    np.testing.assert_allclose(jnp.matmul(A, X), B, rtol=0, atol=1e-12)


def test_solve_shape_mismatch():
    with pytest.raises(ShapeError):
        solve(jnp.eye(3), jnp.ones(4))
    with pytest.raises(ShapeError):
        solve(jnp.ones((3, 4)), jnp.ones(3))
    with pytest.raises(ShapeError):
        solve(jnp.eye(2), 1.0)


def test_factorization_solve_rejects_scalars_and_tensors():
    """The factorization checks its right-hand side itself."""
    lu = factorize(jnp.eye(2))
    with pytest.raises(ShapeError):
        lu.solve(1.0)
    with pytest.raises(ShapeError):
        lu.solve(jnp.ones((2, 1, 1)))
    with pytest.raises(ShapeError):
        lu.solve(jnp.ones(3))
    np.testing.assert_allclose(lu.solve(jnp.array([1.0, 2.0])), jnp.array([1.0, 2.0]), rtol=0, atol=0)


def test_invert_regression():
    """Test invert against a hand-checked inverse."""
    A = jnp.array([[1.0, 2.0, 3.0], [3.0, 2.0, 1.0], [-1.0, 0.0, -1.0]])
    expected = jnp.array([[-0.25, 0.25, -0.5], [0.25, 0.25, 1.0], [0.25, -0.25, -0.5]])
    assert approx_equal(invert(A), expected, 1e-12)


def test_invert_reference_values():
    A = jnp.array([[-57.49, 63.53, -91.04],
                   [-74.85, 42.29, -64.59],
                   [-20.78, 24.62, -12.04]])
    expected = jnp.array([[0.020156646023028360, -0.027530452243719080, -0.004723350790256376],
                          [0.008222499098030746, -0.022367978292674870, 0.057821544853750080],
                          [-0.017974848551911330, 0.001776010968341117, 0.043332031870502870]])
    np.testing.assert_allclose(invert(A), expected, rtol=0, atol=1e-12)
    np.testing.assert_allclose(matrix_power(A, -1), expected, rtol=0, atol=1e-12)


def test_invert_requires_square():
    with pytest.raises(ShapeError):
        invert(jnp.ones((2, 3)))


@given(st.integers(min_value=0, max_value=100), st.integers(min_value=1, max_value=6))
@settings(deadline=None, max_examples=25)
def test_invert_property(seed, n):
    """invert(A) @ A = I and solve(A, b) = invert(A) @ b."""
    A = _random_nonsingular(seed, n)
    A_inv = invert(A)
    np.testing.assert_allclose(jnp.matmul(A_inv, A), jnp.eye(n), rtol=0, atol=1e-12)

    b = jax.random.uniform(jax.random.PRNGKey(seed + 1), (n,), minval=-5.0, maxval=5.0)
    np.testing.assert_allclose(solve(A, b), jnp.matmul(A_inv, b), rtol=0, atol=1e-12)


# Norms and QR
def test_norm_vectors():
    assert norm(jnp.array([3.0, 4.0])) == pytest.approx(5.0)
    assert norm(jnp.array([[3.0], [4.0]])) == pytest.approx(5.0)
    assert norm(jnp.array([[3.0, 4.0]])) == pytest.approx(5.0)


def test_norm_spectral():
    """Matrices use the spectral norm, not the Frobenius norm."""
    assert norm(jnp.diag(jnp.array([3.0, -5.0, 1.0]))) == pytest.approx(5.0)
    A = jnp.array([[1.0, 2.0], [3.0, 4.0]])
    assert norm(A) == pytest.approx(np.linalg.norm(np.asarray(A), 2), rel=1e-8)


def test_qr_decompose_square():
    A = _random_nonsingular(11, 4)
    Q, R = qr_decompose(A)
    assert Q.shape == (4, 4)
    assert R.shape == (4, 4)
    np.testing.assert_allclose(jnp.matmul(Q, R), A, rtol=0, atol=1e-12)
    np.testing.assert_allclose(jnp.matmul(Q.T, Q), jnp.eye(4), rtol=0, atol=1e-12)
    np.testing.assert_allclose(R, jnp.triu(R), rtol=0, atol=0)


def test_qr_decompose_rectangular():
    A = jax.random.uniform(jax.random.PRNGKey(5), (4, 2))
    Q, R = qr_decompose(A)
    assert Q.shape == (4, 2)
    assert R.shape == (2, 2)
    np.testing.assert_allclose(jnp.matmul(Q, R), A, rtol=0, atol=1e-12)

    B = jax.random.uniform(jax.random.PRNGKey(6), (2, 3))
    Q, R = qr_decompose(B)
    assert Q.shape == (2, 2)
    assert R.shape == (2, 3)
    np.testing.assert_allclose(jnp.matmul(Q, R), B, rtol=0, atol=1e-12)


def test_qr_decompose_dependent_column():
    """A column lying in the span of earlier ones gets a zero diagonal in R."""
    A = jnp.array([[1.0, 2.0], [1.0, 2.0]])
    Q, R = qr_decompose(A)
    assert float(R[1, 1]) == pytest.approx(0.0, abs=1e-12)
    np.testing.assert_allclose(jnp.matmul(Q, R), A, rtol=0, atol=1e-12)


# Eigenvalues
@pytest.mark.parametrize("n", [1, 2, 3, 4, 5, 6])
def test_eigenvalues_identity(n):
    assert eigenvalues(jnp.eye(n)) == (1.0,) * n


def test_eigenvalues_sorted_descending():
    values = eigenvalues(jnp.diag(jnp.array([3.0, 1.0, 2.0])))
    np.testing.assert_allclose(values, [3.0, 2.0, 1.0], rtol=0, atol=1e-12)

    values = eigenvalues(jnp.array([[4.0, 1.0], [0.0, 2.0]]))
    np.testing.assert_allclose(values, [4.0, 2.0], rtol=0, atol=1e-12)


def test_eigenvalues_symmetric():
    A = jnp.array([[4.0, 1.0, 0.0], [1.0, 3.0, 1.0], [0.0, 1.0, 2.0]])
    expected = sorted(np.linalg.eigvalsh(np.asarray(A)), reverse=True)
    np.testing.assert_allclose(eigenvalues(A), expected, rtol=0, atol=1e-12)


@given(st.integers(min_value=0, max_value=100), st.integers(min_value=2, max_value=6))
@settings(deadline=None, max_examples=25)
def test_eigenvalues_symmetric_positive_definite(seed, n):
    """Eigenvalues of M^T M + I match a reference solver to well below the deflation tolerance."""
    M = jax.random.uniform(jax.random.PRNGKey(seed), (n, n), minval=-1.0, maxval=1.0)
    A = jnp.matmul(M.T, M) + jnp.eye(n)
    expected = sorted(np.linalg.eigvalsh(np.asarray(A)), reverse=True)
    values = eigenvalues(A)
    assert len(values) == n
    np.testing.assert_allclose(values, expected, rtol=0, atol=1e-12)


def test_eigenvalues_requires_square():
    with pytest.raises(ShapeError):
        eigenvalues(jnp.ones((2, 3)))


def test_eigenvalues_slow_convergence():
    """The bottom-right shift leaves this matrix unchanged, so it never deflates."""
    A = jnp.array([[2.0, 1.0], [1.0, 2.0]])
    with pytest.raises(SlowConvergenceError):
        eigenvalues(A, max_iterations=20)


def test_norm_slow_convergence():
    """A^T A of [[2, 1], [1, 2]] is again a fixed point of the shift, so the spectral norm fails."""
    A = jnp.array([[2.0, 1.0], [1.0, 2.0]])
    with pytest.raises(SlowConvergenceError):
        norm(A)
    # Vectors never reach the eigenvalue iteration
    assert norm(jnp.array([2.0, 1.0, 1.0, 2.0])) == pytest.approx(math.sqrt(10.0))


# Matrix helpers
def test_matrix_power():
    A = jnp.array([[3.5, 0.9, 6.3], [8.2, -0.7, -6.5], [-4.6, 9.3, -8.9]])
    expected = jnp.array([[651.7790000000001, -421.98300000000006, -101.277],
                          [-770.8220000000001, 1145.1380000000001, -340.346],
                          [-365.18200000000013, 61.33800000000008, 1335.1180000000002]])
    assert approx_equal(matrix_power(A, 3), expected, 1e-9)
    np.testing.assert_array_equal(matrix_power(A, 0), jnp.eye(3))


def test_matrix_power_requires_square():
    with pytest.raises(ShapeError):
        matrix_power(jnp.ones((2, 3)), 2)


def test_approx_equal():
    a = jnp.array([[3.5, 0.9], [8.2, -0.7]])
    assert approx_equal(a, a + 1e-13)
    assert not approx_equal(a, a + 1e-11)
    assert not approx_equal(a, a[:, :1])


def test_matmul_checks_inner_dimension():
    a = jnp.ones((2, 3))
    np.testing.assert_allclose(matmul(a, jnp.ones((3, 4))), 3.0 * jnp.ones((2, 4)), rtol=0, atol=0)
    with pytest.raises(ShapeError):
        matmul(a, jnp.ones((2, 3)))


def test_vector_conventions():
    assert as_column(jnp.array([1.0, 2.0, 3.0])).shape == (3, 1)
    assert as_column(jnp.array([[1.0, 2.0, 3.0]])).shape == (3, 1)
    with pytest.raises(ShapeError):
        as_column(jnp.ones((2, 2)))
    z = zeros((2, 3))
    assert z.shape == (2, 3)
    assert z.dtype == jnp.float64


def test_tolerances():
    assert DEFAULT_TOLERANCES.structure == 1e-12
    assert DEFAULT_TOLERANCES.series_max_terms == 15
    custom = Tolerances(pivot=1e-6)
    assert custom.pivot == 1e-6
    assert custom.eigen == DEFAULT_TOLERANCES.eigen
    A = jnp.array([[1e-8, 0.0], [0.0, 1.0]])
    with pytest.raises(SingularMatrixError):
        factorize(A, tolerance=custom.pivot)
