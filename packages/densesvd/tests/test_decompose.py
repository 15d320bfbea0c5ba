"""Tests for the Householder + implicit QR decomposition."""
import io

import numpy as np
import pytest

from conftest import reconstruct, relative_error


class TestReconstruction:

    def test_tall_reconstruction(self, tall_matrix):
        from densesvd.decompose import decompose
        u, w, v = decompose(tall_matrix.copy())
        assert relative_error(tall_matrix, reconstruct(u, w, v)) < 1e-10

    def test_square_reconstruction(self, square_matrix):
        from densesvd.decompose import decompose
        u, w, v = decompose(square_matrix.copy())
        assert relative_error(square_matrix, reconstruct(u, w, v)) < 1e-10

    @pytest.mark.parametrize("shape", [(1, 1), (3, 1), (10, 3), (30, 12)])
    def test_random_shapes(self, shape):
        from densesvd.decompose import decompose
        np.random.seed(7)
        a = np.random.randn(*shape)
        u, w, v = decompose(a.copy())
        assert relative_error(a, reconstruct(u, w, v)) < 1e-10

    def test_worked_example(self, worked_example):
        from densesvd.decompose import decompose
        u, w, v = decompose(worked_example.copy())
        assert w.shape == (2,)
        assert np.all(w >= 0.0)
        assert relative_error(worked_example, reconstruct(u, w, v)) < 1e-10
        expected = np.sqrt([4.0 + 2.0 * np.sqrt(2.0), 4.0 - 2.0 * np.sqrt(2.0)])
        np.testing.assert_allclose(np.sort(w)[::-1], expected, rtol=1e-12)

    def test_singular_values_match_numpy(self, tall_matrix):
        from densesvd.decompose import decompose
        _, w, _ = decompose(tall_matrix.copy())
        expected = np.linalg.svd(tall_matrix, compute_uv=False)
        np.testing.assert_allclose(np.sort(w)[::-1], expected, rtol=1e-10)


class TestFactors:

    def test_u_orthonormal_columns(self, tall_matrix):
        from densesvd.decompose import decompose
        u, _, _ = decompose(tall_matrix.copy())
        np.testing.assert_allclose(u.T @ u, np.eye(4), atol=1e-10)

    def test_v_orthogonal(self, tall_matrix):
        from densesvd.decompose import decompose
        _, _, v = decompose(tall_matrix.copy())
        np.testing.assert_allclose(v.T @ v, np.eye(4), atol=1e-10)
        np.testing.assert_allclose(v @ v.T, np.eye(4), atol=1e-10)

    def test_singular_values_non_negative(self):
        from densesvd.decompose import decompose
        np.random.seed(3)
        for _ in range(10):
            _, w, _ = decompose(np.random.randn(6, 4))
            assert np.all(w >= 0.0)

    def test_negative_scalar(self):
        from densesvd.decompose import decompose
        u, w, v = decompose(np.array([[-3.0]]))
        assert w[0] == pytest.approx(3.0)
        assert u[0, 0] * w[0] * v[0, 0] == pytest.approx(-3.0)

    def test_zero_matrix(self):
        from densesvd.decompose import decompose
        _, w, v = decompose(np.zeros((3, 2)))
        np.testing.assert_array_equal(w, 0.0)
        np.testing.assert_allclose(v.T @ v, np.eye(2))

    def test_diagonal_input(self):
        from densesvd.decompose import decompose
        a = np.diag([3.0, -1.0, 2.0])
        u, w, v = decompose(a.copy())
        np.testing.assert_allclose(np.sort(w), [1.0, 2.0, 3.0])
        assert relative_error(a, reconstruct(u, w, v)) < 1e-12


class TestInPlace:

    def test_a_becomes_u(self, tall_matrix):
        from densesvd.decompose import decompose
        a = tall_matrix.copy()
        u, _, _ = decompose(a)
        assert u is a

    def test_supplied_buffers_are_filled(self, tall_matrix):
        from densesvd.decompose import decompose
        w = np.zeros(4)
        v = np.zeros((4, 4))
        _, w_out, v_out = decompose(tall_matrix.copy(), w, v)
        assert w_out is w
        assert v_out is v
        assert np.all(w > 0.0)

    def test_wrong_v_shape(self, tall_matrix):
        from densesvd.decompose import decompose
        from densesvd.errors import InvalidDimensions
        with pytest.raises(InvalidDimensions):
            decompose(tall_matrix.copy(), v=np.zeros((3, 3)))

    def test_aliased_buffers_rejected(self):
        from densesvd.decompose import decompose
        a = np.eye(3)
        with pytest.raises(ValueError):
            decompose(a, w=a[0])

    def test_integer_array_rejected(self):
        from densesvd.decompose import decompose
        with pytest.raises(TypeError):
            decompose(np.eye(3, dtype=int))


class TestFailures:

    @pytest.mark.parametrize("shape", [(0, 2), (2, 0), (0, 0)])
    def test_degenerate_dimensions(self, shape):
        from densesvd.decompose import decompose
        from densesvd.errors import InvalidDimensions, Reason
        with pytest.raises(InvalidDimensions) as exc_info:
            decompose(np.zeros(shape))
        assert exc_info.value.reason is Reason.INVALID_DIMENSIONS

    def test_iteration_cap(self, tall_matrix):
        from densesvd.config import SVDConfig
        from densesvd.decompose import decompose
        from densesvd.errors import NonConvergence, Reason
        with pytest.raises(NonConvergence) as exc_info:
            decompose(tall_matrix.copy(), config=SVDConfig(max_iterations=0))
        assert exc_info.value.reason is Reason.NON_CONVERGENCE
        assert "no convergence in 0 iterations" in str(exc_info.value)

    def test_default_cap_is_enough(self):
        from densesvd.decompose import decompose
        np.random.seed(11)
        a = np.random.randn(40, 25)
        _, w, _ = decompose(a.copy())
        assert np.all(np.isfinite(w))


class TestDiagnostics:

    def test_silent_by_default(self, tall_matrix):
        from densesvd.config import SVDConfig
        from densesvd.decompose import decompose
        stream = io.StringIO()
        decompose(tall_matrix.copy(), config=SVDConfig(stream=stream))
        assert stream.getvalue() == ''

    def test_phase_markers(self, tall_matrix):
        from densesvd.config import SVDConfig
        from densesvd.decompose import decompose
        stream = io.StringIO()
        decompose(tall_matrix.copy(), config=SVDConfig(verbose=1, stream=stream))
        assert stream.getvalue() == (
            "  svd: householder reduction:\n"
            "  svd: accumulating right-hand transformations:\n"
            "  svd: accumulating left-hand transformations:\n"
            "  svd: diagonalization of the bidiagonal form:\n"
        )

    def test_progress_dots(self, tall_matrix):
        from densesvd.config import SVDConfig
        from densesvd.decompose import decompose
        stream = io.StringIO()
        decompose(tall_matrix.copy(), config=SVDConfig(verbose=2, stream=stream))
        assert "  svd: householder reduction:...." in stream.getvalue()

    def test_verbosity_does_not_change_result(self, tall_matrix):
        from densesvd.config import SVDConfig
        from densesvd.decompose import decompose
        quiet = decompose(tall_matrix.copy())
        loud = decompose(tall_matrix.copy(), config=SVDConfig(verbose=2, stream=io.StringIO()))
        for x, y in zip(quiet, loud):
            np.testing.assert_array_equal(x, y)


class TestWideInput:
    """Fewer rows than columns, decomposed without transposing."""

    def test_wide_reconstruction(self):
        from densesvd.decompose import decompose
        np.random.seed(42)
        a = np.random.randn(3, 5)
        u, w, v = decompose(a.copy())
        assert u.shape == (3, 5)
        assert w.shape == (5,)
        assert np.all(w >= 0.0)
        assert relative_error(a, reconstruct(u, w, v)) < 1e-10
        np.testing.assert_allclose(v.T @ v, np.eye(5), atol=1e-10)

    def test_wide_extra_singular_values_vanish(self):
        from densesvd.decompose import decompose
        np.random.seed(42)
        a = np.random.randn(3, 5)
        _, w, _ = decompose(a.copy())
        w_sorted = np.sort(w)[::-1]
        np.testing.assert_allclose(w_sorted[3:], 0.0, atol=1e-12)
        np.testing.assert_allclose(w_sorted[:3], np.linalg.svd(a, compute_uv=False), rtol=1e-10)

    def test_usage_example_shape(self):
        from densesvd.decompose import decompose
        a = np.array([[1, 0, 0, 1], [-1, 0, 2, 1], [1, 2, 0, 1]], dtype=float)
        u, w, v = decompose(a.copy())
        assert relative_error(a, reconstruct(u, w, v)) < 1e-10
