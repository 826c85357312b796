"""
Tests for angle handling, discretization, shape validation and
covariance diagnostics.
"""

import numpy as np
import pytest

from linear_estimation import DimensionMismatchError
from linear_estimation.common import (
    angle_diff, circular_mean, fold_residual, normalize_angle, polar_correct,
    wrap_degrees, wrap_radians,
    discrete_white_noise, kinematic_transition, order_by_derivative,
    as_mask, as_matrix, as_vector,
    covariance_diagnostics, is_positive_semidefinite, min_eigenvalue, symmetrize,
    symmetry_error,
)


class TestAngles:

    @pytest.mark.parametrize("residual, expected", [
        (359.0, -1.0),
        (-359.0, 1.0),
        (181.0, -179.0),
        (180.0, 180.0),
        (-180.0, -180.0),
        (45.0, 45.0),
        (0.0, 0.0),
    ])
    def test_single_and_full_agree_within_one_turn(self, residual, expected):
        assert float(fold_residual(residual, mode="single")) == pytest.approx(expected)
        assert float(fold_residual(residual, mode="full")) == pytest.approx(expected)

    def test_full_mode_removes_several_turns(self):
        np.testing.assert_allclose(fold_residual([719.0, -1081.0, 1000.0]),
                                   [-1.0, -1.0, -80.0])

    def test_single_mode_folds_once(self):
        # one fold only: 719 -> 359
        assert float(fold_residual(719.0, mode="single")) == pytest.approx(359.0)

    def test_unknown_mode_and_units(self):
        with pytest.raises(ValueError):
            fold_residual(10.0, mode='twice')
        with pytest.raises(ValueError):
            fold_residual(10.0, units='gradians')

    def test_polar_correct_returns_copy(self):
        y = np.array([359.0, 359.0, -270.0])
        corrected = polar_correct(y, [True, False, True])

        np.testing.assert_allclose(corrected, [-1.0, 359.0, 90.0])
        np.testing.assert_allclose(y, [359.0, 359.0, -270.0])

    def test_polar_correct_radians(self):
        corrected = polar_correct([1.5 * np.pi], [True], units='radians')
        np.testing.assert_allclose(corrected, [-0.5 * np.pi])

    def test_wrap_functions(self):
        np.testing.assert_allclose(wrap_degrees([370.0, -190.0, 180.0]), [10.0, 170.0, -180.0])
        np.testing.assert_allclose(wrap_radians(3 * np.pi / 2), -np.pi / 2)
        assert normalize_angle(2 * np.pi + 0.25) == pytest.approx(0.25)

    def test_angle_diff(self):
        assert angle_diff(1.0, 359.0) == pytest.approx(2.0)
        assert angle_diff(359.0, 1.0) == pytest.approx(-2.0)
        assert angle_diff(0.1, 2 * np.pi - 0.1, units='radians') == pytest.approx(0.2)

    def test_circular_mean(self):
        assert circular_mean([350.0, 10.0]) == pytest.approx(0.0, abs=1e-9)
        assert abs(circular_mean([170.0, -170.0], weights=[1.0, 1.0])) == pytest.approx(180.0)
        assert circular_mean([0.0, np.pi / 2], units='radians') == pytest.approx(np.pi / 4)


class TestDiscretization:

    def test_kinematic_transition(self):
        np.testing.assert_allclose(kinematic_transition(0.5), [[1.0, 0.5], [0.0, 1.0]])
        F = kinematic_transition(2.0, order=3)
        np.testing.assert_allclose(F[0], [1.0, 2.0, 2.0])

        with pytest.raises(ValueError):
            kinematic_transition(1.0, order=4)

    def test_discrete_white_noise(self):
        Q = discrete_white_noise(2, dt=1.0, var=2.0)
        np.testing.assert_allclose(Q, [[0.5, 1.0], [1.0, 2.0]])

        Q = discrete_white_noise(3, dt=0.1, var=1.0, block_size=2)
        assert Q.shape == (6, 6)
        np.testing.assert_allclose(Q, Q.T)
        np.testing.assert_allclose(Q[:3, 3:], 0.0)

        with pytest.raises(ValueError):
            discrete_white_noise(4, dt=1.0)
        with pytest.raises(ValueError):
            discrete_white_noise(2, dt=1.0, block_size=0)

    def test_order_by_derivative(self):
        np.testing.assert_array_equal(order_by_derivative(2), [0, 2, 1, 3])
        np.testing.assert_array_equal(order_by_derivative(1), [0, 1])


class TestValidation:

    def test_as_vector(self):
        np.testing.assert_array_equal(as_vector([[1.0], [2.0]], 'x'), [1.0, 2.0])
        np.testing.assert_array_equal(as_vector([[1.0, 2.0]], 'x', 2), [1.0, 2.0])

        with pytest.raises(DimensionMismatchError):
            as_vector([1.0, 2.0], 'x', 3)
        with pytest.raises(DimensionMismatchError):
            as_vector(np.ones((2, 2)), 'x')
        with pytest.raises(DimensionMismatchError):
            as_vector(1.0, 'x')

    def test_as_matrix(self):
        assert as_matrix(np.eye(2), 'A', (2, 2)).shape == (2, 2)
        assert as_matrix(np.zeros((3, 0)), 'B', (3, 0)).shape == (3, 0)

        for empty in ([], np.zeros((5, 0)), np.zeros((0, 3))):
            with pytest.raises(DimensionMismatchError):
                as_matrix(empty, 'B', (3, 0))

        with pytest.raises(DimensionMismatchError) as excinfo:
            as_matrix(np.eye(2), 'H', (1, 2))
        assert excinfo.value.expected == (1, 2)
        assert excinfo.value.actual == (2, 2)
        assert "H" in str(excinfo.value)

    def test_as_mask(self):
        np.testing.assert_array_equal(as_mask(None, 3), [False, False, False])
        np.testing.assert_array_equal(as_mask([1, 0], 2), [True, False])

        with pytest.raises(DimensionMismatchError):
            as_mask([True], 2)

    def test_dimension_error_is_value_error(self):
        with pytest.raises(ValueError):
            as_vector([1.0], 'x', 2)


class TestCovarianceDiagnostics:

    def test_symmetric_psd(self):
        P = np.array([[2.0, 0.5], [0.5, 1.0]])

        assert symmetry_error(P) == 0.0
        assert min_eigenvalue(P) > 0.0
        assert is_positive_semidefinite(P)

        diagnostics = covariance_diagnostics(P)
        assert diagnostics['trace'] == pytest.approx(3.0)

    def test_asymmetric_and_indefinite(self):
        P = np.array([[1.0, 0.2], [0.0, -1.0]])

        assert symmetry_error(P) == pytest.approx(0.2)
        assert min_eigenvalue(P) < 0.0
        assert not is_positive_semidefinite(P)
        np.testing.assert_allclose(symmetrize(P), [[1.0, 0.1], [0.1, -1.0]])
