"""
Tests for the kinematic model providers.
"""

import numpy as np
import pytest

from linear_estimation import KalmanFilter
from linear_estimation.common import is_positive_semidefinite
from linear_estimation.models import ConstantVelocityModel, HeadingModel


class TestConstantVelocityModel:

    def test_shapes(self):
        model = ConstantVelocityModel(dim=2, dt=0.1, q=0.5)

        assert model.transition_matrix(0.0).shape == (4, 4)
        assert model.control_matrix(0.0).shape == (4, 0)
        assert model.process_noise(0.0).shape == (4, 4)
        assert model.position_matrix().shape == (2, 4)
        assert model.velocity_matrix().shape == (2, 4)

    def test_process_noise_ordering(self):
        dt, q = 0.5, 2.0
        Q = ConstantVelocityModel(dim=2, dt=dt, q=q).process_noise(0.0)

        # [px, py, vx, vy]: positions couple with their own velocity only
        assert Q[0, 2] == pytest.approx(q * dt**3 / 2)
        assert Q[1, 3] == pytest.approx(q * dt**3 / 2)
        assert Q[0, 1] == 0.0
        assert Q[0, 3] == 0.0
        assert Q[2, 2] == pytest.approx(q * dt**2)
        assert is_positive_semidefinite(Q)

    def test_explicit_process_noise(self):
        model = ConstantVelocityModel(dim=1, q=np.eye(2) * 0.3)
        np.testing.assert_allclose(model.process_noise(5.0), np.eye(2) * 0.3)

        with pytest.raises(ValueError):
            ConstantVelocityModel(dim=1, q=np.eye(3))
        with pytest.raises(ValueError):
            ConstantVelocityModel(dim=0)

    def test_acceleration_control(self):
        model = ConstantVelocityModel(dim=1, dt=2.0, q=0.0, control=True)
        kf = KalmanFilter.from_model(model, x0=[0.0, 0.0], P0=np.eye(2))

        assert kf.dim_u == 1
        kf.predict(2.0, u=[1.0])

        np.testing.assert_allclose(kf.x, [2.0, 2.0])

    def test_position_update(self):
        model = ConstantVelocityModel(dim=2, dt=1.0, q=0.01)
        kf = KalmanFilter.from_model(model, x0=np.zeros(4), P0=np.eye(4))

        kf.predict(1.0)
        kf.update([1.0, -1.0], model.position_matrix(), np.eye(2))

        assert kf.x[0] > 0.0
        assert kf.x[1] < 0.0
        assert kf.x[0] == pytest.approx(-kf.x[1])


class TestHeadingModel:

    def test_polar_mask_is_taken_from_model(self):
        model = HeadingModel(dt=1.0)
        kf = KalmanFilter.from_model(model, x0=[359.0, 0.0], P0=np.eye(2))

        np.testing.assert_array_equal(kf.polar_mask, [True, False])

        kf.update([1.0], model.compass_matrix(), [[1.0]])
        np.testing.assert_allclose(kf.get_innovation(), [2.0])

    def test_polar_mask_is_per_instance_and_read_only(self):
        first, second = HeadingModel(), HeadingModel()

        assert first.polar_mask is not second.polar_mask
        with pytest.raises(ValueError):
            first.polar_mask[0] = False
        np.testing.assert_array_equal(second.polar_mask, [True, False])

    def test_noise_schedule(self):
        model = HeadingModel(q_heading=0.1, q_rate=0.01,
                             noise_schedule=lambda t: 10.0 if t < 1.0 else 1.0)

        np.testing.assert_allclose(model.process_noise(0.5), np.diag([1.0, 0.1]))
        np.testing.assert_allclose(model.process_noise(2.0), np.diag([0.1, 0.01]))

    def test_time_varying_noise_reaches_filter(self):
        model = HeadingModel(q_heading=1.0, q_rate=0.0, noise_schedule=lambda t: t)
        kf = KalmanFilter.from_model(model, x0=[0.0, 0.0], P0=np.zeros((2, 2)))

        kf.predict(3.0)
        assert kf.P[0, 0] == pytest.approx(3.0)

    def test_negative_noise_scale(self):
        model = HeadingModel(noise_schedule=lambda t: -1.0)
        with pytest.raises(ValueError):
            model.process_noise(0.0)

    def test_turning_through_north(self):
        model = HeadingModel(dt=1.0, q_heading=0.01, q_rate=0.01)
        kf = KalmanFilter.from_model(model, x0=[350.0, 5.0], P0=np.diag([1.0, 1.0]))

        heading = 350.0
        for k in range(1, 11):
            heading = (heading + 5.0) % 360.0
            kf.predict(float(k))
            kf.update([heading, 5.0],
                      np.vstack([model.compass_matrix(), model.gyro_matrix()]),
                      np.diag([1.0, 0.1]))

        # The estimate is continuous (400 deg), the residual stays small
        assert kf.x[0] % 360.0 == pytest.approx(heading, abs=1e-6)
        assert kf.x[1] == pytest.approx(5.0, abs=1e-6)
