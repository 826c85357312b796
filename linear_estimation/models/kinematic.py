"""
Kinematic model providers for the linear Kalman filter.

Each model exposes the methods expected by ``KalmanFilter.from_model``:

- ``transition_matrix(t)`` -> A (N, N)
- ``control_matrix(t)``    -> B (N, M)
- ``process_noise(t)``     -> Q (N, N)

plus helpers that build matching observation matrices.
"""

import numpy as np

from ..common.discretization import discrete_white_noise, order_by_derivative


class ConstantVelocityModel:
    """
    Constant velocity model in ``dim`` spatial axes.

    State: x = [p_1, ..., p_dim, v_1, ..., v_dim]

    Control (optional): u = [a_1, ..., a_dim], accelerations held constant
    over a step.

    Parameters
    ----------
    dim : int, optional
        Number of spatial axes (default: 1)
    dt : float, optional
        Time step between predictions (default: 1.0)
    q : float or np.ndarray, optional
        Process noise. A scalar gives the piecewise white acceleration
        covariance with variance q; an (N, N) array is used as is.
    control : bool, optional
        Accept acceleration inputs (default: False)

    Examples
    --------
    >>> model = ConstantVelocityModel(dim=2, dt=0.1, q=0.5)
    >>> model.transition_matrix(0.0).shape
    (4, 4)
    """

    def __init__(self, dim=1, dt=1.0, q=0.01, control=False):
        if dim < 1:
            raise ValueError("dim must be at least 1")

        self.dim = dim
        self.dt = float(dt)
        self.dim_x = 2 * dim
        self.dim_u = dim if control else 0

        I = np.eye(dim)
        Z = np.zeros((dim, dim))

        self._A = np.block([[I, self.dt * I],
                            [Z, I]])

        if control:
            self._B = np.vstack([0.5 * self.dt**2 * I, self.dt * I])
        else:
            self._B = np.zeros((self.dim_x, 0))

        if np.ndim(q) == 0:
            p = order_by_derivative(dim, order=2)
            Q = discrete_white_noise(2, self.dt, var=float(q), block_size=dim)
            self._Q = Q[np.ix_(p, p)]
        else:
            self._Q = np.array(q, dtype=float)
            if self._Q.shape != (self.dim_x, self.dim_x):
                raise ValueError(f"q must be scalar or ({self.dim_x}, {self.dim_x})")

    def transition_matrix(self, t):
        return self._A

    def control_matrix(self, t):
        return self._B

    def process_noise(self, t):
        return self._Q

    def position_matrix(self):
        """Observation matrix selecting the positions, (dim, 2*dim)."""
        return np.hstack([np.eye(self.dim), np.zeros((self.dim, self.dim))])

    def velocity_matrix(self):
        """Observation matrix selecting the velocities, (dim, 2*dim)."""
        return np.hstack([np.zeros((self.dim, self.dim)), np.eye(self.dim)])


class HeadingModel:
    """
    Heading and turn rate model, in degrees.

    State: x = [psi, omega]
    - psi: heading (deg), an angular component
    - omega: turn rate (deg/s)

    The process noise can vary with time through ``noise_schedule``, e.g.
    to inflate Q during known manoeuvres.

    Parameters
    ----------
    dt : float, optional
        Time step (default: 1.0)
    q_heading : float, optional
        Heading process noise variance per step (deg^2)
    q_rate : float, optional
        Turn rate process noise variance per step ((deg/s)^2)
    noise_schedule : callable, optional
        Function t -> non-negative scale factor applied to Q
    """

    dim_x = 2
    dim_u = 0

    def __init__(self, dt=1.0, q_heading=0.1, q_rate=0.01, noise_schedule=None):
        self.dt = float(dt)
        self._A = np.array([[1.0, self.dt],
                            [0.0, 1.0]])
        self._Q = np.diag([q_heading, q_rate]).astype(float)
        self.noise_schedule = noise_schedule

        # Heading is angular, turn rate is not
        self.polar_mask = np.array([True, False])
        self.polar_mask.setflags(write=False)

    def transition_matrix(self, t):
        return self._A

    def control_matrix(self, t):
        return np.zeros((2, 0))

    def process_noise(self, t):
        if self.noise_schedule is None:
            return self._Q
        scale = float(self.noise_schedule(t))
        if scale < 0.0:
            raise ValueError(f"noise_schedule returned a negative scale at t={t}")
        return self._Q * scale

    @staticmethod
    def compass_matrix():
        """Observation matrix of a heading sensor, (1, 2)."""
        return np.array([[1.0, 0.0]])

    @staticmethod
    def gyro_matrix():
        """Observation matrix of a turn rate sensor, (1, 2)."""
        return np.array([[0.0, 1.0]])
