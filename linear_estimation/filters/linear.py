"""
Linear Kalman Filter implementation.

A generalized discrete-time Kalman filter for linear systems whose model
matrices may change with time:

    x_k = A(t) x_{k-1} + B(t) u_k + w,   w ~ N(0, Q(t))
    z_k = H x_k + v,                     v ~ N(0, R)

A, B and Q are supplied once as constant matrices or as functions of time.
Observations (z, H, R) are supplied per update and may have any dimension.
State components flagged in the polar mask are angles whose innovations
are wrapped around before they enter the gain computation.

Inspired by FilterPy's API design.
"""

import numpy as np

from ..common.angles import polar_correct
from ..common.covariance import covariance_diagnostics, symmetrize
from ..common.validation import as_mask, as_matrix, as_vector
from ..config import FilterConfig
from ..exceptions import DimensionMismatchError, SingularInnovationError
from ..utils.logging import get_logger

logger = get_logger(__name__)


def _as_evaluator(value):
    """Wrap a constant matrix into a function of time; pass callables through."""
    if callable(value):
        return value

    matrix = np.array(value, dtype=float)

    def constant(t):
        return matrix

    return constant


class KalmanFilter:
    """
    Linear Kalman Filter with time-varying system model.

    The model can be given in three equivalent ways:

    - constant matrices: ``KalmanFilter(A, B, Q, x0, P0)``
    - functions of time: ``KalmanFilter(A_fn, B_fn, Q_fn, x0, P0)``
    - a model object: ``KalmanFilter.from_model(model, x0, P0)``

    Attributes
    ----------
    dim_x : int
        Dimension of the state vector (N), taken from x0
    dim_u : int or None
        Dimension of the control input vector (M). None until known:
        it is taken from ``dim_u``, from a constant B, or from B(t) on the
        first successful predict, and never changes afterwards.
    polar_mask : np.ndarray
        Read-only boolean vector (dim_x,) flagging angular state components
    config : FilterConfig
        Numerical options
    y : np.ndarray or None
        Innovation of the last update (after polar correction)
    S : np.ndarray or None
        Innovation covariance of the last update
    K : np.ndarray or None
        Kalman gain of the last update
    nis : float or None
        Normalized innovation squared of the last update
    log_likelihood : float or None
        Gaussian log-likelihood of the last innovation
    update_count : int
        Number of successful updates so far
    drift_warnings : int
        Number of covariance health check failures so far

    Examples
    --------
    >>> A = np.array([[1., 1.], [0., 1.]])
    >>> kf = KalmanFilter(A, None, np.eye(2) * 0.01, x0=[0., 1.], P0=np.eye(2))
    >>> kf.predict(t=1.0)
    >>> kf.update_scalar(1.0, H=[1., 0.], R=1.0)
    """

    def __init__(self, A, B, Q, x0, P0, polar_mask=None, dim_u=None, config=None):
        """
        Initialize Kalman Filter.

        Parameters
        ----------
        A : np.ndarray or callable
            State transition matrix (N, N), or function t -> matrix
        B : np.ndarray, callable or None
            Control input matrix (N, M), or function t -> matrix.
            None for a system without control input (M = 0).
        Q : np.ndarray or callable
            Process noise covariance (N, N), or function t -> matrix
        x0 : array_like
            Initial state estimate (N,)
        P0 : array_like
            Initial error covariance (N, N)
        polar_mask : array_like of bool, optional
            Flags for angular state components (N,). Default: none.
        dim_u : int, optional
            Dimension of the control input
        config : FilterConfig, optional
            Numerical options (default: FilterConfig())
        """
        self.config = config if config is not None else FilterConfig()

        # State and covariance
        self._x = as_vector(x0, 'x0')
        self.dim_x = n = self._x.shape[0]
        if n == 0:
            raise DimensionMismatchError('x0', ('N >= 1',), self._x.shape)
        self._P = as_matrix(P0, 'P0', (n, n))

        # Constant matrices are checked now, evaluators on every predict
        if not callable(A):
            as_matrix(A, 'A', (n, n))
        if not callable(Q):
            as_matrix(Q, 'Q', (n, n))

        if B is None:
            dim_u = 0 if dim_u is None else int(dim_u)
            B = np.zeros((n, dim_u))
        elif not callable(B):
            B = np.array(B, dtype=float)
            if dim_u is None:
                if B.ndim != 2:
                    raise DimensionMismatchError('B', (n, 'M'), B.shape)
                dim_u = B.shape[1]
            as_matrix(B, 'B', (n, dim_u))

        self.dim_u = None if dim_u is None else int(dim_u)

        self._A = _as_evaluator(A)
        self._B = _as_evaluator(B)
        self._Q = _as_evaluator(Q)

        # Polar correction flags, fixed for the lifetime of the filter
        self.polar_mask = as_mask(polar_mask, n, 'polar_mask')
        self.polar_mask.setflags(write=False)

        # For storing the last update
        self.y = None
        self.S = None
        self.K = None
        self.nis = None
        self.log_likelihood = None
        self.update_count = 0

        self.drift_warnings = 0

    @classmethod
    def from_model(cls, model, x0, P0, polar_mask=None, dim_u=None, config=None):
        """
        Build a filter from a model object.

        The model must expose ``transition_matrix(t)`` and
        ``process_noise(t)``; ``control_matrix(t)``, ``dim_u`` and
        ``polar_mask`` are optional.

        Parameters
        ----------
        model : object
            Model provider, e.g. :class:`ConstantVelocityModel`
        x0, P0, polar_mask, dim_u, config
            As in the constructor

        Returns
        -------
        KalmanFilter
        """
        for name in ('transition_matrix', 'process_noise'):
            if not callable(getattr(model, name, None)):
                raise TypeError(f"Model {type(model).__name__} has no {name}(t) method")

        B = getattr(model, 'control_matrix', None)
        if dim_u is None:
            dim_u = getattr(model, 'dim_u', None)
        if polar_mask is None:
            polar_mask = getattr(model, 'polar_mask', None)

        return cls(model.transition_matrix, B, model.process_noise,
                   x0, P0, polar_mask=polar_mask, dim_u=dim_u, config=config)

    # ------------------------------------------------------------------
    # Predict
    # ------------------------------------------------------------------
    def _evaluate_model(self, t):
        """Evaluate and shape-check A(t), B(t), Q(t)."""
        n = self.dim_x

        A = as_matrix(self._A(t), 'A', (n, n))

        B = np.array(self._B(t), dtype=float)
        dim_u = self.dim_u
        if dim_u is None:
            if B.ndim != 2:
                raise DimensionMismatchError('B', (n, 'M'), B.shape)
            dim_u = B.shape[1]
        B = as_matrix(B, 'B', (n, dim_u))

        Q = as_matrix(self._Q(t), 'Q', (n, n))

        return A, B, Q

    def _propagate(self, t, u):
        A, B, Q = self._evaluate_model(t)

        dim_u = B.shape[1]
        if u is None:
            u = np.zeros(dim_u)
        else:
            u = as_vector(u, 'u', dim_u)

        x = A @ self._x + B @ u
        P = A @ self._P @ A.T + Q

        if self.config.symmetrize:
            P = symmetrize(P)

        return x, P, dim_u

    def predict(self, t, u=None):
        """
        Predict step of the Kalman filter.

        Propagates the state and covariance forward to time ``t``:
        x = A(t) x + B(t) u,  P = A(t) P A(t)^T + Q(t).

        Parameters
        ----------
        t : float
            Timestamp to advance to. Non-decreasing order is the caller's
            responsibility.
        u : array_like, optional
            Control input (M,). Zero when omitted.

        Returns
        -------
        None
            Updates the state and covariance in place
        """
        x, P, dim_u = self._propagate(t, u)

        self._x = x
        self._P = P

        if self.dim_u is None:
            self.dim_u = dim_u
            logger.debug("Control dimension set to %d from B(t)", dim_u)

        logger.debug("predict t=%.6f trace(P)=%.6g", t, np.trace(P))
        self._check_covariance('predict')

    def get_prediction(self, t, u=None):
        """
        Get predicted state and covariance without updating the filter.

        Parameters
        ----------
        t : float
            Timestamp to predict to
        u : array_like, optional
            Control input

        Returns
        -------
        tuple of np.ndarray
            (x, P) predicted to ``t``
        """
        x, P, _ = self._propagate(t, u)
        return x, P

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------
    def _invert_innovation(self, S):
        """Invert S, refusing non-finite or ill-conditioned matrices."""
        if not np.all(np.isfinite(S)):
            logger.warning("Innovation covariance is not finite")
            raise SingularInnovationError(S, np.inf)

        with np.errstate(divide='ignore', invalid='ignore'):
            condition = float(np.linalg.cond(S))

        if not np.isfinite(condition) or condition > self.config.max_condition:
            logger.warning("Innovation covariance is ill-conditioned (cond=%.3g)", condition)
            raise SingularInnovationError(S, condition)

        try:
            return np.linalg.inv(S)
        except np.linalg.LinAlgError as exc:
            raise SingularInnovationError(S, condition) from exc

    def update(self, z, H, R, polar_mask=None):
        """
        Update step of the Kalman filter.

        Updates the state estimate with an observation z = H x + v,
        v ~ N(0, R). ``predict`` must have been called up to the time of
        the observation.

        A scalar ``z`` is accepted together with a length-N ``H`` and a
        scalar ``R``.

        Parameters
        ----------
        z : array_like
            Observation vector (U,)
        H : array_like
            Observation matrix (U, N)
        R : array_like
            Observation noise covariance (U, U)
        polar_mask : array_like of bool, optional
            Per-row angular flags (U,) for this call only. Default: the
            filter's polar mask, row r following state component r.

        Returns
        -------
        None
            Updates the state and covariance in place

        Raises
        ------
        DimensionMismatchError
            If z, H, R or polar_mask have inconsistent shapes
        SingularInnovationError
            If H P H^T + R cannot be inverted. The filter is unchanged.
        """
        n = self.dim_x

        if np.ndim(z) == 0:
            z = [z]
            H = np.atleast_2d(np.asarray(H, dtype=float))
            R = np.atleast_2d(np.asarray(R, dtype=float))

        z = as_vector(z, 'z')
        dim_z = z.shape[0]
        if dim_z == 0:
            raise DimensionMismatchError('z', ('U >= 1',), z.shape)

        H = as_matrix(H, 'H', (dim_z, n))
        R = as_matrix(R, 'R', (dim_z, dim_z))

        if polar_mask is None:
            mask = self.polar_mask
        else:
            mask = as_mask(polar_mask, dim_z, 'polar_mask')

        # Innovation
        y = z - H @ self._x
        if mask.any():
            y = polar_correct(y, mask,
                              units=self.config.angle_units,
                              mode=self.config.wrap_mode)

        # Innovation covariance
        PHt = self._P @ H.T
        S = H @ PHt + R
        S_inv = self._invert_innovation(S)

        # Kalman gain
        K = PHt @ S_inv

        # Update state
        x = self._x + K @ y

        # Update covariance
        I_KH = np.eye(n) - K @ H
        if self.config.covariance_form == 'joseph':
            P = I_KH @ self._P @ I_KH.T + K @ R @ K.T
        else:
            P = I_KH @ self._P

        if self.config.symmetrize:
            P = symmetrize(P)

        self._x = x
        self._P = P

        self.y = y
        self.S = S
        self.K = K
        self.nis = float(y @ S_inv @ y)
        self.update_count += 1

        sign, logdet = np.linalg.slogdet(S)
        if sign > 0:
            self.log_likelihood = float(-0.5 * (dim_z * np.log(2.0 * np.pi) + logdet + self.nis))
        else:
            self.log_likelihood = float('nan')

        logger.debug("update dim_z=%d nis=%.6g trace(P)=%.6g", dim_z, self.nis, np.trace(P))
        self._check_covariance('update')

    def update_scalar(self, z, H, R):
        """
        Update with a single scalar observation.

        Parameters
        ----------
        z : float
            Observation
        H : array_like
            Observation row (N,) or (1, N)
        R : float
            Observation noise variance
        """
        self.update(np.array([float(z)]),
                    np.reshape(np.asarray(H, dtype=float), (1, -1)),
                    np.array([[float(R)]]))

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------
    def _check_covariance(self, stage):
        if not self.config.check_covariance:
            return

        diagnostics = covariance_diagnostics(self._P)
        scale = max(1.0, float(np.max(np.abs(self._P))))
        tol = self.config.symmetry_tolerance * scale

        if diagnostics['symmetry_error'] > tol or diagnostics['min_eigenvalue'] < -tol:
            self.drift_warnings += 1
            logger.warning(
                "Covariance drift after %s: symmetry error %.3g, min eigenvalue %.3g",
                stage, diagnostics['symmetry_error'], diagnostics['min_eigenvalue'],
            )

    def covariance_diagnostics(self):
        """
        Health of the current error covariance.

        Returns
        -------
        dict
            ``symmetry_error``, ``min_eigenvalue``, ``trace`` and
            ``drift_warnings``
        """
        diagnostics = covariance_diagnostics(self._P)
        diagnostics['drift_warnings'] = self.drift_warnings
        return diagnostics

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def x(self):
        """Current state estimate (copy)."""
        return self._x.copy()

    @x.setter
    def x(self, value):
        self.set_state_estimate(value)

    @property
    def P(self):
        """Current error covariance (copy)."""
        return self._P.copy()

    @P.setter
    def P(self, value):
        self.set_error_covariance(value)

    def get_state_estimate(self):
        """
        Get the current state estimate.

        Returns
        -------
        np.ndarray
            State estimate x (dim_x,)
        """
        return self._x.copy()

    def get_error_covariance(self):
        """
        Get the current error covariance.

        Returns
        -------
        np.ndarray
            Error covariance P (dim_x, dim_x)
        """
        return self._P.copy()

    def set_state_estimate(self, x):
        """Replace the state estimate, e.g. after a detected divergence."""
        self._x = as_vector(x, 'x', self.dim_x)

    def set_error_covariance(self, P):
        """Replace the error covariance."""
        self._P = as_matrix(P, 'P', (self.dim_x, self.dim_x))
        self._check_covariance('reset')

    def get_innovation(self):
        """
        Get the innovation (residual) from the last update.

        Returns
        -------
        np.ndarray or None
            Innovation vector y
        """
        return None if self.y is None else self.y.copy()

    def get_innovation_covariance(self):
        """
        Get the innovation covariance from the last update.

        Returns
        -------
        np.ndarray or None
            Innovation covariance matrix S
        """
        return None if self.S is None else self.S.copy()

    def get_kalman_gain(self):
        """Kalman gain K of the last update, or None."""
        return None if self.K is None else self.K.copy()
