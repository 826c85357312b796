"""
Discretization helpers for linear system models.

Builds the discrete-time transition and process noise matrices of
piecewise-constant kinematic models.
"""

import numpy as np
from scipy.linalg import block_diag


def kinematic_transition(dt, order=2):
    """
    Transition matrix of a single-axis kinematic chain.

    Parameters
    ----------
    dt : float
        Time step
    order : int, optional
        Number of states per axis (2: position/velocity,
        3: position/velocity/acceleration)

    Returns
    -------
    np.ndarray
        (order, order) transition matrix

    Examples
    --------
    >>> kinematic_transition(1.0)
    array([[1., 1.],
           [0., 1.]])
    """
    if order not in (2, 3):
        raise ValueError(f"Order {order} not supported. Use 2 or 3.")

    F = np.eye(order)
    F[0, 1] = dt
    if order == 3:
        F[1, 2] = dt
        F[0, 2] = 0.5 * dt**2
    return F


def discrete_white_noise(dim, dt, var=1.0, block_size=1):
    """
    Generate discrete white noise covariance matrix Q.

    Piecewise white noise model: the highest derivative of each axis is
    constant over a step and changes as white noise between steps.

    Parameters
    ----------
    dim : int
        Number of states per axis (2 or 3)
    dt : float
        Time step
    var : float, optional
        Variance of the white noise
    block_size : int, optional
        Number of independent axes. The result is block diagonal with
        states ordered axis by axis, e.g. [x, vx, y, vy].

    Returns
    -------
    np.ndarray
        Process noise covariance matrix Q (dim*block_size, dim*block_size)

    Examples
    --------
    >>> Q = discrete_white_noise(2, dt=0.1, var=0.1)
    >>> Q.shape
    (2, 2)
    """
    if dim == 2:
        Q = np.array([[dt**4/4, dt**3/2],
                      [dt**3/2, dt**2]])
    elif dim == 3:
        Q = np.array([[dt**4/4, dt**3/2, dt**2/2],
                      [dt**3/2, dt**2,   dt],
                      [dt**2/2, dt,      1.0]])
    else:
        raise ValueError(f"dim {dim} not supported. Use 2 or 3.")

    if block_size < 1:
        raise ValueError("block_size must be at least 1")

    return block_diag(*([Q * var] * block_size))


def order_by_derivative(n_axes, order=2):
    """
    Permutation from axis-major to derivative-major state ordering.

    ``discrete_white_noise`` orders states [x, vx, y, vy]; models that keep
    [x, y, vx, vy] apply this permutation as ``Q[np.ix_(p, p)]``.

    Returns
    -------
    np.ndarray
        Index array of length n_axes * order
    """
    return np.array([axis * order + k for k in range(order) for axis in range(n_axes)])
