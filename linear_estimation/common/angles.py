"""
Angle utilities for state estimation.

Functions for wrapping angles and for folding angular innovations back
into [-half turn, half turn], so that e.g. 359 deg - 1 deg is seen as -2 deg
instead of a 358 deg error.
"""

import numpy as np


HALF_TURN = {
    'degrees': 180.0,
    'radians': np.pi,
}


def _half_turn(units):
    try:
        return HALF_TURN[units]
    except KeyError:
        raise ValueError(f"Unknown angle units: {units}. Use 'degrees' or 'radians'.")


def normalize_angle(angle):
    """
    Normalize angle to [-pi, pi].

    Parameters
    ----------
    angle : float or np.ndarray
        Angle(s) in radians

    Returns
    -------
    float or np.ndarray
        Normalized angle(s) in [-pi, pi]
    """
    return np.arctan2(np.sin(angle), np.cos(angle))


def wrap_radians(angle):
    """Wrap angle(s) in radians to [-pi, pi)."""
    angle = np.asarray(angle, dtype=float)
    return (angle + np.pi) % (2 * np.pi) - np.pi


def wrap_degrees(angle):
    """Wrap angle(s) in degrees to [-180, 180)."""
    angle = np.asarray(angle, dtype=float)
    return (angle + 180.0) % 360.0 - 180.0


def angle_diff(angle1, angle2, units='degrees'):
    """
    Compute the smallest difference between two angles.

    Parameters
    ----------
    angle1, angle2 : float or np.ndarray
        Angles in ``units``
    units : str, optional
        ``'degrees'`` (default) or ``'radians'``

    Returns
    -------
    float or np.ndarray
        angle1 - angle2 folded into [-half turn, half turn]

    Examples
    --------
    >>> angle_diff(1.0, 359.0)
    2.0
    """
    diff = np.asarray(angle1, dtype=float) - np.asarray(angle2, dtype=float)
    corrected = fold_residual(diff, units=units, mode='full')
    if corrected.ndim == 0:
        return float(corrected)
    return corrected


def fold_residual(residual, units='degrees', mode='full'):
    """
    Fold angular residual(s) into [-half turn, half turn].

    Values already inside the range are returned unchanged.

    Parameters
    ----------
    residual : float or np.ndarray
        Angular residual(s)
    units : str, optional
        ``'degrees'`` or ``'radians'``
    mode : str, optional
        ``'full'`` removes any number of whole turns. ``'single'`` applies
        one fold ``y - sign(y) * turn`` and is only correct for residuals
        smaller than one full turn in magnitude.

    Returns
    -------
    np.ndarray
        Folded residual(s)
    """
    half = _half_turn(units)
    full = 2.0 * half
    y = np.array(residual, dtype=float)
    outside = np.abs(y) > half

    if mode == 'full':
        folded = y - full * np.round(y / full)
    elif mode == 'single':
        folded = y - np.sign(y) * full
    else:
        raise ValueError(f"Unknown wrap mode: {mode}. Use 'full' or 'single'.")

    return np.where(outside, folded, y)


def polar_correct(y, mask, units='degrees', mode='full'):
    """
    Apply wrap-around correction to the flagged rows of an innovation.

    Parameters
    ----------
    y : np.ndarray
        Innovation vector (U,)
    mask : array_like of bool
        Per-row flags. Rows beyond ``len(mask)`` are never corrected.
    units : str, optional
        Units of the flagged components
    mode : str, optional
        Wrap mode, see :func:`fold_residual`

    Returns
    -------
    np.ndarray
        Corrected copy of ``y``
    """
    y = np.array(y, dtype=float)
    mask = np.asarray(mask, dtype=bool)

    rows = np.flatnonzero(mask[:len(y)])
    if rows.size:
        y[rows] = fold_residual(y[rows], units=units, mode=mode)

    return y


def circular_mean(angles, weights=None, units='degrees'):
    """
    Compute the circular mean of angles.

    Uses the atan2(sum(sin), sum(cos)) method for correct
    averaging across the wrap-around discontinuity.

    Parameters
    ----------
    angles : np.ndarray
        Array of angles
    weights : np.ndarray, optional
        Weights for each angle. If None, uniform weights are used.
    units : str, optional
        ``'degrees'`` (default) or ``'radians'``

    Returns
    -------
    float
        Circular mean angle in [-half turn, half turn]
    """
    angles = np.asarray(angles, dtype=float)
    if units == 'degrees':
        angles = np.deg2rad(angles)
    else:
        _half_turn(units)

    if weights is None:
        weights = np.ones(len(angles))
    else:
        weights = np.asarray(weights, dtype=float)

    sin_sum = np.dot(np.sin(angles), weights)
    cos_sum = np.dot(np.cos(angles), weights)

    mean = np.arctan2(sin_sum, cos_sum)
    if units == 'degrees':
        return float(np.rad2deg(mean))
    return float(mean)
