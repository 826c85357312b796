"""
Linear state estimation filters.

This module provides a generalized discrete-time Kalman filter with
time-varying system model, variable-dimension observations and
wrap-around correction of angular innovations.

The filter follows a consistent API inspired by FilterPy.
"""

from .linear import KalmanFilter

__all__ = [
    'KalmanFilter',
]
