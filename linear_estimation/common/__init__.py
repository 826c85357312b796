"""
Common utilities for state estimation.

Includes angle handling, shape validation, covariance health checks and
discretization of kinematic models.
"""

from .angles import (normalize_angle, wrap_degrees, wrap_radians, angle_diff,
                     fold_residual, polar_correct, circular_mean)
from .covariance import (symmetrize, symmetry_error, min_eigenvalue,
                         is_positive_semidefinite, covariance_diagnostics)
from .discretization import kinematic_transition, discrete_white_noise, order_by_derivative
from .validation import as_vector, as_matrix, as_mask

__all__ = [
    'normalize_angle',
    'wrap_degrees',
    'wrap_radians',
    'angle_diff',
    'fold_residual',
    'polar_correct',
    'circular_mean',
    'symmetrize',
    'symmetry_error',
    'min_eigenvalue',
    'is_positive_semidefinite',
    'covariance_diagnostics',
    'kinematic_transition',
    'discrete_white_noise',
    'order_by_derivative',
    'as_vector',
    'as_matrix',
    'as_mask',
]
