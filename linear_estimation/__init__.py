"""
Linear State Estimation Library

A generalized discrete-time Kalman filter for linear systems with
time-varying models, variable-dimension observations and wrap-around
correction of angular measurements, with a FilterPy-inspired API.

License: MIT
"""

__version__ = "1.0.0"

from .config import FilterConfig, load_config, save_config
from .exceptions import LinearEstimationError, DimensionMismatchError, SingularInnovationError
from .filters.linear import KalmanFilter
from .history import FilterHistory

__all__ = [
    'KalmanFilter',
    'FilterConfig',
    'FilterHistory',
    'load_config',
    'save_config',
    'LinearEstimationError',
    'DimensionMismatchError',
    'SingularInnovationError',
]
