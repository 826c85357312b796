"""
Exceptions raised by the linear estimation filters.

All failures are local to a single predict/update call. The filter never
retries and never modifies its state when one of these is raised, so the
caller can skip the step, reset the filter, or abort.
"""

import numpy as np


class LinearEstimationError(Exception):
    """Base class for all filter failures."""


class DimensionMismatchError(LinearEstimationError, ValueError):
    """
    A vector or matrix argument does not have the expected shape.

    Parameters
    ----------
    name : str
        Name of the offending argument (e.g. ``'H'``)
    expected : tuple
        Expected shape
    actual : tuple
        Shape that was received
    """

    def __init__(self, name, expected, actual):
        self.name = name
        self.expected = tuple(expected)
        self.actual = tuple(actual)
        super().__init__(
            f"{name} has shape {self.actual}, expected {self.expected}"
        )


class SingularInnovationError(LinearEstimationError, np.linalg.LinAlgError):
    """
    The innovation covariance S = H P H^T + R cannot be inverted reliably.

    Attributes
    ----------
    S : np.ndarray
        The offending innovation covariance
    condition : float
        Its condition number (inf when not finite or exactly singular)
    """

    def __init__(self, S, condition):
        self.S = S
        self.condition = condition
        super().__init__(
            f"Innovation covariance is singular or ill-conditioned "
            f"(condition number {condition:.3g})"
        )
