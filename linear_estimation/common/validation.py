"""
Shape coercion for filter inputs.

Every vector or matrix entering the filter goes through these helpers, so
a wrong shape is reported as a DimensionMismatchError at the boundary
instead of being broadcast, truncated or padded by numpy.
"""

import numpy as np

from ..exceptions import DimensionMismatchError


def as_vector(value, name, length=None):
    """
    Coerce ``value`` to a 1-D float array.

    Column vectors of shape (n, 1) and row vectors of shape (1, n) are
    flattened; anything else with more than one dimension is rejected.

    Parameters
    ----------
    value : array_like
        Input vector
    name : str
        Argument name used in error messages
    length : int, optional
        Required length

    Returns
    -------
    np.ndarray
        Float vector (copy)
    """
    arr = np.array(value, dtype=float)

    if arr.ndim == 2 and 1 in arr.shape:
        arr = arr.reshape(-1)
    elif arr.ndim != 1:
        expected = (length,) if length is not None else ('n',)
        raise DimensionMismatchError(name, expected, arr.shape)

    if length is not None and arr.shape[0] != length:
        raise DimensionMismatchError(name, (length,), arr.shape)

    return arr


def as_matrix(value, name, shape):
    """
    Coerce ``value`` to a 2-D float array of exactly ``shape``.

    Parameters
    ----------
    value : array_like
        Input matrix
    name : str
        Argument name used in error messages
    shape : tuple of int
        Required (rows, cols)

    Returns
    -------
    np.ndarray
        Float matrix (copy)
    """
    arr = np.array(value, dtype=float)

    # Empty matrices too: an (N, 0) B must carry N rows
    if arr.ndim != 2 or arr.shape != tuple(shape):
        raise DimensionMismatchError(name, shape, arr.shape)

    return arr


def as_mask(value, length, name='polar_mask'):
    """
    Coerce a polar-correction mask to a boolean vector of ``length``.

    ``None`` or ``False`` give an all-False mask. Integer index lists are
    not accepted; pass one flag per component.
    """
    if value is None or value is False:
        return np.zeros(length, dtype=bool)

    mask = np.asarray(value)
    if mask.ndim != 1 or mask.shape[0] != length:
        raise DimensionMismatchError(name, (length,), mask.shape)

    return mask.astype(bool)
