"""
Covariance health checks.

Repeated updates in floating point can make P slightly asymmetric or give
it small negative eigenvalues. These helpers measure that drift.
"""

import numpy as np


def symmetrize(P):
    """Return (P + P^T) / 2."""
    P = np.asarray(P, dtype=float)
    return 0.5 * (P + P.T)


def symmetry_error(P):
    """Largest absolute entry of P - P^T."""
    P = np.asarray(P, dtype=float)
    if P.size == 0:
        return 0.0
    return float(np.max(np.abs(P - P.T)))


def min_eigenvalue(P):
    """Smallest eigenvalue of the symmetric part of P."""
    P = np.asarray(P, dtype=float)
    if P.size == 0:
        return 0.0
    return float(np.linalg.eigvalsh(symmetrize(P))[0])


def is_positive_semidefinite(P, tol=1e-9):
    """
    Check whether P is symmetric positive semi-definite within ``tol``.

    Parameters
    ----------
    P : np.ndarray
        Square matrix
    tol : float, optional
        Allowed asymmetry and allowed negative eigenvalue magnitude

    Returns
    -------
    bool
    """
    return symmetry_error(P) <= tol and min_eigenvalue(P) >= -tol


def covariance_diagnostics(P):
    """
    Summary of covariance health.

    Returns
    -------
    dict
        ``symmetry_error``, ``min_eigenvalue`` and ``trace``
    """
    P = np.asarray(P, dtype=float)
    return {
        'symmetry_error': symmetry_error(P),
        'min_eigenvalue': min_eigenvalue(P),
        'trace': float(np.trace(P)),
    }
