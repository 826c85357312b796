"""
Performance metrics for evaluating state estimation quality.

Includes RMSE, MAE, NEES and NIS, plus chi-square bounds to judge filter
consistency.
"""

import numpy as np
from scipy.stats import chi2


def rmse(estimates, ground_truth, axis=0):
    """
    Root Mean Square Error.

    Parameters
    ----------
    estimates : np.ndarray
        Estimated states (T, dim) or (T,)
    ground_truth : np.ndarray
        True states (T, dim) or (T,)
    axis : int, optional
        Axis along which to compute RMSE

    Returns
    -------
    float or np.ndarray
        RMSE value(s)
    """
    estimates = np.asarray(estimates, dtype=float)
    ground_truth = np.asarray(ground_truth, dtype=float)

    squared_errors = (estimates - ground_truth) ** 2
    return np.sqrt(np.mean(squared_errors, axis=axis))


def mae(estimates, ground_truth, axis=0):
    """Mean Absolute Error along ``axis``."""
    estimates = np.asarray(estimates, dtype=float)
    ground_truth = np.asarray(ground_truth, dtype=float)

    return np.mean(np.abs(estimates - ground_truth), axis=axis)


def nees(estimates, ground_truth, covariances):
    """
    Normalized Estimation Error Squared (NEES).

    For a consistent filter, NEES follows a chi-squared distribution with
    dim_x degrees of freedom.

    Parameters
    ----------
    estimates : np.ndarray
        Estimated states (T, dim_x)
    ground_truth : np.ndarray
        True states (T, dim_x)
    covariances : np.ndarray
        Estimation error covariances (T, dim_x, dim_x)

    Returns
    -------
    np.ndarray
        NEES values for each time step (T,)
    """
    errors = np.asarray(estimates, dtype=float) - np.asarray(ground_truth, dtype=float)
    covariances = np.asarray(covariances, dtype=float)

    nees_values = np.zeros(len(errors))
    for i, error in enumerate(errors):
        nees_values[i] = error @ np.linalg.solve(covariances[i], error)

    return nees_values


def nis(innovations, innovation_covariances):
    """
    Normalized Innovation Squared (NIS).

    For a consistent filter, NIS follows a chi-squared distribution with
    dim_z degrees of freedom.

    Parameters
    ----------
    innovations : np.ndarray
        Innovation vectors (T, dim_z)
    innovation_covariances : np.ndarray
        Innovation covariances (T, dim_z, dim_z)

    Returns
    -------
    np.ndarray
        NIS values for each time step (T,)
    """
    innovations = np.asarray(innovations, dtype=float)
    if innovations.ndim == 1:
        innovations = innovations[:, None]
    innovation_covariances = np.asarray(innovation_covariances, dtype=float)
    if innovation_covariances.ndim == 1:
        innovation_covariances = innovation_covariances[:, None, None]

    nis_values = np.zeros(len(innovations))
    for i, y in enumerate(innovations):
        nis_values[i] = y @ np.linalg.solve(innovation_covariances[i], y)

    return nis_values


def chi2_bounds(dof, n_runs=1, confidence=0.95):
    """
    Two-sided confidence interval of an averaged NEES/NIS statistic.

    Parameters
    ----------
    dof : int
        Degrees of freedom (dim_x for NEES, dim_z for NIS)
    n_runs : int, optional
        Number of values averaged (Monte Carlo runs or time steps)
    confidence : float, optional
        Probability mass inside the interval

    Returns
    -------
    tuple of float
        (lower, upper) bounds of the average

    Examples
    --------
    >>> lo, hi = chi2_bounds(2, n_runs=50)
    >>> lo < 2 < hi
    True
    """
    if not 0.0 < confidence < 1.0:
        raise ValueError("confidence must be in (0, 1)")

    alpha = 1.0 - confidence
    total_dof = dof * n_runs
    lower = chi2.ppf(alpha / 2.0, total_dof) / n_runs
    upper = chi2.ppf(1.0 - alpha / 2.0, total_dof) / n_runs
    return float(lower), float(upper)


def compute_all_metrics(estimates, ground_truth, covariances=None,
                        innovations=None, innovation_covariances=None):
    """
    Compute all available metrics.

    Parameters
    ----------
    estimates : np.ndarray
        Estimated states (T, dim_x)
    ground_truth : np.ndarray
        True states (T, dim_x)
    covariances : np.ndarray, optional
        State covariances (T, dim_x, dim_x)
    innovations : np.ndarray, optional
        Innovation vectors (T, dim_z)
    innovation_covariances : np.ndarray, optional
        Innovation covariances (T, dim_z, dim_z)

    Returns
    -------
    dict
        Dictionary with computed metrics
    """
    metrics = {}

    metrics['rmse'] = rmse(estimates, ground_truth, axis=0)
    metrics['mae'] = mae(estimates, ground_truth, axis=0)
    metrics['rmse_total'] = float(np.mean(metrics['rmse']))
    metrics['mae_total'] = float(np.mean(metrics['mae']))

    # Consistency metrics (require covariances)
    if covariances is not None:
        nees_vals = nees(estimates, ground_truth, covariances)
        metrics['nees'] = nees_vals
        metrics['nees_mean'] = float(np.mean(nees_vals))
        metrics['nees_std'] = float(np.std(nees_vals))

    if innovations is not None and innovation_covariances is not None:
        nis_vals = nis(innovations, innovation_covariances)
        metrics['nis'] = nis_vals
        metrics['nis_mean'] = float(np.mean(nis_vals))
        metrics['nis_std'] = float(np.std(nis_vals))

    return metrics


def print_metrics(metrics, filter_name="Filter"):
    """
    Print metrics in a formatted way.

    Parameters
    ----------
    metrics : dict
        Dictionary of metrics from compute_all_metrics
    filter_name : str, optional
        Name of the filter for display
    """
    print(f"\n{filter_name} Performance Metrics")
    print("=" * 50)

    if 'rmse' in metrics:
        print(f"RMSE per dimension: {metrics['rmse']}")
    if 'rmse_total' in metrics:
        print(f"Total RMSE: {metrics['rmse_total']:.6f}")

    if 'mae' in metrics:
        print(f"MAE per dimension: {metrics['mae']}")
    if 'mae_total' in metrics:
        print(f"Total MAE: {metrics['mae_total']:.6f}")

    if 'nees_mean' in metrics:
        print(f"NEES (mean ± std): {metrics['nees_mean']:.2f} ± {metrics['nees_std']:.2f}")

    if 'nis_mean' in metrics:
        print(f"NIS (mean ± std): {metrics['nis_mean']:.2f} ± {metrics['nis_std']:.2f}")

    print("=" * 50)
