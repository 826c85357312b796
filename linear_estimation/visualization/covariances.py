"""
Covariance and uncertainty visualization.

Functions for plotting uncertainty ellipses, state estimates with
confidence bands, and NIS consistency.
"""

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Ellipse

from ..metrics.performance import chi2_bounds


def plot_covariance_ellipse(mean, cov, n_std=3.0, ax=None, **kwargs):
    """
    Plot covariance ellipse for 2D distribution.

    Parameters
    ----------
    mean : array-like
        Mean of distribution [x, y]
    cov : np.ndarray
        2x2 covariance matrix
    n_std : float, optional
        Number of standard deviations for ellipse (default: 3-sigma)
    ax : matplotlib.axes.Axes, optional
        Axes to plot on. If None, uses the current axes.
    **kwargs : dict
        Additional arguments passed to Ellipse patch
        (e.g., facecolor, edgecolor, alpha, linewidth)

    Returns
    -------
    matplotlib.patches.Ellipse
        The ellipse patch object
    """
    if ax is None:
        ax = plt.gca()

    mean = np.asarray(mean, dtype=float)
    cov = np.asarray(cov, dtype=float)
    if cov.shape != (2, 2):
        raise ValueError(f"cov must be 2x2, got {cov.shape}")

    eigenvalues, eigenvectors = np.linalg.eigh(0.5 * (cov + cov.T))
    eigenvalues = np.clip(eigenvalues, 0.0, None)

    # Angle of ellipse (first eigenvector)
    angle = np.degrees(np.arctan2(eigenvectors[1, 0], eigenvectors[0, 0]))

    width, height = 2 * n_std * np.sqrt(eigenvalues)

    ellipse = Ellipse(xy=mean, width=width, height=height, angle=angle, **kwargs)
    ax.add_patch(ellipse)

    return ellipse


def plot_state_history(history, indices=None, ground_truth=None, n_std=2.0,
                       state_names=None, title="State Estimates",
                       figsize=(10, 8), save_path=None, show=True):
    """
    Plot state estimates over time with +/- n_std confidence bands.

    Parameters
    ----------
    history : FilterHistory
        Recorded estimates
    indices : list of int, optional
        State components to plot (default: all)
    ground_truth : np.ndarray, optional
        True states (T, dim_x)
    n_std : float, optional
        Width of the confidence band in standard deviations
    state_names : list of str, optional
        Axis labels per state component
    title : str, optional
        Figure title
    figsize : tuple, optional
        Figure size
    save_path : str, optional
        Path to save figure
    show : bool, optional
        Whether to display the plot

    Returns
    -------
    fig, axes
        Matplotlib figure and array of axes
    """
    if len(history) == 0:
        raise ValueError("History is empty")

    times = history.times
    states = history.states
    stds = history.standard_deviations()

    if indices is None:
        indices = list(range(states.shape[1]))

    fig, axes = plt.subplots(len(indices), 1, figsize=figsize, sharex=True, squeeze=False)
    axes = axes[:, 0]

    for ax, i in zip(axes, indices):
        ax.plot(times, states[:, i], 'b-', linewidth=1.5, label='Estimate')
        ax.fill_between(times,
                        states[:, i] - n_std * stds[:, i],
                        states[:, i] + n_std * stds[:, i],
                        color='blue', alpha=0.15, label=f'±{n_std:g}σ')
        if ground_truth is not None:
            ax.plot(times, np.asarray(ground_truth)[:, i], 'k--',
                    linewidth=1.0, label='Ground Truth')

        name = state_names[i] if state_names is not None else f"x{i}"
        ax.set_ylabel(name, fontsize=12)
        ax.grid(True, alpha=0.3)

    axes[0].legend(fontsize=10)
    axes[-1].set_xlabel('Time (s)', fontsize=12)
    fig.suptitle(title, fontsize=14)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')

    if show:
        plt.show()

    return fig, axes


def plot_nis(nis_values, dim_z, confidence=0.95,
             title="NIS Consistency Test",
             figsize=(12, 6), save_path=None, show=True):
    """
    Plot Normalized Innovation Squared (NIS) with confidence bounds.

    Parameters
    ----------
    nis_values : np.ndarray
        NIS values over time (T,)
    dim_z : int
        Dimension of measurement vector
    confidence : float, optional
        Confidence level for bounds
    title : str, optional
        Plot title
    figsize : tuple, optional
        Figure size
    save_path : str, optional
        Path to save figure
    show : bool, optional
        Whether to display the plot

    Returns
    -------
    fig, ax
        Matplotlib figure and axes
    """
    fig, ax = plt.subplots(figsize=figsize)

    time = np.arange(len(nis_values))

    ax.plot(time, nis_values, 'b-', linewidth=1.5, alpha=0.7, label='NIS')
    ax.axhline(dim_z, color='k', linestyle='--', linewidth=2,
               label=f'Expected ({dim_z})')

    lower_bound, upper_bound = chi2_bounds(dim_z, n_runs=1, confidence=confidence)

    ax.axhline(lower_bound, color='r', linestyle=':', linewidth=1.5,
               label=f'{confidence*100:.0f}% Bounds')
    ax.axhline(upper_bound, color='r', linestyle=':', linewidth=1.5)
    ax.fill_between(time, lower_bound, upper_bound, alpha=0.1, color='red')

    ax.set_xlabel('Update', fontsize=12)
    ax.set_ylabel('NIS', fontsize=12)
    ax.set_title(title, fontsize=14)
    ax.legend(fontsize=10)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')

    if show:
        plt.show()

    return fig, ax
