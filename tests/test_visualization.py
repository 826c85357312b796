"""
Smoke tests for the plotting helpers (Agg backend).
"""

import matplotlib.pyplot as plt
import numpy as np
import pytest

from linear_estimation import FilterHistory, KalmanFilter
from linear_estimation.visualization import plot_covariance_ellipse, plot_nis, plot_state_history


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close('all')


@pytest.fixture
def history():
    kf = KalmanFilter(np.array([[1.0, 1.0], [0.0, 1.0]]), None, np.eye(2) * 0.01,
                      x0=[0.0, 1.0], P0=np.eye(2))
    history = FilterHistory()
    for k in range(1, 11):
        kf.predict(float(k))
        kf.update_scalar(float(k), [1.0, 0.0], 1.0)
        history.record(float(k), kf)
    return history


def test_covariance_ellipse_axes():
    fig, ax = plt.subplots()
    ellipse = plot_covariance_ellipse([1.0, 2.0], np.diag([4.0, 1.0]), n_std=2.0, ax=ax)

    assert ellipse.width == pytest.approx(4.0)
    assert ellipse.height == pytest.approx(8.0)
    assert ellipse in ax.patches


def test_covariance_ellipse_requires_2x2():
    with pytest.raises(ValueError):
        plot_covariance_ellipse([0.0, 0.0], np.eye(3))


def test_state_history(history, tmp_path):
    save_path = tmp_path / "states.png"
    fig, axes = plot_state_history(history, ground_truth=np.column_stack([np.arange(1, 11), np.ones(10)]),
                                   state_names=['pos', 'vel'], save_path=str(save_path), show=False)

    assert len(axes) == 2
    assert axes[0].get_ylabel() == 'pos'
    assert save_path.exists()


def test_state_history_subset(history):
    fig, axes = plot_state_history(history, indices=[1], show=False)
    assert len(axes) == 1


def test_state_history_empty():
    with pytest.raises(ValueError):
        plot_state_history(FilterHistory(), show=False)


def test_nis_plot(history):
    fig, ax = plot_nis(history.nis, dim_z=1, show=False)
    assert ax.get_ylabel() == 'NIS'
