"""
Shared fixtures for the linear_estimation tests.

Run with: python -m pytest tests/ -v
"""

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from linear_estimation import KalmanFilter, FilterConfig


CV_A = np.array([[1.0, 1.0],
                 [0.0, 1.0]])


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def cv_filter():
    """1-D position/velocity filter: x0 = [0, 1], P0 = I, Q = 0.01 I, no control."""
    return KalmanFilter(CV_A, None, np.eye(2) * 0.01, x0=[0.0, 1.0], P0=np.eye(2))


@pytest.fixture
def static_filter():
    """Filter whose predict is a no-op: A = I, B = 0, Q = 0."""
    return KalmanFilter(np.eye(2), np.zeros((2, 1)), np.zeros((2, 2)),
                        x0=[1.0, -2.0], P0=np.array([[2.0, 0.5], [0.5, 1.0]]))


@pytest.fixture
def heading_filter():
    """Scalar heading filter in degrees with the only component flagged angular."""
    return KalmanFilter(np.eye(1), None, np.zeros((1, 1)),
                        x0=[0.0], P0=np.eye(1), polar_mask=[True])


@pytest.fixture
def simple_config():
    return FilterConfig(covariance_form="simple", symmetrize=False)


@pytest.fixture
def config_dir(tmp_path):
    path = tmp_path / "configs"
    path.mkdir()
    return path
