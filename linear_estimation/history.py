"""
Recording of filter estimates over time.

``FilterHistory`` keeps copies of the state, covariance and last NIS of a
filter at caller-chosen instants, for metrics, plots and export.
"""

import numpy as np
import pandas as pd


class FilterHistory:
    """
    Time series of filter estimates.

    Examples
    --------
    >>> history = FilterHistory()
    >>> for t, z in readings:
    ...     kf.predict(t)
    ...     kf.update_scalar(z, H, R)
    ...     history.record(t, kf)
    >>> df = history.to_dataframe()
    """

    def __init__(self):
        self._times = []
        self._states = []
        self._covariances = []
        self._nis = []
        self._last_update_count = 0

    def __len__(self):
        return len(self._times)

    def record(self, t, kf):
        """
        Store the current estimate of ``kf`` at time ``t``.

        Parameters
        ----------
        t : float
            Timestamp of the estimate
        kf : KalmanFilter
            Filter to sample
        """
        x = kf.get_state_estimate()
        if self._states and x.shape != self._states[0].shape:
            raise ValueError(
                f"State dimension changed from {self._states[0].shape[0]} to {x.shape[0]}"
            )

        self._times.append(float(t))
        self._states.append(x)
        self._covariances.append(kf.get_error_covariance())
        # NIS only for records that follow a new update
        if kf.update_count != self._last_update_count and kf.nis is not None:
            self._nis.append(kf.nis)
        else:
            self._nis.append(np.nan)
        self._last_update_count = kf.update_count

    def clear(self):
        self.__init__()

    @property
    def times(self):
        """Recorded timestamps (T,)."""
        return np.array(self._times)

    @property
    def states(self):
        """Recorded state estimates (T, dim_x)."""
        if not self._states:
            return np.empty((0, 0))
        return np.vstack(self._states)

    @property
    def covariances(self):
        """Recorded error covariances (T, dim_x, dim_x)."""
        if not self._covariances:
            return np.empty((0, 0, 0))
        return np.stack(self._covariances)

    @property
    def nis(self):
        """NIS of the update since the previous record, NaN where there was none (T,)."""
        return np.array(self._nis, dtype=float)

    def standard_deviations(self):
        """Square roots of the covariance diagonals (T, dim_x)."""
        if not self._covariances:
            return np.empty((0, 0))
        variances = np.diagonal(self.covariances, axis1=1, axis2=2)
        return np.sqrt(np.clip(variances, 0.0, None))

    def to_dataframe(self, state_names=None):
        """
        Export the history as a DataFrame.

        Parameters
        ----------
        state_names : list of str, optional
            Names of the state components (default: x0, x1, ...)

        Returns
        -------
        pd.DataFrame
            Columns ``t``, one per state component, ``std_<name>`` per
            component, ``trace_P`` and ``nis``
        """
        states = self.states
        dim_x = states.shape[1] if len(self) else 0

        if state_names is None:
            state_names = [f"x{i}" for i in range(dim_x)]
        elif len(state_names) != dim_x:
            raise ValueError(f"Expected {dim_x} state names, got {len(state_names)}")

        data = {'t': self.times}
        stds = self.standard_deviations()
        for i, name in enumerate(state_names):
            data[name] = states[:, i]
        for i, name in enumerate(state_names):
            data[f"std_{name}"] = stds[:, i]
        data['trace_P'] = np.trace(self.covariances, axis1=1, axis2=2) if len(self) else np.array([])
        data['nis'] = self.nis

        return pd.DataFrame(data)
