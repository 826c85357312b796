"""
Filter configuration.

Numerical options of the Kalman filter, loadable from YAML:

    covariance_form: joseph      # or "simple"
    symmetrize: true
    angle_units: degrees         # or "radians"
    wrap_mode: full              # or "single"
    max_condition: 1.0e+12
    symmetry_tolerance: 1.0e-9
    check_covariance: true
"""

from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, Union

import yaml


COVARIANCE_FORMS = ("joseph", "simple")
ANGLE_UNITS = ("degrees", "radians")
WRAP_MODES = ("full", "single")


@dataclass
class FilterConfig:
    """
    Numerical options of a KalmanFilter.

    Attributes
    ----------
    covariance_form : str
        ``'joseph'`` for P = (I-KH) P (I-KH)^T + K R K^T, which stays
        symmetric PSD for any gain, or ``'simple'`` for P = (I-KH) P
    symmetrize : bool
        Replace P with (P + P^T)/2 after every update
    angle_units : str
        Units of the polar-corrected state components
    wrap_mode : str
        ``'full'`` folds residuals of any magnitude into [-half, half];
        ``'single'`` applies one fold only, valid for |y| < one full turn
    max_condition : float
        Largest accepted condition number of the innovation covariance
    symmetry_tolerance : float
        Drift threshold for the covariance health check
    check_covariance : bool
        Run the covariance health check after every predict/update
    """

    covariance_form: str = "joseph"
    symmetrize: bool = True
    angle_units: str = "degrees"
    wrap_mode: str = "full"
    max_condition: float = 1e12
    symmetry_tolerance: float = 1e-9
    check_covariance: bool = True

    def __post_init__(self):
        if self.covariance_form not in COVARIANCE_FORMS:
            raise ValueError(
                f"Unknown covariance_form: {self.covariance_form}. "
                f"Use one of {COVARIANCE_FORMS}."
            )
        if self.angle_units not in ANGLE_UNITS:
            raise ValueError(
                f"Unknown angle_units: {self.angle_units}. "
                f"Use one of {ANGLE_UNITS}."
            )
        if self.wrap_mode not in WRAP_MODES:
            raise ValueError(
                f"Unknown wrap_mode: {self.wrap_mode}. Use one of {WRAP_MODES}."
            )
        for name in ("symmetrize", "check_covariance"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ValueError(f"{name} must be true or false, got {value!r}")
        for name in ("max_condition", "symmetry_tolerance"):
            value = getattr(self, name)
            try:
                setattr(self, name, float(value))
            except (TypeError, ValueError) as e:
                raise ValueError(f"{name} must be a number, got {value!r}") from e
        if self.max_condition <= 1.0:
            raise ValueError("max_condition must be greater than 1")
        if self.symmetry_tolerance < 0.0:
            raise ValueError("symmetry_tolerance must be non-negative")

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "FilterConfig":
        """Build a config from a mapping, rejecting unknown keys."""
        values = dict(values or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Unknown filter config keys: {unknown}")
        return cls(**values)

    @classmethod
    def from_yaml(cls, config_path: Union[str, Path]) -> "FilterConfig":
        """
        Load a config from a YAML file.

        The file may hold the options at top level or under a ``filter`` key.
        """
        config = load_config(config_path)
        if "filter" in config:
            config = config["filter"]
        return cls.from_dict(config)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Parameters
    ----------
    config_path : str or Path
        Path to YAML config file

    Returns
    -------
    dict
        Configuration dictionary (empty for an empty file)
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        config = yaml.safe_load(f)

    return config or {}


def save_config(config: Union[FilterConfig, Dict[str, Any]],
                config_path: Union[str, Path]) -> None:
    """
    Save configuration to YAML file.

    Parameters
    ----------
    config : FilterConfig or dict
        Configuration to write
    config_path : str or Path
        Output path
    """
    if isinstance(config, FilterConfig):
        config = config.to_dict()

    config_path = Path(config_path)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)
