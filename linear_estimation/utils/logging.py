"""
Logging configuration for linear_estimation.

Library modules only create loggers with :func:`get_logger`; handlers are
installed by applications (see ``examples/``) through :func:`setup_logging`.
The filter logs predict/update traces at DEBUG and covariance drift or
ill-conditioned innovations at WARNING.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union


DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers kept at WARNING when DEBUG tracing is on
QUIET_LOGGERS = ("matplotlib", "PIL")


def _resolve_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    numeric_level = logging.getLevelName(str(level).upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")
    return numeric_level


def _handler(stream_or_path, level: int, formatter: logging.Formatter) -> logging.Handler:
    if isinstance(stream_or_path, Path):
        stream_or_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(stream_or_path)
    else:
        handler = logging.StreamHandler(stream_or_path)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: Union[str, int] = "INFO",
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the root logger for scripts using the filter.

    Replaces any existing root handlers, so calling it twice does not
    duplicate output.

    Parameters
    ----------
    level : str or int
        Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL) or number
    log_file : str, optional
        Also write to this file; parent directories are created
    format_string : str, optional
        Custom format string for log messages

    Returns
    -------
    logging.Logger
        The configured root logger

    Raises
    ------
    ValueError
        If ``level`` is not a known level name
    """
    numeric_level = _resolve_level(level)
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT, datefmt=DATE_FORMAT)

    handlers = [_handler(sys.stdout, numeric_level, formatter)]
    if log_file is not None:
        handlers.append(_handler(Path(log_file), numeric_level, formatter))

    logging.basicConfig(level=numeric_level, handlers=handlers, force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    return logging.getLogger()


def get_logger(name: str) -> logging.Logger:
    """Logger for a module of this package (pass ``__name__``)."""
    return logging.getLogger(name)
