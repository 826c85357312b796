"""
System models for state estimation.

This module provides example model providers (transition, control and
process noise as functions of time) that can be used with the filters.
"""

from .kinematic import ConstantVelocityModel, HeadingModel

__all__ = [
    'ConstantVelocityModel',
    'HeadingModel',
]
